"""Fixed-interval throttled HTTP session."""

import logging
import time
from typing import Callable, Optional

import requests

RATE_LIMIT_STATUS = 429


class RateLimitedSession(requests.Session):
    """Session that spaces calls by a fixed delay and waits out rate limits.

    Every completed call is followed by ``request_delay`` seconds of sleep
    before control returns to the caller. A 429 response suspends the caller
    for ``cooldown`` seconds and re-issues the identical request, with no
    retry cap: the ledger's limit is always temporary.
    """

    def __init__(
        self,
        request_delay: float = 0.8,
        cooldown: float = 60.0,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__()
        self.request_delay = request_delay
        self.cooldown = cooldown
        self._sleep = sleep
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.rate_limit_hits = 0

    def request(self, method, url, *args, **kwargs) -> requests.Response:
        while True:
            response = super().request(method, url, *args, **kwargs)
            if response.status_code != RATE_LIMIT_STATUS:
                break
            self.rate_limit_hits += 1
            self.logger.warning(
                f"Rate limit hit on {url}, waiting {self.cooldown:g} seconds..."
            )
            self._wait_out_cooldown()
            self.logger.info("Resuming requests...")

        if self.request_delay > 0:
            self.logger.debug(f"Waiting {self.request_delay:g}s before next request...")
            self._sleep(self.request_delay)
        return response

    def _wait_out_cooldown(self):
        """Block in one-second ticks so the countdown is visible in the logs."""
        remaining = self.cooldown
        while remaining > 0:
            if remaining % 10 == 0:
                self.logger.info(f"Waiting {remaining:g} seconds for rate limit...")
            tick = min(1.0, remaining)
            self._sleep(tick)
            remaining -= tick
