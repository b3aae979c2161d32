"""Abstract base classes for nft_snapshot package."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests

from .rate_limiter import RateLimitedSession
from .exceptions import LedgerError, TransportError


@dataclass
class APIConfig:
    """Configuration for API clients."""

    base_url: str
    api_key: Optional[str] = None
    request_delay: float = 0.8  # seconds between calls
    rate_limit_cooldown: float = 60.0  # seconds to wait on HTTP 429
    timeout: int = 30


class BaseAPIClient(ABC):
    """Abstract base class for all API clients."""

    def __init__(self, config: APIConfig, sleep: Callable[[float], None] = time.sleep):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self._session = self._create_session(sleep)

    def _create_session(self, sleep: Callable[[float], None]) -> RateLimitedSession:
        """Create configured session with rate limiting."""
        session = RateLimitedSession(
            request_delay=self.config.request_delay,
            cooldown=self.config.rate_limit_cooldown,
            sleep=sleep,
            logger=self.logger,
        )
        session.headers.update(self._build_headers())
        return session

    def _build_headers(self) -> Dict[str, str]:
        return {"accept": "application/json"}

    @abstractmethod
    def _build_request_params(self, **kwargs) -> Dict[str, Any]:
        """Build request parameters specific to the API."""
        pass

    def _handle_response(self, response: requests.Response) -> Any:
        """Raise on HTTP failures and error payloads, return the JSON body."""
        if not response.ok:
            raise TransportError(response.url, response.status_code, response.text)
        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(response.url, response.status_code, f"invalid JSON: {e}") from e

        if isinstance(data, dict) and data.get("error"):
            raise LedgerError(response.url, str(data["error"]))
        return data

    def make_request(self, endpoint: str, params: Dict[str, Any] = None) -> Any:
        """Issue one throttled GET; failures other than rate limits are not retried."""
        url = (
            f"{self.config.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
            if endpoint
            else self.config.base_url
        )
        request_params = self._build_request_params(**(params or {}))

        self.logger.debug(f"Making API request: {endpoint}")
        try:
            response = self._session.get(
                url, params=request_params, timeout=self.config.timeout
            )
        except requests.RequestException as e:
            raise TransportError(url, None, str(e)) from e
        return self._handle_response(response)
