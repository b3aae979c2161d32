"""Logging setup for scripts."""

import logging
from typing import Union


def setup_logging(level: Union[int, str] = logging.INFO):
    """Configure the root logger once with a timestamped format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Keep urllib3 connection chatter out of progress output
    logging.getLogger("urllib3").setLevel(logging.WARNING)
