"""Centralized configuration management for nft_snapshot."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


@dataclass
class APIs:
    """API-specific settings."""

    tonapi_api_key: Optional[str] = None

    # Fixed delay after every successful call, and the full-stop cooldown on 429
    request_delay: Optional[float] = None
    rate_limit_cooldown: Optional[float] = None
    timeout: int = 30

    def __post_init__(self):
        # Load from environment if not provided
        if self.tonapi_api_key is None:
            self.tonapi_api_key = os.getenv("TONAPI_API_KEY")
        if self.request_delay is None:
            self.request_delay = _env_float("TONAPI_REQUEST_DELAY", 0.8)
        if self.rate_limit_cooldown is None:
            self.rate_limit_cooldown = _env_float("TONAPI_RATE_LIMIT_COOLDOWN", 60.0)


@dataclass
class SnapshotSettings:
    """Pagination ceilings and reconstruction behaviour."""

    items_page_size: int = 1000
    events_page_size: int = 100
    collection_page_ceiling: int = 100
    item_history_limit: int = 100
    item_page_ceiling: int = 10
    max_resolution_hops: int = 8
    verify_unseen_items: bool = True
    custodial_patterns_path: Optional[str] = None
    output_dir: Optional[str] = None

    def __post_init__(self):
        if self.custodial_patterns_path is None:
            self.custodial_patterns_path = os.getenv("CUSTODIAL_PATTERNS_PATH")
        if self.output_dir is None:
            self.output_dir = os.getenv("SNAPSHOT_OUTPUT_DIR", ".")


class APIUrls:
    """API endpoint URLs."""

    TONAPI = "https://tonapi.io/v2"


class Settings:
    """Main settings class."""

    def __init__(self):
        self.api = APIs()
        self.snapshot = SnapshotSettings()
        self.api_urls = APIUrls()


# Global settings instance
settings = Settings()
