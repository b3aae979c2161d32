"""Utility modules for nft_snapshot package."""

from .dates import parse_target_date, to_timestamp
from .export import snapshot_filename, write_json, write_parquet
from .logging import setup_logging

__all__ = [
    "parse_target_date",
    "to_timestamp",
    "snapshot_filename",
    "write_json",
    "write_parquet",
    "setup_logging",
]
