"""Configuration management for nft_snapshot package."""

from .settings import Settings, settings, APIs, APIUrls, SnapshotSettings
from .custodial_registry import CustodialPattern, CustodialRegistry

__all__ = [
    "Settings",
    "settings",
    "APIs",
    "APIUrls",
    "SnapshotSettings",
    "CustodialPattern",
    "CustodialRegistry",
]
