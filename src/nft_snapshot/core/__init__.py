"""Core infrastructure for nft_snapshot package."""

from .base import BaseAPIClient, APIConfig
from .rate_limiter import RateLimitedSession
from .exceptions import (
    APIError,
    Condition,
    ConditionKind,
    ConfigurationError,
    IncompleteLogCondition,
    LedgerError,
    PerItemVerificationFailure,
    SnapshotError,
    TransportError,
    UnresolvedOwnerCondition,
)
from .models import (
    UNOWNED,
    AddressInfo,
    EventLog,
    Item,
    ItemHistory,
    Reconstruction,
    Snapshot,
    TransferEvent,
)

__all__ = [
    "BaseAPIClient",
    "APIConfig",
    "RateLimitedSession",
    "APIError",
    "Condition",
    "ConditionKind",
    "ConfigurationError",
    "IncompleteLogCondition",
    "LedgerError",
    "PerItemVerificationFailure",
    "SnapshotError",
    "TransportError",
    "UnresolvedOwnerCondition",
    "UNOWNED",
    "AddressInfo",
    "EventLog",
    "Item",
    "ItemHistory",
    "Reconstruction",
    "Snapshot",
    "TransferEvent",
]
