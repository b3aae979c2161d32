"""NFT Snapshot - point-in-time NFT ownership reconstruction toolkit."""

from .config import settings, Settings, CustodialPattern, CustodialRegistry
from .core import Item, Snapshot, TransferEvent
from .source import TonAPIClient
from .extractor import (
    BalanceAggregator,
    EventPaginator,
    OwnershipReconstructor,
    OwnerResolver,
)
from .dataloader import SnapshotOrchestrator

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "settings",
    "Settings",
    "CustodialPattern",
    "CustodialRegistry",
    # Data model
    "Item",
    "Snapshot",
    "TransferEvent",
    # Ledger clients
    "TonAPIClient",
    # Reconstruction
    "BalanceAggregator",
    "EventPaginator",
    "OwnershipReconstructor",
    "OwnerResolver",
    # Pipeline
    "SnapshotOrchestrator",
]
