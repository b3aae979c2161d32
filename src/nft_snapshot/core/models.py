"""Data model shared by the snapshot components."""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from .exceptions import Condition, IncompleteLogCondition

# Balance key for items that currently have no holder at all
UNOWNED = "unowned"

OwnershipMap = Dict[str, Optional[str]]
BalanceTable = Dict[str, int]


@dataclass(frozen=True)
class Item:
    """One item of the collection with its present-day holder."""

    address: str
    owner: Optional[str]
    index: Optional[int] = None
    owner_is_wallet: Optional[bool] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class TransferEvent:
    """One observed change of holder.

    ``sender`` is None for a mint, ``recipient`` None when the ledger did
    not report one. ``seq`` is the arrival position in the log and breaks
    timestamp ties.
    """

    item_id: str
    sender: Optional[str]
    recipient: Optional[str]
    timestamp: int
    source: str
    event_id: Optional[str] = None
    seq: int = 0

    @property
    def order_key(self) -> Tuple[int, int]:
        # Log order is the ledger's newest-first arrival order, so on a
        # timestamp tie the newer transfer (earlier in the log) sorts first.
        return (self.timestamp, self.seq)


@dataclass(frozen=True)
class AddressInfo:
    """Ledger classification of an address."""

    address: str
    is_direct_holder: bool
    capabilities: FrozenSet[str] = frozenset()


@dataclass
class EventLog:
    """Collection-wide transfer log as collected by the paginator."""

    events: List[TransferEvent] = field(default_factory=list)
    pages: int = 0
    complete: bool = True
    conditions: List[Condition] = field(default_factory=list)


@dataclass
class ItemHistory:
    """Per-item transfer history relative to the target time."""

    item_id: str
    after_target: List[TransferEvent] = field(default_factory=list)
    at_or_before_target: List[TransferEvent] = field(default_factory=list)
    strategy: str = "history"
    complete: bool = True
    conditions: List[Condition] = field(default_factory=list)


@dataclass
class Reconstruction:
    """Point-in-time ownership plus what it took to produce it."""

    ownership: OwnershipMap
    transfers_applied: int = 0
    items_checked: int = 0
    items_updated: int = 0
    conditions: List[Condition] = field(default_factory=list)


@dataclass(frozen=True)
class Snapshot:
    """Final ownership distribution of a collection at the target time."""

    target_time: int
    target_date: str
    collection: str
    total_items: int
    owners_count: int
    balances: BalanceTable
    ranked: Tuple[Tuple[str, int], ...]
    degraded: bool = False
    conditions: Tuple[Condition, ...] = ()

    @property
    def incomplete_logs(self) -> List[IncompleteLogCondition]:
        return [c for c in self.conditions if isinstance(c, IncompleteLogCondition)]

    def top(self, n: int = 10) -> List[Tuple[str, int]]:
        return list(self.ranked[:n])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.target_time,
            "targetDate": self.target_date,
            "collectionAddress": self.collection,
            "totalNfts": self.total_items,
            "ownersCount": self.owners_count,
            "balances": dict(self.balances),
            "sortedBalances": [list(entry) for entry in self.ranked],
            "degraded": self.degraded,
            "warnings": [c.to_dict() for c in self.conditions],
        }
