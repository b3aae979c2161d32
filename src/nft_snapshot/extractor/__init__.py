"""Ownership reconstruction components."""

from .balances import BalanceAggregator
from .events import EventPaginator
from .ownership import OwnershipReconstructor, holder_from_history, replay, transfers_after
from .resolver import OwnerResolver

__all__ = [
    "BalanceAggregator",
    "EventPaginator",
    "OwnershipReconstructor",
    "OwnerResolver",
    "holder_from_history",
    "replay",
    "transfers_after",
]
