"""Logical capabilities the snapshot pipeline consumes from a ledger service."""

from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from ..config.custodial_registry import CustodialPattern
from ..core.models import AddressInfo, Item, TransferEvent


@dataclass(frozen=True)
class EventPage:
    """A page of transfer events and the opaque cursor for the next (older) page.

    ``raw_count`` and ``newest_timestamp`` describe every event the ledger
    returned on the page, including ones without transfer actions, and are
    what pagination decisions look at.
    """

    events: List[TransferEvent] = field(default_factory=list)
    next_cursor: Optional[int] = None
    raw_count: int = 0
    newest_timestamp: Optional[int] = None

    @classmethod
    def of_transfers(
        cls, events: List[TransferEvent], next_cursor: Optional[int] = None
    ) -> "EventPage":
        """A page where every ledger event was a transfer."""
        return cls(
            events=list(events),
            next_cursor=next_cursor,
            raw_count=len(events),
            newest_timestamp=max((e.timestamp for e in events), default=None),
        )


class LedgerSource(Protocol):
    """Anything that can answer the snapshot pipeline's ledger queries."""

    def list_items(self, collection: str) -> List[Item]: ...

    def collection_events_page(
        self,
        collection: str,
        start_date: Optional[int] = None,
        before_lt: Optional[int] = None,
        limit: int = 100,
    ) -> EventPage: ...

    def item_history_page(self, item_id: str, limit: int = 100) -> EventPage: ...

    def account_events_page(
        self,
        item_id: str,
        end_date: int,
        before_lt: Optional[int] = None,
        limit: int = 100,
    ) -> EventPage: ...

    def classify_address(self, address: str) -> AddressInfo: ...

    def invoke_owner_lookup(
        self, address: str, pattern: CustodialPattern
    ) -> Optional[str]: ...
