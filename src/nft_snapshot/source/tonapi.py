"""TonAPI v2 client implementation."""

import time
from typing import Any, Callable, Dict, List, Optional

from ..config.custodial_registry import CustodialPattern
from ..config.settings import settings
from ..core.base import APIConfig, BaseAPIClient
from ..core.models import AddressInfo, Item, TransferEvent
from .ledger import EventPage

NFT_TRANSFER_ACTION = "NftItemTransfer"


def _address_of(account: Any) -> Optional[str]:
    """Extract an address from TonAPI's ``{"address": ...}`` account refs."""
    if isinstance(account, dict):
        return account.get("address") or None
    if isinstance(account, str):
        return account or None
    return None


def parse_transfer_events(events: List[Dict[str, Any]], source: str) -> List[TransferEvent]:
    """Flatten TonAPI account events into one TransferEvent per NFT transfer action."""
    transfers = []
    for event in events:
        timestamp = int(event.get("timestamp", 0))
        for action in event.get("actions") or []:
            if action.get("type") != NFT_TRANSFER_ACTION:
                continue
            transfer = action.get(NFT_TRANSFER_ACTION)
            if not transfer or not transfer.get("nft"):
                continue
            transfers.append(
                TransferEvent(
                    item_id=transfer["nft"],
                    sender=_address_of(transfer.get("sender")),
                    recipient=_address_of(transfer.get("recipient")),
                    timestamp=timestamp,
                    source=source,
                    event_id=event.get("event_id"),
                )
            )
    return transfers


class TonAPIClient(BaseAPIClient):
    """TonAPI client implementation."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        request_delay: Optional[float] = None,
        rate_limit_cooldown: Optional[float] = None,
        items_page_size: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        config = APIConfig(
            base_url=settings.api_urls.TONAPI,
            api_key=api_key or settings.api.tonapi_api_key,
            request_delay=(
                settings.api.request_delay if request_delay is None else request_delay
            ),
            rate_limit_cooldown=(
                settings.api.rate_limit_cooldown
                if rate_limit_cooldown is None
                else rate_limit_cooldown
            ),
            timeout=settings.api.timeout,
        )
        self.items_page_size = items_page_size or settings.snapshot.items_page_size
        super().__init__(config, sleep=sleep)

    def _build_headers(self) -> Dict[str, str]:
        headers = super()._build_headers()
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def _build_request_params(self, **kwargs) -> Dict[str, Any]:
        """Drop unset parameters; TonAPI rejects empty values."""
        return {key: value for key, value in kwargs.items() if value is not None}

    @staticmethod
    def _next_cursor(data: Dict[str, Any]) -> Optional[int]:
        next_from = data.get("next_from")
        return int(next_from) if next_from else None

    def _event_page(self, data: Dict[str, Any], source: str) -> EventPage:
        """Transfers on the page plus facts about every raw event, transfer or not."""
        raw_events = data.get("events") or []
        timestamps = [int(event.get("timestamp", 0)) for event in raw_events]
        return EventPage(
            events=parse_transfer_events(raw_events, source),
            next_cursor=self._next_cursor(data),
            raw_count=len(raw_events),
            newest_timestamp=max(timestamps, default=None),
        )

    def list_items(self, collection: str) -> List[Item]:
        """Get all items in a collection with their current holders."""
        self.logger.info(f"Fetching all NFTs for collection: {collection}")

        items: List[Item] = []
        offset = 0
        page_count = 0
        while True:
            page_count += 1
            data = self.make_request(
                f"nfts/collections/{collection}/items",
                {"limit": self.items_page_size, "offset": offset},
            )
            nft_items = data.get("nft_items") or []
            for nft in nft_items:
                owner = nft.get("owner") or {}
                items.append(
                    Item(
                        address=nft["address"],
                        owner=_address_of(owner),
                        index=nft.get("index"),
                        owner_is_wallet=owner.get("is_wallet"),
                        name=(nft.get("metadata") or {}).get("name"),
                    )
                )
            self.logger.info(
                f"Page {page_count}: Found {len(nft_items)} NFTs (Total: {len(items)})"
            )

            # A short page is the last one
            if len(nft_items) < self.items_page_size:
                break
            offset += self.items_page_size

        self.logger.info(f"Total NFTs found: {len(items)}")
        return items

    def collection_events_page(
        self,
        collection: str,
        start_date: Optional[int] = None,
        before_lt: Optional[int] = None,
        limit: int = 100,
    ) -> EventPage:
        """One page of the collection account's events, newest first."""
        endpoint = f"accounts/{collection}/events"
        data = self.make_request(
            endpoint,
            {"limit": limit, "start_date": start_date, "before_lt": before_lt},
        )
        return self._event_page(data, "collection_events")

    def item_history_page(self, item_id: str, limit: int = 100) -> EventPage:
        """The item's own transfer history."""
        data = self.make_request(f"nfts/{item_id}/history", {"limit": limit})
        return self._event_page(data, "item_history")

    def account_events_page(
        self,
        item_id: str,
        end_date: int,
        before_lt: Optional[int] = None,
        limit: int = 100,
    ) -> EventPage:
        """One page of the item account's events bounded above by ``end_date``."""
        data = self.make_request(
            f"accounts/{item_id}/events",
            {"limit": limit, "end_date": end_date, "before_lt": before_lt},
        )
        return self._event_page(data, "item_events")

    def classify_address(self, address: str) -> AddressInfo:
        """Wallets are direct holders; contracts report their interfaces."""
        data = self.make_request(f"accounts/{address}")
        return AddressInfo(
            address=address,
            is_direct_holder=bool(data.get("is_wallet")),
            capabilities=frozenset(data.get("interfaces") or []),
        )

    def invoke_owner_lookup(
        self, address: str, pattern: CustodialPattern
    ) -> Optional[str]:
        """Run the pattern's get-method and read the owner from its decoded result."""
        data = self.make_request(
            f"blockchain/accounts/{address}/methods/{pattern.method}"
        )
        if not data.get("success", True):
            self.logger.debug(
                f"{pattern.method} on {address} exited with code {data.get('exit_code')}"
            )
            return None

        decoded = data.get("decoded") or {}
        for field_name in pattern.owner_fields:
            owner = _address_of(decoded.get(field_name))
            if owner:
                return owner
        return None
