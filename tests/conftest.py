"""Shared fakes for the snapshot tests."""

import json
from typing import Callable, Dict, List, Optional, Union

import pytest
import requests

from nft_snapshot.core.models import AddressInfo, Item, TransferEvent
from nft_snapshot.source.ledger import EventPage

Page = Union[tuple, EventPage]


def transfer(item_id, sender, recipient, timestamp, seq=0, source="collection_events"):
    return TransferEvent(
        item_id=item_id,
        sender=sender,
        recipient=recipient,
        timestamp=timestamp,
        source=source,
        seq=seq,
    )


def raw_page(transfers, cursor, raw_count, newest_timestamp=None):
    """A ledger page holding ``raw_count`` events of which only ``transfers`` are transfers."""
    timestamps = [e.timestamp for e in transfers]
    if newest_timestamp is not None:
        timestamps.append(newest_timestamp)
    return EventPage(
        events=list(transfers),
        next_cursor=cursor,
        raw_count=raw_count,
        newest_timestamp=max(timestamps, default=None),
    )


def make_response(status=200, payload=None, url="https://tonapi.io/v2/test"):
    response = requests.Response()
    response.status_code = status
    response._content = json.dumps({} if payload is None else payload).encode()
    response.url = url
    response.encoding = "utf-8"
    return response


class FakeLedger:
    """In-memory ledger.

    Pages are lists of ``(transfers, cursor)`` tuples or ``EventPage`` objects,
    or a callable of the page index. A tuple stands for a page whose ledger
    events were all transfers; use ``raw_page`` for pages with other activity.
    """

    def __init__(
        self,
        items: Optional[List[Item]] = None,
        collection_pages: Union[List[Page], Callable[[int], Page], None] = None,
        item_histories: Optional[Dict[str, object]] = None,
        account_pages: Optional[Dict[str, object]] = None,
        accounts: Optional[Dict[str, object]] = None,
        owners: Optional[Dict[str, object]] = None,
    ):
        self.items = items or []
        self.collection_pages = collection_pages or []
        self.item_histories = item_histories or {}
        self.account_pages = account_pages or {}
        self.accounts = accounts or {}
        self.owners = owners or {}
        self.calls = []

    def _count(self, name, key=None):
        return len([c for c in self.calls if c[0] == name and (key is None or c[1] == key)])

    @staticmethod
    def _page(pages, index):
        if isinstance(pages, Exception):
            raise pages
        if callable(pages):
            page = pages(index)
        elif index < len(pages):
            page = pages[index]
        else:
            page = ([], None)
        if isinstance(page, EventPage):
            return page
        return EventPage.of_transfers(*page)

    def list_items(self, collection):
        self.calls.append(("list_items", collection))
        return list(self.items)

    def collection_events_page(self, collection, start_date=None, before_lt=None, limit=100):
        index = self._count("collection_events_page")
        self.calls.append(("collection_events_page", collection, start_date, before_lt))
        return self._page(self.collection_pages, index)

    def item_history_page(self, item_id, limit=100):
        self.calls.append(("item_history_page", item_id))
        history = self.item_histories.get(item_id, [])
        if isinstance(history, Exception):
            raise history
        return EventPage.of_transfers(history)

    def account_events_page(self, item_id, end_date, before_lt=None, limit=100):
        index = self._count("account_events_page", item_id)
        self.calls.append(("account_events_page", item_id, end_date, before_lt))
        return self._page(self.account_pages.get(item_id, []), index)

    def classify_address(self, address):
        self.calls.append(("classify_address", address))
        info = self.accounts.get(address)
        if isinstance(info, Exception):
            raise info
        if info is None:
            return AddressInfo(address=address, is_direct_holder=True)
        return info

    def invoke_owner_lookup(self, address, pattern):
        self.calls.append(("invoke_owner_lookup", address, pattern.name))
        owner = self.owners.get(address)
        if isinstance(owner, Exception):
            raise owner
        return owner

    def classify_count(self, address):
        return self._count("classify_address", address)


def sale_contract(address):
    """Classification of a marketplace sale escrow."""
    return AddressInfo(
        address=address,
        is_direct_holder=False,
        capabilities=frozenset({"nft_sale_getgems_v3"}),
    )


@pytest.fixture
def sleeps():
    """Records sleep durations instead of blocking."""
    return []
