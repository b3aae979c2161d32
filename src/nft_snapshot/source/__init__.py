"""Ledger client implementations."""

from .ledger import EventPage, LedgerSource
from .tonapi import TonAPIClient, parse_transfer_events

__all__ = [
    "EventPage",
    "LedgerSource",
    "TonAPIClient",
    "parse_transfer_events",
]
