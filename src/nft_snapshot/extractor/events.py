"""Transfer-event pagination over the ledger service."""

import dataclasses
import logging
from typing import List, Optional, Set

from ..config.settings import settings
from ..core.exceptions import APIError, IncompleteLogCondition
from ..core.models import EventLog, ItemHistory, TransferEvent
from ..source.ledger import LedgerSource


class EventPaginator:
    """Pulls bounded transfer logs using the two pagination protocols.

    Collection-wide: first page seeded with ``start_date``, later pages with
    the ``before_lt`` cursor of the previous page. Per-item: the item's own
    history, falling back to time-windowed account events when that fails.
    Hitting a page ceiling never raises; it is reported as an
    ``IncompleteLogCondition`` on the returned log.

    Example:
        paginator = EventPaginator(TonAPIClient())
        log = paginator.collection_events("0:abc...", since=1704067200)
    """

    def __init__(
        self,
        source: LedgerSource,
        page_size: Optional[int] = None,
        collection_page_ceiling: Optional[int] = None,
        item_history_limit: Optional[int] = None,
        item_page_ceiling: Optional[int] = None,
    ):
        cfg = settings.snapshot
        self.source = source
        self.page_size = page_size or cfg.events_page_size
        self.collection_page_ceiling = collection_page_ceiling or cfg.collection_page_ceiling
        self.item_history_limit = item_history_limit or cfg.item_history_limit
        self.item_page_ceiling = item_page_ceiling or cfg.item_page_ceiling
        self.logger = logging.getLogger(self.__class__.__name__)
        self._seq = 0

    def _sequence(self, events: List[TransferEvent]) -> List[TransferEvent]:
        """Stamp events with their arrival order."""
        stamped = []
        for event in events:
            stamped.append(dataclasses.replace(event, seq=self._seq))
            self._seq += 1
        return stamped

    def collection_events(self, collection: str, since: int) -> EventLog:
        """All transfers recorded on the collection account since ``since``.

        ``APIError`` propagates; callers treat it as fatal for the run.
        """
        self.logger.info(f"Fetching recent transaction history for collection: {collection}")

        log = EventLog()
        cursor: Optional[int] = None
        requested: Set[int] = set()

        while True:
            log.pages += 1
            if cursor is None:
                page = self.source.collection_events_page(
                    collection, start_date=since, limit=self.page_size
                )
            else:
                page = self.source.collection_events_page(
                    collection, before_lt=cursor, limit=self.page_size
                )
            next_cursor = page.next_cursor
            log.events.extend(self._sequence(page.events))
            self.logger.info(
                f"Page {log.pages}: Found {page.raw_count} events, "
                f"{len(page.events)} transfers (Total: {len(log.events)})"
            )

            # Emptiness counts every ledger event, not only transfers
            if not next_cursor or page.raw_count == 0:
                self.logger.info(
                    f"Reached end of events (no more pages, next_from: {next_cursor})"
                )
                break

            if next_cursor in requested:
                self.logger.warning(
                    f"Cursor {next_cursor} was already paged, stopping after {log.pages} pages"
                )
                self._mark_incomplete(log, collection, "repeated_cursor")
                break

            if log.pages >= self.collection_page_ceiling:
                self.logger.warning(
                    f"Reached maximum page limit ({self.collection_page_ceiling}), stopping..."
                )
                self._mark_incomplete(log, collection, "page_ceiling")
                break

            requested.add(next_cursor)
            cursor = next_cursor

        self.logger.info(f"Total events found: {len(log.events)}")
        return log

    def _mark_incomplete(self, log: EventLog, subject: str, reason: str):
        log.complete = False
        log.conditions.append(
            IncompleteLogCondition(
                subject=subject,
                pages=log.pages,
                ceiling=self.collection_page_ceiling,
                reason=reason,
            )
        )

    def item_events(self, item_id: str, target: int) -> ItemHistory:
        """Transfers of a single item relative to ``target``.

        Failures of the windowed fallback propagate to the caller.
        """
        try:
            page = self.source.item_history_page(item_id, limit=self.item_history_limit)
        except APIError as e:
            self.logger.warning(f"Failed to get NFT history for {item_id}: {e}")
            return self._windowed_item_events(item_id, target)

        history = ItemHistory(item_id=item_id, strategy="history")
        history.after_target = [e for e in self._sequence(page.events) if e.timestamp > target]
        return history

    def _windowed_item_events(self, item_id: str, target: int) -> ItemHistory:
        """Page the item account's events that happened at or before ``target``.

        The ledger returns newest first, so a page holding any event past the
        window means the range is exhausted.
        """
        self.logger.debug(f"Fetching transaction history for NFT: {item_id}")

        history = ItemHistory(item_id=item_id, strategy="windowed")
        cursor: Optional[int] = None
        requested: Set[int] = set()
        pages = 0

        while True:
            pages += 1
            page = self.source.account_events_page(
                item_id, end_date=target, before_lt=cursor, limit=self.page_size
            )
            next_cursor = page.next_cursor
            in_window = [e for e in self._sequence(page.events) if e.timestamp <= target]
            history.at_or_before_target.extend(in_window)
            self.logger.debug(
                f"Page {pages}: Found {page.raw_count} events "
                f"({len(in_window)} transfers before target date) for NFT {item_id}"
            )

            past_window = page.newest_timestamp is not None and page.newest_timestamp > target
            if not next_cursor or page.raw_count == 0 or past_window:
                break

            if next_cursor in requested or pages >= self.item_page_ceiling:
                reason = "repeated_cursor" if next_cursor in requested else "page_ceiling"
                self.logger.warning(f"Reached maximum page limit for NFT {item_id}, stopping...")
                history.complete = False
                history.conditions.append(
                    IncompleteLogCondition(
                        subject=item_id,
                        pages=pages,
                        ceiling=self.item_page_ceiling,
                        reason=reason,
                    )
                )
                break

            requested.add(next_cursor)
            cursor = next_cursor

        self.logger.debug(
            f"Total events found for NFT {item_id}: {len(history.at_or_before_target)}"
        )
        return history
