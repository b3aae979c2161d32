"""Point-in-time ownership reconstruction by reverse replay."""

import logging
from typing import Iterable, List, Optional, Sequence, Set

from ..config.settings import settings
from ..core.exceptions import PerItemVerificationFailure, SnapshotError
from ..core.models import (
    Item,
    ItemHistory,
    OwnershipMap,
    Reconstruction,
    TransferEvent,
)
from .events import EventPaginator


def current_ownership(items: Iterable[Item]) -> OwnershipMap:
    """Ownership map seeded 1:1 from each item's present-day holder."""
    return {item.address: item.owner for item in items}


def transfers_after(
    events: Iterable[TransferEvent], target: int, item_ids: Optional[Set[str]] = None
) -> List[TransferEvent]:
    """Transfers strictly after ``target``, oldest first, ties in log order."""
    selected = [
        e
        for e in events
        if e.timestamp > target and (item_ids is None or e.item_id in item_ids)
    ]
    return sorted(selected, key=lambda e: e.order_key)


def replay(ownership: OwnershipMap, transfers: Sequence[TransferEvent]) -> int:
    """Undo ascending ``transfers`` newest first, writing each sender back.

    The last write for an item is the sender of its earliest transfer, i.e.
    the holder just before the target boundary was crossed. Transfers
    without a sender leave the entry untouched. Returns the number of
    writes.
    """
    applied = 0
    for transfer in reversed(transfers):
        if transfer.sender and transfer.item_id in ownership:
            ownership[transfer.item_id] = transfer.sender
            applied += 1
    return applied


def holder_from_history(history: ItemHistory) -> Optional[str]:
    """Holder at the target time implied by a per-item history, if any.

    Post-target history yields the sender of the earliest transfer with a
    sender. Windowed (pre-target) history yields the recipient of the
    latest transfer at or before the target.
    """
    for transfer in sorted(history.after_target, key=lambda e: e.order_key):
        if transfer.sender:
            return transfer.sender
    for transfer in sorted(
        history.at_or_before_target, key=lambda e: e.order_key, reverse=True
    ):
        if transfer.recipient:
            return transfer.recipient
    return None


class OwnershipReconstructor:
    """Turns present ownership plus the transfer log into ownership at ``target``.

    Items with no transfer in the collection-wide log are re-checked one by
    one through the paginator's per-item strategy, because the collection
    log is not guaranteed to be complete.
    """

    def __init__(
        self,
        paginator: Optional[EventPaginator] = None,
        verify_unseen_items: Optional[bool] = None,
    ):
        self.paginator = paginator
        self.verify_unseen_items = (
            settings.snapshot.verify_unseen_items
            if verify_unseen_items is None
            else verify_unseen_items
        )
        self.logger = logging.getLogger(self.__class__.__name__)

    def reconstruct(
        self, items: Sequence[Item], events: Sequence[TransferEvent], target: int
    ) -> Reconstruction:
        self.logger.info(f"Reconstructing ownership for timestamp: {target}")

        ownership = current_ownership(items)
        transfers = transfers_after(events, target, set(ownership))
        self.logger.info(
            f"Found {len(transfers)} NFT transfers after target date "
            f"(from {len(events)} total events)"
        )

        result = Reconstruction(ownership=ownership)
        result.transfers_applied = self._replay_with_progress(ownership, transfers)

        if self.verify_unseen_items and self.paginator is not None:
            seen = {t.item_id for t in transfers}
            unseen = [item for item in items if item.address not in seen]
            self._verify(unseen, target, result)

        self.logger.info(f"Ownership reconstructed for {len(ownership)} NFTs")
        return result

    def _replay_with_progress(
        self, ownership: OwnershipMap, transfers: List[TransferEvent]
    ) -> int:
        if not transfers:
            return 0
        step = max(1, len(transfers) // 10)
        applied = 0
        # Chunks go newest first so undo order holds across chunk boundaries
        for end in range(len(transfers), 0, -step):
            applied += replay(ownership, transfers[max(0, end - step) : end])
            done = len(transfers) - max(0, end - step)
            self.logger.info(
                f"Processed {done}/{len(transfers)} transfers "
                f"({round(done / len(transfers) * 100)}%)"
            )
        return applied

    def _verify(self, items: List[Item], target: int, result: Reconstruction):
        """Check each item's own history; failures only degrade that item."""
        if not items:
            return
        self.logger.info(
            f"Checking individual NFT history for {len(items)} NFTs "
            "that may have missed transfers..."
        )

        step = max(1, len(items) // 20)
        for checked, item in enumerate(items, start=1):
            try:
                history = self.paginator.item_events(item.address, target)
            except SnapshotError as e:
                self.logger.warning(f"Could not verify NFT {item.address}: {e}")
                result.conditions.append(
                    PerItemVerificationFailure(item_id=item.address, error=str(e))
                )
            else:
                result.conditions.extend(history.conditions)
                holder = holder_from_history(history)
                if holder and holder != result.ownership[item.address]:
                    self.logger.info(
                        f"Updated ownership for NFT {item.address[-8:]} "
                        f"from {str(item.owner)[-8:]} to {holder[-8:]}"
                    )
                    result.ownership[item.address] = holder
                    result.items_updated += 1
            result.items_checked += 1

            if checked % step == 0 or checked == len(items):
                self.logger.info(
                    f"Checked individual NFT history: {checked}/{len(items)} "
                    f"({round(checked / len(items) * 100)}%)"
                )

