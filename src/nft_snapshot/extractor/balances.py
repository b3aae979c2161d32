"""Per-owner balance aggregation and ranking."""

import logging
from collections import Counter
from typing import List, Mapping, Optional, Tuple

import polars as pl

from ..core.exceptions import SnapshotError
from ..core.models import UNOWNED, BalanceTable, OwnershipMap
from .resolver import OwnerResolver


class BalanceAggregator:
    """Tallies items per real owner.

    Every item contributes exactly one count, so the table always sums to
    the number of items. Items with no holder are counted under ``UNOWNED``.
    """

    def __init__(self, resolver: Optional[OwnerResolver] = None):
        self.resolver = resolver
        self.logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def tally(ownership: OwnershipMap) -> BalanceTable:
        """Count items per recorded holder."""
        return dict(Counter(owner or UNOWNED for owner in ownership.values()))

    def collapse(self, counts: Mapping[str, int]) -> BalanceTable:
        """Re-key counts by resolved owner, summing owners that collapse together."""
        if self.resolver is None:
            return dict(counts)

        balances: BalanceTable = {}
        for owner, count in counts.items():
            real_owner = owner if owner == UNOWNED else self.resolver.resolve(owner)
            balances[real_owner] = balances.get(real_owner, 0) + count

        collapsed = len(counts) - len(balances)
        if collapsed:
            self.logger.info(f"{collapsed} holders collapsed into their real owners")
        return balances

    def aggregate(self, ownership: OwnershipMap) -> BalanceTable:
        balances = self.collapse(self.tally(ownership))
        total = sum(balances.values())
        if total != len(ownership):
            raise SnapshotError(
                f"Balance table counts {total} items but ownership has {len(ownership)}"
            )
        return balances

    @staticmethod
    def rank(balances: Mapping[str, int]) -> List[Tuple[str, int]]:
        """Owners by count descending; equal counts keep mapping order."""
        return sorted(balances.items(), key=lambda entry: entry[1], reverse=True)

    @staticmethod
    def to_frame(ranked: List[Tuple[str, int]]) -> pl.DataFrame:
        """Ranked balances as a DataFrame with each owner's share of the supply."""
        df = pl.DataFrame(
            {
                "owner": [owner for owner, _ in ranked],
                "count": [count for _, count in ranked],
            },
            schema={"owner": pl.Utf8, "count": pl.Int64},
        )
        total = df["count"].sum() or 1
        return df.with_columns(
            pl.int_range(1, pl.len() + 1).alias("rank"),
            (pl.col("count") / total).alias("share"),
        ).select(["rank", "owner", "count", "share"])
