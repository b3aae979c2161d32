"""Snapshot persistence to JSON and Parquet files."""

import json
import logging
from pathlib import Path
from typing import Optional, Union

import polars as pl

from ..core.models import Snapshot
from ..extractor.balances import BalanceAggregator

logger = logging.getLogger(__name__)


def snapshot_filename(collection: str, target_date: str, suffix: str = "json") -> str:
    """``owners_snapshot_<last 8 of collection>_<YYYYMMDD>.<suffix>``."""
    day = target_date[:10].replace("-", "")
    return f"owners_snapshot_{collection[-8:]}_{day}.{suffix}"


def _resolve_path(
    snapshot: Snapshot, output_path: Optional[Union[str, Path]], save_dir: str, suffix: str
) -> Path:
    if output_path is None:
        output_path = Path(save_dir) / snapshot_filename(
            snapshot.collection, snapshot.target_date, suffix
        )
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    return output_path


def write_json(
    snapshot: Snapshot,
    output_path: Optional[Union[str, Path]] = None,
    save_dir: str = ".",
) -> str:
    """Save the snapshot record as indented JSON."""
    path = _resolve_path(snapshot, output_path, save_dir, "json")
    with open(path, "w") as f:
        json.dump(snapshot.to_dict(), f, indent=2)
    logger.info(f"Snapshot saved to {path}")
    return str(path)


def write_parquet(
    snapshot: Snapshot,
    output_path: Optional[Union[str, Path]] = None,
    save_dir: str = ".",
) -> str:
    """Save the ranked balances, tagged with collection and target time."""
    path = _resolve_path(snapshot, output_path, save_dir, "parquet")
    df = BalanceAggregator.to_frame(list(snapshot.ranked)).with_columns(
        pl.lit(snapshot.collection).alias("collection"),
        pl.lit(snapshot.target_time).alias("target_time"),
        pl.lit(snapshot.degraded).alias("degraded"),
    )
    df.write_parquet(path)
    logger.info(f"Ranked balances ({len(df)} owners) saved to {path}")
    return str(path)
