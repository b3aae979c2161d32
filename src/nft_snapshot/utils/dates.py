"""Target date handling."""

import re
from datetime import date, datetime, timezone
from typing import Optional, Tuple, Union

TargetDate = Union[str, date, datetime, int]

_DATE_FORMAT = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_target_date(value: str, now: Optional[datetime] = None) -> date:
    """Validate a ``YYYY-MM-DD`` string that is not in the future."""
    if not _DATE_FORMAT.match(value):
        raise ValueError("TARGET_DATE must be in YYYY-MM-DD format")
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValueError(f"Invalid TARGET_DATE {value}: {e}") from e

    today = (now or datetime.now(timezone.utc)).date()
    if parsed > today:
        raise ValueError("TARGET_DATE cannot be in the future")
    return parsed


def to_timestamp(target: TargetDate) -> Tuple[int, str]:
    """Unix timestamp (UTC) and display label for a target date.

    Plain dates mean midnight UTC at the start of that day.
    """
    if isinstance(target, bool):
        raise TypeError("Target date cannot be a bool")
    if isinstance(target, int):
        label = datetime.fromtimestamp(target, tz=timezone.utc).isoformat()
        return target, label
    if isinstance(target, str):
        target = parse_target_date(target)
    if isinstance(target, datetime):
        if target.tzinfo is None:
            target = target.replace(tzinfo=timezone.utc)
        return int(target.timestamp()), target.isoformat()
    if isinstance(target, date):
        midnight = datetime(target.year, target.month, target.day, tzinfo=timezone.utc)
        return int(midnight.timestamp()), target.isoformat()
    raise TypeError(f"Unsupported target date type: {type(target).__name__}")
