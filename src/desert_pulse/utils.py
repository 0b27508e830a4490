"""Utility functions."""
import math
from datetime import date, datetime
from typing import Optional, Union


def to_int(s: Optional[str]) -> Optional[int]:
    """Convert string to int, returning None if conversion fails."""
    try:
        return int(s) if s is not None else None
    except (TypeError, ValueError):
        return None


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero for positive values (2.5 -> 3)."""
    return math.floor(value + 0.5)


def to_datetime(value: Union[str, date, datetime]) -> datetime:
    """
    Normalize a session date to a datetime.

    Accepts datetime, date (midnight) or an ISO-8601 string.
    Raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        return datetime.fromisoformat(value.strip())
    raise ValueError(f"Unsupported date value: {value!r}")
