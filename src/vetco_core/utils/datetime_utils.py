"""
DateTime utilities for the VetCo backend.

Timestamps are handled as timezone-aware UTC values; incoming ISO strings
from clients may carry a trailing ``Z``.
"""

from datetime import datetime
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

UTC = ZoneInfo("UTC")


def get_current_utc() -> datetime:
    """Get the current UTC datetime."""
    return datetime.now(UTC)


def to_utc(dt: datetime, source_tz: str = "UTC") -> datetime:
    """Convert a datetime to UTC, treating naive values as ``source_tz``."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=ZoneInfo(source_tz))
    return dt.astimezone(UTC)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 string as sent by the web and mobile clients.

    Args:
        value: ISO string such as ``2024-03-01T08:00:00.000Z``, or None

    Returns:
        UTC datetime, or None when ``value`` is empty

    Raises:
        ValueError: If the string is not ISO-8601
    """
    if not value:
        return None
    return to_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def to_epoch_millis(dt: datetime) -> int:
    """Milliseconds since the Unix epoch."""
    return int(to_utc(dt).timestamp() * 1000)


def validate_date_range(
    start: Optional[datetime], end: Optional[datetime]
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Check an optional inclusive range.

    Raises:
        ValueError: If both bounds are set and start is after end
    """
    if start is not None and end is not None and to_utc(start) > to_utc(end):
        raise ValueError("start date must not be after end date")
    return start, end
