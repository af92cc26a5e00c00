"""Timestamp helpers for event records and rendered emails."""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC and convert aware ones to UTC.

    Example:
        >>> ensure_utc(datetime(2025, 11, 4, 12, 0)).tzinfo == timezone.utc
        True
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """ISO 8601 in UTC with a ``Z`` suffix, seconds precision."""
    return ensure_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_human(dt: datetime) -> str:
    """Long, reader-friendly form used in email bodies, always in UTC.

    Example:
        >>> format_human(datetime(1986, 9, 4, 20, 30, tzinfo=timezone.utc))
        'Thursday, September 4th 1986 8:30 PM'
    """
    dt = ensure_utc(dt)
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return (
        f"{dt.strftime('%A')}, {dt.strftime('%B')} {_ordinal(dt.day)} {dt.year} "
        f"{hour}:{dt.minute:02d} {meridiem}"
    )
