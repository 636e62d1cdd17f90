"""General utility functions."""
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC timezone."""
    if dt.tzinfo is None:
        # SQLite drops tzinfo; stored values are UTC
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def is_past(moment: datetime, now: Optional[datetime] = None) -> bool:
    """
    Check whether ``moment`` lies before ``now``.

    Args:
        moment: Timestamp to check (naive values are assumed UTC)
        now: Reference time, defaults to the current UTC time

    Returns:
        bool: True if ``moment`` is strictly in the past
    """
    reference = to_utc(now) if now is not None else utcnow()
    return to_utc(moment) < reference
