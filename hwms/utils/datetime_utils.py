"""
Common date/time helpers.

Storage: all timestamps are stored in UTC.
"""

from datetime import datetime, timezone


def as_utc(dt: datetime) -> datetime:
    """
    Convert dt to tz-aware UTC.
    If dt is naive, we treat it as UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    """
    Get current UTC datetime. Used as the review clock for leave and swap requests.
    """
    return datetime.now(timezone.utc)
