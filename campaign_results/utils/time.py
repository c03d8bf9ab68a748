"""
Clock helpers.

All timestamps written by the tracker are timezone-aware UTC datetimes.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(ts: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def format_timestamp(ts: Optional[datetime]) -> Optional[str]:
    """ISO 8601 text for storage, None passes through."""
    if ts is None:
        return None
    return ensure_utc(ts).isoformat()


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Inverse of format_timestamp."""
    if value is None:
        return None
    return ensure_utc(datetime.fromisoformat(value))
