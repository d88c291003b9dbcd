"""
Timezone helpers

SQLite hands back naive datetimes while PostgreSQL returns aware ones, so
anything compared in Python goes through ``as_utc`` first.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def period_bounds(days: int, now: Optional[datetime] = None) -> Tuple[datetime, datetime, datetime]:
    """
    Return (previous_start, current_start, now) for two equal trailing windows
    of ``days`` days each.
    """
    now = now or utcnow()
    current_start = now - timedelta(days=days)
    previous_start = now - timedelta(days=days * 2)
    return previous_start, current_start, now
