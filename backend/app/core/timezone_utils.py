"""
Timezone utilities for the Courtside platform.

All datetimes are stored in UTC. SQLite hands back naive values, so anything
read from the database goes through ``ensure_utc`` before it is compared with
an aware ``utc_now()``.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to aware UTC.

    Naive values are assumed to already be UTC; aware values are converted.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Return the [start, end) UTC bounds of a calendar day."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def tomorrow_bounds(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """UTC bounds of the day after ``now``."""
    reference = ensure_utc(now) or utc_now()
    return day_bounds(reference.date() + timedelta(days=1))
