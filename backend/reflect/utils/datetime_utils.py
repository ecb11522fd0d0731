"""
Datetime utilities

Timestamps are stored as naive UTC datetimes so they compare equally on
PostgreSQL and SQLite.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple


def utc_now() -> datetime:
    """Current UTC time as a naive datetime"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Return [start, end) of a calendar day"""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def period_start(days: int, now: Optional[datetime] = None) -> datetime:
    """
    Start of a window covering the last `days` calendar days, today included

    Example:
        >>> period_start(7, datetime(2025, 1, 10, 15, 30))
        datetime.datetime(2025, 1, 4, 0, 0)
    """
    now = now or utc_now()
    return datetime.combine(now.date() - timedelta(days=days - 1), time.min)
