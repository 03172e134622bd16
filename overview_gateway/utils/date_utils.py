"""Date manipulation utilities"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


def days_before(moment: datetime, days: int) -> datetime:
    """Same wall-clock time, a number of calendar days earlier"""
    return moment - timedelta(days=days)


def ensure_utc(moment: datetime) -> datetime:
    """Treat naive datetimes (e.g. read back from SQLite) as UTC"""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
