"""
Date/time helpers

All stored timestamps are timezone-aware UTC. Calendar dates ("today") are
taken in UTC as well, matching the ISO date the client derives from the same
instant.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

UTC = ZoneInfo("UTC")


def now_utc() -> datetime:
    """Current datetime in UTC (timezone-aware)"""
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC

    Naive datetimes are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def epoch_millis(dt: datetime) -> int:
    """Milliseconds since the Unix epoch, used to build record ids"""
    return int(to_utc(dt).timestamp() * 1000)
