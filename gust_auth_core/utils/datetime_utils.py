"""Helpers for the UTC day windows used by rate limiting."""

from datetime import UTC, datetime, timedelta
from typing import Optional

from ..constants import Timeouts


def utc_now() -> datetime:
    """Return current UTC time with timezone info attached."""
    return datetime.now(UTC)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Attach UTC to naive datetimes and convert aware ones to UTC.

    SQLite hands back naive datetimes even for timezone-aware columns, so every
    timestamp read from the store goes through here before comparison.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def start_of_utc_day(now: Optional[datetime] = None) -> datetime:
    """Midnight UTC of the day containing `now`."""
    current = ensure_utc(now) or utc_now()
    return current.replace(hour=0, minute=0, second=0, microsecond=0)


def next_reset(window_start: datetime) -> datetime:
    """End of the daily window that opened at `window_start`."""
    return ensure_utc(window_start) + timedelta(seconds=Timeouts.DAILY_WINDOW)


def format_rfc3339(value: datetime) -> str:
    """Format a timestamp as RFC 3339 in UTC with a trailing Z."""
    return ensure_utc(value).replace(microsecond=0).strftime("%Y-%m-%dT%H:%M:%SZ")
