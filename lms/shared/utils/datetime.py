"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

from calendar import monthrange
from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository/persistence boundaries to normalize datetimes.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def start_of_month(dt: datetime) -> datetime:
    """Return midnight on the first day of dt's month (same tzinfo)."""
    return dt.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def end_of_month(dt: datetime) -> datetime:
    """Return the last microsecond of dt's month (same tzinfo)."""
    last_day = monthrange(dt.year, dt.month)[1]
    return dt.replace(
        day=last_day, hour=23, minute=59, second=59, microsecond=999_999
    )


def shift_months(dt: datetime, months: int) -> datetime:
    """Move dt by a whole number of months, clamping the day to the target month's length."""
    index = dt.year * 12 + (dt.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(dt.day, monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def seconds_until_end_of_day(dt: datetime) -> int:
    """Whole seconds from dt to the next midnight (at least 1)."""
    midnight = dt.replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=1)
    return max(1, int((midnight - dt).total_seconds()))
