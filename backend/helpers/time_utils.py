"""
Time utilities.

All timestamps handled by the API are timezone-aware UTC. SQLite drops the
tzinfo on round-trip, so values read back from the database go through
``ensure_utc`` before they are compared against the clock.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Normalize a datetime to timezone-aware UTC.

    Naive values are assumed to already be UTC (that is how they were written).

    Args:
        dt: Datetime to normalize, or None

    Returns:
        Timezone-aware UTC datetime, or None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_iso8601(dt: datetime) -> str:
    """
    Format a datetime as an ISO 8601 string with millisecond precision.

    Args:
        dt: The datetime to format

    Returns:
        String like "2024-01-15T10:30:00.000Z"
    """
    if dt.tzinfo is None:
        normalized = dt.replace(tzinfo=timezone.utc)
    else:
        normalized = dt.astimezone(timezone.utc)
    return normalized.strftime("%Y-%m-%dT%H:%M:%S.") + f"{normalized.microsecond // 1000:03d}Z"
