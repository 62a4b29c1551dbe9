"""
UTC datetime utilities for consistent timezone handling.

Use these helpers instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def utc_date_stamp(now: datetime | None = None) -> str:
    """
    Return the UTC calendar date as YYYYMMDD.

    Args:
        now: Optional datetime to format; defaults to utc_now()

    Returns:
        Eight-digit date string
    """
    return (now or utc_now()).astimezone(UTC).strftime("%Y%m%d")
