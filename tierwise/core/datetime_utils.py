"""Datetime utilities for consistent timezone handling across the application."""

from datetime import datetime, timezone


def utc_now_naive() -> datetime:
    """Get current UTC time as naive datetime for database operations.

    Returns:
        Current datetime in UTC as naive datetime (no timezone info).

    Note:
        The models use TIMESTAMP WITHOUT TIME ZONE columns, which hold naive UTC values.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Normalize a datetime to naive UTC.

    Aware values are converted to UTC before the tzinfo is dropped; naive values are
    assumed to already be UTC and are returned unchanged.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
