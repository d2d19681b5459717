"""UTC timestamp helpers for report payloads."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_millis(value: datetime) -> str:
    """
    Render a datetime as a UTC ISO-8601 string with millisecond precision.

    Example: 2025-06-15T10:30:00.000Z
    """
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def hour_bucket(value: datetime) -> str:
    """Top-of-hour UTC bucket, e.g. 2025-06-15T10:00:00.000Z."""
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:00:00.000Z")


def utc_date_string(value: datetime) -> str:
    """Calendar date of a datetime in UTC (YYYY-MM-DD)."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%d")
