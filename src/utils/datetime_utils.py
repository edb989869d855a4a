"""
Centralized datetime and timezone utilities.

The database stores naive UTC datetimes. These helpers keep timezone-aware
input, storage and display consistent across the application.
"""

from datetime import datetime
from typing import Optional
import pytz

from config import settings


def utcnow() -> datetime:
    """Get current time in UTC (naive), the storage format for all timestamps."""
    return datetime.now(pytz.UTC).replace(tzinfo=None)


def get_local_tz() -> pytz.BaseTzInfo:
    """Get the configured display timezone."""
    return pytz.timezone(settings.timezone)


def to_naive_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Convert any datetime to naive UTC for database storage.

    Aware datetimes are converted to UTC and stripped of tzinfo.
    Naive datetimes are assumed to already be UTC.
    """
    if dt is None:
        return None

    if dt.tzinfo is not None:
        return dt.astimezone(pytz.UTC).replace(tzinfo=None)

    return dt


def to_local(dt: Optional[datetime]) -> Optional[datetime]:
    """Convert a stored naive UTC datetime to the configured local timezone."""
    if dt is None:
        return None

    return pytz.UTC.localize(dt).astimezone(get_local_tz())


def format_deadline(dt: Optional[datetime]) -> str:
    """
    Format a deadline date for notification messages.

    Returns:
        "DD.MM.YYYY" in the local timezone, or "Not set" if None
    """
    if dt is None:
        return "Not set"

    return to_local(dt).strftime("%d.%m.%Y")

