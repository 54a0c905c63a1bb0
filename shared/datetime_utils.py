"""
Date/time helpers: framework-agnostic.

MongoDB hands datetimes back without tzinfo unless the client is created with
``tz_aware=True``; everything here treats naive values as UTC so comparisons
against ``utc_now()`` never mix naive and aware datetimes.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return *value* as an aware UTC datetime (naive values are assumed UTC)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def date_to_datetime(value: date) -> datetime:
    """Widen a calendar date to midnight UTC.

    BSON has no date-only type, so birthdays are stored as datetimes.
    """
    if isinstance(value, datetime):
        return as_utc(value)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)
