# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for StudyPilot.

All timestamps are stored as timezone-aware UTC values. Databases that
hand back naive datetimes are normalized through ensure_utc() before any
arithmetic so naive/aware mixing never reaches the services.

Usage:
    from src.utils.datetime import utc_now

    started_at = utc_now()
    minutes = whole_minutes_between(started_at, utc_now())
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None. Naive values are assumed
        to already be in UTC.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def whole_minutes_between(start: datetime, end: datetime) -> int:
    """Count the whole minutes elapsed between two datetimes.

    Partial minutes are dropped, so a 59 second span is 0 minutes.

    Args:
        start: Start of the interval.
        end: End of the interval.

    Returns:
        Elapsed whole minutes, never negative.
    """
    start_utc = ensure_utc(start)
    end_utc = ensure_utc(end)
    seconds = (end_utc - start_utc).total_seconds()
    return max(0, int(seconds // 60))


def format_iso(dt: datetime | None) -> str | None:
    """Format a datetime as ISO 8601 string.

    Args:
        dt: Datetime to format.

    Returns:
        ISO 8601 formatted string or None.
    """
    if dt is None:
        return None

    return ensure_utc(dt).isoformat()
