"""
Time and date utilities for account auditing.

Key concepts:
  - Whole-day arithmetic: elapsed durations are truncated toward zero, never
    rounded, so "90 days and 23 hours" counts as 90 days.
  - UTC normalization: every timestamp entering the audit is made timezone
    aware (naive values are taken as UTC) so subtraction never mixes naive
    and aware datetimes.
  - Display formats: the fixed strings used by the console report and the
    CSV export.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional

TIMESTAMP_DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_DISPLAY_FORMAT = "%Y-%m-%d"
NEVER = "Never"

_ONE_DAY = timedelta(days=1)
_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    Naive datetimes are assumed to already be in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def whole_days_between(now: datetime, then: datetime) -> int:
    """Return the whole days elapsed from ``then`` to ``now``.

    The elapsed duration is truncated toward zero: 90d23h -> 90 and
    -1d5h -> -1.  A ``then`` in the future yields a negative count.

    Args:
        now:  Reference point (normally ``EvaluationContext.now``).
        then: Earlier timestamp, e.g. a last-logon time.

    Returns:
        Signed integer day count.
    """
    delta = ensure_utc(now) - ensure_utc(then)
    if delta >= timedelta(0):
        return delta // _ONE_DAY
    return -((-delta) // _ONE_DAY)


def days_since_epoch_to_datetime(days: int) -> datetime:
    """Convert a day count since 1970-01-01 (shadow file convention) to UTC."""
    return _UNIX_EPOCH + timedelta(days=days)


def epoch_seconds_to_datetime(seconds: int) -> datetime:
    """Convert Unix epoch seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def format_timestamp(value: Optional[datetime]) -> str:
    """Format a timestamp as ``YYYY-MM-DD HH:MM:SS`` (UTC), or ``"Never"``."""
    if value is None:
        return NEVER
    return ensure_utc(value).strftime(TIMESTAMP_DISPLAY_FORMAT)


def format_date(value: Optional[datetime | date]) -> str:
    """Format a calendar date as ``YYYY-MM-DD`` (no time part), or ``"Never"``."""
    if value is None:
        return NEVER
    if isinstance(value, datetime):
        value = ensure_utc(value)
    return value.strftime(DATE_DISPLAY_FORMAT)
