"""
Calendar-date utilities.

Key concepts:
  - One canonical value type: ``datetime.date``.  Day keys are ISO
    ``YYYY-MM-DD`` strings produced by ``format_date_key()``.
  - Conversion happens once, at the boundary, via ``parse_date_key()``.
    Datetimes keep their own calendar date (no timezone shifting), so a
    log dated ``2024-01-05T23:30:00+07:00`` stays on 2024-01-05.
  - "Today" is always passed in explicitly; only the CLI calls
    ``today_utc()``.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

_DATE_KEY = re.compile(r"^\s*(\d{4})-(\d{1,2})-(\d{1,2})(?:[T ]\S.*)?\s*$")


def parse_date_key(value: Any) -> Optional[date]:
    """Convert a date-like value to a calendar ``date``, or ``None``.

    Accepts ``date``, ``datetime``, and strings beginning with
    ``YYYY-M-D`` (zero padding optional).  A trailing time part must be
    separated by ``T`` or a space and is ignored; any other suffix is rejected.

    Args:
        value: Raw date value from a payload or caller.

    Returns:
        The calendar date, or ``None`` when the value cannot be parsed.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    match = _DATE_KEY.match(value)
    if match is None:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def format_date_key(value: date) -> str:
    """Return the canonical ``YYYY-MM-DD`` key for ``value``."""
    return value.isoformat()


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp or epoch milliseconds, or ``None``.

    Strings may use a ``Z`` suffix.  Numbers are milliseconds since the Unix
    epoch; booleans and non-finite numbers are rejected.  Naive results are
    assumed to be UTC so that timestamps compare safely.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def date_range(start: date, end: date, step_days: int = 1) -> list[date]:
    """Generate a list of dates from ``start`` to ``end`` (inclusive).

    Returns an empty list when ``end < start``.

    Raises:
        ValueError: If ``step_days < 1``.
    """
    if step_days < 1:
        raise ValueError(f"step_days must be >= 1, got {step_days}.")

    result: list[date] = []
    current = start
    while current <= end:
        result.append(current)
        current += timedelta(days=step_days)
    return result


def short_day_label(value: date) -> str:
    """Short card label, e.g. ``"Mon 1"``."""
    return f"{value.strftime('%a')} {value.day}"


def long_day_label(value: date) -> str:
    """Long card label, e.g. ``"Monday, January 1"``."""
    return f"{value.strftime('%A')}, {value.strftime('%B')} {value.day}"


def today_utc() -> date:
    """Return today's calendar date in UTC."""
    return datetime.now(tz=timezone.utc).date()
