"""
Missed-day detection for restore prompts.

A day is "missing" when it lies strictly after the latest real log and
strictly before today.  Today itself is never missing (the user can still
log it normally), and a user with no logs at all has no baseline, so nothing
is missing for them.

Recompute whenever the reconciled map or "today" changes; the detector
holds no state.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from stress_forecaster.utils.time_utils import date_range, format_date_key


def find_missing_dates(latest_date: Optional[date], today: date) -> list[str]:
    """Return date keys strictly between ``latest_date`` and ``today``.

    Args:
        latest_date: Most recent real log date, or ``None`` for a new user.
        today:       Reference calendar date (exclusive upper bound).

    Returns:
        Ascending ``YYYY-MM-DD`` keys; empty when there is no gap.
    """
    if latest_date is None:
        return []
    start = latest_date + timedelta(days=1)
    end = today - timedelta(days=1)
    return [format_date_key(d) for d in date_range(start, end)]
