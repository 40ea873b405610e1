"""
Tests for logbook/gaps.py.

What we test
------------
1. Every day strictly between the latest log and today, ascending.
2. No gap when the latest log is yesterday or today.
3. A new user (no logs) has nothing missing.
4. Month and year boundaries.
"""

from __future__ import annotations

from datetime import date

from stress_forecaster.logbook.gaps import find_missing_dates


def test_gap_is_exact_and_ascending() -> None:
    assert find_missing_dates(date(2024, 1, 7), date(2024, 1, 10)) == [
        "2024-01-08",
        "2024-01-09",
    ]


def test_gap_excludes_both_endpoints() -> None:
    assert find_missing_dates(date(2024, 1, 1), date(2024, 1, 5)) == [
        "2024-01-02",
        "2024-01-03",
        "2024-01-04",
    ]


def test_latest_yesterday_means_no_gap() -> None:
    assert find_missing_dates(date(2024, 1, 9), date(2024, 1, 10)) == []


def test_latest_today_means_no_gap() -> None:
    assert find_missing_dates(date(2024, 1, 10), date(2024, 1, 10)) == []


def test_new_user_has_no_missing_dates() -> None:
    assert find_missing_dates(None, date(2024, 1, 10)) == []


def test_latest_after_today_yields_nothing() -> None:
    assert find_missing_dates(date(2024, 1, 12), date(2024, 1, 10)) == []


def test_crosses_year_boundary() -> None:
    assert find_missing_dates(date(2023, 12, 30), date(2024, 1, 2)) == [
        "2023-12-31",
        "2024-01-01",
    ]


def test_leap_day_included() -> None:
    missing = find_missing_dates(date(2024, 2, 27), date(2024, 3, 2))
    assert missing == ["2024-02-28", "2024-02-29", "2024-03-01"]


def test_today_never_missing() -> None:
    today = date(2024, 1, 10)
    missing = find_missing_dates(date(2023, 12, 1), today)
    assert "2024-01-10" not in missing
    assert len(missing) == 39
