"""
Tests for utils/time_utils.py.

What we test
------------
1. parse_date_key accepts dates, datetimes and date strings with an optional
   time part; rejects trailing junk, impossible dates and non-date values.
2. parse_timestamp handles the ``Z`` suffix, naive values and epoch
   milliseconds.
3. date_range bounds and step validation.
4. Day labels.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from stress_forecaster.utils.time_utils import (
    date_range,
    format_date_key,
    long_day_label,
    parse_date_key,
    parse_timestamp,
    short_day_label,
)


# ── parse_date_key ────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2024-01-05", date(2024, 1, 5)),
        ("2024-1-5", date(2024, 1, 5)),
        (" 2024-01-05T23:30:00+07:00", date(2024, 1, 5)),
        (date(2024, 1, 5), date(2024, 1, 5)),
        (datetime(2024, 1, 5, 23, 59, tzinfo=timezone(timedelta(hours=-5))), date(2024, 1, 5)),
    ],
)
def test_parse_date_key_valid(raw, expected: date) -> None:
    assert parse_date_key(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["2024-02-30", "2024-13-01", "01/05/2024", "2024-01-05garbage", "2024-01-05Z", "", None, 20240105],
)
def test_parse_date_key_invalid(raw) -> None:
    assert parse_date_key(raw) is None


def test_format_date_key_zero_pads() -> None:
    assert format_date_key(date(2024, 1, 5)) == "2024-01-05"


# ── parse_timestamp ───────────────────────────────────────────────────────────

def test_parse_timestamp_zulu() -> None:
    assert parse_timestamp("2024-01-05T08:00:00Z") == datetime(2024, 1, 5, 8, tzinfo=timezone.utc)


def test_parse_timestamp_naive_becomes_utc() -> None:
    parsed = parse_timestamp(datetime(2024, 1, 5, 8))
    assert parsed.tzinfo == timezone.utc


def test_parse_timestamp_offsets_compare() -> None:
    earlier = parse_timestamp("2024-01-05T10:00:00+07:00")
    later = parse_timestamp("2024-01-05T04:00:00Z")
    assert earlier < later


def test_parse_timestamp_epoch_milliseconds() -> None:
    assert parse_timestamp(1704441600000) == datetime(2024, 1, 5, 8, tzinfo=timezone.utc)
    assert parse_timestamp(100) < parse_timestamp(200.0)


@pytest.mark.parametrize("raw", ["soon", "  ", None, True, float("nan"), float("inf")])
def test_parse_timestamp_invalid(raw) -> None:
    assert parse_timestamp(raw) is None


# ── date_range ────────────────────────────────────────────────────────────────

def test_date_range_inclusive() -> None:
    days = date_range(date(2024, 1, 1), date(2024, 1, 3))
    assert days == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]


def test_date_range_empty_when_reversed() -> None:
    assert date_range(date(2024, 1, 3), date(2024, 1, 1)) == []


def test_date_range_step() -> None:
    assert len(date_range(date(2024, 1, 1), date(2024, 1, 7), step_days=3)) == 3


def test_date_range_rejects_zero_step() -> None:
    with pytest.raises(ValueError):
        date_range(date(2024, 1, 1), date(2024, 1, 2), step_days=0)


# ── Labels ────────────────────────────────────────────────────────────────────

def test_day_labels() -> None:
    day = date(2024, 1, 1)
    assert short_day_label(day) == "Mon 1"
    assert long_day_label(day) == "Monday, January 1"
