"""
Tests for models/eligibility.py and models/forecast.py.

What we test
------------
1. EligibilitySnapshot aliases, defaults and count validation.
2. UpstreamForecast base chance selection (chance_percent over probability).
3. ForecastPayload nesting and ForecastDay percent bounds.
"""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from stress_forecaster.models.eligibility import EligibilitySnapshot
from stress_forecaster.models.forecast import ForecastDay, ForecastPayload, UpstreamForecast
from stress_forecaster.taxonomy.stress_taxonomy import StressStatus


# ── EligibilitySnapshot ───────────────────────────────────────────────────────

def test_snapshot_from_backend_payload() -> None:
    snapshot = EligibilitySnapshot.model_validate(
        {
            "userId": 4,
            "eligible": False,
            "streak": 5,
            "requiredStreak": 7,
            "restoreUsed": 1,
            "restoreRemaining": 2,
            "restoreLimit": 3,
            "missing": 2,
            "note": "  too few logs ",
        }
    )
    assert snapshot.user_id == 4
    assert snapshot.required_streak == 7
    assert snapshot.restore_remaining == 2
    assert snapshot.note == "too few logs"


def test_snapshot_defaults() -> None:
    snapshot = EligibilitySnapshot()
    assert not snapshot.eligible
    assert snapshot.required_streak == 7
    assert snapshot.restore_limit == 3
    assert snapshot.note == ""


def test_snapshot_null_note() -> None:
    assert EligibilitySnapshot.model_validate({"note": None}).note == ""


@pytest.mark.parametrize("field", ["streak", "restoreUsed", "restoreRemaining", "missing"])
def test_snapshot_rejects_negative_counts(field: str) -> None:
    with pytest.raises(ValidationError):
        EligibilitySnapshot.model_validate({field: -1})


# ── UpstreamForecast ──────────────────────────────────────────────────────────

def test_chance_percent_preferred(upstream_forecast) -> None:
    assert upstream_forecast.base_chance_percent == 60.0
    assert upstream_forecast.model_type == "global_markov"
    assert upstream_forecast.prediction_label == "High"


def test_probability_fallback() -> None:
    forecast = UpstreamForecast.model_validate({"probability": 0.25})
    assert forecast.base_chance_percent == pytest.approx(25.0)


def test_no_chance_data() -> None:
    forecast = UpstreamForecast.model_validate({"chancePercent": "n/a"})
    assert forecast.chance_percent is None
    assert forecast.base_chance_percent == 0.0
    assert forecast.model_type == "unknown"


# ── ForecastPayload / ForecastDay ─────────────────────────────────────────────

def test_payload_nesting() -> None:
    payload = ForecastPayload.model_validate(
        {
            "forecast": {"forecastDate": "2024-01-11", "chancePercent": 40},
            "eligibility": {"eligible": True, "streak": 9},
        }
    )
    assert payload.forecast.base_chance_percent == 40.0
    assert payload.eligibility.streak == 9


def test_payload_without_eligibility() -> None:
    payload = ForecastPayload.model_validate({"forecast": {}})
    assert payload.eligibility is None


def test_forecast_day_rejects_out_of_range_percent() -> None:
    with pytest.raises(ValidationError):
        ForecastDay(
            forecast_date=date(2024, 1, 11),
            short_label="Thu 11",
            long_label="Thursday, January 11",
            status=StressStatus.LOW,
            probability_percent=101.0,
            advice_text="x",
            model_type="m",
        )
