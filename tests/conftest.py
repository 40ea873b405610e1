"""
Shared pytest fixtures for the stress forecaster test suite.

Provides:
  - ``today``: a pinned reference date so calendar math is deterministic.
  - Eligibility snapshots (eligible / ineligible / personalized).
  - A sample upstream forecast and a log-list payload in backend shape.
"""

from __future__ import annotations

from datetime import date

import pytest

from stress_forecaster.models.eligibility import EligibilitySnapshot
from stress_forecaster.models.forecast import UpstreamForecast

TODAY = date(2024, 1, 10)


@pytest.fixture
def today() -> date:
    """Pinned "today" for every test that needs one."""
    return TODAY


@pytest.fixture
def eligible_snapshot() -> EligibilitySnapshot:
    return EligibilitySnapshot(
        user_id=1,
        eligible=True,
        streak=7,
        required_streak=7,
        restore_used=0,
        restore_remaining=3,
        restore_limit=3,
        missing=0,
        note="Eligible",
    )


@pytest.fixture
def ineligible_snapshot() -> EligibilitySnapshot:
    return EligibilitySnapshot(
        user_id=1,
        eligible=False,
        streak=3,
        required_streak=7,
        restore_used=1,
        restore_remaining=2,
        restore_limit=3,
        missing=2,
        note="too few logs",
    )


@pytest.fixture
def personalized_snapshot() -> EligibilitySnapshot:
    return EligibilitySnapshot(
        eligible=True,
        streak=75,
        required_streak=7,
        restore_used=0,
        restore_remaining=3,
        restore_limit=3,
    )


@pytest.fixture
def upstream_forecast() -> UpstreamForecast:
    return UpstreamForecast.model_validate(
        {
            "userId": 1,
            "forecastDate": "2024-01-11",
            "probability": 0.6,
            "chancePercent": 60,
            "threshold": 0.5,
            "predictionBinary": 1,
            "predictionLabel": "High",
            "modelType": "global_markov",
        }
    )


@pytest.fixture
def log_list_payload() -> list[dict]:
    """Backend my-logs response data: two entries for Jan 5, one bad date."""
    return [
        {
            "stressLevelId": 11,
            "userId": 1,
            "date": "2024-01-04",
            "stressLevel": 0,
            "gpa": 3.4,
            "extracurricularHourPerDay": 1,
            "physicalActivityHourPerDay": 1,
            "sleepHourPerDay": 8,
            "studyHourPerDay": 3,
            "socialHourPerDay": 2,
            "emoji": 3,
            "isRestored": False,
            "createdAt": "2024-01-04T20:00:00Z",
        },
        {
            "stressLevelId": 12,
            "userId": 1,
            "date": "2024-01-05",
            "stressLevel": 1,
            "gpa": 3.5,
            "extracurricularHourPerDay": 0,
            "physicalActivityHourPerDay": 0.5,
            "sleepHourPerDay": 6,
            "studyHourPerDay": 5,
            "socialHourPerDay": 1,
            "emoji": 2,
            "isRestored": False,
            "createdAt": "2024-01-05T08:00:00Z",
        },
        {
            "stressLevelId": 13,
            "userId": 1,
            "date": "2024-01-05",
            "stressLevel": 2,
            "gpa": 3.6,
            "extracurricularHourPerDay": 2,
            "physicalActivityHourPerDay": 0,
            "sleepHourPerDay": 5,
            "studyHourPerDay": 7,
            "socialHourPerDay": 0,
            "emoji": 1,
            "isRestored": False,
            "createdAt": "2024-01-05T21:00:00Z",
        },
        {
            "stressLevelId": 14,
            "userId": 1,
            "date": "not-a-date",
            "stressLevel": 2,
            "sleepHourPerDay": 4,
            "emoji": 0,
            "isRestored": False,
            "createdAt": None,
        },
    ]
