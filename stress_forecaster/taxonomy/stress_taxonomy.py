"""
Stress taxonomy: status bands, forecast modes and the mood scale.

The backend reports a categorical stress level per log.  The dashboard shows
it as a 0–100 score via a fixed lookup (not a computation)::

    High     → 85
    Moderate → 50
    Low      → 20

and derives the status band back from the score:

    score > 60 → High
    score > 30 → Moderate
    otherwise  → Low

Mood is an ordinal index 0–4 (very sad … very happy); 2 is neutral.

This module has NO imports from any other ``stress_forecaster`` package.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class StressStatus(StrEnum):
    """Stress band shown on calendar days and forecast cards."""

    LOW      = "Low"
    MODERATE = "Moderate"
    HIGH     = "High"


class ForecastMode(StrEnum):
    """Presentation label for which model family produced a forecast."""

    GLOBAL       = "global"
    PERSONALIZED = "personalized"


STATUS_SCORES: dict[StressStatus, int] = {
    StressStatus.HIGH:     85,
    StressStatus.MODERATE: 50,
    StressStatus.LOW:      20,
}

HIGH_SCORE_THRESHOLD = 60
MODERATE_SCORE_THRESHOLD = 30

MOOD_SCALE: tuple[str, ...] = ("very_sad", "sad", "neutral", "happy", "very_happy")
NEUTRAL_MOOD_INDEX = 2


def coerce_stress_level(value: Any) -> StressStatus:
    """Map a backend stress level (label or 0/1/2 code) to ``StressStatus``.

    Anything unrecognised maps to Low, matching the dashboard's fallback.
    """
    if isinstance(value, StressStatus):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == "high":
            return StressStatus.HIGH
        if normalized == "moderate":
            return StressStatus.MODERATE
        return StressStatus.LOW
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if value == 2:
            return StressStatus.HIGH
        if value == 1:
            return StressStatus.MODERATE
    return StressStatus.LOW


def score_for_level(value: Any) -> int:
    """Return the UI score (85/50/20) for a backend stress level."""
    return STATUS_SCORES[coerce_stress_level(value)]


def status_from_score(score: float) -> StressStatus:
    """Derive the status band from a 0–100 score."""
    if score > HIGH_SCORE_THRESHOLD:
        return StressStatus.HIGH
    if score > MODERATE_SCORE_THRESHOLD:
        return StressStatus.MODERATE
    return StressStatus.LOW


def status_code(status: StressStatus) -> int:
    """Return the backend's numeric code for a status (2/1/0)."""
    return {StressStatus.HIGH: 2, StressStatus.MODERATE: 1, StressStatus.LOW: 0}[status]


def coerce_mood_index(value: Any) -> int:
    """Clamp a raw mood value to a valid index; invalid values become neutral."""
    try:
        idx = int(value)
    except (TypeError, ValueError, OverflowError):
        return NEUTRAL_MOOD_INDEX
    if isinstance(value, float) and value != idx:
        return NEUTRAL_MOOD_INDEX
    if 0 <= idx < len(MOOD_SCALE):
        return idx
    return NEUTRAL_MOOD_INDEX
