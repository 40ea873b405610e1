"""
Forecast eligibility gate.

The gate does not recompute eligibility: it trusts the snapshot's own
``eligible`` flag and only decides what to show.  When the forecast is
withheld it builds the explanation shown in place of the forecast cards.

Message format (line order and punctuation are relied on by display code)::

    Forecast is not available because your data does not meet the minimum requirement yet.
    Reason: too few logs
    Collected data: 3/7.
    • Requires 7 logs (not necessarily consecutive).
    • Restore can be used (max 3/month).
    • Minimum 4 original logs within the 7-day window.
    Restore used: 1 • Remaining: 2.

The ``Reason`` line is omitted when the note is empty; unknown counts are
rendered as ``-``.

Mode
----
Independently of gating, the forecast is labelled ``personalized`` when
``streak >= 60`` and ``global`` otherwise, so the UI can explain why a
personalized forecast is not available yet.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from stress_forecaster.models.eligibility import EligibilitySnapshot
from stress_forecaster.taxonomy.stress_taxonomy import ForecastMode

PERSONALIZED_STREAK_THRESHOLD = 60
DEFAULT_REQUIRED_STREAK = 7
DEFAULT_RESTORE_LIMIT = 3
MIN_ORIGINAL_LOGS_IN_WINDOW = 4
WINDOW_DAYS = 7

UNAVAILABLE_HEADLINE = (
    "Forecast is not available because your data does not meet the minimum requirement yet."
)

_MODE_DESCRIPTIONS: dict[ForecastMode, str] = {
    ForecastMode.PERSONALIZED: (
        "Personalized forecast is trained from your own stress history "
        f"({PERSONALIZED_STREAK_THRESHOLD}+ logs)."
    ),
    ForecastMode.GLOBAL: "Global forecast uses aggregate patterns from all users' stress data.",
}


@dataclass(frozen=True)
class GateVerdict:
    """Outcome of the eligibility gate.

    Attributes:
        can_show_forecast: True only when the snapshot says ``eligible``.
        message:           Explanation when withheld; empty when shown.
        mode:              Presentation mode, computed either way.
    """

    can_show_forecast: bool
    message: str
    mode: ForecastMode


def resolve_forecast_mode(
    snapshot: Optional[EligibilitySnapshot],
    personalized_streak: int = PERSONALIZED_STREAK_THRESHOLD,
) -> ForecastMode:
    """Return ``personalized`` when ``streak >= personalized_streak``."""
    if snapshot is None:
        return ForecastMode.GLOBAL
    if snapshot.streak >= personalized_streak:
        return ForecastMode.PERSONALIZED
    return ForecastMode.GLOBAL


def mode_description(mode: ForecastMode) -> str:
    """UI copy explaining a forecast mode."""
    return _MODE_DESCRIPTIONS[mode]


def _or_dash(value: Optional[int]) -> str:
    return "-" if value is None else str(value)


def build_eligibility_message(
    reason: Optional[str] = None,
    streak: Optional[int] = None,
    restore_used: Optional[int] = None,
    restore_remaining: Optional[int] = None,
    required_streak: int = DEFAULT_REQUIRED_STREAK,
    restore_limit: int = DEFAULT_RESTORE_LIMIT,
) -> str:
    """Build the multi-line "forecast unavailable" explanation."""
    lines = [
        UNAVAILABLE_HEADLINE,
        f"Reason: {reason}" if reason else None,
        f"Collected data: {_or_dash(streak)}/{required_streak}.",
        f"• Requires {required_streak} logs (not necessarily consecutive).",
        f"• Restore can be used (max {restore_limit}/month).",
        f"• Minimum {MIN_ORIGINAL_LOGS_IN_WINDOW} original logs within the {WINDOW_DAYS}-day window.",
        f"Restore used: {_or_dash(restore_used)} • Remaining: {_or_dash(restore_remaining)}.",
    ]
    return "\n".join(line for line in lines if line)


def evaluate_eligibility(
    snapshot: Optional[EligibilitySnapshot],
    personalized_streak: int = PERSONALIZED_STREAK_THRESHOLD,
    default_required_streak: int = DEFAULT_REQUIRED_STREAK,
    default_restore_limit: int = DEFAULT_RESTORE_LIMIT,
) -> GateVerdict:
    """Gate the multi-day forecast on the upstream eligibility verdict.

    Args:
        snapshot:                Eligibility from the backend, or ``None`` if
                                 it could not be obtained.
        personalized_streak:     Streak at which the mode becomes personalized.
        default_required_streak: Used in the message when ``snapshot`` is None.
        default_restore_limit:   Used in the message when ``snapshot`` is None.

    Returns:
        ``GateVerdict``.
    """
    mode = resolve_forecast_mode(snapshot, personalized_streak)

    if snapshot is None:
        message = build_eligibility_message(
            required_streak=default_required_streak,
            restore_limit=default_restore_limit,
        )
        return GateVerdict(can_show_forecast=False, message=message, mode=mode)

    if snapshot.eligible:
        return GateVerdict(can_show_forecast=True, message="", mode=mode)

    message = build_eligibility_message(
        reason=snapshot.note,
        streak=snapshot.streak,
        restore_used=snapshot.restore_used,
        restore_remaining=snapshot.restore_remaining,
        required_streak=snapshot.required_streak,
        restore_limit=snapshot.restore_limit,
    )
    return GateVerdict(can_show_forecast=False, message=message, mode=mode)


def same_eligibility(
    left: Optional[EligibilitySnapshot],
    right: Optional[EligibilitySnapshot],
) -> bool:
    """True when two snapshots agree on every field the dashboard shows."""
    if left is None and right is None:
        return True
    if left is None or right is None:
        return False
    return (
        left.streak == right.streak
        and left.required_streak == right.required_streak
        and left.restore_used == right.restore_used
        and left.restore_limit == right.restore_limit
        and left.missing == right.missing
        and left.note == right.note
    )
