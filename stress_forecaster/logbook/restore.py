"""
Restore (backfill) bookkeeping.

A restore submits a log for a missed past day.  Restores are limited by a
monthly quota reported in the ``EligibilitySnapshot``.  This module decides
*whether* a restore may happen and builds the request; sending it is the
caller's job.

Rules
-----
Prompt for missed days (``should_prompt_restore``) only when:
  - the user has not dismissed the prompt,
  - ``0 < len(missing) <= restore_remaining``, and
  - ``len(missing) <= max_prompt_days`` (default 3).

A specific date may be restored (``check_restore``) only when, in priority
order of the hint shown to the user:
  1. eligibility is known,
  2. ``restore_remaining > 0``,
  3. the date is strictly before today,
  4. the date has no real record.

``apply_restore`` returns the snapshot as it will look after a successful
restore; it never mutates its input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, field_validator

from stress_forecaster.logbook.imputation import ImputedProfile
from stress_forecaster.models.eligibility import EligibilitySnapshot
from stress_forecaster.models.log import METRIC_FIELDS, DayRecord
from stress_forecaster.taxonomy.stress_taxonomy import (
    NEUTRAL_MOOD_INDEX,
    StressStatus,
    status_code,
)
from stress_forecaster.utils.time_utils import format_date_key, parse_date_key

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_MAX_DAYS = 3

HINT_UNKNOWN        = "Failed to load restore eligibility."
HINT_QUOTA_USED_UP  = "Your restore limit for this month is used up."
HINT_NOT_PAST       = "Select a date before today to restore."
HINT_HAS_DATA       = "This date already has data."
HINT_CAN_RESTORE    = "No data found for this date. You can restore it."
HINT_INVALID_DATE   = "Select a valid date to restore."


# ── Custom exceptions ─────────────────────────────────────────────────────────


class RestoreNotAllowedError(ValueError):
    """Raised when building a restore request for a date that cannot be restored.

    Attributes:
        target: The requested date key.
        hint:   The user-facing reason.
    """

    def __init__(self, target: str, hint: str) -> None:
        self.target = target
        self.hint   = hint
        super().__init__(f"Cannot restore {target}: {hint}")


class RestoreQuotaExceededError(RuntimeError):
    """Raised when applying a restore with no quota left.

    Attributes:
        restore_limit: Monthly quota from the snapshot.
    """

    def __init__(self, restore_limit: int) -> None:
        self.restore_limit = restore_limit
        super().__init__(
            f"Monthly restore limit reached ({restore_limit}/month)."
        )


# ── Result types ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class RestorePrompt:
    """Prompt offering to restore the listed missed days."""

    dates: tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.dates)

    @property
    def first_date(self) -> str:
        return self.dates[0]


@dataclass(frozen=True)
class RestoreCheck:
    """Whether a date can be restored, plus the hint shown to the user."""

    allowed: bool
    hint: str


class RestoreRequest(BaseModel):
    """Backfill submission for one missed day.

    Attributes:
        log_date:      Day being restored.
        stress_status: Stress band predicted for the restored metrics.
        sleep_hours … physical_hours: Submitted metric values (0–24).
        mood_index:    Ordinal mood 0–4.
        gpa:           GPA to submit with the log, if known.
    """

    model_config = ConfigDict(frozen=True)

    log_date: date
    stress_status: StressStatus
    sleep_hours: float
    study_hours: float = 0.0
    extracurricular_hours: float = 0.0
    social_hours: float = 0.0
    physical_hours: float = 0.0
    mood_index: int = NEUTRAL_MOOD_INDEX
    gpa: Optional[float] = None

    @field_validator(*METRIC_FIELDS)
    @classmethod
    def validate_hours(cls, v: float) -> float:
        if not 0.0 <= v <= 24.0:
            raise ValueError(f"Hours must be in [0, 24], got {v}.")
        return v

    @field_validator("mood_index")
    @classmethod
    def validate_mood(cls, v: int) -> int:
        if not 0 <= v <= 4:
            raise ValueError(f"mood_index must be in [0, 4], got {v}.")
        return v

    def to_payload(self) -> dict:
        """Backend request body (camelCase keys)."""
        payload = {
            "date": format_date_key(self.log_date),
            "stressLevel": status_code(self.stress_status),
            "extracurricularHourPerDay": self.extracurricular_hours,
            "physicalActivityHourPerDay": self.physical_hours,
            "sleepHourPerDay": self.sleep_hours,
            "studyHourPerDay": self.study_hours,
            "socialHourPerDay": self.social_hours,
            "emoji": self.mood_index,
        }
        if self.gpa is not None:
            payload["gpa"] = self.gpa
        return payload

    @classmethod
    def from_profile(
        cls,
        profile: ImputedProfile,
        stress_status: StressStatus,
        gpa: Optional[float] = None,
    ) -> "RestoreRequest":
        """Pre-fill a request from an imputed profile (0.5-hour rounding).

        Metrics the profile could not estimate are submitted as 0.
        """
        values = {
            name: (value if value is not None else 0.0)
            for name, value in profile.display_values().items()
        }
        return cls(
            log_date=profile.target_date,
            stress_status=stress_status,
            mood_index=profile.mood_index,
            gpa=gpa,
            **values,
        )


# ── Rules ─────────────────────────────────────────────────────────────────────


def should_prompt_restore(
    missing_dates: Sequence[str],
    restore_remaining: int,
    max_prompt_days: int = DEFAULT_PROMPT_MAX_DAYS,
    dismissed: bool = False,
) -> Optional[RestorePrompt]:
    """Decide whether to offer restoring the missed days.

    Args:
        missing_dates:     Output of ``find_missing_dates()``.
        restore_remaining: Restores left this month.
        max_prompt_days:   Longest gap still worth prompting for.
        dismissed:         True once the user closed the prompt.

    Returns:
        ``RestorePrompt`` or ``None``.
    """
    count = len(missing_dates)
    if dismissed or count == 0:
        return None
    if count > restore_remaining or count > max_prompt_days:
        logger.debug(
            "Not prompting restore: %d missing, %d remaining, cap %d",
            count, restore_remaining, max_prompt_days,
        )
        return None
    return RestorePrompt(dates=tuple(missing_dates))


def check_restore(
    records: Mapping[str, DayRecord],
    target: Union[str, date],
    today: date,
    snapshot: Optional[EligibilitySnapshot],
) -> RestoreCheck:
    """Return whether ``target`` can be restored and the hint to show."""
    if snapshot is None:
        return RestoreCheck(allowed=False, hint=HINT_UNKNOWN)
    if snapshot.restore_remaining <= 0:
        return RestoreCheck(allowed=False, hint=HINT_QUOTA_USED_UP)

    target_date = parse_date_key(target)
    if target_date is None:
        return RestoreCheck(allowed=False, hint=HINT_INVALID_DATE)
    if target_date >= today:
        return RestoreCheck(allowed=False, hint=HINT_NOT_PAST)

    existing = records.get(format_date_key(target_date))
    if existing is not None and not existing.is_empty:
        return RestoreCheck(allowed=False, hint=HINT_HAS_DATA)
    return RestoreCheck(allowed=True, hint=HINT_CAN_RESTORE)


def build_restore_request(
    records: Mapping[str, DayRecord],
    today: date,
    snapshot: Optional[EligibilitySnapshot],
    request: RestoreRequest,
) -> RestoreRequest:
    """Validate ``request`` against the restore rules and return it.

    Raises:
        RestoreNotAllowedError: If ``check_restore`` rejects the date.
    """
    check = check_restore(records, request.log_date, today, snapshot)
    if not check.allowed:
        raise RestoreNotAllowedError(format_date_key(request.log_date), check.hint)
    logger.info("Restore request accepted for %s", request.log_date)
    return request


def apply_restore(snapshot: EligibilitySnapshot) -> EligibilitySnapshot:
    """Return ``snapshot`` with one more restore used.

    Raises:
        RestoreQuotaExceededError: If no restores remain.
    """
    if snapshot.restore_remaining <= 0:
        raise RestoreQuotaExceededError(snapshot.restore_limit)
    return snapshot.model_copy(
        update={
            "restore_used": snapshot.restore_used + 1,
            "restore_remaining": snapshot.restore_remaining - 1,
        }
    )
