"""
Daily self-report models: raw backend entries and reconciled day records.

Two-stage design:
  1. ``RawLogEntry``: one log exactly as received from the log source.
                       The date is kept raw so the reconciler can skip
                       malformed dates instead of failing validation.
  2. ``DayRecord``:   the reconciled, one-per-calendar-day projection that
                       presentation code and the imputation estimator read.

Both models are frozen.  Malformed numeric metrics are coerced to ``None``
at the field level so one bad value never discards the whole entry.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from stress_forecaster.taxonomy.stress_taxonomy import (
    NEUTRAL_MOOD_INDEX,
    StressStatus,
    coerce_mood_index,
)
from stress_forecaster.utils.time_utils import format_date_key, parse_timestamp

METRIC_FIELDS: tuple[str, ...] = (
    "sleep_hours",
    "study_hours",
    "extracurricular_hours",
    "social_hours",
    "physical_hours",
)


def finite_or_none(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class RawLogEntry(BaseModel):
    """A single daily self-report as returned by the log source.

    Field aliases match the backend's camelCase response so payloads can be
    validated directly; snake_case names are accepted too.

    Attributes:
        log_id:                Opaque backend id (``stressLevelId``).
        log_date:              Raw calendar date (``date``); parsed later.
        created_at:            Creation timestamp, or ``None`` if absent/invalid.
        stress_level:          Categorical stress level (label or 0/1/2 code).
        sleep_hours:           Hours slept, or ``None``.
        study_hours:           Hours studied, or ``None``.
        extracurricular_hours: Hours on extracurriculars, or ``None``.
        social_hours:          Hours socialising, or ``None``.
        physical_hours:        Hours of physical activity, or ``None``.
        mood_index:            Ordinal mood 0–4 (``emoji``).
        is_restored:           True if this log was a backfill.
        gpa:                   GPA submitted with the log, or ``None``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    log_id: Optional[Any] = Field(default=None, alias="stressLevelId")
    log_date: Union[date, str, None] = Field(default=None, alias="date")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    stress_level: Union[int, str, None] = Field(default=None, alias="stressLevel")
    sleep_hours: Optional[float] = Field(default=None, alias="sleepHourPerDay")
    study_hours: Optional[float] = Field(default=None, alias="studyHourPerDay")
    extracurricular_hours: Optional[float] = Field(
        default=None, alias="extracurricularHourPerDay"
    )
    social_hours: Optional[float] = Field(default=None, alias="socialHourPerDay")
    physical_hours: Optional[float] = Field(default=None, alias="physicalActivityHourPerDay")
    mood_index: int = Field(default=NEUTRAL_MOOD_INDEX, alias="emoji")
    is_restored: bool = Field(default=False, alias="isRestored")
    gpa: Optional[float] = None

    @field_validator("created_at", mode="before")
    @classmethod
    def lenient_timestamp(cls, v: Any) -> Optional[datetime]:
        return parse_timestamp(v)

    @field_validator(*METRIC_FIELDS, "gpa", mode="before")
    @classmethod
    def finite_metric(cls, v: Any) -> Optional[float]:
        return finite_or_none(v)

    @field_validator("mood_index", mode="before")
    @classmethod
    def valid_mood(cls, v: Any) -> int:
        return coerce_mood_index(v)

    @field_validator("is_restored", mode="before")
    @classmethod
    def restored_flag(cls, v: Any) -> bool:
        return bool(v) if v is not None else False

    @field_validator("stress_level", mode="before")
    @classmethod
    def stress_level_scalar(cls, v: Any) -> Union[int, str, None]:
        if isinstance(v, (int, str)) or v is None:
            return v
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return None


class DayRecord(BaseModel):
    """The authoritative record for one calendar day.

    Built fresh by ``reconcile_logs()`` from the latest-created raw entry for
    the day, or as an empty placeholder for today when nothing was logged.

    Attributes:
        log_date:    Calendar date of the record.
        score:       UI score 0–100 (85/50/20 lookup; 0 for placeholders).
        status:      Low / Moderate / High band derived from ``score``.
        sleep_hours … physical_hours: Metric values; ``None`` if the source
                     entry lacked a finite value.
        mood_index:  Ordinal mood 0–4.
        is_empty:    True only for the synthetic placeholder day.
        is_today:    True if ``log_date`` equals the reconciliation "today".
        is_restored: True if the source entry was a backfill.
        log_id:      Backend id of the source entry, if any.
    """

    model_config = ConfigDict(frozen=True)

    log_date: date
    score: int = 0
    status: StressStatus = StressStatus.LOW
    sleep_hours: Optional[float] = None
    study_hours: Optional[float] = None
    extracurricular_hours: Optional[float] = None
    social_hours: Optional[float] = None
    physical_hours: Optional[float] = None
    mood_index: int = NEUTRAL_MOOD_INDEX
    is_empty: bool = False
    is_today: bool = False
    is_restored: bool = False
    log_id: Optional[Any] = None

    @property
    def key(self) -> str:
        """Canonical ``YYYY-MM-DD`` key of this record."""
        return format_date_key(self.log_date)

    def metric(self, name: str) -> Optional[float]:
        """Return the value of metric ``name`` (one of ``METRIC_FIELDS``)."""
        if name not in METRIC_FIELDS:
            raise KeyError(f"Unknown metric '{name}'. Expected one of {METRIC_FIELDS}.")
        return getattr(self, name)

    @classmethod
    def placeholder(cls, day: date) -> "DayRecord":
        """Empty record for a day with no submission yet (all metrics zero)."""
        return cls(
            log_date=day,
            score=0,
            status=StressStatus.LOW,
            sleep_hours=0.0,
            study_hours=0.0,
            extracurricular_hours=0.0,
            social_hours=0.0,
            physical_hours=0.0,
            mood_index=NEUTRAL_MOOD_INDEX,
            is_empty=True,
            is_today=True,
        )
