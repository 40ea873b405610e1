"""
Imputation of plausible metric values for a missed day.

When a user restores a missed day in "auto" mode, the form is pre-filled
from nearby real days instead of zeros.

Sample selection
----------------
1. Take every non-empty ``DayRecord`` except the target day.
2. Split into days strictly before the target (nearest first, i.e. date
   descending) and strictly after it (nearest first, ascending).
3. Concatenate past-then-future and keep the first ``sample_cap`` (default 7).
   If that leaves nothing, fall back to all non-empty records.

Estimates
---------
- Each hour metric is the arithmetic mean over samples that have a finite
  value for it.  Records lacking the metric are ignored, never counted as 0.
  A metric with no usable value at all is reported as ``None``.
- Mood is the mode of the samples' mood indices.  Ties go to the value that
  occurs first in sample order (nearest past day first).
- Means keep full precision; ``ImputedProfile.display_value()`` rounds to the
  nearest 0.5 hour (half up) for form pre-fill.

No samples anywhere is a normal outcome, reported as
``ImputationUnavailable`` so callers fall back to manual entry.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional, Union

from stress_forecaster.models.log import METRIC_FIELDS, DayRecord
from stress_forecaster.utils.time_utils import parse_date_key

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_CAP = 7
DISPLAY_STEP_HOURS = 0.5

NO_DATA_MESSAGE = "No previous data found. Please fill it manually first."


@dataclass(frozen=True)
class ImputedProfile:
    """Estimated metrics for one target day.

    Attributes:
        target_date:  Day being estimated.
        estimates:    Metric name → full-precision mean, or ``None`` when no
                      sample had a finite value for that metric.
        mood_index:   Most frequent mood among the samples.
        sample_dates: Dates of the records used, in selection order.
    """

    target_date: date
    estimates: dict[str, Optional[float]]
    mood_index: int
    sample_dates: tuple[date, ...]

    @property
    def sample_count(self) -> int:
        return len(self.sample_dates)

    def display_value(self, metric: str, step: float = DISPLAY_STEP_HOURS) -> Optional[float]:
        """Estimate for ``metric`` rounded to the nearest ``step`` (half up)."""
        value = self.estimates[metric]
        if value is None:
            return None
        return round_to_step(value, step)

    def display_values(self) -> dict[str, Optional[float]]:
        """All metrics rounded for display."""
        return {name: self.display_value(name) for name in METRIC_FIELDS}


@dataclass(frozen=True)
class ImputationUnavailable:
    """Explicit "estimation unavailable" result.

    Attributes:
        target_key: The requested target, as given.
        reason:     Human-readable explanation for the form.
    """

    target_key: str
    reason: str = NO_DATA_MESSAGE


ImputationResult = Union[ImputedProfile, ImputationUnavailable]


def round_to_step(value: float, step: float = DISPLAY_STEP_HOURS) -> float:
    """Round ``value`` to the nearest multiple of ``step``; halves round up."""
    return math.floor(value / step + 0.5) * step


def select_samples(
    records: Mapping[str, DayRecord],
    target: date,
    sample_cap: int = DEFAULT_SAMPLE_CAP,
) -> list[DayRecord]:
    """Pick the nearest non-empty records around ``target``.

    Returns:
        Up to ``sample_cap`` records, past (descending) before future
        (ascending); all non-empty records if that selection is empty.
    """
    candidates = [
        r for r in records.values()
        if not r.is_empty and r.log_date != target
    ]
    if not candidates:
        return []

    past = sorted((r for r in candidates if r.log_date < target),
                  key=lambda r: r.log_date, reverse=True)
    future = sorted((r for r in candidates if r.log_date > target),
                    key=lambda r: r.log_date)
    samples = (past + future)[:max(sample_cap, 0)]
    return samples if samples else candidates


def _mean(values: list[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def _mode_first_seen(values: list[int]) -> int:
    counts = Counter(values)
    best = max(counts.values())
    for value in values:
        if counts[value] == best:
            return value
    raise ValueError("mode of an empty sequence")


def impute_profile(
    records: Mapping[str, DayRecord],
    target: Union[str, date],
    sample_cap: int = DEFAULT_SAMPLE_CAP,
) -> ImputationResult:
    """Estimate metrics and mood for ``target`` from nearby real days.

    Args:
        records:    Reconciled map (date key → ``DayRecord``).
        target:     Target date or date key.
        sample_cap: Maximum number of nearby records to average.

    Returns:
        ``ImputedProfile``, or ``ImputationUnavailable`` when the target is
        unparsable or no other non-empty record exists.
    """
    target_key = str(target)
    target_date = parse_date_key(target)
    if target_date is None:
        logger.debug("Imputation target %r is not a valid date", target)
        return ImputationUnavailable(target_key=target_key, reason="Invalid target date.")

    samples = select_samples(records, target_date, sample_cap)
    if not samples:
        logger.info("No samples available to impute %s", target_date)
        return ImputationUnavailable(target_key=target_key)

    estimates: dict[str, Optional[float]] = {}
    for name in METRIC_FIELDS:
        finite = [
            v for v in (r.metric(name) for r in samples)
            if v is not None and math.isfinite(v)
        ]
        estimates[name] = _mean(finite)

    profile = ImputedProfile(
        target_date=target_date,
        estimates=estimates,
        mood_index=_mode_first_seen([r.mood_index for r in samples]),
        sample_dates=tuple(r.log_date for r in samples),
    )
    logger.debug("Imputed %s from %d samples", target_date, profile.sample_count)
    return profile
