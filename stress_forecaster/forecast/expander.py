"""
Multi-day forecast expansion.

The forecast source predicts a single day.  ``expand_forecast()`` turns that
one prediction into ``days`` cards using compounding decay:

    p_0 = clamp(chance_percent, 0, 100) / 100
    p_i = p_{i-1} * p_0            for i > 0

so a 60% base chance reads 60.0%, 36.0%, 21.6%.  Percentages are rounded
half-up to one decimal place.

Status per day (evaluated in this order, first match wins):
  1. ``prediction_label`` contains "high" / "moderate" / "low"
     (case-insensitive, checked in that order)
  2. ``prediction_binary`` is set: 1 → High, otherwise Low
  3. ``threshold`` is set: day percent >= threshold * 100 → High, else Low
  4. Low

Advice is drawn from the pool matching the status; randomness is injectable.
An unparsable ``forecast_date`` yields an empty list.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from stress_forecaster.forecast.advice import DEFAULT_ADVICE_POOLS, AdvicePools
from stress_forecaster.forecast.eligibility import (
    DEFAULT_REQUIRED_STREAK,
    DEFAULT_RESTORE_LIMIT,
    PERSONALIZED_STREAK_THRESHOLD,
    GateVerdict,
    evaluate_eligibility,
    same_eligibility,
)
from stress_forecaster.models.eligibility import EligibilitySnapshot
from stress_forecaster.models.forecast import ForecastDay, ForecastPayload, UpstreamForecast
from stress_forecaster.taxonomy.stress_taxonomy import ForecastMode, StressStatus
from stress_forecaster.utils.time_utils import long_day_label, parse_date_key, short_day_label

logger = logging.getLogger(__name__)

DEFAULT_FORECAST_DAYS = 3
NOT_AVAILABLE_YET = "Forecast not available yet."


@dataclass(frozen=True)
class ForecastView:
    """Gate verdict plus the expanded days (empty when withheld).

    Attributes:
        verdict:  Result of the eligibility gate.
        days:     Expanded forecast days.
        message:  Text to show instead of cards; empty when ``days`` is set.
        snapshot: The snapshot the verdict was computed from.
    """

    verdict: GateVerdict
    days: tuple[ForecastDay, ...]
    message: str
    snapshot: Optional[EligibilitySnapshot]


def round_percent(probability: float) -> float:
    """Convert a probability to a percentage rounded half-up to 1 dp."""
    return math.floor(probability * 1000 + 0.5) / 10


def resolve_status(
    prediction_label: Optional[str],
    prediction_binary: Optional[int],
    chance_percent: float,
    threshold: Optional[float],
) -> StressStatus:
    """Classify one forecast day (label, then binary flag, then threshold)."""
    normalized = (prediction_label or "").lower()
    if "high" in normalized:
        return StressStatus.HIGH
    if "moderate" in normalized:
        return StressStatus.MODERATE
    if "low" in normalized:
        return StressStatus.LOW
    if prediction_binary is not None:
        return StressStatus.HIGH if prediction_binary == 1 else StressStatus.LOW
    if threshold is not None:
        return StressStatus.HIGH if chance_percent >= threshold * 100 else StressStatus.LOW
    return StressStatus.LOW


def expand_forecast(
    upstream: UpstreamForecast,
    days: int = DEFAULT_FORECAST_DAYS,
    pools: AdvicePools = DEFAULT_ADVICE_POOLS,
    rng: Optional[random.Random] = None,
    mode: ForecastMode = ForecastMode.GLOBAL,
) -> list[ForecastDay]:
    """Expand one upstream prediction into ``days`` forecast days.

    Args:
        upstream: Single-day prediction from the forecast source.
        days:     Number of days to produce.
        pools:    Advice pools keyed by status.
        rng:      Randomness for advice selection (module ``random`` if None).
        mode:     Presentation mode stamped on every day.

    Returns:
        ``days`` entries starting at ``upstream.forecast_date``, or ``[]``
        if that date cannot be parsed.
    """
    start = parse_date_key(upstream.forecast_date)
    if start is None:
        logger.warning("Forecast date %r is not parsable; no forecast", upstream.forecast_date)
        return []

    base = max(0.0, min(upstream.base_chance_percent, 100.0)) / 100
    probability = base
    result: list[ForecastDay] = []

    for idx in range(days):
        if idx > 0:
            probability *= base
        percent = round_percent(probability)
        status = resolve_status(
            upstream.prediction_label,
            upstream.prediction_binary,
            percent,
            upstream.threshold,
        )
        day = start + timedelta(days=idx)
        result.append(
            ForecastDay(
                forecast_date=day,
                short_label=short_day_label(day),
                long_label=long_day_label(day),
                status=status,
                probability_percent=percent,
                advice_text=pools.pick(status, rng),
                model_type=upstream.model_type,
                threshold=upstream.threshold,
                forecast_mode=mode,
            )
        )

    logger.debug(
        "Expanded forecast from %s: %s",
        start, ", ".join(f"{d.probability_percent}%" for d in result),
    )
    return result


def build_forecast_view(
    payload: ForecastPayload,
    snapshot: Optional[EligibilitySnapshot] = None,
    days: int = DEFAULT_FORECAST_DAYS,
    pools: AdvicePools = DEFAULT_ADVICE_POOLS,
    rng: Optional[random.Random] = None,
    personalized_streak: int = PERSONALIZED_STREAK_THRESHOLD,
    default_required_streak: int = DEFAULT_REQUIRED_STREAK,
    default_restore_limit: int = DEFAULT_RESTORE_LIMIT,
) -> ForecastView:
    """Gate and expand a forecast payload.

    The payload's own eligibility, when present and different from
    ``snapshot``, is treated as the fresher view.
    """
    effective = snapshot
    if payload.eligibility is not None and not same_eligibility(payload.eligibility, snapshot):
        effective = payload.eligibility

    verdict = evaluate_eligibility(
        effective,
        personalized_streak=personalized_streak,
        default_required_streak=default_required_streak,
        default_restore_limit=default_restore_limit,
    )
    if not verdict.can_show_forecast:
        logger.info("Forecast withheld (mode=%s)", verdict.mode)
        return ForecastView(verdict=verdict, days=(), message=verdict.message, snapshot=effective)

    expanded = expand_forecast(payload.forecast, days=days, pools=pools, rng=rng, mode=verdict.mode)
    message = "" if expanded else NOT_AVAILABLE_YET
    return ForecastView(verdict=verdict, days=tuple(expanded), message=message, snapshot=effective)
