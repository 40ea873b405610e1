"""
Forecast models.

``UpstreamForecast`` is the single-day prediction returned by the forecast
source.  ``ForecastDay`` is one entry of the expanded multi-day view built by
``stress_forecaster.forecast.expander``.

Both models are frozen. A forecast day is created once per expansion and
never mutated afterwards.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from stress_forecaster.models.eligibility import EligibilitySnapshot
from stress_forecaster.models.log import finite_or_none
from stress_forecaster.taxonomy.stress_taxonomy import ForecastMode, StressStatus


class UpstreamForecast(BaseModel):
    """Next-day stress prediction from the forecast source.

    Either ``chance_percent`` (0–100) or ``probability`` (0–1) carries the base
    rate; ``chance_percent`` wins when both are present.

    Attributes:
        user_id:           Backend user id, if supplied.
        forecast_date:     Raw date of the predicted day; parsed by the expander.
        probability:       Base probability in [0, 1], or ``None``.
        chance_percent:    Base chance in [0, 100], or ``None``.
        threshold:         Decision threshold in [0, 1], or ``None``.
        prediction_binary: 1 = high stress predicted, 0 = not, or ``None``.
        prediction_label:  Free-text label, e.g. ``"High"``, or ``None``.
        model_type:        Identifier of the upstream model.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    user_id: Optional[int] = Field(default=None, alias="userId")
    forecast_date: Union[date, str, None] = Field(default=None, alias="forecastDate")
    probability: Optional[float] = None
    chance_percent: Optional[float] = Field(default=None, alias="chancePercent")
    threshold: Optional[float] = None
    prediction_binary: Optional[int] = Field(default=None, alias="predictionBinary")
    prediction_label: Optional[str] = Field(default=None, alias="predictionLabel")
    model_type: str = Field(default="unknown", alias="modelType")

    @field_validator("probability", "chance_percent", "threshold", mode="before")
    @classmethod
    def finite_number(cls, v: Any) -> Optional[float]:
        return finite_or_none(v)

    @property
    def base_chance_percent(self) -> float:
        """Base chance in percent; 0.0 when neither field is usable."""
        if self.chance_percent is not None:
            return self.chance_percent
        if self.probability is not None:
            return self.probability * 100.0
        return 0.0


class ForecastPayload(BaseModel):
    """Forecast source response: the prediction plus a fresh eligibility view."""

    model_config = ConfigDict(frozen=True)

    forecast: UpstreamForecast
    eligibility: Optional[EligibilitySnapshot] = None


class ForecastDay(BaseModel):
    """One day of the expanded forecast.

    Attributes:
        forecast_date:       Calendar date of this day.
        short_label:         Short display label, e.g. ``"Mon 1"``.
        long_label:          Long display label, e.g. ``"Monday, January 1"``.
        status:              Low / Moderate / High classification.
        probability_percent: Compounded chance for this day, 1 decimal place.
        advice_text:         Advice drawn from the pool matching ``status``.
        model_type:          Upstream model identifier.
        threshold:           Upstream threshold, if any.
        forecast_mode:       Global or personalized presentation mode.
    """

    model_config = ConfigDict(frozen=True)

    forecast_date: date
    short_label: str
    long_label: str
    status: StressStatus
    probability_percent: float
    advice_text: str
    model_type: str
    threshold: Optional[float] = None
    forecast_mode: ForecastMode = ForecastMode.GLOBAL

    @field_validator("probability_percent")
    @classmethod
    def validate_percent(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"probability_percent must be in [0, 100], got {v}.")
        return v
