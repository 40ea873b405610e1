"""
Parsing of backend response envelopes into domain models.

Every backend response is wrapped in the same envelope::

    {"success": bool, "message": str, "data": <payload> | null,
     "errors": [..] | null, "meta": {..} | null}

``parse_api_response()`` validates the envelope and returns ``data``.  A
``success: false`` envelope raises ``ApiResponseError``; if its first error
carries an ``eligibility`` object (the forecast endpoint does this when the
user is not eligible) it is exposed as ``ApiResponseError.eligibility`` so
the gate message can still be built.

Structural problems surface as ``pydantic.ValidationError``.  Individual
log entries are lenient (see ``RawLogEntry``); the envelope is strict.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from stress_forecaster.models.eligibility import EligibilitySnapshot
from stress_forecaster.models.forecast import ForecastPayload
from stress_forecaster.models.log import RawLogEntry

logger = logging.getLogger(__name__)

_LOG_LIST = TypeAdapter(list[RawLogEntry])


class ApiEnvelope(BaseModel):
    """The common response wrapper."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool
    message: str
    data: Any = None
    errors: Optional[list[Any]] = None
    meta: Optional[dict[str, Any]] = None


class ApiResponseError(RuntimeError):
    """Raised for an envelope with ``success: false``.

    Attributes:
        envelope:    The parsed envelope.
        eligibility: Eligibility attached to the first error, if any.
    """

    def __init__(self, envelope: ApiEnvelope) -> None:
        self.envelope = envelope
        self.eligibility = _error_eligibility(envelope)
        super().__init__(envelope.message or "Request failed")


def _error_eligibility(envelope: ApiEnvelope) -> Optional[EligibilitySnapshot]:
    if not envelope.errors:
        return None
    first = envelope.errors[0]
    if not isinstance(first, dict) or not isinstance(first.get("eligibility"), dict):
        return None
    try:
        return EligibilitySnapshot.model_validate(first["eligibility"])
    except ValidationError:
        logger.warning("Ignoring malformed eligibility in error payload")
        return None


def parse_api_response(payload: Any) -> Any:
    """Validate an envelope and return its ``data``.

    Raises:
        pydantic.ValidationError: If the envelope is malformed.
        ApiResponseError:         If ``success`` is false.
    """
    envelope = ApiEnvelope.model_validate(payload)
    if not envelope.success:
        raise ApiResponseError(envelope)
    return envelope.data


def _unwrap(payload: Any) -> Any:
    """Accept either a full envelope or a bare ``data`` value."""
    if isinstance(payload, dict) and "success" in payload and "message" in payload:
        return parse_api_response(payload)
    return payload


def parse_log_list(payload: Any) -> list[RawLogEntry]:
    """Parse the log source response into raw entries (order preserved)."""
    data = _unwrap(payload)
    if data is None:
        return []
    return _LOG_LIST.validate_python(data)


def parse_eligibility(payload: Any) -> EligibilitySnapshot:
    """Parse the eligibility source response."""
    return EligibilitySnapshot.model_validate(_unwrap(payload))


def parse_forecast_payload(payload: Any) -> ForecastPayload:
    """Parse the forecast source response (``forecast`` + ``eligibility``)."""
    return ForecastPayload.model_validate(_unwrap(payload))
