"""
Eligibility snapshot model.

The eligibility source computes streak, restore quota usage and the overall
``eligible`` verdict server-side.  ``EligibilitySnapshot`` is a read-only
view of that response; the gate trusts it rather than re-deriving it.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EligibilitySnapshot(BaseModel):
    """Streak and restore-quota state for the current user.

    Attributes:
        user_id:           Backend user id, if supplied.
        eligible:          Upstream verdict: may a multi-day forecast be shown?
        streak:            Number of collected logs counting toward the streak.
        required_streak:   Logs needed before a forecast is available.
        restore_used:      Restores used this month.
        restore_remaining: Restores still available this month.
        restore_limit:     Monthly restore quota.
        missing:           Missing days reported by the backend.
        note:              Human-readable reason from the backend.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    user_id: Optional[int] = Field(default=None, alias="userId")
    eligible: bool = False
    streak: int = 0
    required_streak: int = Field(default=7, alias="requiredStreak")
    restore_used: int = Field(default=0, alias="restoreUsed")
    restore_remaining: int = Field(default=0, alias="restoreRemaining")
    restore_limit: int = Field(default=3, alias="restoreLimit")
    missing: int = 0
    note: str = ""

    @field_validator("streak", "restore_used", "restore_remaining", "missing")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Counts must be non-negative, got {v}.")
        return v

    @field_validator("note", mode="before")
    @classmethod
    def note_text(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()
