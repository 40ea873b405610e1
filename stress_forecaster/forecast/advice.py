"""
Advice text pools for forecast days.

Each forecast day carries one advice string drawn from the pool that matches
its status.  The pools are plain immutable configuration: a frozen
``AdvicePools`` instance is passed into ``expand_forecast()`` (the default is
``DEFAULT_ADVICE_POOLS``; ``config/default.toml`` may override any pool).

Selection is cosmetic and may be random, but the mapping is strict: a High
day only ever draws from ``high``, a Low day only from ``low``.
"""

from __future__ import annotations

import random
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from stress_forecaster.taxonomy.stress_taxonomy import StressStatus

HIGH_STRESS_ADVICE: tuple[str, ...] = (
    "High stress likely. Try the 4-7-8 breathing technique: Inhale for 4s, hold for 7s, exhale for 8s.",
    "Your energy might be drained. Prioritize sleep tonight and limit screen time before bed.",
    "Don't overwhelm yourself. Pick just 3 major tasks for today and focus only on them.",
    "High pressure detected. Take a 10-minute walk outside to reset your cortisol levels.",
    "It's okay to say no. Delegate tasks where possible and focus on your mental well-being.",
    "Avoid excessive caffeine today; it might heighten anxiety. Opt for herbal tea or water.",
)

MODERATE_STRESS_ADVICE: tuple[str, ...] = (
    "Balance looks steady. Keep your routine consistent and avoid overcommitting.",
    "Stress is manageable. Schedule a short break to keep your energy stable.",
    "You're in the middle zone. Prioritize the tasks that matter most today.",
)

LOW_STRESS_ADVICE: tuple[str, ...] = (
    "Great energy ahead! Use this clarity to tackle your hardest subject or project.",
    "Low stress predicted. It's a perfect time to learn a new skill or hobby.",
    "You are in a good flow. Consider helping a friend or socializing to boost your mood further.",
    "Mental clarity is high. Plan your schedule for the upcoming busy week.",
    "Take advantage of this calm. Push your physical limits with a slightly more intense workout.",
    "Enjoy the balance. Treat yourself to a good book or a creative activity you love.",
)


class AdvicePools(BaseModel):
    """Advice strings keyed by forecast status.

    Attributes:
        high:     Pool for High-risk days.
        moderate: Pool for Moderate-risk days.
        low:      Pool for Low-risk days.
    """

    model_config = ConfigDict(frozen=True)

    high:     tuple[str, ...] = HIGH_STRESS_ADVICE
    moderate: tuple[str, ...] = MODERATE_STRESS_ADVICE
    low:      tuple[str, ...] = LOW_STRESS_ADVICE

    @field_validator("high", "moderate", "low")
    @classmethod
    def validate_non_empty(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        cleaned = tuple(s.strip() for s in v if s and s.strip())
        if not cleaned:
            raise ValueError("Advice pools must contain at least one non-empty string.")
        return cleaned

    def for_status(self, status: StressStatus) -> tuple[str, ...]:
        """Return the pool belonging to ``status``."""
        if status == StressStatus.HIGH:
            return self.high
        if status == StressStatus.MODERATE:
            return self.moderate
        return self.low

    def pick(self, status: StressStatus, rng: Optional[random.Random] = None) -> str:
        """Draw one advice string for ``status``.

        Args:
            status: Day status; selects the pool.
            rng:    Randomness source; module-level ``random`` when ``None``.
        """
        pool = self.for_status(status)
        chooser = rng if rng is not None else random
        return chooser.choice(pool)


DEFAULT_ADVICE_POOLS = AdvicePools()
