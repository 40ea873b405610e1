"""
Tests for forecast/advice.py.

What we test
------------
1. Default pools are non-empty and mapped strictly by status.
2. Pool validation strips blanks and rejects empty pools.
3. pick() uses the injected rng.
"""

from __future__ import annotations

import random

import pytest
from pydantic import ValidationError

from stress_forecaster.forecast.advice import (
    DEFAULT_ADVICE_POOLS,
    HIGH_STRESS_ADVICE,
    LOW_STRESS_ADVICE,
    MODERATE_STRESS_ADVICE,
    AdvicePools,
)
from stress_forecaster.taxonomy.stress_taxonomy import StressStatus


def test_default_pools_by_status() -> None:
    assert DEFAULT_ADVICE_POOLS.for_status(StressStatus.HIGH) == HIGH_STRESS_ADVICE
    assert DEFAULT_ADVICE_POOLS.for_status(StressStatus.MODERATE) == MODERATE_STRESS_ADVICE
    assert DEFAULT_ADVICE_POOLS.for_status(StressStatus.LOW) == LOW_STRESS_ADVICE


def test_default_pools_do_not_overlap() -> None:
    assert not set(HIGH_STRESS_ADVICE) & set(LOW_STRESS_ADVICE)
    assert not set(MODERATE_STRESS_ADVICE) & set(HIGH_STRESS_ADVICE)


@pytest.mark.parametrize("status", list(StressStatus))
def test_pick_draws_from_matching_pool(status: StressStatus) -> None:
    rng = random.Random(0)
    for _ in range(20):
        assert DEFAULT_ADVICE_POOLS.pick(status, rng) in DEFAULT_ADVICE_POOLS.for_status(status)


def test_pick_is_deterministic_for_seed() -> None:
    a = [DEFAULT_ADVICE_POOLS.pick(StressStatus.HIGH, random.Random(3)) for _ in range(3)]
    b = [DEFAULT_ADVICE_POOLS.pick(StressStatus.HIGH, random.Random(3)) for _ in range(3)]
    assert a == b


def test_pick_without_rng_uses_pool() -> None:
    pools = AdvicePools(high=("only",))
    assert pools.pick(StressStatus.HIGH) == "only"


def test_blank_entries_stripped() -> None:
    pools = AdvicePools(low=("  relax  ", "", "   "))
    assert pools.low == ("relax",)


def test_empty_pool_rejected() -> None:
    with pytest.raises(ValidationError):
        AdvicePools(moderate=())
