"""Tests for stress_forecaster.reporting.formatters."""

from __future__ import annotations

from datetime import date

from stress_forecaster.forecast.advice import AdvicePools
from stress_forecaster.forecast.expander import build_forecast_view
from stress_forecaster.logbook.imputation import ImputationUnavailable, impute_profile
from stress_forecaster.logbook.reconciler import reconcile_logs
from stress_forecaster.logbook.restore import RestoreCheck, RestorePrompt
from stress_forecaster.models.forecast import ForecastPayload
from stress_forecaster.models.log import RawLogEntry
from stress_forecaster.reporting.formatters import (
    format_forecast,
    format_imputation,
    format_missing_dates,
    format_reconciled_log,
    format_restore_check,
)

_POOLS = AdvicePools(high=("rest",), moderate=("pace",), low=("enjoy",))


# ── format_reconciled_log ─────────────────────────────────────────────────────


def test_reconciled_log_rows_newest_first(today, log_list_payload) -> None:
    """Rows are sorted newest first and the placeholder is flagged."""
    entries = [RawLogEntry.model_validate(p) for p in log_list_payload]
    text = format_reconciled_log(reconcile_logs(entries, today))
    assert "Latest log:   2024-01-05" in text
    assert "(skipped 1)" in text
    rows = [line.strip() for line in text.splitlines() if line.strip().startswith("2024-")]
    assert [row[:10] for row in rows] == ["2024-01-10", "2024-01-05", "2024-01-04"]
    assert rows[0].endswith("TE")


def test_reconciled_log_empty(today) -> None:
    """No logs shows (none) as the latest date."""
    text = format_reconciled_log(reconcile_logs([], today))
    assert "Latest log:   (none)" in text
    assert "Logged today: no" in text


# ── format_missing_dates ──────────────────────────────────────────────────────


def test_missing_dates_none() -> None:
    assert "No missing days." in format_missing_dates([], None)


def test_missing_dates_with_prompt() -> None:
    text = format_missing_dates(["2024-01-08", "2024-01-09"], RestorePrompt(("2024-01-08", "2024-01-09")))
    assert "2 day(s), starting 2024-01-08" in text


def test_missing_dates_without_prompt() -> None:
    text = format_missing_dates(["2024-01-08"], None)
    assert "not shown" in text


# ── format_imputation ─────────────────────────────────────────────────────────


def test_imputation_unavailable() -> None:
    text = format_imputation(ImputationUnavailable(target_key="2024-01-08"))
    assert "No previous data found" in text


def test_imputation_profile_uses_display_rounding(today) -> None:
    entries = [
        RawLogEntry(log_date="2024-01-06", sleep_hours=6.0, study_hours=2.0, emoji=3),
        RawLogEntry(log_date="2024-01-09", sleep_hours=7.0, emoji=3),
    ]
    records = reconcile_logs(entries, today).records
    text = format_imputation(impute_profile(records, date(2024, 1, 8)))
    assert "Samples: 2" in text
    assert "6.5h" in text
    assert "happy" in text
    assert "Extra     -" in text


# ── format_forecast ───────────────────────────────────────────────────────────


def test_forecast_cards(upstream_forecast, eligible_snapshot) -> None:
    view = build_forecast_view(ForecastPayload(forecast=upstream_forecast), eligible_snapshot, pools=_POOLS)
    text = format_forecast(view)
    assert "Mode: global" in text
    assert "60.0%" in text
    assert "21.6%" in text
    assert "Thursday, January 11" in text
    assert "Model: global_markov  Threshold: 0.5" in text


def test_forecast_withheld_shows_message(upstream_forecast, ineligible_snapshot) -> None:
    view = build_forecast_view(ForecastPayload(forecast=upstream_forecast), ineligible_snapshot, pools=_POOLS)
    text = format_forecast(view)
    assert "Collected data: 3/7." in text
    assert "%" not in text


# ── format_restore_check ──────────────────────────────────────────────────────


def test_restore_check_tags() -> None:
    assert format_restore_check("2024-01-08", RestoreCheck(True, "ok")).strip().startswith("[OK]")
    assert "[BLOCKED]" in format_restore_check("2024-01-07", RestoreCheck(False, "no"))
