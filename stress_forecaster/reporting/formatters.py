"""
ASCII terminal formatters for CLI commands.

All formatters accept computed results and return plain multi-line strings
suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).
"""

from __future__ import annotations

from typing import Optional, Sequence

from stress_forecaster.forecast.eligibility import mode_description
from stress_forecaster.forecast.expander import ForecastView
from stress_forecaster.logbook.imputation import ImputationResult, ImputationUnavailable
from stress_forecaster.logbook.reconciler import ReconciledLog
from stress_forecaster.logbook.restore import RestoreCheck, RestorePrompt
from stress_forecaster.models.log import METRIC_FIELDS
from stress_forecaster.taxonomy.stress_taxonomy import MOOD_SCALE

_METRIC_LABELS: dict[str, str] = {
    "sleep_hours":           "Sleep",
    "study_hours":           "Study",
    "extracurricular_hours": "Extra",
    "social_hours":          "Social",
    "physical_hours":        "Physical",
}


def _hours(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value:g}h"


# ── Reconciled log ────────────────────────────────────────────────────────────


def format_reconciled_log(log: ReconciledLog) -> str:
    """One row per day, most recent first.

    ::

        Date        Score  Status    Sleep  Study  Extra  Social  Physical  Mood      Flags
        2024-01-05     85  High         6h     4h     1h      2h        1h  neutral   R
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Reconciled Log ===")
    lines.append(f"  Today:        {log.today.isoformat()}")
    latest = log.latest_date.isoformat() if log.latest_date else "(none)"
    lines.append(f"  Latest log:   {latest}")
    lines.append(f"  Entries read: {log.source_count}  (skipped {log.skipped})")
    lines.append(f"  Logged today: {'yes' if log.has_submitted_today else 'no'}")
    lines.append("")

    header = (
        f"  {'Date':<10}  {'Score':>5}  {'Status':<8}  "
        + "  ".join(f"{_METRIC_LABELS[m]:>8}" for m in METRIC_FIELDS)
        + f"  {'Mood':<10}  Flags"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))

    for key in sorted(log.records, reverse=True):
        rec = log.records[key]
        flags = "".join(
            flag for flag, on in (("T", rec.is_today), ("E", rec.is_empty), ("R", rec.is_restored))
            if on
        )
        metrics = "  ".join(f"{_hours(rec.metric(m)):>8}" for m in METRIC_FIELDS)
        lines.append(
            f"  {key:<10}  {rec.score:>5}  {rec.status.value:<8}  {metrics}"
            f"  {MOOD_SCALE[rec.mood_index]:<10}  {flags}"
        )
    lines.append("")
    lines.append("  Flags: T=today  E=empty placeholder  R=restored")
    return "\n".join(lines)


# ── Missing dates ─────────────────────────────────────────────────────────────


def format_missing_dates(missing: Sequence[str], prompt: Optional[RestorePrompt]) -> str:
    """List missed days and whether a restore prompt would be shown."""
    lines = ["", "=== Missing Days ==="]
    if not missing:
        lines.append("  No missing days.")
        return "\n".join(lines)
    for key in missing:
        lines.append(f"  {key}")
    lines.append("")
    if prompt is not None:
        lines.append(f"  Restore prompt: {prompt.count} day(s), starting {prompt.first_date}")
    else:
        lines.append("  Restore prompt: not shown (too many days or quota exhausted)")
    return "\n".join(lines)


# ── Imputation ────────────────────────────────────────────────────────────────


def format_imputation(result: ImputationResult) -> str:
    """Show imputed values (display rounding) or the unavailable reason."""
    lines = ["", "=== Imputed Values ==="]
    if isinstance(result, ImputationUnavailable):
        lines.append(f"  Target: {result.target_key}")
        lines.append(f"  {result.reason}")
        return "\n".join(lines)

    lines.append(f"  Target:  {result.target_date.isoformat()}")
    lines.append(
        f"  Samples: {result.sample_count} "
        f"({', '.join(d.isoformat() for d in result.sample_dates)})"
    )
    for name, value in result.display_values().items():
        lines.append(f"  {_METRIC_LABELS[name]:<9} {_hours(value)}")
    lines.append(f"  {'Mood':<9} {MOOD_SCALE[result.mood_index]}")
    lines.append("")
    lines.append("  Values are auto-filled based on nearby averages. You can still edit them.")
    return "\n".join(lines)


# ── Forecast ──────────────────────────────────────────────────────────────────


def format_forecast(view: ForecastView) -> str:
    """Forecast cards, or the gate message when withheld."""
    mode = view.verdict.mode
    lines = ["", "=== Stress Forecast ==="]
    lines.append(f"  Mode: {mode.value}")
    lines.append(f"  {mode_description(mode)}")
    lines.append("")

    if not view.days:
        lines.extend(f"  {line}" for line in view.message.splitlines())
        return "\n".join(lines)

    for day in view.days:
        lines.append(
            f"  {day.short_label:<7} {day.status.value:<8} {day.probability_percent:>5.1f}%"
            f"  ({day.long_label})"
        )
        lines.append(f"          {day.advice_text}")
    first = view.days[0]
    threshold = "-" if first.threshold is None else f"{first.threshold:g}"
    lines.append("")
    lines.append(f"  Model: {first.model_type}  Threshold: {threshold}")
    return "\n".join(lines)


# ── Restore ───────────────────────────────────────────────────────────────────


def format_restore_check(target: str, check: RestoreCheck) -> str:
    """One-line restore verdict for a date."""
    tag = "[OK]" if check.allowed else "[BLOCKED]"
    return f"  {tag} {target}: {check.hint}"
