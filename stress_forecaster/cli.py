"""
Stress Forecaster CLI entry point.

The CLI works on JSON dumps of backend responses (either the full
``{success, message, data, ...}`` envelope or the bare ``data`` value); it
never talks to the network.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Read and validate the input files.
  4. Run the pure logbook / forecast functions.
  5. Report the result to stdout.

Install and run::

    pip install -e .
    stress-forecaster --help
    stress-forecaster validate-config
    stress-forecaster reconcile --logs logs.json --today 2024-05-16
    stress-forecaster missing-dates --logs logs.json --eligibility elig.json
    stress-forecaster impute --logs logs.json --date 2024-05-14
    stress-forecaster forecast --forecast forecast.json --seed 7
    stress-forecaster restore-check --logs logs.json --eligibility elig.json --date 2024-05-14
"""

from __future__ import annotations

import json
import random
from datetime import date
from pathlib import Path
from typing import Any, Optional

import typer

app = typer.Typer(
    name="stress-forecaster",
    help="Daily stress log reconciliation, restore bookkeeping and forecast expansion.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from stress_forecaster.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config, command: str):
    """Set up logging from config, tagging records with ``command``."""
    from stress_forecaster.utils.logging import configure_logging
    configure_logging(config.logging, command=command, debug=config.debug)


def _resolve_today(today: Optional[str]) -> date:
    """Parse ``--today`` or fall back to the current UTC date."""
    from stress_forecaster.utils.time_utils import parse_date_key, today_utc

    if today is None:
        return today_utc()
    parsed = parse_date_key(today)
    if parsed is None:
        typer.echo(f"[ERROR] Invalid --today value: {today!r} (expected YYYY-MM-DD).", err=True)
        raise typer.Exit(code=1)
    return parsed


def _read_json_or_exit(path: str) -> Any:
    file_path = Path(path)
    if not file_path.exists():
        typer.echo(f"[ERROR] File not found: {file_path}", err=True)
        raise typer.Exit(code=1)
    try:
        with open(file_path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        typer.echo(f"[ERROR] Invalid JSON in {file_path}: {exc}", err=True)
        raise typer.Exit(code=1)


def _parse_or_exit(parser, payload: Any, label: str):
    """Run a payload parser, converting validation/API errors to exit code 1."""
    from pydantic import ValidationError

    from stress_forecaster.ingestion.payloads import ApiResponseError

    try:
        return parser(payload)
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid {label} payload:\n{exc}", err=True)
        raise typer.Exit(code=1)
    except ApiResponseError as exc:
        typer.echo(f"[ERROR] {label} request failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _load_logs(logs_file: str):
    from stress_forecaster.ingestion.payloads import parse_log_list
    return _parse_or_exit(parse_log_list, _read_json_or_exit(logs_file), "log list")


def _load_eligibility(eligibility_file: Optional[str]):
    from stress_forecaster.ingestion.payloads import parse_eligibility

    if eligibility_file is None:
        return None
    return _parse_or_exit(parse_eligibility, _read_json_or_exit(eligibility_file), "eligibility")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Imputation sample cap:  {config.logbook.imputation_sample_cap}")
    typer.echo(f"  Restore prompt max:     {config.logbook.restore_prompt_max_days} day(s)")
    typer.echo(f"  Forecast days:          {config.forecast.days}")
    typer.echo(f"  Personalized streak:    {config.forecast.personalized_streak_threshold}")
    typer.echo(
        "  Advice pools:           "
        f"high={len(config.forecast.advice.high)} "
        f"moderate={len(config.forecast.advice.moderate)} "
        f"low={len(config.forecast.advice.low)}"
    )
    typer.echo(f"  Log level:              {config.logging.level}")
    typer.echo(f"  Debug mode:             {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("reconcile")
def reconcile(
    logs_file: str = typer.Option(..., "--logs", help="JSON dump of the my-logs response."),
    today: Optional[str] = typer.Option(None, "--today", help="Override today (YYYY-MM-DD)."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Reconcile raw logs into one record per day and print the calendar view."""
    from stress_forecaster.logbook.reconciler import latest_known_gpa, reconcile_logs
    from stress_forecaster.reporting.formatters import format_reconciled_log

    config = _load_config_or_exit(config_path)
    _configure_logging(config, "reconcile")

    entries = _load_logs(logs_file)
    result = reconcile_logs(entries, _resolve_today(today))

    typer.echo(format_reconciled_log(result))
    gpa = latest_known_gpa(entries)
    typer.echo(f"  Latest known GPA: {gpa if gpa is not None else '-'}")


@app.command("missing-dates")
def missing_dates(
    logs_file: str = typer.Option(..., "--logs", help="JSON dump of the my-logs response."),
    eligibility_file: Optional[str] = typer.Option(
        None, "--eligibility", help="JSON dump of the eligibility response.",
    ),
    today: Optional[str] = typer.Option(None, "--today", help="Override today (YYYY-MM-DD)."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """List missed days since the last log and whether a restore prompt applies."""
    from stress_forecaster.logbook.gaps import find_missing_dates
    from stress_forecaster.logbook.reconciler import reconcile_logs
    from stress_forecaster.logbook.restore import should_prompt_restore
    from stress_forecaster.reporting.formatters import format_missing_dates

    config = _load_config_or_exit(config_path)
    _configure_logging(config, "missing-dates")

    reference = _resolve_today(today)
    result = reconcile_logs(_load_logs(logs_file), reference)
    missing = find_missing_dates(result.latest_date, reference)

    snapshot = _load_eligibility(eligibility_file)
    remaining = snapshot.restore_remaining if snapshot is not None else 0
    prompt = should_prompt_restore(
        missing, remaining, max_prompt_days=config.logbook.restore_prompt_max_days,
    )
    typer.echo(format_missing_dates(missing, prompt))


@app.command("impute")
def impute(
    logs_file: str = typer.Option(..., "--logs", help="JSON dump of the my-logs response."),
    target: str = typer.Option(..., "--date", help="Target date to estimate (YYYY-MM-DD)."),
    sample_cap: Optional[int] = typer.Option(
        None, "--sample-cap", min=1, help="Override config.logbook.imputation_sample_cap.",
    ),
    today: Optional[str] = typer.Option(None, "--today", help="Override today (YYYY-MM-DD)."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Estimate metric values for a missed day from nearby real days."""
    from stress_forecaster.logbook.imputation import impute_profile
    from stress_forecaster.logbook.reconciler import reconcile_logs
    from stress_forecaster.reporting.formatters import format_imputation

    config = _load_config_or_exit(config_path)
    _configure_logging(config, "impute")

    result = reconcile_logs(_load_logs(logs_file), _resolve_today(today))
    cap = sample_cap or config.logbook.imputation_sample_cap
    typer.echo(format_imputation(impute_profile(result.records, target, sample_cap=cap)))


@app.command("forecast")
def forecast(
    forecast_file: str = typer.Option(..., "--forecast", help="JSON dump of the forecast response."),
    eligibility_file: Optional[str] = typer.Option(
        None, "--eligibility", help="JSON dump of the eligibility response.",
    ),
    days: Optional[int] = typer.Option(
        None, "--days", min=1, max=14, help="Override config.forecast.days.",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed", help="Seed for advice selection (reproducible output).",
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Gate and expand the single-day forecast into a multi-day view."""
    from pydantic import ValidationError

    from stress_forecaster.forecast.eligibility import evaluate_eligibility
    from stress_forecaster.forecast.expander import ForecastView, build_forecast_view
    from stress_forecaster.ingestion.payloads import ApiResponseError, parse_forecast_payload
    from stress_forecaster.reporting.formatters import format_forecast

    config = _load_config_or_exit(config_path)
    _configure_logging(config, "forecast")
    fc = config.forecast

    snapshot = _load_eligibility(eligibility_file)
    try:
        payload = parse_forecast_payload(_read_json_or_exit(forecast_file))
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid forecast payload:\n{exc}", err=True)
        raise typer.Exit(code=1)
    except ApiResponseError as exc:
        if exc.eligibility is None:
            typer.echo(f"[ERROR] Failed to load forecast. {exc}", err=True)
            raise typer.Exit(code=1)
        # Ineligible users get the gate message, not an error.
        verdict = evaluate_eligibility(
            exc.eligibility,
            personalized_streak=fc.personalized_streak_threshold,
        )
        view = ForecastView(verdict=verdict, days=(), message=verdict.message,
                            snapshot=exc.eligibility)
        typer.echo(format_forecast(view))
        return

    view = build_forecast_view(
        payload,
        snapshot=snapshot,
        days=days or fc.days,
        pools=fc.advice,
        rng=random.Random(seed) if seed is not None else None,
        personalized_streak=fc.personalized_streak_threshold,
        default_required_streak=fc.default_required_streak,
        default_restore_limit=fc.default_restore_limit,
    )
    typer.echo(format_forecast(view))


@app.command("restore-check")
def restore_check(
    logs_file: str = typer.Option(..., "--logs", help="JSON dump of the my-logs response."),
    eligibility_file: str = typer.Option(
        ..., "--eligibility", help="JSON dump of the eligibility response.",
    ),
    target: str = typer.Option(..., "--date", help="Date to restore (YYYY-MM-DD)."),
    auto: bool = typer.Option(
        False, "--auto", help="Also print the auto-filled restore payload.",
    ),
    stress_level: str = typer.Option(
        "Low", "--stress-level", help="Predicted stress level for the payload (High/Moderate/Low).",
    ),
    today: Optional[str] = typer.Option(None, "--today", help="Override today (YYYY-MM-DD)."),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to TOML config file."),
) -> None:
    """Check whether a date can be restored and preview the auto-filled payload.

    Exits with code 2 when the date cannot be restored.
    """
    from pydantic import ValidationError

    from stress_forecaster.logbook.imputation import ImputedProfile, impute_profile
    from stress_forecaster.logbook.reconciler import latest_known_gpa, reconcile_logs
    from stress_forecaster.logbook.restore import RestoreRequest, check_restore
    from stress_forecaster.reporting.formatters import format_imputation, format_restore_check
    from stress_forecaster.taxonomy.stress_taxonomy import coerce_stress_level

    config = _load_config_or_exit(config_path)
    _configure_logging(config, "restore-check")

    reference = _resolve_today(today)
    entries = _load_logs(logs_file)
    result = reconcile_logs(entries, reference)
    snapshot = _load_eligibility(eligibility_file)

    check = check_restore(result.records, target, reference, snapshot)
    typer.echo(format_restore_check(target, check))
    if not check.allowed:
        raise typer.Exit(code=2)

    if auto:
        profile = impute_profile(
            result.records, target, sample_cap=config.logbook.imputation_sample_cap,
        )
        typer.echo(format_imputation(profile))
        if isinstance(profile, ImputedProfile):
            try:
                request = RestoreRequest.from_profile(
                    profile, coerce_stress_level(stress_level), gpa=latest_known_gpa(entries),
                )
            except ValidationError as exc:
                typer.echo(f"[ERROR] Imputed values cannot be submitted:\n{exc}", err=True)
                raise typer.Exit(code=1)
            typer.echo("")
            typer.echo(json.dumps(request.to_payload(), indent=2))


if __name__ == "__main__":
    app()
