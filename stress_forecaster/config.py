"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``       committed static defaults
  2. ``config/local.toml``         optional local overrides (gitignored)
  3. ``.env``                      local env overrides (gitignored)
  4. Environment variables         ``STRESS_FORECASTER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The pure logbook/forecast functions never read configuration themselves.
The CLI loads an ``AppConfig`` once and threads the relevant values
(sample cap, forecast days, advice pools, ...) into each call.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from stress_forecaster.forecast.advice import DEFAULT_ADVICE_POOLS, AdvicePools

# ── Sub-config models ─────────────────────────────────────────────────────────


class LogbookConfig(BaseModel):
    """Reconciliation, imputation and restore-prompt settings."""

    model_config = ConfigDict(frozen=True)

    imputation_sample_cap: int = 7
    restore_prompt_max_days: int = 3

    @field_validator("imputation_sample_cap", "restore_prompt_max_days")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Value must be >= 1, got {v}.")
        return v


class ForecastConfig(BaseModel):
    """Forecast gating and expansion settings.

    ``default_required_streak`` and ``default_restore_limit`` are only used
    when the eligibility source omits those fields.
    """

    model_config = ConfigDict(frozen=True)

    days: int = 3
    personalized_streak_threshold: int = 60
    default_required_streak: int = 7
    default_restore_limit: int = 3
    advice: AdvicePools = DEFAULT_ADVICE_POOLS

    @field_validator("days")
    @classmethod
    def validate_days(cls, v: int) -> int:
        if not 1 <= v <= 14:
            raise ValueError(f"days must be in [1, 14], got {v}.")
        return v

    @field_validator("personalized_streak_threshold", "default_required_streak")
    @classmethod
    def validate_streak(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Streak thresholds must be >= 1, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: Optional[str] = None
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration."""

    model_config = ConfigDict(frozen=True)

    logbook: LogbookConfig = LogbookConfig()
    forecast: ForecastConfig = ForecastConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    load_dotenv(dotenv_path=root / ".env", override=False)

    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply STRESS_FORECASTER_* env vars to the raw config dict.

    Supported overrides:
      STRESS_FORECASTER_LOG_LEVEL      → raw["logging"]["level"]
      STRESS_FORECASTER_DEBUG          → raw["debug"]
      STRESS_FORECASTER_FORECAST_DAYS  → raw["forecast"]["days"]
      STRESS_FORECASTER_SAMPLE_CAP     → raw["logbook"]["imputation_sample_cap"]
    """
    if log_level := os.environ.get("STRESS_FORECASTER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("STRESS_FORECASTER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    if days := os.environ.get("STRESS_FORECASTER_FORECAST_DAYS"):
        raw.setdefault("forecast", {})["days"] = int(days)

    if sample_cap := os.environ.get("STRESS_FORECASTER_SAMPLE_CAP"):
        raw.setdefault("logbook", {})["imputation_sample_cap"] = int(sample_cap)

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    forecast_raw = dict(raw.get("forecast", {}))
    if "advice" in forecast_raw:
        forecast_raw["advice"] = AdvicePools(**forecast_raw["advice"])

    return AppConfig(
        logbook=LogbookConfig(**raw.get("logbook", {})),
        forecast=ForecastConfig(**forecast_raw),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
