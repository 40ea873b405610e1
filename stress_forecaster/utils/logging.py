"""
Logging setup for the stress forecaster CLI.

``configure_logging(config, command=..., debug=...)`` is called once per CLI
command before any work.  Library modules only ever call
``logging.getLogger(__name__)``.

Handlers write to stderr (and optionally a file); stdout is reserved for the
command's report.  Every record carries a ``command`` attribute naming the CLI
command that produced it, so lines from different runs in one log file can be
told apart.

JSON format (``json_format = true`` under ``[logging]``) emits one object per
line::

    {"ts": "2024-05-16T08:00:00Z", "level": "INFO", "command": "reconcile",
     "logger": "stress_forecaster.logbook.reconciler", "msg": "..."}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stress_forecaster.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(command)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "command"}


class _CommandFilter(logging.Filter):
    """Stamp each record with the running CLI command."""

    def __init__(self, command: str) -> None:
        super().__init__()
        self.command = command

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "command"):
            record.command = self.command
        return True


class _JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra=`` fields are copied to the top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "command": getattr(record, "command", "-"),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        payload.update(
            (key, val) for key, val in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        )
        return json.dumps(payload, default=str)


def resolve_level(config: "LoggingConfig", debug: bool = False) -> int:
    """Numeric level from config; ``debug`` forces DEBUG."""
    if debug:
        return logging.DEBUG
    return getattr(logging, config.level.upper(), logging.INFO)


def configure_logging(
    config: "LoggingConfig",
    command: str = "-",
    debug: bool = False,
) -> None:
    """Configure the root logger for one CLI command.

    Args:
        config:  ``[logging]`` section of ``AppConfig``.
        command: CLI command name stamped on every record.
        debug:   ``AppConfig.debug``; forces DEBUG level when set.
    """
    level = resolve_level(config, debug)
    formatter: logging.Formatter = (
        _JsonFormatter() if config.json_format
        else logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    )
    command_filter = _CommandFilter(command)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(command_filter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
