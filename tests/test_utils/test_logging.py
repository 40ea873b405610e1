"""
Tests for utils/logging.py.

What we test
------------
1. Level resolution from config, with ``debug`` forcing DEBUG.
2. JSON lines carry the command name and ``extra=`` fields.
3. The optional log file is created and receives stamped records.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from stress_forecaster.config import LoggingConfig
from stress_forecaster.utils.logging import configure_logging, resolve_level


@pytest.fixture(autouse=True)
def _reset_root_logger():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()


def test_resolve_level() -> None:
    assert resolve_level(LoggingConfig(level="WARNING")) == logging.WARNING
    assert resolve_level(LoggingConfig(level="WARNING"), debug=True) == logging.DEBUG


def test_json_file_lines_are_stamped(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "run.log"
    configure_logging(
        LoggingConfig(level="INFO", log_file=str(log_file), json_format=True),
        command="reconcile",
    )
    logging.getLogger("stress_forecaster.test").info("merged %d days", 4, extra={"skipped": 1})
    logging.getLogger("stress_forecaster.test").debug("hidden")

    for handler in logging.getLogger().handlers:
        handler.flush()
    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["command"] == "reconcile"
    assert record["msg"] == "merged 4 days"
    assert record["skipped"] == 1
    assert record["level"] == "INFO"


def test_text_format_includes_command(tmp_path: Path) -> None:
    log_file = tmp_path / "run.log"
    configure_logging(LoggingConfig(log_file=str(log_file)), command="forecast", debug=True)
    logging.getLogger("stress_forecaster.test").debug("expanding")

    for handler in logging.getLogger().handlers:
        handler.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "[DEBUG] forecast stress_forecaster.test: expanding" in text
