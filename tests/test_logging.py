"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from streakkeeper.config import BaseConfig
from streakkeeper.logging_config import JSONFormatter, get_logger, setup_logging


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.setenv("STREAKKEEPER_DATA_DIR", str(tmp_path))
    return BaseConfig()


def _record(**kwargs) -> logging.LogRecord:
    defaults = dict(
        name="test.logger",
        level=logging.INFO,
        pathname="test.py",
        lineno=42,
        msg="Test message",
        args=(),
        exc_info=None,
    )
    defaults.update(kwargs)
    return logging.LogRecord(**defaults)


def test_json_formatter():
    """JSONFormatter emits the standard fields."""
    record = _record()
    record.funcName = "test_function"

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_extra_fields():
    record = _record()
    record.habit_id = 7

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"] == {"habit_id": 7}


def test_json_formatter_with_exception():
    """JSONFormatter serializes exception details."""
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(JSONFormatter().format(_record(level=logging.ERROR, exc_info=exc_info)))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_setup_logging_writes_json_file(config, tmp_path):
    logger = setup_logging(config)

    assert logger.name == "streakkeeper"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 2  # Console + File

    get_logger("services.habits").warning("Something odd", extra={"habit_id": 3})
    for handler in logger.handlers:
        handler.flush()

    log_file = tmp_path / "logs" / "streakkeeper.log"
    lines = [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
    assert lines[0]["message"] == "Logging initialized"
    assert lines[-1]["logger"] == "streakkeeper.services.habits"
    assert lines[-1]["extra"]["habit_id"] == 3


def test_get_logger_namespacing():
    assert get_logger("module1").name == "streakkeeper.module1"
    assert get_logger("streakkeeper.cli").name == "streakkeeper.cli"


@pytest.mark.parametrize("dev_mode", [True, False])
def test_console_level_follows_dev_mode(config, dev_mode):
    config.DEV_MODE = dev_mode
    logger = setup_logging(config)

    console = [
        h
        for h in logger.handlers
        if isinstance(h, logging.StreamHandler)
        and not isinstance(h, logging.handlers.RotatingFileHandler)
    ]
    assert len(console) == 1
    assert console[0].level == (logging.INFO if dev_mode else logging.WARNING)
