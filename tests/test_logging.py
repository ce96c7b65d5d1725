"""Tests for logging configuration."""

import json
import logging
import sys

import pytest

from statescan.logging_config import ConsoleFormatter, JSONFormatter, setup_logging


def make_record(msg: str = "Test message", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="statescan.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJSONFormatter:
    """Tests for JSON log formatter."""

    def test_basic_format(self):
        """Test basic JSON log format."""
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "statescan.test"
        assert data["message"] == "Test message"
        assert data["timestamp"].endswith("Z")

    def test_extra_fields(self):
        """Test scanner extras are included."""
        record = make_record("Scan finished")
        record.root = "/tmp/project"
        record.detector = "identity"
        record.duration_ms = 150.5
        record.error_count = 2

        data = json.loads(JSONFormatter().format(record))

        assert data["root"] == "/tmp/project"
        assert data["detector"] == "identity"
        assert data["duration_ms"] == 150.5
        assert data["error_count"] == 2
        assert "platform" not in data

    def test_exception_info(self):
        try:
            raise ValueError("broken")
        except ValueError:
            record = make_record("failed", logging.WARNING)
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: broken" in data["exception"]


class TestConsoleFormatter:
    """Tests for the colored console formatter."""

    def test_includes_level_and_message(self):
        output = ConsoleFormatter().format(make_record())
        assert "INFO" in output
        assert "statescan.test: Test message" in output

    def test_extras(self):
        record = make_record()
        record.detector = "metrics"
        record.duration_ms = 12.34
        output = ConsoleFormatter().format(record)
        assert "[detector=metrics, 12.3ms]" in output

    def test_extras_follow_field_order(self):
        record = make_record()
        record.error_count = 2
        record.root = "/tmp/project"
        record.platform = "vscode"
        output = ConsoleFormatter().format(record)
        assert output.endswith("[root=/tmp/project, platform=vscode, error_count=2]")


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_mode(self, restore_root_logger):
        setup_logging(json_logs=True)
        root = restore_root_logger
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_debug_overrides_json(self, restore_root_logger):
        setup_logging(debug=True, json_logs=True)
        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, ConsoleFormatter)
