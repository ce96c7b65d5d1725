"""Logging configuration for the state scanner."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# Extra attributes scanner code attaches via ``logger.x(..., extra={...})``
EXTRA_FIELDS = ("root", "detector", "platform", "duration_ms", "error_count")


class JSONFormatter(logging.Formatter):
    """JSON log formatter for machine-readable scan logs."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class ConsoleFormatter(logging.Formatter):
    """Colored console formatter for interactive use."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    # Extras not rendered as key=value
    EXTRA_LAYOUT = {"duration_ms": "{:.1f}ms"}

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno, "")
        timestamp = datetime.now().strftime("%H:%M:%S")

        extras = [
            self.EXTRA_LAYOUT.get(name, name + "={}").format(getattr(record, name))
            for name in EXTRA_FIELDS
            if hasattr(record, name)
        ]
        suffix = f" [{', '.join(extras)}]" if extras else ""

        line = f"{timestamp} {color}{record.levelname:8}{self.RESET} {record.name}: {record.getMessage()}{suffix}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(debug: bool = False, json_logs: bool = False) -> None:
    """Route all scanner logs to a single stderr handler.

    Args:
        debug: Enable debug level logging (parser errors are logged at DEBUG)
        json_logs: Use JSON format (ignored in debug mode)
    """
    level = logging.DEBUG if debug else logging.INFO
    formatter = JSONFormatter() if json_logs and not debug else ConsoleFormatter()

    # stdout carries the scan result
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # asyncio reports slow to_thread callbacks at DEBUG
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={logging.getLevelName(level)}, formatter={type(formatter).__name__}"
    )
