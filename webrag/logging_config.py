"""Logging setup for the pipeline.

One stdout handler on the root logger: JSON lines outside development,
pipe-separated text with trailing key=value context in development.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from webrag.config import Environment, get_settings

# Attributes present on every LogRecord; anything else came in through `extra=`.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}

NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


class JSONFormatter(logging.Formatter):
    """One JSON object per record; `extra=` fields are nested under "extra"."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = extract_extra(record)
        if extra:
            log_data["extra"] = extra

        if record.funcName:
            log_data["function"] = record.funcName
        if record.pathname:
            log_data["file"] = f"{record.pathname}:{record.lineno}"

        return json.dumps(log_data, default=str, ensure_ascii=False)


class DevFormatter(logging.Formatter):
    """Human-readable formatter for development.

    Fields passed through `extra=` are appended as key=value pairs.
    """

    FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

    def __init__(self) -> None:
        super().__init__(fmt=self.FORMAT, datefmt=self.DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with trailing context fields."""
        output = super().format(record)
        extra = extract_extra(record)
        if extra:
            pairs = " ".join(f"{key}={value}" for key, value in extra.items())
            output = f"{output} | {pairs}"
        return output


def extract_extra(record: logging.LogRecord) -> dict[str, Any]:
    """Return the fields attached to a record via `extra=`."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


def setup_logging(
    level: str | None = None,
    json_output: bool | None = None,
) -> logging.Logger:
    """Install the stdout handler on the root logger.

    Args:
        level: Level name; falls back to LOG_LEVEL.
        json_output: Emit JSON lines; defaults to True unless the
            environment is development.

    Returns:
        The root logger.
    """
    settings = get_settings()

    log_level = level or settings.log_level
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    if json_output is None:
        json_output = settings.environment != Environment.DEVELOPMENT

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter() if json_output else DevFormatter())
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Return the module logger for `name`."""
    return logging.getLogger(name)
