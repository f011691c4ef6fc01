"""Structured JSON logging for specwrap.

Hook failures are logged with the correlation id of the run (``cid``)
and the label of the failing hook so that records from concurrently
running tests can be told apart.

Usage:
    from specwrap.observability.logging import configure_logging, get_logger

    configure_logging(log_level="INFO", json_format=True)

    logger = get_logger(__name__)
    logger.info("Running spec", extra={"cid": "0-1"})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from specwrap.config import WrapperSettings

_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}


class JSONFormatter(logging.Formatter):
    """Formats log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "cid"):
            log_data["cid"] = record.cid

        if hasattr(record, "hook"):
            log_data["hook"] = record.hook

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=repr)


def configure_logging(
    log_level: str = "INFO",
    json_format: bool = True,
    settings: WrapperSettings | None = None,
) -> None:
    """Configure the ``specwrap`` logger hierarchy.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatter if True, plain text if False
        settings: When given, overrides *log_level* and *json_format*
    """
    if settings is not None:
        log_level, json_format = settings.log_level, settings.json_logs
    level = getattr(logging, log_level.upper())

    package_logger = logging.getLogger("specwrap")
    package_logger.setLevel(level)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    package_logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name."""
    return logging.getLogger(name)
