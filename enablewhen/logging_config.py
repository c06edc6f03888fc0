"""Logging configuration for the enableWhen navigation engine.

Production logs are JSON, development logs are colored text. Services pass
the questionnaire and step a record relates to via ``extra``; both
formatters render these context fields.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from enablewhen.config import get_settings

# Context passed by the task builder and validator
CONTEXT_FIELDS = ("questionnaire_id", "step_id")

# Attributes every LogRecord has; anything else was passed via ``extra``
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}


def _context(record: logging.LogRecord) -> Dict[str, Any]:
    """Context fields set on a record, skipping unset ones."""
    return {
        field: getattr(record, field)
        for field in CONTEXT_FIELDS
        if getattr(record, field, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record, context and extra fields included."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and key not in CONTEXT_FIELDS:
                log_data[key] = value
        log_data.update(_context(record))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Colored single-line output with the context appended."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        formatted = (
            f"{color}[{record.levelname:8}]{self.RESET} "
            f"{record.name:30} - {record.getMessage()}"
        )

        context = _context(record)
        if context:
            formatted += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


def setup_logging() -> None:
    """Configure the root logger from settings.

    JSON output in production, colored text otherwise. Meant to be called
    once by the application embedding the library.
    """
    settings = get_settings()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if settings.is_production else DevelopmentFormatter())

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(settings.log_level)

    logging.getLogger(__name__).info(
        f"Logging configured - Environment: {settings.environment}, "
        f"Level: {settings.log_level}"
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given name (typically __name__)."""
    return logging.getLogger(name)
