"""
Structured logging configuration.

All library loggers live under the ``fuzzynum`` namespace, which carries a
NullHandler so that nothing is printed unless the application asks for it.
``setup_logging()`` attaches console (and optional file) handlers to that
namespace only; the root logger is left alone.
"""

import sys
import logging
from typing import Any, Dict, Optional
from datetime import datetime, timezone
import json
from pathlib import Path

from .config import Settings, settings as default_settings

LIBRARY_LOGGER = "fuzzynum"

logging.getLogger(LIBRARY_LOGGER).addHandler(logging.NullHandler())


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter"""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON"""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        # Numbers and fuzz are rendered through their to_string()
        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text log formatter; extra_data is appended as key=value"""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            fields = " ".join(f"{key}={value}" for key, value in extra_data.items())
            text = f"{text} [{fields}]"
        return text


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Configure the library logger from settings.

    Calling it again replaces the handlers installed by the previous call.

    Returns:
        The ``fuzzynum`` logger
    """
    settings = settings or default_settings

    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.WARNING)

    if settings.LOG_FORMAT == "json":
        formatter = StructuredFormatter()
    else:
        formatter = TextFormatter()

    library_logger = logging.getLogger(LIBRARY_LOGGER)
    for handler in library_logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            library_logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    library_logger.addHandler(console_handler)

    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        library_logger.addHandler(file_handler)

    library_logger.setLevel(log_level)
    return library_logger


def get_logger(name: str) -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)


class LoggerAdapter(logging.LoggerAdapter):
    """Enhanced logger with structured context"""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        """Add context to log messages"""
        extra_data = kwargs.pop("extra_data", {})

        if "extra" not in kwargs:
            kwargs["extra"] = {}

        kwargs["extra"]["extra_data"] = {
            **self.extra,
            **extra_data
        }

        return msg, kwargs


def get_context_logger(name: str, **context) -> LoggerAdapter:
    """Get logger with permanent context"""
    logger = get_logger(name)
    return LoggerAdapter(logger, context)


# Example usage:
# logger = get_context_logger(__name__, component="series")
# logger.warning("Series did not converge", extra_data={"cap": 1000, "last_term": 1e-9})
