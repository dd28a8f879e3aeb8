"""Core utilities package"""

from .config import Settings, settings, get_settings
from .logging import setup_logging, get_logger, get_context_logger
from .errors import (
    NumberError,
    InvalidValueError,
    DivisionByZeroError,
    IncompatibleFactorError,
    UnboundedSeriesEvaluation,
    MalformedLiteralError,
)

__all__ = [
    "Settings",
    "settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "NumberError",
    "InvalidValueError",
    "DivisionByZeroError",
    "IncompatibleFactorError",
    "UnboundedSeriesEvaluation",
    "MalformedLiteralError",
]
