"""
Utility functions for graphinspect.
"""

from .validation import (
    validate_count,
    validate_offset,
    validate_path,
    ValidationError,
)
from .logging import setup_logger, get_logger, LogContext

__all__ = [
    "validate_count",
    "validate_offset",
    "validate_path",
    "ValidationError",
    "setup_logger",
    "get_logger",
    "LogContext",
]
