"""
Input validation utilities.
"""

import os
from typing import Any

from ..core.exceptions import ValidationError


def validate_count(value: Any, name: str = "count") -> int:
    """
    Validate a non-negative count such as a sample size.

    Args:
        value: The value to validate (int or numeric string)
        name: Parameter name used in error messages

    Returns:
        The validated count

    Raises:
        ValidationError: If the value is not a non-negative integer
    """
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer, got bool")

    if isinstance(value, str):
        try:
            value = int(value.strip(), 10)
        except ValueError:
            raise ValidationError(
                f"{name} requires a positive number (got \"{value}\")"
            )

    if not isinstance(value, int):
        raise ValidationError(
            f"{name} must be an integer, got {type(value).__name__}"
        )

    if value < 0:
        raise ValidationError(
            f"{name} requires a positive number (got \"{value}\")"
        )

    return value


def validate_offset(value: Any) -> int:
    """Validate a byte offset into a file."""
    return validate_count(value, "offset")


def validate_path(value: Any, layout: str) -> str:
    """
    Validate the source of a file-backed layout.

    Raises:
        ValidationError: If the value is not a str, bytes or os.PathLike
    """
    if not isinstance(value, (str, bytes, os.PathLike)):
        raise ValidationError(
            f"{layout} layout needs a file path, got {type(value).__name__}"
        )
    return os.fspath(value)
