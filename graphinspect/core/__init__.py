"""
Core components for graphinspect.
"""

from .stats import (
    GraphStats,
    DegreeAccumulator,
    aggregate_degrees,
    compute_stats_in_memory,
    DEFAULT_WEAK_THRESHOLD,
)
from .exceptions import (
    GraphInspectError,
    StorageError,
    FileOpenError,
    HeaderReadError,
    FormatMismatchError,
    UnsupportedLayoutError,
    ValidationError,
    GraphValidationError,
)

__all__ = [
    # Stats
    "GraphStats",
    "DegreeAccumulator",
    "aggregate_degrees",
    "compute_stats_in_memory",
    "DEFAULT_WEAK_THRESHOLD",
    # Exceptions
    "GraphInspectError",
    "StorageError",
    "FileOpenError",
    "HeaderReadError",
    "FormatMismatchError",
    "UnsupportedLayoutError",
    "ValidationError",
    "GraphValidationError",
]
