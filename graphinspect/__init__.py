"""
graphinspect - structural inspector for on-disk proximity-graph indexes.

Example:
    >>> from graphinspect import (
    ...     compute_stats_from_sequential_file,
    ...     render_graph_report,
    ...     render_small_graph,
    ...     Layout,
    ... )
    >>>
    >>> stats = compute_stats_from_sequential_file("index.graph")
    >>> print(render_graph_report(stats), end="")
    >>> print(render_small_graph("index.graph", Layout.RAW_GRAPH, 10), end="")
"""

from .core import (
    # Stats
    GraphStats,
    DegreeAccumulator,
    aggregate_degrees,
    compute_stats_in_memory,
    DEFAULT_WEAK_THRESHOLD,
    # Exceptions
    GraphInspectError,
    StorageError,
    FileOpenError,
    HeaderReadError,
    FormatMismatchError,
    UnsupportedLayoutError,
    ValidationError,
    GraphValidationError,
)

from .storage import (
    Layout,
    DataType,
    HeaderVariant,
    NodeRecord,
    save_stats,
    load_stats,
)

from .inspector import (
    compute_stats,
    compute_stats_from_sequential_file,
    compute_stats_from_unified_index,
    compute_stats_from_paged_file,
    render_adjacency_sample,
    render_small_graph,
)

from .report import render_graph_report

__version__ = "0.1.0"

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
    # Layouts
    "Layout",
    "DataType",
    "HeaderVariant",
    "NodeRecord",
    # Entry points
    "compute_stats",
    "compute_stats_from_sequential_file",
    "compute_stats_from_unified_index",
    "compute_stats_from_paged_file",
    "render_adjacency_sample",
    "render_small_graph",
    "render_graph_report",
    # Reports
    "save_stats",
    "load_stats",
]
