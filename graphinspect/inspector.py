"""
Boundary functions of the inspector.

Every file-backed entry point resolves the header once, makes one pass
over the body, and resolves every failure locally: stats collapse to an
all-zero GraphStats, text collapses to a "Could not open file" line or to
an empty string. The reason is logged.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence, Union

from .core.exceptions import (
    FileOpenError,
    GraphInspectError,
    UnsupportedLayoutError,
    ValidationError,
)
from .core.stats import DEFAULT_WEAK_THRESHOLD, GraphStats, compute_stats_in_memory
from .observability import IoContext, io_context
from .report import (
    render_adjacency_section,
    render_open_failure,
    render_small_graph_section,
)
from .sampling.sampler import (
    build_small_graph,
    collect_adjacency_sample,
    records_from_adjacency,
)
from .storage.cursor import BinaryCursor
from .storage.format import (
    DataType,
    Layout,
    NodeRecord,
    UNIFIED_METADATA_SIZE,
    resolve_element_size,
)
from .storage.header import resolve_unified_index_offset
from .storage.paged import SectorPagedReader
from .storage.sequential import SequentialGraphScanner
from .utils.logging import get_logger
from .utils.validation import validate_count, validate_offset, validate_path

logger = get_logger(__name__)

PathLike = Union[str, "os.PathLike[str]"]
Adjacency = Sequence[Sequence[int]]
Source = Union[PathLike, Adjacency]
ElementSize = Union[int, str, DataType]


def _require_element_size(element_size: Optional[ElementSize]) -> ElementSize:
    if element_size is None:
        raise ValidationError("disk_index layout needs an element_size or data type")
    return element_size


# =========================================================================
# STATS
# =========================================================================

def compute_stats_from_sequential_file(path: PathLike, body_offset: int = 0) -> GraphStats:
    """
    Stats of a raw graph whose 24-byte header starts at ``body_offset``.

    Returns:
        GraphStats; total_nodes is 0 if the file cannot be opened or its
        header cannot be read
    """
    try:
        body_offset = validate_offset(body_offset)
        with BinaryCursor.open(os.fspath(path)) as cursor:
            return SequentialGraphScanner(cursor, body_offset).compute_stats()
    except GraphInspectError as e:
        logger.warning(f"No graph stats for {path} at offset {body_offset}: {e}")
        return GraphStats()


def compute_stats_from_unified_index(
    path: PathLike,
    expected_graph_offset: int = UNIFIED_METADATA_SIZE,
) -> GraphStats:
    """Stats of the graph embedded in a single-file unified index."""
    try:
        offset = resolve_unified_index_offset(os.fspath(path), expected_graph_offset)
    except GraphInspectError as e:
        logger.warning(f"No graph stats for {path}: {e}")
        return GraphStats()
    return compute_stats_from_sequential_file(path, offset)


def compute_stats_from_paged_file(path: PathLike, element_size: ElementSize) -> GraphStats:
    """
    Stats of a sector-paged disk index.

    Args:
        path: Disk index file
        element_size: Bytes per coordinate, or a DataType

    Returns:
        GraphStats; total_nodes is 0 on any read or format failure,
        including records that span more than one sector
    """
    try:
        esz = resolve_element_size(element_size)
        with BinaryCursor.open(os.fspath(path)) as cursor:
            return SectorPagedReader(cursor, esz).compute_stats()
    except UnsupportedLayoutError as e:
        logger.warning(f"Unsupported disk index {path}: {e}")
        return GraphStats()
    except GraphInspectError as e:
        logger.warning(f"No graph stats for {path}: {e}")
        return GraphStats()


def compute_stats(
    source: Source,
    layout: Union[Layout, str],
    body_offset: Optional[int] = None,
    element_size: Optional[ElementSize] = None,
    active_count: Optional[int] = None,
    frozen_count: int = 0,
    entry_point: int = 0,
    weak_threshold: int = DEFAULT_WEAK_THRESHOLD,
) -> GraphStats:
    """
    Dispatch to the stats entry point for ``layout``.

    For IN_MEMORY, ``active_count`` defaults to every position not
    counted as frozen. DISK_INDEX requires ``element_size``.

    Raises:
        ValidationError: If a file layout gets something other than a
            path, or DISK_INDEX gets no element size
    """
    layout = Layout(layout)

    if layout is Layout.IN_MEMORY:
        if active_count is None:
            active_count = max(len(source) - frozen_count, 0)
        return compute_stats_in_memory(
            source, active_count, frozen_count, entry_point, weak_threshold
        )
    validate_path(source, layout.value)
    if layout is Layout.DISK_INDEX:
        return compute_stats_from_paged_file(source, _require_element_size(element_size))
    if layout is Layout.UNIFIED_INDEX and body_offset is None:
        return compute_stats_from_unified_index(source)
    return compute_stats_from_sequential_file(source, body_offset or 0)


# =========================================================================
# SAMPLING
# =========================================================================

class _GraphView:
    """Uniform record access over any layout."""

    def __init__(self, entry_point: int, records, node_limit: Optional[int] = None):
        self.entry_point = entry_point
        self._records = records
        self.node_limit = node_limit

    def records(self, neighbor_cap: int, limit: int) -> Iterator[NodeRecord]:
        return self._records(neighbor_cap, limit)


@contextmanager
def _open_graph(
    source: Source,
    layout: Layout,
    body_offset: Optional[int],
    element_size: Optional[ElementSize],
    entry_point: int,
) -> Iterator[_GraphView]:
    if layout is Layout.IN_MEMORY:
        yield _GraphView(
            entry_point,
            lambda cap, limit: records_from_adjacency(source, cap, limit),
        )
        return

    path = validate_path(source, layout.value)

    if layout is Layout.DISK_INDEX:
        esz = resolve_element_size(_require_element_size(element_size))
        with BinaryCursor.open(path) as cursor:
            reader = SectorPagedReader(cursor, esz)
            yield _GraphView(
                reader.entry_point,
                lambda cap, limit: reader.records(
                    materialize=True, neighbor_cap=cap, limit=limit
                ),
                node_limit=reader.header.n_nodes,
            )
        return

    if body_offset is None:
        if layout is Layout.UNIFIED_INDEX:
            body_offset = resolve_unified_index_offset(path)
        else:
            body_offset = 0

    with BinaryCursor.open(path) as cursor:
        scanner = SequentialGraphScanner(cursor, validate_offset(body_offset))
        yield _GraphView(
            scanner.entry_point,
            lambda cap, limit: scanner.records(neighbor_cap=cap, limit=limit),
        )


def render_adjacency_sample(
    source: Source,
    layout: Union[Layout, str],
    sample_size: int,
    max_shown: int = 20,
    body_offset: Optional[int] = None,
    element_size: Optional[ElementSize] = None,
    entry_point: int = 0,
) -> str:
    """
    Out-neighbor lists of the first ``sample_size`` nodes as text.

    Args:
        source: File path, or an adjacency list for Layout.IN_MEMORY
        layout: Layout of the source
        sample_size: Number of leading nodes to print
        max_shown: Max ids per line (0 = all)
        body_offset: Graph header offset for RAW_GRAPH / UNIFIED_INDEX
            (UNIFIED_INDEX resolves it from the metadata block when None)
        element_size: Bytes per coordinate or DataType; required for DISK_INDEX
        entry_point: Entry point to print, for IN_MEMORY

    Returns:
        Header line plus one line per node; a "Could not open file" line
        if the file cannot be opened; "" for any other failure
    """
    try:
        layout = Layout(layout)
        sample_size = validate_count(sample_size, "sample_size")
        max_shown = validate_count(max_shown, "max_shown")
        with _open_graph(source, layout, body_offset, element_size, entry_point) as graph:
            with io_context(IoContext.OTHER):
                sample = collect_adjacency_sample(
                    graph.records(max_shown, sample_size),
                    graph.entry_point,
                    sample_size,
                )
    except FileOpenError as e:
        logger.warning(str(e))
        return render_open_failure(os.fspath(source))
    except (GraphInspectError, ValueError) as e:
        logger.warning(f"No adjacency sample for {_describe(source)}: {e}")
        return ""

    return render_adjacency_section(sample, max_shown)


def render_small_graph(
    source: Source,
    layout: Union[Layout, str],
    sample_size: int,
    max_shown: int = 20,
    body_offset: Optional[int] = None,
    element_size: Optional[ElementSize] = None,
    entry_point: int = 0,
) -> str:
    """
    First ``sample_size`` nodes with out-neighbors and in-sample
    referrers as text.

    Arguments and failure behavior match render_adjacency_sample().
    """
    try:
        layout = Layout(layout)
        sample_size = validate_count(sample_size, "sample_size")
        max_shown = validate_count(max_shown, "max_shown")
        with _open_graph(source, layout, body_offset, element_size, entry_point) as graph:
            if graph.node_limit is not None:
                sample_size = min(sample_size, graph.node_limit)
            with io_context(IoContext.OTHER):
                small = build_small_graph(
                    graph.records(0, sample_size),
                    graph.entry_point,
                    sample_size,
                )
    except FileOpenError as e:
        logger.warning(str(e))
        return render_open_failure(os.fspath(source))
    except (GraphInspectError, ValueError) as e:
        logger.warning(f"No small graph for {_describe(source)}: {e}")
        return ""

    return render_small_graph_section(small, max_shown)


def _describe(source: Source) -> str:
    if isinstance(source, (str, bytes, os.PathLike)):
        return os.fspath(source)
    return f"in-memory graph ({len(source)} nodes)"
