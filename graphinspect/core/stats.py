"""
Graph structure statistics.

GraphStats is the single output type of every stats entry point. The
aggregation is streaming: scanners push one degree at a time into a
DegreeAccumulator, so no adjacency list is ever materialized for
file-backed graphs.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, Optional, Sequence

import numpy as np

from .exceptions import GraphValidationError


# Nodes with fewer out-edges than this are reported as weak
DEFAULT_WEAK_THRESHOLD = 2


@dataclass(frozen=True)
class GraphStats:
    """
    Structural summary of a proximity graph.

    Attributes:
        total_nodes: Number of counted nodes
        active_nodes: Nodes that take part in search routing
        frozen_nodes: Nodes kept in the graph but excluded from routing
        total_edges: Sum of out-degrees
        degree_min: Smallest out-degree (0 for an empty graph)
        degree_avg: Mean out-degree
        degree_max: Largest out-degree (0 for an empty graph)
        weak_count: Nodes with out-degree below the weak threshold
        entry_point: Default search origin (medoid)
    """

    total_nodes: int = 0
    active_nodes: int = 0
    frozen_nodes: int = 0
    total_edges: int = 0
    degree_min: int = 0
    degree_avg: float = 0.0
    degree_max: int = 0
    weak_count: int = 0
    entry_point: int = 0

    @property
    def is_empty(self) -> bool:
        return self.total_nodes == 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphStats":
        """Create GraphStats from dictionary, ignoring unknown keys."""
        known = {k: data[k] for k in cls.__dataclass_fields__ if k in data}
        return cls(**known)

    def __repr__(self) -> str:
        return (
            f"GraphStats(total_nodes={self.total_nodes}, "
            f"total_edges={self.total_edges}, "
            f"degree_avg={self.degree_avg:.4f}, "
            f"entry_point={self.entry_point})"
        )


class DegreeAccumulator:
    """
    Running min/max/sum/weak tally over a stream of degrees.

    Example:
        >>> acc = DegreeAccumulator()
        >>> for degree in (0, 1, 2, 3, 1):
        ...     acc.add(degree)
        >>> acc.finalize(active_nodes=5, frozen_nodes=0, entry_point=0).weak_count
        3
    """

    def __init__(self, weak_threshold: int = DEFAULT_WEAK_THRESHOLD):
        self.weak_threshold = weak_threshold
        self.count = 0
        self.total_edges = 0
        self.weak_count = 0
        self._min: Optional[int] = None
        self._max = 0

    def add(self, degree: int) -> None:
        self.count += 1
        self.total_edges += degree
        if self._min is None or degree < self._min:
            self._min = degree
        if degree > self._max:
            self._max = degree
        if degree < self.weak_threshold:
            self.weak_count += 1

    def finalize(
        self,
        active_nodes: int,
        frozen_nodes: int,
        entry_point: int,
    ) -> GraphStats:
        """
        Build the final GraphStats.

        An empty stream collapses to all-zero stats, entry point included.
        """
        if self.count == 0:
            return GraphStats()

        return GraphStats(
            total_nodes=self.count,
            active_nodes=active_nodes,
            frozen_nodes=frozen_nodes,
            total_edges=self.total_edges,
            degree_min=self._min if self._min is not None else 0,
            degree_avg=float(self.total_edges) / float(self.count),
            degree_max=self._max,
            weak_count=self.weak_count,
            entry_point=entry_point,
        )


def aggregate_degrees(
    degrees: Iterable[int],
    active_nodes: int,
    frozen_nodes: int,
    entry_point: int,
    weak_threshold: int = DEFAULT_WEAK_THRESHOLD,
) -> GraphStats:
    """
    Aggregate a finite stream of per-node degrees into GraphStats.

    The order of the stream does not affect the result.

    Args:
        degrees: One out-degree per counted node
        active_nodes: Active node count to report
        frozen_nodes: Frozen node count to report
        entry_point: Entry point to report
        weak_threshold: Degrees strictly below this count as weak

    Returns:
        GraphStats over the stream
    """
    acc = DegreeAccumulator(weak_threshold)
    for degree in degrees:
        acc.add(int(degree))
    return acc.finalize(active_nodes, frozen_nodes, entry_point)


def compute_stats_in_memory(
    adjacency: Sequence[Sequence[int]],
    active_count: int,
    frozen_count: int,
    entry_point: int,
    weak_threshold: int = DEFAULT_WEAK_THRESHOLD,
) -> GraphStats:
    """
    Compute stats from an adjacency list already held in memory.

    Only the first ``active_count + frozen_count`` positions are counted.

    Raises:
        GraphValidationError: If the adjacency list is shorter than the
            requested node count
    """
    total = active_count + frozen_count
    if total == 0:
        return GraphStats()
    if len(adjacency) < total:
        raise GraphValidationError(
            f"Adjacency has {len(adjacency)} entries, "
            f"expected at least {total}"
        )

    degrees = np.fromiter(
        (len(adjacency[i]) for i in range(total)),
        dtype=np.int64,
        count=total,
    )
    total_edges = int(degrees.sum())

    return GraphStats(
        total_nodes=total,
        active_nodes=active_count,
        frozen_nodes=frozen_count,
        total_edges=total_edges,
        degree_min=int(degrees.min()),
        degree_avg=float(total_edges) / float(total),
        degree_max=int(degrees.max()),
        weak_count=int(np.count_nonzero(degrees < weak_threshold)),
        entry_point=entry_point,
    )
