"""
Bounded-memory graph sampling.
"""

from .sampler import (
    AdjacencySample,
    SmallGraph,
    records_from_adjacency,
    collect_adjacency_sample,
    build_small_graph,
)

__all__ = [
    "AdjacencySample",
    "SmallGraph",
    "records_from_adjacency",
    "collect_adjacency_sample",
    "build_small_graph",
]
