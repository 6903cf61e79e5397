"""
Adjacency and reverse-adjacency sampling over a prefix of a graph.

Both samplers consume a stream of NodeRecord from any reader and keep
memory proportional to the nodes actually read. Reverse edges are held in
an array of lists indexed by node id; an edge whose target falls outside
the sample has no slot to land in and is dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence

from ..storage.format import NodeRecord


@dataclass
class AdjacencySample:
    """
    Out-neighbor lists of the first nodes of a graph.

    Attributes:
        requested: Sample size asked for
        entry_point: Entry point of the graph
        records: Records read, in node id order
    """

    requested: int
    entry_point: int
    records: List[NodeRecord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class SmallGraph:
    """
    Sampled subgraph with in-edges restricted to the sample.

    ``out_neighbors[i]`` holds the ids node ``i`` points to (any id);
    ``referenced_by[i]`` holds the sampled nodes that point to ``i``.
    """

    entry_point: int
    out_neighbors: List[List[int]]
    referenced_by: List[List[int]]
    degrees: List[int]

    @property
    def size(self) -> int:
        return len(self.out_neighbors)

    def __len__(self) -> int:
        return self.size


def records_from_adjacency(
    adjacency: Sequence[Sequence[int]],
    neighbor_cap: int = 0,
    limit: Optional[int] = None,
) -> Iterator[NodeRecord]:
    """Present an in-memory adjacency list as a record stream."""
    count = len(adjacency) if limit is None else min(limit, len(adjacency))
    for node_id in range(count):
        neighbors = [int(v) for v in adjacency[node_id]]
        degree = len(neighbors)
        if neighbor_cap > 0:
            neighbors = neighbors[:neighbor_cap]
        yield NodeRecord(node_id, degree, neighbors)


def collect_adjacency_sample(
    records: Iterable[NodeRecord],
    entry_point: int,
    sample_size: int,
) -> AdjacencySample:
    """Keep the first ``sample_size`` records of a stream."""
    sample = AdjacencySample(requested=sample_size, entry_point=entry_point)
    if sample_size == 0:
        return sample
    for record in records:
        sample.records.append(record)
        if len(sample.records) >= sample_size:
            break
    return sample


def build_small_graph(
    records: Iterable[NodeRecord],
    entry_point: int,
    sample_size: int,
) -> SmallGraph:
    """
    Build out- and in-neighbor lists for the first ``sample_size`` nodes.

    The arrays hold one slot per node actually read, so a stream that
    ends early costs memory for the nodes it produced only. Reverse edges
    are filled in after the read; a target outside ``0 <= target <
    nodes_read`` has no slot and is dropped.

    Args:
        records: Records in node id order, with neighbors materialized
        entry_point: Entry point of the graph
        sample_size: Number of leading nodes to sample

    Returns:
        SmallGraph over the nodes actually read
    """
    out_neighbors: List[List[int]] = []
    degrees: List[int] = []

    for record in records:
        if len(out_neighbors) >= sample_size:
            break
        out_neighbors.append(list(record.neighbors or []))
        degrees.append(record.degree)

    nodes_read = len(out_neighbors)
    referenced_by: List[List[int]] = [[] for _ in range(nodes_read)]
    for source, neighbors in enumerate(out_neighbors):
        for target in neighbors:
            if 0 <= target < nodes_read:
                referenced_by[target].append(source)

    return SmallGraph(
        entry_point=entry_point,
        out_neighbors=out_neighbors,
        referenced_by=referenced_by,
        degrees=degrees,
    )
