"""
Text rendering of inspection results.

The line shapes here are parsed by external tooling and must not change:

    Graph structure summary: total_nodes=... entry_point=...
    Adjacency sample (first N nodes, entry_point=P):
      0: [1, 2, ... (5 total)]
    Small graph (first N nodes, entry_point=P): out-neighbors and referenced_by within sample
      0: out [1, 2]  referenced_by [2]

Every line ends with a newline.
"""

from __future__ import annotations

from typing import Sequence

from .core.stats import GraphStats
from .sampling.sampler import AdjacencySample, SmallGraph


def format_degree_avg(value: float) -> str:
    """Six significant digits, as a C++ stream prints a double."""
    return format(value, "g")


def render_graph_report(stats: GraphStats) -> str:
    """The one-line structural summary."""
    return (
        f"Graph structure summary: total_nodes={stats.total_nodes}"
        f" active={stats.active_nodes}"
        f" frozen={stats.frozen_nodes}"
        f" total_edges={stats.total_edges}"
        f" degree_min={stats.degree_min}"
        f" degree_avg={format_degree_avg(stats.degree_avg)}"
        f" degree_max={stats.degree_max}"
        f" weak_count(deg<2)={stats.weak_count}"
        f" entry_point={stats.entry_point}\n"
    )


def format_neighbors(neighbors: Sequence[int], degree: int, max_shown: int) -> str:
    """
    Comma-separated ids, cut at ``max_shown`` (0 = all).

    A cut list ends with ``, ... (K total)`` where K is the stored degree.
    """
    shown = neighbors if max_shown == 0 else neighbors[:max_shown]
    text = ", ".join(str(v) for v in shown)
    if max_shown > 0 and degree > max_shown:
        text += f", ... ({degree} total)"
    return text


def render_adjacency_section(sample: AdjacencySample, max_shown: int) -> str:
    lines = [
        f"Adjacency sample (first {sample.requested} nodes, "
        f"entry_point={sample.entry_point}):"
    ]
    for record in sample.records:
        neighbors = format_neighbors(record.neighbors or [], record.degree, max_shown)
        lines.append(f"  {record.node_id}: [{neighbors}]")
    return "\n".join(lines) + "\n"


def render_small_graph_section(graph: SmallGraph, max_shown: int) -> str:
    lines = [
        f"Small graph (first {graph.size} nodes, entry_point={graph.entry_point}): "
        "out-neighbors and referenced_by within sample"
    ]
    for i in range(graph.size):
        out = format_neighbors(graph.out_neighbors[i], graph.degrees[i], max_shown)
        referenced = ", ".join(str(v) for v in graph.referenced_by[i])
        lines.append(f"  {i}: out [{out}]  referenced_by [{referenced}]")
    return "\n".join(lines) + "\n"


def render_open_failure(path: str) -> str:
    return f"Could not open file: {path}\n"
