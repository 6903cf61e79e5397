"""
Command-line entry point for graphinspect.

Usage:
    python -m graphinspect (--graph-file PATH | --index-file PATH |
                            --disk-index PATH --data-type TYPE) [OPTIONS]

Options:
    --graph-file PATH       Raw graph file (header at offset 0)
    --index-file PATH       Single-file unified index (graph at 4KB)
    --disk-index PATH       Sector-paged disk index (*_disk.index)
    --data-type TYPE        For --disk-index only: float, uint8, or int8
    --adjacency-sample N    Print neighbor lists for the first N nodes
    --max-neighbors M       Cap neighbors per node in samples (0 = all)
    --small-graph N         Print the first N nodes with referenced_by
    --save-stats PATH       Write the stats report (msgpack) to PATH
    --config PATH           YAML settings file
    --log-level TEXT        Log level (DEBUG, INFO, WARNING, ERROR)
"""

import argparse
import sys
from typing import List, Optional

from config import load_config

from .core.exceptions import (
    FileOpenError,
    FormatMismatchError,
    HeaderReadError,
    ValidationError,
)
from .inspector import (
    compute_stats_from_paged_file,
    compute_stats_from_sequential_file,
    render_adjacency_sample,
    render_small_graph,
)
from .report import render_graph_report
from .storage.format import DataType, Layout
from .storage.header import resolve_unified_index_offset
from .storage.serialization import save_stats
from .utils.logging import setup_logger
from .utils.validation import validate_count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graphinspect",
        description="Structural inspector for on-disk proximity-graph indexes",
    )

    parser.add_argument(
        "--graph-file",
        type=str,
        default=None,
        help="Raw graph file (as written by save_graph at offset 0)"
    )
    parser.add_argument(
        "--index-file",
        type=str,
        default=None,
        help="Single-file unified index (graph at 4KB)"
    )
    parser.add_argument(
        "--disk-index",
        type=str,
        default=None,
        help="On-disk SSD index (*_disk.index). Requires --data-type"
    )
    parser.add_argument(
        "--data-type",
        type=str,
        default=None,
        help="For --disk-index only: float, uint8, or int8"
    )
    parser.add_argument(
        "--adjacency-sample",
        type=str,
        default=None,
        help="Print neighbor lists for first N nodes (default: 0 = off)"
    )
    parser.add_argument(
        "--max-neighbors",
        type=str,
        default=None,
        help="Cap neighbors per node in adjacency sample (default: 20)"
    )
    parser.add_argument(
        "--small-graph",
        type=str,
        default=None,
        help="Print first N nodes with out-neighbors and referenced_by (default: 0 = off)"
    )
    parser.add_argument(
        "--save-stats",
        type=str,
        default=None,
        help="Write the stats report (msgpack) to this path"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML settings file"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level"
    )

    return parser


def _error(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = load_config(args.config)
    setup_logger(
        level=args.log_level or settings.log_level,
        log_file=settings.log_file,
    )

    counts = {}
    for flag, value, default in (
        ("--adjacency-sample", args.adjacency_sample, settings.sample_config.adjacency_sample),
        ("--max-neighbors", args.max_neighbors, settings.sample_config.max_neighbors),
        ("--small-graph", args.small_graph, settings.sample_config.small_graph),
    ):
        try:
            counts[flag] = validate_count(default if value is None else value, flag)
        except ValidationError as e:
            return _error(f"{e}.")

    adjacency_sample = counts["--adjacency-sample"]
    max_neighbors = counts["--max-neighbors"]
    small_graph = counts["--small-graph"]

    chosen = [
        (layout, path)
        for layout, path in (
            (Layout.RAW_GRAPH, args.graph_file),
            (Layout.UNIFIED_INDEX, args.index_file),
            (Layout.DISK_INDEX, args.disk_index),
        )
        if path
    ]
    if not chosen:
        return _error("provide one of --graph-file, --index-file, or --disk-index.")
    if len(chosen) > 1:
        return _error("provide exactly one of --graph-file, --index-file, or --disk-index.")

    layout, path = chosen[0]
    offset = 0
    data_type = None

    if layout is Layout.DISK_INDEX:
        if not args.data_type:
            return _error("--disk-index requires --data-type (float, uint8, or int8).")
        try:
            data_type = DataType.parse(args.data_type)
        except ValidationError:
            return _error("--data-type must be float, uint8, or int8.")
        stats = compute_stats_from_paged_file(path, data_type)
    elif layout is Layout.UNIFIED_INDEX:
        metadata_size = settings.layout_config.unified_metadata_size
        try:
            offset = resolve_unified_index_offset(path, metadata_size)
        except FileOpenError:
            return _error(f"could not open {path}")
        except HeaderReadError:
            return _error(f"could not read metadata (5 x uint64) from {path}")
        except FormatMismatchError as e:
            return _error(f"{e}. Use --disk-index for *_disk.index files.")
        stats = compute_stats_from_sequential_file(path, offset)
    else:
        stats = compute_stats_from_sequential_file(path, offset)

    if stats.total_nodes == 0 and layout is not Layout.DISK_INDEX and offset > 0:
        return _error(f"failed to read graph from {path} at offset {offset}")
    if stats.total_nodes == 0:
        return _error("no nodes read (empty graph or read error).")

    sanity = settings.sanity_config
    if layout is Layout.RAW_GRAPH and (
        stats.degree_max > sanity.max_reasonable_degree
        or stats.total_nodes > sanity.max_reasonable_nodes
    ):
        return _error(
            "file does not look like a raw graph. "
            "Use --disk-index for *_disk.index files."
        )

    sys.stdout.write(render_graph_report(stats))

    if adjacency_sample > 0:
        sys.stdout.write("\n")
        sys.stdout.write(render_adjacency_sample(
            path, layout, adjacency_sample, max_neighbors,
            body_offset=offset, element_size=data_type,
        ))

    if small_graph > 0:
        sys.stdout.write("\n")
        sys.stdout.write(render_small_graph(
            path, layout, small_graph, max_neighbors,
            body_offset=offset, element_size=data_type,
        ))

    if args.save_stats:
        save_stats(args.save_stats, stats, path=path, layout=layout.value)

    return 0


if __name__ == "__main__":
    sys.exit(main())
