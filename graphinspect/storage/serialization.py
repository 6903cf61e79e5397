"""
Serialization of inspection results.

Stats reports are stored as msgpack maps so a graph's structure can be
saved next to the index and compared against later builds.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Union

import msgpack

from ..core.exceptions import StorageError
from ..core.stats import GraphStats


# Bumped when the report map changes shape
REPORT_VERSION = 1


def serialize_stats(stats: GraphStats, **extra: Any) -> bytes:
    """
    Serialize stats to msgpack.

    Args:
        stats: Stats to serialize
        **extra: Additional report fields (source path, layout, ...)
    """
    report: Dict[str, Any] = {
        "version": REPORT_VERSION,
        "stats": stats.to_dict(),
    }
    if extra:
        report["source"] = extra
    return msgpack.packb(report, use_bin_type=True)


def deserialize_stats(data: bytes) -> GraphStats:
    """
    Deserialize stats from msgpack.

    Raises:
        StorageError: If the data is not a stats report
    """
    try:
        report = msgpack.unpackb(data, raw=False)
    except (msgpack.exceptions.UnpackException, ValueError) as e:
        raise StorageError(f"Invalid stats report: {e}") from e

    if not isinstance(report, dict) or "stats" not in report:
        raise StorageError("Invalid stats report: missing stats")

    version = report.get("version")
    if version != REPORT_VERSION:
        raise StorageError(f"Unsupported report version: {version}")

    return GraphStats.from_dict(report["stats"])


def save_stats(path: Union[str, Path], stats: GraphStats, /, **extra: Any) -> None:
    """Write a stats report to ``path``."""
    with open(path, "wb") as f:
        f.write(serialize_stats(stats, **extra))


def load_stats(path: Union[str, Path]) -> GraphStats:
    """Read a stats report written by save_stats()."""
    with open(path, "rb") as f:
        return deserialize_stats(f.read())
