"""
Pytest fixtures for graphinspect tests.

The builder fixtures return functions that lay out graph files byte by
byte, so every test controls exactly what the readers see.
"""

import shutil
import struct
import tempfile
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import numpy as np
import pytest

from graphinspect.storage.format import (
    DISK_INDEX_DATA_OFFSET,
    SECTOR_LEN,
    DataType,
    DiskIndexHeader,
    GraphHeader,
    HeaderVariant,
    UnifiedIndexMetadata,
)

Adjacency = Sequence[Sequence[int]]


def raw_graph_bytes(
    adjacency: Adjacency,
    entry_point: int = 0,
    frozen_count: int = 0,
    width: Optional[int] = None,
) -> bytes:
    """Layout A: 24-byte header plus one (degree, ids) record per node."""
    body = b"".join(
        struct.pack(f"<I{len(ids)}I", len(ids), *ids) for ids in adjacency
    )
    header = GraphHeader(
        expected_total_size=GraphHeader.SIZE + len(body),
        width=width if width is not None else max((len(a) for a in adjacency), default=0),
        entry_point=entry_point,
        frozen_count=frozen_count,
    )
    return header.to_bytes() + body


def unified_index_bytes(
    adjacency: Adjacency,
    entry_point: int = 0,
    frozen_count: int = 0,
    graph_offset: int = 4096,
) -> bytes:
    """Layout B: 5 x u64 metadata, padding, then layout A at graph_offset."""
    graph = raw_graph_bytes(adjacency, entry_point, frozen_count)
    metadata = UnifiedIndexMetadata(
        values=(graph_offset, graph_offset + len(graph), 0, 0, 0)
    )
    head = metadata.to_bytes()
    return head + b"\x00" * (graph_offset - len(head)) + graph


def disk_index_bytes(
    adjacency: Adjacency,
    n_dims: int = 4,
    data_type: DataType = DataType.FLOAT,
    records_per_page: Optional[int] = None,
    max_record_len: Optional[int] = None,
    medoid: int = 0,
    variant: HeaderVariant = HeaderVariant.TAGGED,
    n_nodes: Optional[int] = None,
    seed: int = 0,
) -> bytes:
    """
    Layout C: geometry header in the first sector, then records packed
    into 4096-byte sectors.

    Neighbor ids that do not fit in the sector are cut off.
    """
    esz = data_type.element_size
    max_degree = max((len(a) for a in adjacency), default=0)
    if max_record_len is None:
        max_record_len = n_dims * esz + 4 + 4 * max_degree
    if records_per_page is None:
        records_per_page = SECTOR_LEN // max_record_len
    if n_nodes is None:
        n_nodes = len(adjacency)

    header = DiskIndexHeader(
        variant, n_nodes, n_dims, medoid, max_record_len, records_per_page
    )
    head = header.to_bytes()
    data = bytearray(head + b"\x00" * (DISK_INDEX_DATA_OFFSET - len(head)))

    rng = np.random.default_rng(seed)
    dtype = {DataType.FLOAT: "<f4", DataType.UINT8: "u1", DataType.INT8: "i1"}[data_type]

    n_sectors = (len(adjacency) + records_per_page - 1) // max(records_per_page, 1)
    for s in range(n_sectors):
        sector = bytearray(SECTOR_LEN)
        for j in range(records_per_page):
            node = s * records_per_page + j
            if node >= len(adjacency):
                break
            start = j * max_record_len
            if start >= SECTOR_LEN:
                break
            coords = rng.integers(0, 100, size=n_dims).astype(dtype).tobytes()
            record = coords + struct.pack("<I", len(adjacency[node]))
            record += np.asarray(adjacency[node], dtype="<u4").tobytes()
            record = record[:SECTOR_LEN - start]
            sector[start:start + len(record)] = record
        data += sector
    return bytes(data)


@pytest.fixture
def temp_dir():
    """Create a temporary directory, removed after the test."""
    path = tempfile.mkdtemp(prefix="graphinspect_test_")
    yield Path(path)
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def write_file(temp_dir: Path) -> Callable[[str, bytes], str]:
    """Write bytes to a file in the temp dir and return its path."""
    def _write(name: str, data: bytes) -> str:
        path = temp_dir / name
        path.write_bytes(data)
        return str(path)
    return _write


@pytest.fixture
def sample_adjacency() -> List[List[int]]:
    """Hand-built graph with degrees [0, 1, 2, 3, 1]."""
    return [
        [],
        [0],
        [0, 1],
        [0, 1, 2],
        [2],
    ]


@pytest.fixture
def ring_adjacency() -> List[List[int]]:
    """0 -> 1 -> 2 -> 0, plus 0 -> 5 leaving the first three nodes."""
    return [
        [1, 5],
        [2],
        [0],
        [4],
        [5],
        [3],
    ]


@pytest.fixture
def raw_graph(write_file):
    """Factory writing a layout A file."""
    def _make(adjacency: Adjacency, name: str = "index.graph", **kwargs) -> str:
        return write_file(name, raw_graph_bytes(adjacency, **kwargs))
    return _make


@pytest.fixture
def unified_index(write_file):
    """Factory writing a layout B file."""
    def _make(adjacency: Adjacency, name: str = "index.bin", **kwargs) -> str:
        return write_file(name, unified_index_bytes(adjacency, **kwargs))
    return _make


@pytest.fixture
def disk_index(write_file):
    """Factory writing a layout C file."""
    def _make(adjacency: Adjacency, name: str = "index_disk.index", **kwargs) -> str:
        return write_file(name, disk_index_bytes(adjacency, **kwargs))
    return _make


@pytest.fixture
def graph_bytes():
    """Layout A byte builder."""
    return raw_graph_bytes


@pytest.fixture
def unified_bytes():
    """Layout B byte builder."""
    return unified_index_bytes


@pytest.fixture
def disk_bytes():
    """Layout C byte builder."""
    return disk_index_bytes
