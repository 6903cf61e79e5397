"""
File format definitions for proximity-graph index files.

Three layouts carry the same logical graph:

    A  raw graph          24-byte header, then variable-length records
    B  unified index      layout A embedded at an offset stored in a
                          5 x u64 metadata block at file offset 0
    C  disk index         5 x u64 geometry (optionally behind an 8-byte
                          tag), then fixed-size records packed in
                          4096-byte sectors starting at offset 4096

All integers are little-endian.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple, Union

from ..core.exceptions import FormatMismatchError, ValidationError


# Sector (page) size of the disk index
SECTOR_LEN = 4096

# Disk index body always starts after one metadata sector
DISK_INDEX_DATA_OFFSET = 4096

# Unified index: graph section starts right after the metadata block
UNIFIED_METADATA_SIZE = 4096

# Smallest tag count that marks the tagged disk index header
TAG_MIN_NPTS = 5

# Size of one neighbor id / degree field
ID_SIZE = 4


class Layout(str, Enum):
    """Where a graph comes from."""
    RAW_GRAPH = "raw_graph"
    UNIFIED_INDEX = "unified_index"
    DISK_INDEX = "disk_index"
    IN_MEMORY = "in_memory"


class DataType(str, Enum):
    """Coordinate encoding of disk index records."""
    FLOAT = "float"
    UINT8 = "uint8"
    INT8 = "int8"

    @property
    def element_size(self) -> int:
        """Bytes per coordinate."""
        return 4 if self is DataType.FLOAT else 1

    @classmethod
    def parse(cls, value: Union[str, "DataType"]) -> "DataType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValidationError(
                f"data type must be float, uint8, or int8 (got \"{value}\")"
            )


def resolve_element_size(value: Union[int, str, DataType]) -> int:
    """Element size in bytes from an int or a DataType."""
    if isinstance(value, bool):
        raise ValidationError("element size must be an integer or data type")
    if isinstance(value, int):
        if value <= 0:
            raise ValidationError(f"element size must be positive, got {value}")
        return value
    return DataType.parse(value).element_size


class HeaderVariant(str, Enum):
    """Historical serializations of the disk index geometry header."""
    TAGGED = "tagged"       # (npts:i32, ndims:i32) tag, then 5 x u64
    UNTAGGED = "untagged"   # 5 x u64 at offset 0


@dataclass(frozen=True)
class GraphHeader:
    """
    Raw graph header (24 bytes).

    Layout:
        0-7:   Expected total size in bytes, header included (uint64)
        8-11:  Max degree / width (uint32)
        12-15: Entry point (uint32)
        16-23: Frozen point count (uint64)
    """

    expected_total_size: int
    width: int
    entry_point: int
    frozen_count: int

    FORMAT = '<QIIQ'
    SIZE = 24

    def to_bytes(self) -> bytes:
        """Serialize header to bytes."""
        return struct.pack(
            self.FORMAT,
            self.expected_total_size,
            self.width,
            self.entry_point,
            self.frozen_count,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> 'GraphHeader':
        """Deserialize header from bytes."""
        if len(data) < cls.SIZE:
            raise ValueError(f"Header too short: {len(data)} < {cls.SIZE}")
        return cls(*struct.unpack(cls.FORMAT, data[:cls.SIZE]))

    def __repr__(self) -> str:
        return (
            f"GraphHeader(size={self.expected_total_size}, width={self.width}, "
            f"entry_point={self.entry_point}, frozen={self.frozen_count})"
        )


@dataclass(frozen=True)
class UnifiedIndexMetadata:
    """
    Metadata block at the start of a single-file unified index.

    Layout:
        0-7:   Graph section offset (uint64, always 4096)
        8-15:  Next section offset (uint64, past the graph)
        16-39: Further section offsets (3 x uint64)
    """

    values: Tuple[int, int, int, int, int]

    FORMAT = '<5Q'
    SIZE = 40

    @property
    def graph_offset(self) -> int:
        return self.values[0]

    @property
    def next_section_offset(self) -> int:
        return self.values[1]

    def validate(self, expected_graph_offset: int = UNIFIED_METADATA_SIZE) -> bool:
        """
        Check this block describes a unified index.

        Raises:
            FormatMismatchError: If the graph offset is not the metadata
                size, or the next section does not follow it
        """
        if (
            self.graph_offset != expected_graph_offset
            or self.next_section_offset <= self.graph_offset
        ):
            raise FormatMismatchError(
                "file does not look like a single-file unified index "
                f"(expected first 8 bytes = {expected_graph_offset}, "
                f"next 8 bytes > {expected_graph_offset})"
            )
        return True

    def to_bytes(self) -> bytes:
        return struct.pack(self.FORMAT, *self.values)

    @classmethod
    def from_bytes(cls, data: bytes) -> 'UnifiedIndexMetadata':
        if len(data) < cls.SIZE:
            raise ValueError(f"Metadata too short: {len(data)} < {cls.SIZE}")
        return cls(values=struct.unpack(cls.FORMAT, data[:cls.SIZE]))


@dataclass(frozen=True)
class DiskIndexHeader:
    """
    Disk index geometry.

    Layout (untagged):
        0-7:   Node count (uint64)
        8-15:  Dimensions per point (uint64)
        16-23: Medoid / entry point id (uint64)
        24-31: Max record length in bytes (uint64)
        32-39: Records per sector (uint64, 0 = records span sectors)

    The tagged variant prefixes the same 40 bytes with an 8-byte
    (npts:int32, ndims:int32) tag. Either way the body starts at 4096.
    """

    variant: HeaderVariant
    n_nodes: int
    n_dims: int
    medoid_id: int
    max_record_len: int
    records_per_page: int

    GEOMETRY_FORMAT = '<5Q'
    GEOMETRY_SIZE = 40
    TAG_FORMAT = '<ii'
    TAG_SIZE = 8

    @property
    def body_offset(self) -> int:
        return DISK_INDEX_DATA_OFFSET

    @property
    def entry_point(self) -> int:
        """Medoid truncated to a 32-bit node id."""
        return self.medoid_id & 0xFFFFFFFF

    @property
    def n_sectors(self) -> int:
        if self.records_per_page == 0:
            return 0
        return (self.n_nodes + self.records_per_page - 1) // self.records_per_page

    def degree_offset(self, element_size: int) -> int:
        """Offset of the degree field within a record."""
        return self.n_dims * element_size

    def is_plausible(self, element_size: int) -> bool:
        min_len = self.n_dims * element_size + ID_SIZE
        return min_len <= self.max_record_len <= SECTOR_LEN

    def validate(self, element_size: int) -> bool:
        """
        Check the record geometry fits a sector.

        Raises:
            FormatMismatchError: If a record cannot hold its coordinates
                and degree, or is larger than a sector
        """
        if not self.is_plausible(element_size):
            raise FormatMismatchError(
                f"max_record_len={self.max_record_len} outside "
                f"[{self.n_dims * element_size + ID_SIZE}, {SECTOR_LEN}] "
                f"for n_dims={self.n_dims}, element_size={element_size}"
            )
        return True

    def geometry(self) -> Tuple[int, int, int, int, int]:
        return (
            self.n_nodes,
            self.n_dims,
            self.medoid_id,
            self.max_record_len,
            self.records_per_page,
        )

    def to_bytes(self, tag: Tuple[int, int] = (TAG_MIN_NPTS, 1)) -> bytes:
        """Serialize in this header's variant."""
        data = struct.pack(self.GEOMETRY_FORMAT, *self.geometry())
        if self.variant is HeaderVariant.TAGGED:
            data = struct.pack(self.TAG_FORMAT, *tag) + data
        return data

    def __repr__(self) -> str:
        return (
            f"DiskIndexHeader({self.variant.value}, n_nodes={self.n_nodes}, "
            f"n_dims={self.n_dims}, medoid={self.medoid_id}, "
            f"max_record_len={self.max_record_len}, "
            f"records_per_page={self.records_per_page})"
        )


class NodeRecord(NamedTuple):
    """
    One decoded node.

    ``neighbors`` is None when the neighbor ids were skipped rather than
    read; otherwise it holds at most ``degree`` ids.
    """
    node_id: int
    degree: int
    neighbors: Optional[List[int]]
