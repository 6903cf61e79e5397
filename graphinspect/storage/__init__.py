"""
Readers for on-disk proximity-graph layouts.

Available Readers:
    - SequentialGraphScanner: raw graph files and unified indexes
    - SectorPagedReader: sector-paged disk indexes

Example:
    >>> from graphinspect.storage import BinaryCursor, SectorPagedReader
    >>>
    >>> with BinaryCursor.open("sift_disk.index") as cursor:
    ...     reader = SectorPagedReader(cursor, element_size=4)
    ...     for record in reader.records(limit=5):
    ...         print(record.node_id, record.degree)
"""

from .cursor import BinaryCursor
from .format import (
    GraphHeader,
    UnifiedIndexMetadata,
    DiskIndexHeader,
    HeaderVariant,
    NodeRecord,
    Layout,
    DataType,
    resolve_element_size,
    SECTOR_LEN,
    DISK_INDEX_DATA_OFFSET,
    UNIFIED_METADATA_SIZE,
)
from .header import (
    read_graph_header,
    read_unified_metadata,
    resolve_unified_index_offset,
    resolve_disk_index_header,
)
from .sequential import SequentialGraphScanner, iter_graph_records
from .paged import SectorPagedReader
from .serialization import (
    serialize_stats,
    deserialize_stats,
    save_stats,
    load_stats,
)

__all__ = [
    # Cursor
    "BinaryCursor",
    # Format
    "GraphHeader",
    "UnifiedIndexMetadata",
    "DiskIndexHeader",
    "HeaderVariant",
    "NodeRecord",
    "Layout",
    "DataType",
    "resolve_element_size",
    "SECTOR_LEN",
    "DISK_INDEX_DATA_OFFSET",
    "UNIFIED_METADATA_SIZE",
    # Header
    "read_graph_header",
    "read_unified_metadata",
    "resolve_unified_index_offset",
    "resolve_disk_index_header",
    # Readers
    "SequentialGraphScanner",
    "iter_graph_records",
    "SectorPagedReader",
    # Serialization
    "serialize_stats",
    "deserialize_stats",
    "save_stats",
    "load_stats",
]
