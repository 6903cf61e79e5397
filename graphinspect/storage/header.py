"""
Header resolution for the three index layouts.

Every resolver either returns a complete header or raises; a layout is
never inferred from a partially readable header.
"""

from __future__ import annotations

import struct
from typing import Optional

from ..core.exceptions import HeaderReadError
from ..utils.logging import get_logger
from .cursor import BinaryCursor
from .format import (
    DiskIndexHeader,
    GraphHeader,
    HeaderVariant,
    TAG_MIN_NPTS,
    UNIFIED_METADATA_SIZE,
    UnifiedIndexMetadata,
)

logger = get_logger(__name__)


def read_graph_header(cursor: BinaryCursor, offset: int = 0) -> GraphHeader:
    """
    Read the 24-byte raw graph header at ``offset``.

    Raises:
        HeaderReadError: If the offset is past the end or the header is short
    """
    if not cursor.seek(offset):
        raise HeaderReadError(f"Seek to offset {offset} failed")

    data = cursor.read_bytes(GraphHeader.SIZE)
    if data is None:
        raise HeaderReadError(
            f"Graph header unreadable at offset {offset} "
            f"({cursor.size} byte file)"
        )
    return GraphHeader.from_bytes(data)


def read_unified_metadata(cursor: BinaryCursor) -> UnifiedIndexMetadata:
    """Read the 5 x u64 metadata block at the start of a unified index."""
    cursor.seek(0)
    data = cursor.read_bytes(UnifiedIndexMetadata.SIZE)
    if data is None:
        raise HeaderReadError("could not read metadata (5 x uint64)")
    return UnifiedIndexMetadata.from_bytes(data)


def resolve_unified_index_offset(
    path: str,
    expected_graph_offset: int = UNIFIED_METADATA_SIZE,
) -> int:
    """
    Locate the graph section of a single-file unified index.

    Returns:
        Byte offset of the embedded raw graph header

    Raises:
        FileOpenError: If the file cannot be opened
        HeaderReadError: If the metadata block is short
        FormatMismatchError: If the metadata does not describe a unified index
    """
    with BinaryCursor.open(path) as cursor:
        metadata = read_unified_metadata(cursor)
    metadata.validate(expected_graph_offset)
    return metadata.graph_offset


def _read_geometry(
    cursor: BinaryCursor,
    variant: HeaderVariant,
) -> Optional[DiskIndexHeader]:
    data = cursor.read_bytes(DiskIndexHeader.GEOMETRY_SIZE)
    if data is None:
        return None
    return DiskIndexHeader(
        variant, *struct.unpack(DiskIndexHeader.GEOMETRY_FORMAT, data)
    )


def resolve_disk_index_header(
    cursor: BinaryCursor,
    element_size: Optional[int] = None,
) -> DiskIndexHeader:
    """
    Resolve the disk index geometry header.

    The tagged form is tried first: when the leading int32 is at least 5
    and the 40 geometry bytes after the tag are readable, the file is
    taken as tagged. Otherwise the geometry is read again from offset 0.

    An untagged file whose first four bytes happen to decode to 5 or more
    is misread as tagged. When ``element_size`` is given and both readings
    pass the geometry check, the ambiguity is logged as a warning.

    Raises:
        HeaderReadError: If neither reading is complete
    """
    cursor.seek(0)
    tag = cursor.read_struct(DiskIndexHeader.TAG_FORMAT)

    if tag is not None and tag[0] >= TAG_MIN_NPTS:
        header = _read_geometry(cursor, HeaderVariant.TAGGED)
        if header is not None:
            logger.info(
                f"Disk index header: tagged (npts_meta={tag[0]}, "
                f"ndims_meta={tag[1]})"
            )
            if element_size is not None and header.is_plausible(element_size):
                cursor.seek(0)
                alternative = _read_geometry(cursor, HeaderVariant.UNTAGGED)
                if alternative is not None and alternative.is_plausible(element_size):
                    logger.warning(
                        "Disk index header is ambiguous: both tagged and "
                        "untagged readings are plausible; using tagged "
                        f"({header!r} vs {alternative!r})"
                    )
            return header

    cursor.seek(0)
    header = _read_geometry(cursor, HeaderVariant.UNTAGGED)
    if header is None:
        raise HeaderReadError(
            f"Disk index header unreadable ({cursor.size} byte file)"
        )
    logger.info("Disk index header: untagged")
    return header
