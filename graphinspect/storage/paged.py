"""
Sector-paged reader for the disk index layout.

The body is a run of 4096-byte sectors starting at offset 4096. Each
sector packs ``records_per_page`` fixed-size records:

    [coordinates: n_dims * element_size][degree: u32][ids: u32 * degree]

padded to ``max_record_len``. Node ``s * records_per_page + j`` lives in
slot ``j`` of sector ``s``; the last sector may be partly filled. Nothing
is read past a sector boundary: a slot whose degree field would overrun
the sector ends the sector, and neighbor copies are clamped to the ids
that fit.
"""

from __future__ import annotations

import struct
from typing import Iterator, Optional

import numpy as np

from ..core.exceptions import UnsupportedLayoutError
from ..core.stats import DegreeAccumulator, GraphStats
from ..observability import IoContext, io_context, notify
from ..utils.logging import get_logger
from .cursor import BinaryCursor
from .format import ID_SIZE, NodeRecord, SECTOR_LEN
from .header import resolve_disk_index_header

logger = get_logger(__name__)


class SectorPagedReader:
    """
    Reader over a disk index, one sector buffer at a time.

    Attributes:
        header: Resolved geometry header
        element_size: Bytes per coordinate

    Example:
        >>> with BinaryCursor.open("index_disk.index") as cursor:
        ...     reader = SectorPagedReader(cursor, element_size=4)
        ...     stats = reader.compute_stats()
    """

    def __init__(self, cursor: BinaryCursor, element_size: int):
        """
        Resolve and validate the header.

        Raises:
            HeaderReadError: If the header is unreadable
            FormatMismatchError: If the record geometry does not fit a sector
        """
        self._cursor = cursor
        self.element_size = element_size
        self.header = resolve_disk_index_header(cursor, element_size)
        self.header.validate(element_size)

    @property
    def entry_point(self) -> int:
        return self.header.entry_point

    def records(
        self,
        materialize: bool = False,
        neighbor_cap: int = 0,
        limit: Optional[int] = None,
    ) -> Iterator[NodeRecord]:
        """
        Iterate records in node id order.

        Args:
            materialize: Copy neighbor ids out of the sector
            neighbor_cap: Max ids copied per node (0 = all that fit)
            limit: Stop after this many nodes

        Raises:
            UnsupportedLayoutError: If records span multiple sectors
        """
        if self.header.records_per_page == 0:
            raise UnsupportedLayoutError(
                "records larger than one sector (records_per_page=0) "
                "are not supported"
            )
        return self._iter_records(materialize, neighbor_cap, limit)

    def _iter_records(
        self,
        materialize: bool,
        neighbor_cap: int,
        limit: Optional[int],
    ) -> Iterator[NodeRecord]:
        header = self.header
        per_page = header.records_per_page
        record_len = header.max_record_len
        degree_offset = header.degree_offset(self.element_size)

        if not self._cursor.seek(header.body_offset):
            return

        sector = bytearray(SECTOR_LEN)
        emitted = 0

        for sector_id in range(header.n_sectors):
            if limit is not None and emitted >= limit:
                break
            if not self._cursor.read_into(sector):
                logger.debug(
                    f"Sector {sector_id} of {header.n_sectors} unreadable; "
                    f"stopping after {emitted} nodes"
                )
                break
            notify(
                "read_page_request",
                page_id=sector_id,
                offset=header.body_offset + sector_id * SECTOR_LEN,
            )

            for slot in range(per_page):
                if limit is not None and emitted >= limit:
                    break
                node_id = sector_id * per_page + slot
                if node_id >= header.n_nodes:
                    break

                field = slot * record_len + degree_offset
                if field + ID_SIZE > SECTOR_LEN:
                    break
                degree = struct.unpack_from('<I', sector, field)[0]

                neighbors = None
                if materialize:
                    start = field + ID_SIZE
                    take = min(degree, (SECTOR_LEN - start) // ID_SIZE)
                    if neighbor_cap > 0:
                        take = min(take, neighbor_cap)
                    if take > 0:
                        neighbors = np.frombuffer(
                            sector, dtype='<u4', count=take, offset=start
                        ).tolist()
                    else:
                        neighbors = []

                yield NodeRecord(node_id, degree, neighbors)
                emitted += 1

    def compute_stats(self) -> GraphStats:
        """
        Degree statistics from the degree fields only.

        Raises:
            UnsupportedLayoutError: If records span multiple sectors
        """
        acc = DegreeAccumulator()
        with io_context(IoContext.OTHER):
            for record in self.records():
                acc.add(record.degree)

        if acc.count < self.header.n_nodes:
            logger.warning(
                f"Disk index declares {self.header.n_nodes} nodes, "
                f"read {acc.count}"
            )

        return acc.finalize(
            active_nodes=acc.count,
            frozen_nodes=0,
            entry_point=self.header.entry_point,
        )
