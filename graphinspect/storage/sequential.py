"""
Sequential scanner for the raw graph layout (and the unified index, which
embeds it).

Records are ``degree:u32`` followed by ``degree`` u32 neighbor ids, one per
node, back to back. The position of each record depends on the degree of
the one before it, so the file can only be walked front to back. The walk
stops when the running byte count reaches the size recorded in the header
or when a read fails, whichever comes first.
"""

from __future__ import annotations

from typing import Iterator, Optional

import numpy as np

from ..core.stats import DegreeAccumulator, GraphStats
from ..observability import IoContext, io_context
from ..utils.logging import get_logger
from .cursor import BinaryCursor
from .format import GraphHeader, ID_SIZE, NodeRecord
from .header import read_graph_header

logger = get_logger(__name__)


def iter_graph_records(
    cursor: BinaryCursor,
    header: GraphHeader,
    neighbor_cap: Optional[int] = None,
    limit: Optional[int] = None,
) -> Iterator[NodeRecord]:
    """
    Walk raw graph records from the cursor's current position.

    Args:
        cursor: Cursor positioned just past the 24-byte header
        header: The graph header read at that position
        neighbor_cap: None skips every neighbor list with a forward seek;
            0 reads whole lists; n > 0 reads at most n ids per node and
            skips the rest
        limit: Stop after this many nodes

    Yields:
        NodeRecord per node whose record was read in full
    """
    bytes_read = GraphHeader.SIZE
    node_id = 0

    while bytes_read != header.expected_total_size:
        if limit is not None and node_id >= limit:
            break

        degree = cursor.read_u32()
        if degree is None:
            break

        neighbors = None
        if neighbor_cap is None:
            if not cursor.skip(degree * ID_SIZE):
                break
        else:
            take = degree if neighbor_cap == 0 else min(degree, neighbor_cap)
            data = cursor.read_bytes(take * ID_SIZE)
            if data is None:
                break
            if not cursor.skip((degree - take) * ID_SIZE):
                break
            neighbors = np.frombuffer(data, dtype='<u4').tolist()

        yield NodeRecord(node_id, degree, neighbors)

        bytes_read += ID_SIZE + degree * ID_SIZE
        node_id += 1

    if not cursor.good:
        logger.debug(
            f"Graph walk stopped after {node_id} nodes at byte "
            f"{cursor.position} (expected size {header.expected_total_size})"
        )


class SequentialGraphScanner:
    """
    Single-pass reader over a raw graph.

    The header is resolved once on construction; each call to records()
    or compute_stats() is one forward pass over the body.

    Example:
        >>> with BinaryCursor.open("graph.bin") as cursor:
        ...     scanner = SequentialGraphScanner(cursor, offset=0)
        ...     stats = scanner.compute_stats()
    """

    def __init__(self, cursor: BinaryCursor, offset: int = 0):
        self._cursor = cursor
        self._offset = offset
        self.header = read_graph_header(cursor, offset)
        logger.debug(f"Read {self.header!r} at offset {offset}")

    @property
    def entry_point(self) -> int:
        return self.header.entry_point

    @property
    def body_offset(self) -> int:
        return self._offset + GraphHeader.SIZE

    def records(
        self,
        neighbor_cap: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Iterator[NodeRecord]:
        """Iterate records from the start of the body."""
        self._cursor.seek(self.body_offset)
        return iter_graph_records(self._cursor, self.header, neighbor_cap, limit)

    def compute_stats(self) -> GraphStats:
        """
        Degree statistics in one pass, without reading neighbor ids.

        A truncated body yields stats over the records read before the
        truncation.
        """
        acc = DegreeAccumulator()
        with io_context(IoContext.OTHER):
            for record in self.records():
                acc.add(record.degree)

        # Header may claim more frozen points than the body holds
        frozen = min(self.header.frozen_count, acc.count)
        return acc.finalize(
            active_nodes=max(acc.count - frozen, 0),
            frozen_nodes=frozen,
            entry_point=self.header.entry_point,
        )
