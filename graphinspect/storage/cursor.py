"""
Bounds-checked binary cursor over a seekable byte source.

Reads never raise on short input: a short read flips the cursor into the
failed state and returns None, the same way a stream's fail bit works. A
failed cursor refuses further reads until it is repositioned with seek().
"""

from __future__ import annotations

import os
import struct
from typing import BinaryIO, Optional, Tuple

from ..core.exceptions import FileOpenError


class BinaryCursor:
    """
    Little-endian reader with good/failed state.

    Example:
        >>> with BinaryCursor.open("graph.bin") as cursor:
        ...     values = cursor.read_struct("<QIIQ")
        ...     if values is None:
        ...         print("header unreadable")
    """

    def __init__(self, file: BinaryIO, owns_file: bool = False):
        self._file = file
        self._owns_file = owns_file
        self._good = True
        self._size = self._measure(file)
        self._pos = file.tell()

    @staticmethod
    def _measure(file: BinaryIO) -> int:
        try:
            return os.fstat(file.fileno()).st_size
        except (AttributeError, OSError, ValueError):
            current = file.tell()
            file.seek(0, os.SEEK_END)
            size = file.tell()
            file.seek(current)
            return size

    @classmethod
    def open(cls, path: str) -> "BinaryCursor":
        """
        Open a file for reading.

        Raises:
            FileOpenError: If the file cannot be opened
        """
        try:
            file = open(path, "rb")
        except OSError as e:
            raise FileOpenError(f"Could not open file: {path}") from e
        return cls(file, owns_file=True)

    @property
    def good(self) -> bool:
        return self._good

    @property
    def position(self) -> int:
        return self._pos

    @property
    def size(self) -> int:
        return self._size

    @property
    def remaining(self) -> int:
        return max(self._size - self._pos, 0)

    def seek(self, offset: int) -> bool:
        """
        Move to an absolute offset and clear the failed state.

        Offsets past the end of the source fail the cursor.
        """
        self._good = True
        if offset < 0 or offset > self._size:
            self._good = False
            return False
        self._file.seek(offset)
        self._pos = offset
        return True

    def skip(self, count: int) -> bool:
        """Seek forward without reading; fails if it would pass the end."""
        if not self._good:
            return False
        if count < 0 or self._pos + count > self._size:
            self._good = False
            return False
        if count:
            self._file.seek(count, os.SEEK_CUR)
            self._pos += count
        return True

    def read_bytes(self, count: int) -> Optional[bytes]:
        """Read exactly ``count`` bytes, or fail."""
        if not self._good:
            return None
        if count < 0 or count > self.remaining:
            self._good = False
            return None
        data = self._file.read(count)
        if len(data) != count:
            self._good = False
            return None
        self._pos += count
        return data

    def read_into(self, buffer: bytearray) -> bool:
        """Fill ``buffer`` completely, or fail."""
        if not self._good:
            return False
        if len(buffer) > self.remaining:
            self._good = False
            return False
        n = self._file.readinto(buffer)
        if n != len(buffer):
            self._good = False
            return False
        self._pos += n
        return True

    def read_struct(self, fmt: str) -> Optional[Tuple]:
        """Read and unpack one struct of the given format."""
        data = self.read_bytes(struct.calcsize(fmt))
        if data is None:
            return None
        return struct.unpack(fmt, data)

    def read_u32(self) -> Optional[int]:
        values = self.read_struct("<I")
        return None if values is None else values[0]

    def read_u64(self) -> Optional[int]:
        values = self.read_struct("<Q")
        return None if values is None else values[0]

    def read_i32(self) -> Optional[int]:
        values = self.read_struct("<i")
        return None if values is None else values[0]

    def close(self) -> None:
        if self._owns_file and self._file is not None:
            self._file.close()
        self._file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        state = "good" if self._good else "failed"
        return f"BinaryCursor(position={self._pos}, size={self._size}, {state})"
