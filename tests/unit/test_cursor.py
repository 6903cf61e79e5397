"""
Unit tests for the binary cursor.
"""

import io
import struct

import pytest

from graphinspect.core.exceptions import FileOpenError
from graphinspect.storage.cursor import BinaryCursor


def make_cursor(data: bytes) -> BinaryCursor:
    return BinaryCursor(io.BytesIO(data))


class TestBinaryCursor:
    """Test bounds-checked reads."""

    def test_size_and_position(self):
        """Test size of an in-memory source."""
        cursor = make_cursor(b"\x00" * 10)

        assert cursor.size == 10
        assert cursor.position == 0
        assert cursor.remaining == 10

    def test_read_values(self):
        """Test little-endian integer reads."""
        cursor = make_cursor(struct.pack("<IQi", 7, 2 ** 40, -3))

        assert cursor.read_u32() == 7
        assert cursor.read_u64() == 2 ** 40
        assert cursor.read_i32() == -3
        assert cursor.remaining == 0
        assert cursor.good

    def test_short_read_fails(self):
        """Test a short read returns None and fails the cursor."""
        cursor = make_cursor(b"\x01\x02")

        assert cursor.read_u32() is None
        assert not cursor.good
        assert cursor.position == 0

    def test_failed_cursor_refuses_reads(self):
        """Test reads after a failure return None."""
        cursor = make_cursor(b"\x00" * 6)
        cursor.read_u64()

        assert cursor.read_bytes(1) is None

    def test_seek_clears_failure(self):
        """Test seek() resets the failed state."""
        cursor = make_cursor(struct.pack("<I", 42))
        cursor.read_u64()

        assert cursor.seek(0)
        assert cursor.good
        assert cursor.read_u32() == 42

    def test_seek_past_end(self):
        """Test seeking beyond the end fails."""
        cursor = make_cursor(b"\x00" * 4)

        assert not cursor.seek(5)
        assert not cursor.good
        assert cursor.seek(4)
        assert cursor.remaining == 0

    def test_skip(self):
        """Test skip within and past the end."""
        cursor = make_cursor(b"\x00" * 8)

        assert cursor.skip(4)
        assert cursor.position == 4
        assert not cursor.skip(5)
        assert not cursor.good

    def test_read_into(self):
        """Test filling a buffer."""
        cursor = make_cursor(bytes(range(8)))
        buffer = bytearray(4)

        assert cursor.read_into(buffer)
        assert bytes(buffer) == bytes(range(4))
        assert cursor.read_into(buffer)
        assert not cursor.read_into(buffer)

    def test_read_struct(self):
        """Test unpacking a struct."""
        cursor = make_cursor(struct.pack("<QIIQ", 1, 2, 3, 4))

        assert cursor.read_struct("<QIIQ") == (1, 2, 3, 4)


class TestOpen:
    """Test opening files."""

    def test_open_missing_file(self, temp_dir):
        """Test a missing file raises FileOpenError."""
        with pytest.raises(FileOpenError) as exc_info:
            BinaryCursor.open(str(temp_dir / "missing.bin"))

        assert "Could not open file" in str(exc_info.value)

    def test_open_and_close(self, write_file):
        """Test context manager use."""
        path = write_file("data.bin", b"\x05\x00\x00\x00")

        with BinaryCursor.open(path) as cursor:
            assert cursor.size == 4
            assert cursor.read_u32() == 5
