"""
Unit tests for file format definitions and header resolution.
"""

import io
import logging
import struct

import pytest

from graphinspect.core.exceptions import (
    FileOpenError,
    FormatMismatchError,
    HeaderReadError,
    ValidationError,
)
from graphinspect.storage.cursor import BinaryCursor
from graphinspect.storage.format import (
    DataType,
    DiskIndexHeader,
    GraphHeader,
    HeaderVariant,
    UnifiedIndexMetadata,
    resolve_element_size,
)
from graphinspect.storage.header import (
    read_graph_header,
    resolve_disk_index_header,
    resolve_unified_index_offset,
)


class TestGraphHeader:
    """Test the raw graph header."""

    def test_layout(self):
        """Test the header packs to 24 little-endian bytes."""
        header = GraphHeader(100, 32, 7, 1)
        data = header.to_bytes()

        assert len(data) == GraphHeader.SIZE == 24
        assert struct.unpack("<QIIQ", data) == (100, 32, 7, 1)
        assert GraphHeader.from_bytes(data) == header

    def test_short_data(self):
        """Test short input is rejected."""
        with pytest.raises(ValueError):
            GraphHeader.from_bytes(b"\x00" * 10)

    def test_read_at_offset(self):
        """Test reading a header at a non-zero offset."""
        data = b"\xff" * 16 + GraphHeader(24, 0, 3, 0).to_bytes()
        cursor = BinaryCursor(io.BytesIO(data))

        header = read_graph_header(cursor, offset=16)

        assert header.entry_point == 3

    def test_read_truncated(self):
        """Test a truncated header raises."""
        cursor = BinaryCursor(io.BytesIO(b"\x00" * 20))

        with pytest.raises(HeaderReadError):
            read_graph_header(cursor)

    def test_read_offset_past_end(self):
        """Test an offset past the file end raises."""
        cursor = BinaryCursor(io.BytesIO(GraphHeader(24, 0, 0, 0).to_bytes()))

        with pytest.raises(HeaderReadError):
            read_graph_header(cursor, offset=100)


class TestDataType:
    """Test coordinate encodings."""

    def test_element_sizes(self):
        """Test bytes per coordinate."""
        assert DataType.FLOAT.element_size == 4
        assert DataType.UINT8.element_size == 1
        assert DataType.INT8.element_size == 1

    def test_parse(self):
        """Test parsing names."""
        assert DataType.parse("float") is DataType.FLOAT
        assert DataType.parse("INT8") is DataType.INT8
        assert DataType.parse(DataType.UINT8) is DataType.UINT8

    def test_parse_invalid(self):
        """Test unknown names are rejected."""
        with pytest.raises(ValidationError):
            DataType.parse("double")

    def test_resolve_element_size(self):
        """Test element size from ints and names."""
        assert resolve_element_size(2) == 2
        assert resolve_element_size("uint8") == 1
        assert resolve_element_size(DataType.FLOAT) == 4

        with pytest.raises(ValidationError):
            resolve_element_size(0)
        with pytest.raises(ValidationError):
            resolve_element_size(True)


class TestUnifiedIndexMetadata:
    """Test unified index metadata validation."""

    def test_valid(self, write_file):
        """Test a well-formed metadata block."""
        metadata = UnifiedIndexMetadata(values=(4096, 5000, 0, 0, 0))
        path = write_file("index.bin", metadata.to_bytes())

        assert metadata.validate()
        assert resolve_unified_index_offset(path) == 4096

    @pytest.mark.parametrize("values", [
        (0, 5000, 0, 0, 0),
        (4096, 4096, 0, 0, 0),
        (4096, 100, 0, 0, 0),
    ])
    def test_mismatch(self, values, write_file):
        """Test metadata that does not describe a unified index."""
        path = write_file("index.bin", UnifiedIndexMetadata(values=values).to_bytes())

        with pytest.raises(FormatMismatchError):
            resolve_unified_index_offset(path)

    def test_short_metadata(self, write_file):
        """Test a file shorter than 40 bytes."""
        path = write_file("index.bin", b"\x00" * 39)

        with pytest.raises(HeaderReadError):
            resolve_unified_index_offset(path)

    def test_missing_file(self, temp_dir):
        """Test a missing file."""
        with pytest.raises(FileOpenError):
            resolve_unified_index_offset(str(temp_dir / "nope.bin"))


class TestDiskIndexHeader:
    """Test disk index geometry and variant resolution."""

    def make_header(self, variant=HeaderVariant.UNTAGGED, **kwargs):
        fields = dict(
            n_nodes=10, n_dims=4, medoid_id=3, max_record_len=40,
            records_per_page=102,
        )
        fields.update(kwargs)
        return DiskIndexHeader(variant, **fields)

    def test_plausibility(self):
        """Test max_record_len bounds."""
        assert self.make_header(max_record_len=20).is_plausible(4)
        assert not self.make_header(max_record_len=19).is_plausible(4)
        assert self.make_header(max_record_len=4096).is_plausible(4)
        assert not self.make_header(max_record_len=4097).is_plausible(4)

    def test_validate_raises(self):
        """Test validate() rejects a record that cannot hold its fields."""
        with pytest.raises(FormatMismatchError):
            self.make_header(max_record_len=8).validate(4)

    def test_entry_point_masked(self):
        """Test the medoid is truncated to 32 bits."""
        header = self.make_header(medoid_id=(1 << 32) + 17)

        assert header.entry_point == 17

    def test_sectors(self):
        """Test sector count rounds up."""
        assert self.make_header(n_nodes=10, records_per_page=3).n_sectors == 4
        assert self.make_header(records_per_page=0).n_sectors == 0

    def test_resolve_tagged(self):
        """Test the tagged header is read past its tag."""
        header = self.make_header(HeaderVariant.TAGGED)
        data = header.to_bytes(tag=(10, 4)) + b"\x00" * 64
        cursor = BinaryCursor(io.BytesIO(data))

        resolved = resolve_disk_index_header(cursor, 4)

        assert resolved == header
        assert resolved.variant is HeaderVariant.TAGGED

    def test_resolve_untagged_small_count(self):
        """Test a first int32 below 5 selects the untagged reading."""
        header = self.make_header(n_nodes=3)
        cursor = BinaryCursor(io.BytesIO(header.to_bytes() + b"\x00" * 64))

        resolved = resolve_disk_index_header(cursor, 4)

        assert resolved == header
        assert resolved.variant is HeaderVariant.UNTAGGED

    def test_resolve_falls_back_when_tagged_is_short(self):
        """Test an exactly 40-byte untagged header with a large first field."""
        header = self.make_header(n_nodes=10)
        cursor = BinaryCursor(io.BytesIO(header.to_bytes()))

        resolved = resolve_disk_index_header(cursor, 4)

        assert resolved.variant is HeaderVariant.UNTAGGED
        assert resolved.n_nodes == 10

    def test_resolve_unreadable(self):
        """Test a header shorter than both readings."""
        cursor = BinaryCursor(io.BytesIO(b"\x00" * 12))

        with pytest.raises(HeaderReadError):
            resolve_disk_index_header(cursor)

    def test_ambiguity_logged(self, caplog):
        """Test a header plausible both ways logs a warning."""
        # Untagged: (5, 1, 1, 8, 8). Tagged: tag (5, 0), then (1, 1, 8, 8, 8).
        values = (5, 1, 1, 8, 8, 8)
        cursor = BinaryCursor(io.BytesIO(struct.pack("<6Q", *values)))

        with caplog.at_level(logging.WARNING, logger="graphinspect"):
            resolved = resolve_disk_index_header(cursor, 1)

        assert resolved.variant is HeaderVariant.TAGGED
        assert "ambiguous" in caplog.text
