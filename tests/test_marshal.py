"""Tests for the annotating record reader."""

import io
import struct

import pytest

from hexlens import (
    BYTE,
    INT8,
    INT32,
    UINT8,
    UINT16,
    UINT32,
    FLOAT32,
    FLOAT64,
    Kind,
    Array,
    ByteOrder,
    ByteCursor,
    AnnotatingReader,
    record,
)
from hexlens.errors import ReadError, OverlapError, IntrospectionError, UnsupportedTypeError

from conftest import TRACK_DATA, SongRaw


@record
class Pair:
    first: UINT16
    second: UINT16


@record
class Framed:
    magic: Array(BYTE, 2)
    body: Pair
    grid: Array(Array(UINT16, 3), 2)
    tail: INT8


def tiles(annotations) -> bool:
    return all(a.end == b.offset for a, b in zip(annotations, annotations[1:]))


class TestByteOrder:
    """Tests for ByteOrder parsing."""

    def test_parse(self):
        assert ByteOrder.parse("little") is ByteOrder.LITTLE
        assert ByteOrder.parse("BE") is ByteOrder.BIG

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown byte order"):
            ByteOrder.parse("middle")


class TestMarshalSong:
    """Marshaling the sample song header."""

    def test_header_pad_and_text(self, reader):
        reader.marshal(SongRaw(), "song")
        anns = reader.store.values()

        assert [(a.name, a.offset, a.size) for a in anns[:8]] == [
            ("song.Header", 0, 10),
            ("song.Pad", 10, 6),
            ("song.Text[0]", 16, 40),
            ("song.Text[1]", 56, 40),
            ("song.Text[2]", 96, 40),
            ("song.Text[3]", 136, 40),
            ("song.Text[4]", 176, 40),
            ("song.Text[5]", 216, 40),
        ]

    def test_sizes_sum_to_record(self, reader):
        reader.marshal(SongRaw, "song")

        assert reader.store.total_size() == SongRaw.__layout__.size
        assert reader.tell() == 512

    def test_annotations_tile(self, reader):
        reader.marshal(SongRaw, "song")
        anns = reader.store.values()

        assert anns[0].offset == 0
        assert tiles(anns)
        assert anns[-1].end == 512
        assert reader.store.gaps() == []

    def test_fills_in_place(self, reader):
        song = SongRaw()
        result = reader.marshal(song, "song")

        assert result is song
        assert song.Header == b"TFMX-SONG "
        assert song.Text[0].startswith(b"Date : 23.01.91")
        assert song.Text[1].startswith(b"Time : 17:56")
        assert song.StartingPositions[:3] == [1, 0x45, 0x51]
        assert song.TrackStepPointer == 1000
        assert song.PatternDataPointer == 0x3078
        assert song.MacroDataPointer == 0x31DC

    def test_scalar_values_recorded(self, reader):
        reader.marshal(SongRaw, "song")

        ann = reader.store.find("song.TrackStepPointer")
        assert ann.offset == 0x1D0
        assert ann.value == 1000
        assert reader.store.find("song.StartingPositions").value is None
        assert reader.store.find("song.Text[0]").value is None

    def test_kind_paths(self, reader):
        reader.marshal(SongRaw, "song")

        assert reader.store.find("song.Text[2]").kind_path == (Kind.ARRAY, Kind.UINT8)
        assert reader.store.find("song.Mute").kind_path == (Kind.ARRAY, Kind.INT16)
        assert reader.store.find("song.MacroDataPointer").kind_path == (Kind.UINT32,)

    def test_second_marshal_appends(self, reader):
        reader.marshal(SongRaw, "song")
        track = reader.marshal(TRACK_DATA, "track data")

        assert track == [0x2800, 0x6300, 0x7718, 0x0002, 0x2001, 0x0200, 0x767F, 0x0000]
        ann = reader.store[512]
        assert ann.name == "track data"
        assert ann.size == 16
        assert ann.kind_path == (Kind.ARRAY, Kind.UINT16)
        assert reader.tell() == 528

    def test_offsets_reproduce_bytes(self, reader, song_data):
        reader.marshal(SongRaw, "song")
        reader.marshal(TRACK_DATA, "track data")

        for ann in reader.store:
            reader.seek(ann.offset)
            assert reader.cursor.read_exact(ann.size) == song_data[ann.offset : ann.end]


class TestFlattening:
    """Tests for array-of-arrays flattening."""

    def test_flattening_law(self):
        data = bytes(range(2 + 4 + 12 + 1))
        reader = AnnotatingReader(data)
        reader.marshal(Framed, "f")

        grid = [a for a in reader.store if a.name.startswith("f.grid")]
        assert [a.name for a in grid] == ["f.grid[0]", "f.grid[1]"]
        assert [a.size for a in grid] == [6, 6]
        assert grid[1].offset - grid[0].offset == 6
        assert str(grid[0].field_type) == "uint16[3]"

    def test_nested_struct_is_one_field(self):
        data = b"MZ" + struct.pack("<HH", 5, 6) + bytes(12) + b"\xff"
        reader = AnnotatingReader(data)
        framed = reader.marshal(Framed, "f")

        body = reader.store.find("f.body")
        assert body.offset == 2
        assert body.size == 4
        assert body.kind_path == (Kind.STRUCT,)
        assert body.value is None
        assert framed.body == Pair(5, 6)
        assert framed.tail == -1

    def test_bare_nested_array_not_flattened(self):
        reader = AnnotatingReader(bytes(12))
        value = reader.marshal(Array(Array(UINT16, 3), 2), "grid")

        assert value == [[0, 0, 0], [0, 0, 0]]
        assert len(reader.store) == 1
        assert reader.store[0].name == "grid"
        assert reader.store[0].size == 12


class TestByteOrderDecoding:
    """Tests for byte order handling."""

    def test_little_endian(self):
        reader = AnnotatingReader(b"\x01\x00\x45\x00")
        pair = reader.marshal(Pair, "p")

        assert (pair.first, pair.second) == (1, 69)

    def test_big_endian(self):
        reader = AnnotatingReader(b"\x00\x01\x00\x45", ByteOrder.BIG)
        pair = reader.marshal(Pair, "p")

        assert (pair.first, pair.second) == (1, 69)

    def test_floats_and_signed(self):
        @record
        class Mixed:
            ratio: FLOAT32
            scale: FLOAT64
            delta: INT32

        data = struct.pack(">fdi", 0.5, -2.25, -3)
        mixed = AnnotatingReader(data, ByteOrder.BIG).marshal(Mixed, "m")

        assert mixed.ratio == 0.5
        assert mixed.scale == -2.25
        assert mixed.delta == -3


class TestMarshalErrors:
    """Tests for marshal failure semantics."""

    def test_short_source(self):
        reader = AnnotatingReader(bytes(100), ByteOrder.BIG)

        with pytest.raises(ReadError):
            reader.marshal(SongRaw, "song")

        assert len(reader.store) == 0
        assert reader.tell() == 0

    def test_short_source_after_first_record(self, song_data):
        reader = AnnotatingReader(song_data[:520], ByteOrder.BIG)
        reader.marshal(SongRaw, "song")
        before = len(reader.store)

        with pytest.raises(ReadError):
            reader.marshal(TRACK_DATA, "track data")

        assert len(reader.store) == before
        assert reader.tell() == 512

    def test_destination_untouched_on_error(self):
        reader = AnnotatingReader(b"\x01")
        pair = Pair(9, 9)

        with pytest.raises(ReadError):
            reader.marshal(pair, "p")

        assert pair == Pair(9, 9)

    @pytest.mark.parametrize("destination", [UINT32, 42, "text", b"\x00", [1, 2]])
    def test_unsupported(self, destination):
        reader = AnnotatingReader(bytes(8))

        with pytest.raises(UnsupportedTypeError, match="Not supported"):
            reader.marshal(destination, "x")

        assert len(reader.store) == 0
        assert reader.tell() == 0

    def test_shape_error_rewinds(self, monkeypatch):
        import hexlens.reader.marshal as marshal_module

        def broken(shape):
            raise IntrospectionError(f"Cannot classify shape: {shape!r}")

        monkeypatch.setattr(marshal_module, "kind_path", broken)
        reader = AnnotatingReader(bytes(8))
        reader.seek(2)
        pair = Pair(9, 9)

        with pytest.raises(IntrospectionError):
            reader.marshal(pair, "p")

        assert reader.tell() == 2
        assert len(reader.store) == 0
        assert pair == Pair(9, 9)

    def test_remarshal_same_offset(self):
        reader = AnnotatingReader(bytes(8))
        reader.marshal(Pair, "p")
        reader.seek(0)

        with pytest.raises(OverlapError):
            reader.marshal(Pair, "again")

        assert reader.tell() == 0
        assert len(reader.store) == 2


class TestMarshalSources:
    """Tests for source normalization and naming."""

    def test_stream_source(self):
        reader = AnnotatingReader(io.BytesIO(b"\x02\x00\x03\x00"))

        assert reader.marshal(Pair, "p") == Pair(2, 3)

    def test_cursor_source(self):
        cursor = ByteCursor.from_bytes(b"\x00" * 8)
        cursor.seek(4)
        reader = AnnotatingReader(cursor)
        reader.marshal(Pair, "p")

        assert reader.store.offsets() == [4, 6]

    def test_empty_prefix(self):
        reader = AnnotatingReader(bytes(4))
        reader.marshal(Pair)

        assert [a.name for a in reader.store] == [".first", ".second"]

    def test_zero_length_field_skipped(self):
        @record
        class Sparse:
            head: UINT8
            nothing: Array(UINT8, 0)
            tail: UINT8

        reader = AnnotatingReader(b"\x01\x02")
        sparse = reader.marshal(Sparse, "s")

        assert [a.name for a in reader.store] == ["s.head", "s.tail"]
        assert sparse.nothing == b""
        assert sparse.tail == 2

    def test_export(self, reader):
        reader.marshal(SongRaw, "song")
        table = reader.export()

        assert table[0] == {
            "offset": 0,
            "name": "song.Header",
            "size": 10,
            "type": "uint8[10]",
            "kind_path": ["ARRAY", "UINT8"],
            "value": None,
        }


class TestRecordInheritance:
    """Marshaling records that extend other records."""

    def test_base_fields_come_first(self):
        @record
        class Base:
            a: UINT16

        @record
        class Child(Base):
            b: UINT16

        reader = AnnotatingReader(b"\x01\x00\x02\x00")
        child = reader.marshal(Child, "c")

        assert (child.a, child.b) == (1, 2)
        assert [a.name for a in reader.store] == ["c.a", "c.b"]
        assert reader.store.total_size() == Child.__layout__.size == 4
        assert reader.tell() == 4
