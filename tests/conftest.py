"""Shared fixtures: a music tracker song header and its sample bytes."""

import pytest

from hexlens import BYTE, INT16, UINT16, UINT32, Array, ByteOrder, AnnotatingReader, record


@record
class SongRaw:
    """TFMX song header (big-endian, 512 bytes)."""

    Header: Array(BYTE, 10)
    Pad: Array(BYTE, 6)
    Text: Array(Array(BYTE, 40), 6)
    StartingPositions: Array(UINT16, 32)
    EndingPositions: Array(UINT16, 32)
    TempoInformation: Array(UINT16, 32)
    Mute: Array(INT16, 8)
    TrackStepPointer: UINT32
    PatternDataPointer: UINT32
    MacroDataPointer: UINT32
    Pad2: Array(BYTE, 36)


TRACK_DATA = Array(UINT16, 8)

# Song header followed by eight track words
SONG_DATA = bytes.fromhex(
    "54464d582d534f4e4720000100000e50"
    "44617465203a2032332e30312e393120"
    + "20" * 16
    + "202020202020202054696d65203a2031"
    "373a3536202020202020202020202020"
    + "20" * 16 * 11
    + "000100450051005e0061006400650000"
    + "00" * 16 * 2
    + "000000000000000000000000004401ff"
    "00440050005d00600063006400650000"
    + "00" * 16 * 2
    + "000000000000000000000000004f01ff"
    "00040003000300030002000000000005"
    + "0005" * 8 * 2
    + "00050005000500050005000500030005"
    + "00" * 16
    + "000003e800003078000031dc00000000"
    + "00" * 16 * 2
    + "280063007718000220010200767f0000"
)


@pytest.fixture
def song_data() -> bytes:
    return SONG_DATA


@pytest.fixture
def reader(song_data) -> AnnotatingReader:
    """Big-endian reader over the sample song."""
    return AnnotatingReader(song_data, ByteOrder.BIG)
