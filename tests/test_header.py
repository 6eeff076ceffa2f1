from __future__ import annotations

import struct

from wavgen.header import HEADER_LAYOUT, HEADER_SIZE, build_header
from wavgen.params import SynthesisParameters


def test_integer_header_layout() -> None:
    params = SynthesisParameters(sample_rate=48_000, bits_per_sample=24, sample_format="integer")
    header = build_header(params, 48_000)

    assert len(header) == HEADER_SIZE == 44
    fields = struct.unpack("<4sI4s4sIHHIIHH4sI", header)
    assert fields == (
        b"RIFF",
        36 + 144_000,
        b"WAVE",
        b"fmt ",
        16,
        1,
        1,
        48_000,
        144_000,
        3,
        24,
        b"data",
        144_000,
    )


def test_float_header_uses_ieee_format_code() -> None:
    params = SynthesisParameters(sample_rate=44_100, bits_per_sample=64, sample_format="float")
    header = build_header(params, 10)

    audio_format, channels, rate, byte_rate, block_align, bits = struct.unpack(
        "<HHIIHH", header[20:36]
    )
    assert (audio_format, channels, rate, byte_rate, block_align, bits) == (
        3,
        1,
        44_100,
        352_800,
        8,
        64,
    )
    assert struct.unpack("<I", header[40:44])[0] == 80


def test_header_layout_packs_to_header_size() -> None:
    assert struct.calcsize(HEADER_LAYOUT) == HEADER_SIZE == 44


def test_empty_data_region_header_is_still_full_size() -> None:
    header = build_header(SynthesisParameters(bits_per_sample=8), 0)

    assert len(header) == HEADER_SIZE
    assert struct.unpack("<I", header[4:8])[0] == 36
    assert struct.unpack("<I", header[40:44])[0] == 0
