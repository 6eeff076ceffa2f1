from __future__ import annotations

import struct

from .params import SynthesisParameters

HEADER_SIZE = 44
_FMT_CHUNK_SIZE = 16
_CHANNELS = 1

HEADER_LAYOUT = "<4sI4s4sIHHIIHH4sI"
_HEADER_STRUCT = struct.Struct(HEADER_LAYOUT)


def build_header(params: SynthesisParameters, sample_count: int) -> bytes:
    """Canonical 44-byte RIFF/WAVE header for a mono data region of `sample_count` samples."""
    block_align = _CHANNELS * params.bits_per_sample // 8
    byte_rate = params.sample_rate * block_align
    data_size = sample_count * block_align
    return _HEADER_STRUCT.pack(
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        _FMT_CHUNK_SIZE,
        params.format_code,
        _CHANNELS,
        params.sample_rate,
        byte_rate,
        block_align,
        params.bits_per_sample,
        b"data",
        data_size,
    )
