"""
PCM sample encoding.

All output is little-endian regardless of the host: every conversion goes
through an explicit `<` numpy dtype before it is viewed as bytes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, TypeAlias

import numpy as np
from numpy.typing import NDArray

from .chunk import FloatArray, WaveChunk
from .errors import AllocationError, InvalidParameterError
from .params import SampleFormat, bits_supported

_LOGGER = logging.getLogger("wavgen.encoder")

ByteArray: TypeAlias = NDArray[np.uint8]

_UNSIGNED_OFFSET = 128

_SIGNED_DTYPES: Mapping[int, str] = MappingProxyType(
    {
        16: "<i2",
        24: "<i4",
        32: "<i4",
    }
)
_FLOAT_DTYPES: Mapping[int, str] = MappingProxyType(
    {
        32: "<f4",
        64: "<f8",
    }
)


@dataclass(frozen=True, slots=True)
class EncodedBuffer:
    """One chunk of encoded PCM samples, ready to be tiled into a data region."""

    data: ByteArray
    chunk_length: int
    bits_per_sample: int
    sample_format: SampleFormat

    @property
    def bytes_per_sample(self) -> int:
        return self.bits_per_sample // 8

    @property
    def nbytes(self) -> int:
        return int(self.data.size)

    def tobytes(self) -> bytes:
        return self.data.tobytes()

    def head(self, samples: int) -> bytes:
        """Bytes of the first `samples` samples."""
        if not 0 <= samples <= self.chunk_length:
            raise InvalidParameterError(
                f"cannot take {samples} samples from a {self.chunk_length}-sample chunk"
            )
        return self.data[: samples * self.bytes_per_sample].tobytes()


def max_int(bits_per_sample: int) -> int:
    return 2 ** (bits_per_sample - 1) - 1


def round_half_away(values: FloatArray) -> FloatArray:
    return np.copysign(np.floor(np.abs(values) + 0.5), values)


def quantize(samples: FloatArray, bits_per_sample: int) -> NDArray[np.int64]:
    """Scale [-1, 1] samples to signed integers, clamped to the depth's range."""
    top = max_int(bits_per_sample)
    scaled = round_half_away(samples * top)
    return np.clip(scaled, -top - 1, top).astype(np.int64)


def _encode_integer(samples: FloatArray, bits_per_sample: int) -> ByteArray:
    values = quantize(samples, bits_per_sample)
    match bits_per_sample:
        case 8:
            return np.clip(values + _UNSIGNED_OFFSET, 0, 255).astype(np.uint8)
        case 24:
            words = values.astype(_SIGNED_DTYPES[24]).view(np.uint8).reshape(-1, 4)
            return np.ascontiguousarray(words[:, :3]).reshape(-1)
        case _:
            return values.astype(_SIGNED_DTYPES[bits_per_sample]).view(np.uint8)


def _encode_float(samples: FloatArray, bits_per_sample: int) -> ByteArray:
    # 64-bit reuses the chunk storage on little-endian hosts (astype copy=False).
    converted = samples.astype(_FLOAT_DTYPES[bits_per_sample], copy=False)
    return converted.view(np.uint8)


def encode(
    chunk: WaveChunk,
    bits_per_sample: int,
    sample_format: SampleFormat,
) -> EncodedBuffer:
    """Consume the chunk and return its encoded bytes.

    The chunk's storage is released either way: it is reinterpreted as the
    output for 64-bit float, and dropped after conversion otherwise.
    """
    if not bits_supported(bits_per_sample, sample_format):
        raise InvalidParameterError(f"{bits_per_sample}-bit {sample_format} PCM is unsupported")

    samples = chunk.release()
    length = int(samples.size)
    try:
        match sample_format:
            case "integer":
                data = _encode_integer(samples, bits_per_sample)
            case "float":
                data = _encode_float(samples, bits_per_sample)
            case _:
                raise InvalidParameterError(f"Unknown sample format: {sample_format!r}")
    except MemoryError as exc:
        raise AllocationError(
            f"unable to allocate {length * bits_per_sample // 8} bytes of encoded audio"
        ) from exc

    _LOGGER.debug(
        "Encoded %d samples as %d-bit %s (%d bytes)",
        length,
        bits_per_sample,
        sample_format,
        data.size,
    )
    return EncodedBuffer(
        data=data,
        chunk_length=length,
        bits_per_sample=bits_per_sample,
        sample_format=sample_format,
    )
