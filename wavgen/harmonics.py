"""
Additive synthesis of band-limited periodic waveforms.

Every shape is a Fourier series of sine partials, truncated below Nyquist:

    sine      k = 1                    1
    triangle  k = 1, 3, 5, ...         ±1/k²  (negative on k = 3, 7, ...)
    square    k = 1, 3, 5, ...         4/(kπ)
    sawtooth  k = 1, 2, 3, ...         1/k
    even      k = 1, 2, 4, 6, ...      1/k
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from .chunk import FloatArray, WaveChunk, allocate_samples
from .errors import AllocationError, InvalidParameterError
from .params import SynthesisParameters, WaveShape

_LOGGER = logging.getLogger("wavgen.harmonics")


@dataclass(frozen=True, slots=True)
class Partial:
    """One sine component of a tone: harmonic index and signed amplitude."""

    index: int
    amplitude: float


def _below_nyquist(frequency: float, sample_rate: int) -> bool:
    return frequency < sample_rate / 2.0


def harmonic_series(shape: WaveShape, frequency: float, sample_rate: int) -> Iterator[Partial]:
    """Yield the partials of one tone, stopping at the first one at or above Nyquist."""
    if frequency <= 0.0:
        raise InvalidParameterError(f"tone frequency must be positive, got {frequency!r}")

    match shape:
        case "sine":
            yield Partial(1, 1.0)
        case "triangle":
            sign = 1.0
            k = 1
            while _below_nyquist(frequency * k, sample_rate):
                yield Partial(k, sign / (k * k))
                sign = -sign
                k += 2
        case "square":
            k = 1
            while _below_nyquist(frequency * k, sample_rate):
                yield Partial(k, 4.0 / (k * math.pi))
                k += 2
        case "sawtooth":
            k = 1
            while _below_nyquist(frequency * k, sample_rate):
                yield Partial(k, 1.0 / k)
                k += 1
        case "even":
            k = 1
            while _below_nyquist(frequency * k, sample_rate):
                yield Partial(k, 1.0 / k)
                k = 2 if k == 1 else k + 2
        case _:
            raise InvalidParameterError(f"Unknown wave shape: {shape!r}")


class ChunkAccumulator:
    """Running sum of partials over one chunk of samples."""

    def __init__(self, length: int) -> None:
        self._samples = allocate_samples(length)
        try:
            self._index = np.arange(length, dtype=np.float64)
        except MemoryError as exc:
            raise AllocationError(f"unable to allocate a {length}-sample index") from exc
        self.partial_count = 0

    def __len__(self) -> int:
        return self._samples.size

    def add_partial(self, frequency: float, partial: Partial, sample_rate: int) -> None:
        omega = 2.0 * math.pi * frequency * partial.index / sample_rate
        self._samples += partial.amplitude * np.sin(omega * self._index)
        self.partial_count += 1

    def finish(self) -> WaveChunk:
        """Hand the accumulated samples over as a chunk; the accumulator is spent."""
        samples: FloatArray = self._samples
        self._samples = np.empty(0, dtype=np.float64)
        return WaveChunk(samples)


def add_tone(
    accumulator: ChunkAccumulator,
    shape: WaveShape,
    frequency: float,
    sample_rate: int,
) -> int:
    """Superpose one tone's harmonic series onto the accumulator.

    Returns the number of partials added.
    """
    count = 0
    for partial in harmonic_series(shape, frequency, sample_rate):
        accumulator.add_partial(frequency, partial, sample_rate)
        count += 1
    return count


def synthesize_chunk(params: SynthesisParameters, length: int) -> WaveChunk:
    accumulator = ChunkAccumulator(length)
    for frequency in params.frequencies:
        count = add_tone(accumulator, params.shape, frequency, params.sample_rate)
        _LOGGER.debug("%s %.2fHz: %d partial(s)", params.shape, frequency, count)
    return accumulator.finish()
