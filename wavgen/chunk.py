from __future__ import annotations

from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

from .errors import AllocationError, InvalidParameterError

FloatArray: TypeAlias = NDArray[np.float64]


def allocate_samples(length: int) -> FloatArray:
    """Zeroed float64 storage for one chunk."""
    if length < 1:
        raise InvalidParameterError(f"chunk length must be at least one sample, got {length}")
    try:
        return np.zeros(length, dtype=np.float64)
    except MemoryError as exc:
        raise AllocationError(f"unable to allocate a {length}-sample chunk") from exc


class WaveChunk:
    """One period of the composite signal, owned by exactly one stage at a time.

    The samples stay mutable until `release()` hands the storage to the
    encoder; after that the chunk is empty and every access raises.
    """

    __slots__ = ("_samples",)

    def __init__(self, samples: FloatArray) -> None:
        self._samples: FloatArray | None = samples

    def __len__(self) -> int:
        return self.samples.size

    def __repr__(self) -> str:
        state = f"{self._samples.size} samples" if self._samples is not None else "released"
        return f"WaveChunk({state})"

    @property
    def samples(self) -> FloatArray:
        if self._samples is None:
            raise RuntimeError("WaveChunk storage was already released")
        return self._samples

    @property
    def released(self) -> bool:
        return self._samples is None

    def release(self) -> FloatArray:
        samples = self.samples
        self._samples = None
        return samples
