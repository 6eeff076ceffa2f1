from __future__ import annotations

import math
from dataclasses import dataclass

from .errors import InvalidParameterError


@dataclass(frozen=True, slots=True)
class TilingPlan:
    """How many full chunk repeats, plus leading samples of one more, fill the duration."""

    whole_chunks: int
    fractional_samples: int
    chunk_length: int

    @property
    def total_samples(self) -> int:
        return self.whole_chunks * self.chunk_length + self.fractional_samples


def plan_tiling(chunk_length: int, sample_rate: int, duration: float) -> TilingPlan:
    if chunk_length < 1:
        raise InvalidParameterError(f"chunk length must be at least one sample, got {chunk_length}")
    if sample_rate <= 0 or not (duration > 0.0 and math.isfinite(duration)):
        raise InvalidParameterError("sample rate and duration must be positive and finite")

    total_chunks = sample_rate * duration / chunk_length
    whole = math.floor(total_chunks)
    fractional = math.floor(chunk_length * (total_chunks - whole) + 0.5)
    if fractional >= chunk_length:
        whole += 1
        fractional -= chunk_length
    return TilingPlan(whole_chunks=whole, fractional_samples=fractional, chunk_length=chunk_length)
