"""
Synthesis pipeline: period sizing → additive synthesis → peak normalization →
dither → encoding, then a tiling plan for the encoded chunk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .dither import apply_dither
from .encoder import EncodedBuffer, encode
from .harmonics import synthesize_chunk
from .normalize import normalize_peak
from .params import SynthesisParameters
from .period import chunk_length
from .tiling import TilingPlan, plan_tiling

_LOGGER = logging.getLogger("wavgen.engine")


@dataclass(frozen=True, slots=True)
class SynthesisResult:
    buffer: EncodedBuffer
    plan: TilingPlan

    @property
    def total_samples(self) -> int:
        return self.plan.total_samples

    @property
    def data_size(self) -> int:
        """Bytes in the tiled data region."""
        return self.plan.total_samples * self.buffer.bytes_per_sample


def generate(
    params: SynthesisParameters,
    rng: np.random.Generator | None = None,
) -> SynthesisResult:
    """Synthesize and encode one chunk for `params` and plan its tiling.

    `rng` is only drawn from when dither applies; pass a seeded generator for
    reproducible output.
    """
    length = chunk_length(
        params.lowest_frequency,
        params.sample_rate,
        params.duration,
        dither=params.applies_dither,
    )
    _LOGGER.debug("Chunk length: %d samples", length)

    chunk = synthesize_chunk(params, length)
    divisor = normalize_peak(chunk.samples, params.amplitude)
    _LOGGER.debug("Normalized to %+.2fdBFS (divisor %g)", params.amplitude, divisor)

    if params.applies_dither:
        apply_dither(
            chunk.samples,
            params.bits_per_sample,
            rng if rng is not None else np.random.default_rng(),
        )

    buffer = encode(chunk, params.bits_per_sample, params.sample_format)
    plan = plan_tiling(buffer.chunk_length, params.sample_rate, params.duration)
    _LOGGER.debug(
        "Tiling: %d whole chunk(s) + %d sample(s)", plan.whole_chunks, plan.fractional_samples
    )
    return SynthesisResult(buffer=buffer, plan=plan)
