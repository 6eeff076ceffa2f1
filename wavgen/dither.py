from __future__ import annotations

import numpy as np

from .chunk import FloatArray
from .errors import InvalidParameterError


def dither_amplitude(bits_per_sample: int) -> float:
    """Noise scale for one quantization step at the given integer depth."""
    if bits_per_sample < 2:
        raise InvalidParameterError(f"cannot dither {bits_per_sample}-bit samples")
    return 1.0 / 2.0 ** (bits_per_sample - 1)


def apply_dither(
    samples: FloatArray,
    bits_per_sample: int,
    rng: np.random.Generator,
) -> None:
    """Add zero-mean triangular noise in place ahead of integer quantization.

    The difference of two independent uniform draws has a triangular density
    over (-1, 1), which decorrelates quantization error from the signal.
    """
    amp = dither_amplitude(bits_per_sample)
    noise = rng.random(samples.size) - rng.random(samples.size)
    samples += noise * amp
