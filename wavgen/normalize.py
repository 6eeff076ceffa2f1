from __future__ import annotations

import logging
import math

import numpy as np

from .chunk import FloatArray
from .params import MIN_DECIBELS

_LOGGER = logging.getLogger("wavgen.normalize")


def decibels_to_gain(decibels: float) -> float:
    return 10.0 ** (decibels * 0.05) if decibels > MIN_DECIBELS else 0.0


def gain_to_decibels(gain: float) -> float:
    return max(MIN_DECIBELS, math.log10(gain) * 20.0) if gain > 0.0 else MIN_DECIBELS


def peak(samples: FloatArray) -> float:
    """Absolute peak, the larger of the positive peak and the negated negative one."""
    if samples.size == 0:
        return 0.0
    pos_peak = float(np.max(samples))
    neg_peak = float(np.min(samples))
    return max(pos_peak, -neg_peak)


def normalize_peak(samples: FloatArray, decibels: float) -> float:
    """Scale samples in place so their absolute peak sits at `decibels` dBFS.

    Returns the divisor that was applied (1.0 when nothing changed).
    """
    gain = decibels_to_gain(decibels)
    if gain == 0.0:
        _LOGGER.debug("Target %.2fdBFS is at the silence floor; muting chunk", decibels)
        samples.fill(0.0)
        return math.inf

    abs_peak = peak(samples)
    if abs_peak == 0.0:
        return 1.0

    divisor = abs_peak / gain
    if divisor != 1.0:
        samples /= divisor
    return divisor
