from __future__ import annotations

import logging
import math

from .errors import InvalidParameterError

_LOGGER = logging.getLogger("wavgen.period")

_INTEGRAL_TOLERANCE = 1e-9


def _is_integral(value: float) -> bool:
    return abs(value - round(value)) < _INTEGRAL_TOLERANCE


def chunk_length(
    lowest_frequency: float,
    sample_rate: int,
    duration: float,
    dither: bool = False,
) -> int:
    """Sample count of one repeating unit of the composite signal.

    Whole periods of the lowest tone are stacked until they land on an integer
    sample count or cover the requested duration. With dither the chunk is
    grown to at least one second so the noise does not repeat audibly.
    """
    if not (lowest_frequency > 0.0 and math.isfinite(lowest_frequency)):
        raise InvalidParameterError(
            f"tone frequency must be positive and finite, got {lowest_frequency!r}"
        )
    if sample_rate <= 0:
        raise InvalidParameterError(f"sample rate must be positive, got {sample_rate!r}")
    if not (duration > 0.0 and math.isfinite(duration)):
        raise InvalidParameterError(f"duration must be positive and finite, got {duration!r}")

    base = sample_rate / lowest_frequency
    limit = sample_rate * duration
    periods = 1
    length = base
    while not _is_integral(length) and length < limit:
        periods += 1
        length = base * periods

    if _is_integral(length):
        length = float(round(length))
    else:
        # Accepted approximation: the chunk ends mid-cycle and clicks on repeat.
        _LOGGER.debug(
            "No integral period for %.4fHz within %.0f samples; using %d cycles",
            lowest_frequency,
            limit,
            periods,
        )

    if dither and length < sample_rate:
        length *= math.ceil(sample_rate / length)

    samples = round(length) if _is_integral(length) else int(length)
    if samples < 1:
        raise InvalidParameterError(
            f"chunk length resolved to zero samples ({lowest_frequency}Hz at {sample_rate}Hz)"
        )
    return samples
