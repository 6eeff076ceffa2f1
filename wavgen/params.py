from __future__ import annotations

import logging
import math
from types import MappingProxyType
from typing import Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_LOGGER = logging.getLogger("wavgen.params")

WaveShape = Literal["sine", "triangle", "square", "sawtooth", "even"]
SampleFormat = Literal["integer", "float"]

MIN_DECIBELS = -150.0
MAX_DECIBELS = 6.0

SUPPORTED_BITS: Mapping[SampleFormat, tuple[int, ...]] = MappingProxyType(
    {
        "integer": (8, 16, 24, 32),
        "float": (32, 64),
    }
)

# WAVE_FORMAT_PCM / WAVE_FORMAT_IEEE_FLOAT
FORMAT_CODES: Mapping[SampleFormat, int] = MappingProxyType(
    {
        "integer": 1,
        "float": 3,
    }
)


def bits_supported(bits_per_sample: int, sample_format: SampleFormat) -> bool:
    return bits_per_sample in SUPPORTED_BITS.get(sample_format, ())


class SynthesisParameters(BaseModel):
    """Finalized, read-only parameter set consumed by the synthesis engine."""

    frequencies: tuple[float, ...] = (440.0,)
    shape: WaveShape = "sine"
    duration: float = Field(default=4.0, gt=0.0)
    amplitude: float = -1.0
    sample_rate: int = Field(default=48_000, gt=0)
    bits_per_sample: int = 24
    sample_format: SampleFormat = "integer"
    dither: bool = True

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    @field_validator("frequencies")
    @classmethod
    def _check_frequencies(cls, value: tuple[float, ...]) -> tuple[float, ...]:
        if not value:
            raise ValueError("at least one tone frequency is required")
        for freq in value:
            if not (freq > 0.0 and math.isfinite(freq)):
                raise ValueError(f"tone frequencies must be positive, got {freq!r}")
        return value

    @field_validator("amplitude")
    @classmethod
    def _clamp_amplitude(cls, value: float) -> float:
        if value > MAX_DECIBELS:
            _LOGGER.debug("Capping amplitude %+.2fdBFS at %+.2fdBFS", value, MAX_DECIBELS)
            return MAX_DECIBELS
        return max(value, MIN_DECIBELS)

    @model_validator(mode="after")
    def _check_rate_and_depth(self) -> "SynthesisParameters":
        nyquist_limit = 2.0 * max(self.frequencies)
        if self.sample_rate <= nyquist_limit:
            raise ValueError(
                f"sample rate must exceed {nyquist_limit:g}Hz for the requested tones"
            )
        if not bits_supported(self.bits_per_sample, self.sample_format):
            raise ValueError(
                f"{self.bits_per_sample}-bit {self.sample_format} PCM is unsupported"
            )
        return self

    @property
    def bytes_per_sample(self) -> int:
        return self.bits_per_sample // 8

    @property
    def format_code(self) -> int:
        return FORMAT_CODES[self.sample_format]

    @property
    def lowest_frequency(self) -> float:
        return min(self.frequencies)

    @property
    def total_samples(self) -> float:
        """Requested length in samples, generally fractional."""
        return self.sample_rate * self.duration

    @property
    def applies_dither(self) -> bool:
        return self.dither and self.sample_format == "integer"
