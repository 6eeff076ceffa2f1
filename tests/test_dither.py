from __future__ import annotations

import numpy as np
import pytest

from wavgen.dither import apply_dither, dither_amplitude
from wavgen.errors import InvalidParameterError


def test_amplitude_is_one_step_of_the_depth() -> None:
    assert dither_amplitude(8) == 1 / 128
    assert dither_amplitude(16) == 1 / 32_768
    assert dither_amplitude(24) == 1 / 8_388_608


def test_amplitude_rejects_degenerate_depth() -> None:
    with pytest.raises(InvalidParameterError):
        dither_amplitude(1)


def test_noise_is_bounded_and_zero_mean() -> None:
    samples = np.zeros(200_000)
    apply_dither(samples, 16, np.random.default_rng(3))

    amp = dither_amplitude(16)
    assert np.max(np.abs(samples)) < amp
    assert abs(float(np.mean(samples))) < 0.01 * amp
    assert samples.any()


def test_noise_is_triangular() -> None:
    samples = np.zeros(200_000)
    apply_dither(samples, 8, np.random.default_rng(5))

    scaled = samples / dither_amplitude(8)
    # Triangular on (-1, 1): half of the mass lies within |x| < 1 - 1/sqrt(2).
    inner = np.mean(np.abs(scaled) < 1 - 1 / np.sqrt(2))
    assert inner == pytest.approx(0.5, abs=0.01)


def test_seeded_generators_reproduce_noise() -> None:
    first = np.linspace(-0.5, 0.5, 64)
    second = first.copy()
    apply_dither(first, 24, np.random.default_rng(11))
    apply_dither(second, 24, np.random.default_rng(11))
    assert np.array_equal(first, second)
