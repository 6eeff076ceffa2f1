from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import soundfile as sf  # type: ignore[import]

from wavgen.engine import generate
from wavgen.header import HEADER_SIZE
from wavgen.params import SynthesisParameters
from wavgen.writer import write_wav


@pytest.mark.parametrize(
    ("bits", "sample_format", "subtype"),
    [
        (8, "integer", "PCM_U8"),
        (16, "integer", "PCM_16"),
        (24, "integer", "PCM_24"),
        (32, "integer", "PCM_32"),
        (32, "float", "FLOAT"),
        (64, "float", "DOUBLE"),
    ],
)
def test_written_file_decodes(tmp_path: Path, bits: int, sample_format: str, subtype: str) -> None:
    params = SynthesisParameters(
        frequencies=(440.0,),
        duration=0.25,
        sample_rate=48_000,
        bits_per_sample=bits,
        sample_format=sample_format,  # type: ignore[arg-type]
        dither=False,
    )
    result = generate(params)
    path = write_wav(tmp_path / "tone.wav", params, result)

    info = sf.info(str(path))
    assert info.samplerate == 48_000
    assert info.channels == 1
    assert info.frames == 12_000
    assert info.subtype == subtype
    assert path.stat().st_size == HEADER_SIZE + 12_000 * bits // 8


def test_tiled_data_repeats_the_chunk(tmp_path: Path) -> None:
    params = SynthesisParameters(
        frequencies=(440.0,),
        shape="triangle",
        duration=0.123,
        sample_rate=44_100,
        bits_per_sample=16,
        dither=False,
    )
    result = generate(params)
    path = write_wav(tmp_path / "tail.wav", params, result)

    data, rate = sf.read(str(path), dtype="int16")
    chunk = np.frombuffer(result.buffer.tobytes(), dtype="<i2")
    length = result.buffer.chunk_length

    assert rate == 44_100
    assert len(data) == result.total_samples == 5424
    assert np.array_equal(data[:length], chunk)
    assert np.array_equal(data[length : 2 * length], chunk)
    assert np.array_equal(data[2 * length :], chunk[: result.plan.fractional_samples])


def test_float_samples_survive_round_trip(tmp_path: Path) -> None:
    params = SynthesisParameters(
        frequencies=(1000.0, 1500.0),
        shape="sawtooth",
        duration=0.1,
        sample_rate=44_100,
        amplitude=-3.0,
        bits_per_sample=64,
        sample_format="float",
    )
    result = generate(params)
    path = write_wav(tmp_path / "saw.wav", params, result)

    data, _ = sf.read(str(path), dtype="float64")
    assert np.max(np.abs(data)) == pytest.approx(10 ** (-3 / 20), abs=1e-9)
