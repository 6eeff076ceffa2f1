from __future__ import annotations

from .chunk import WaveChunk
from .config import ResolvedConfig, load_parameters, parse_config
from .encoder import EncodedBuffer, encode
from .engine import SynthesisResult, generate
from .errors import AllocationError, InvalidConfigError, InvalidParameterError, WavgenError
from .harmonics import ChunkAccumulator, Partial, add_tone, harmonic_series, synthesize_chunk
from .header import build_header
from .normalize import decibels_to_gain, gain_to_decibels, normalize_peak
from .params import SampleFormat, SynthesisParameters, WaveShape
from .period import chunk_length
from .tiling import TilingPlan, plan_tiling
from .writer import write_wav

__all__ = [
    "AllocationError",
    "ChunkAccumulator",
    "EncodedBuffer",
    "InvalidConfigError",
    "InvalidParameterError",
    "Partial",
    "ResolvedConfig",
    "SampleFormat",
    "SynthesisParameters",
    "SynthesisResult",
    "TilingPlan",
    "WaveChunk",
    "WaveShape",
    "WavgenError",
    "add_tone",
    "build_header",
    "chunk_length",
    "decibels_to_gain",
    "encode",
    "gain_to_decibels",
    "generate",
    "harmonic_series",
    "load_parameters",
    "normalize_peak",
    "parse_config",
    "plan_tiling",
    "synthesize_chunk",
    "write_wav",
]

__version__ = "0.1.0"
