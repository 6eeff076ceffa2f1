from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from .engine import SynthesisResult
from .header import build_header
from .params import SynthesisParameters

_LOGGER = logging.getLogger("wavgen.writer")


def write_tiled(handle: BinaryIO, result: SynthesisResult) -> int:
    """Write the chunk `whole_chunks` times plus the fractional tail; returns bytes written."""
    chunk = result.buffer.tobytes()
    written = 0
    for _ in range(result.plan.whole_chunks):
        written += handle.write(chunk)
    if result.plan.fractional_samples:
        written += handle.write(result.buffer.head(result.plan.fractional_samples))
    return written


def write_wav(path: str | Path, params: SynthesisParameters, result: SynthesisResult) -> Path:
    """Write header and tiled data region to a mono wav file."""
    target = Path(path)
    header = build_header(params, result.total_samples)
    with target.open("wb") as handle:
        handle.write(header)
        written = write_tiled(handle, result)
    _LOGGER.info("Wrote %s (%d samples, %d bytes)", target, result.total_samples, len(header) + written)
    return target
