"""
Config file loading.

A config file holds one `key = value;` entry per line. Anything unreadable is
reported through logging and replaced by its default, so a broken file still
produces a usable parameter set:

    frequencies = 440, 660.5;
    wave_type = "square";
    duration = 4.0;
    amplitude = -1.0;
    sample_rate = 48000;
    bits_per_sample = 24;
    sample_format = "integer";
    dither = true;
    output_file = "file";
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import ValidationError

from .errors import InvalidConfigError
from .header import HEADER_SIZE
from .logging_utils import ARG, INFO, PARSE, READ
from .params import (
    MAX_DECIBELS,
    SampleFormat,
    SynthesisParameters,
    WaveShape,
    bits_supported,
)

_LOGGER = logging.getLogger("wavgen.config")

DEFAULT_CONFIG_FILE = "config.cfg"
DEFAULT_OUTPUT_FILE = "file.wav"
DEFAULT_FREQUENCY = 440.0
FALLBACK_BITS = 32
MAX_FILENAME_BYTES = 255

_FREQ_DELIMS = re.compile(r"[,\s]+")

_WAVE_SHAPES: Mapping[str, WaveShape] = MappingProxyType(
    {
        "sine": "sine",
        "triangle": "triangle",
        "square": "square",
        "saw": "sawtooth",
        "sawtooth": "sawtooth",
        "even": "even",
    }
)
_SAMPLE_FORMATS: Mapping[str, SampleFormat] = MappingProxyType(
    {
        "integer": "integer",
        "float": "float",
        "floating-point": "float",
    }
)
_BOOLEANS: Mapping[str, bool] = MappingProxyType({"true": True, "false": False})

KNOWN_KEYS = (
    "frequencies",
    "wave_type",
    "duration",
    "amplitude",
    "sample_rate",
    "bits_per_sample",
    "sample_format",
    "dither",
    "output_file",
)


@dataclass(frozen=True, slots=True)
class ResolvedConfig:
    """Synthesis parameters plus where to write them."""

    params: SynthesisParameters
    output_path: Path


def _strip_quotes(value: str) -> str:
    return value.strip().strip('"')


def _split_entries(text: str, source: str) -> dict[str, str]:
    entries: dict[str, str] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].split(";", 1)[0].strip()
        if not line:
            continue
        if "=" not in line:
            _LOGGER.warning(
                "'%s': unable to parse line %d: incorrect formatting", source, lineno, extra=PARSE
            )
            continue
        key, value = line.split("=", 1)
        key = key.strip().lower()
        if key not in KNOWN_KEYS:
            _LOGGER.warning(
                "'%s': unknown key %r on line %d (ignoring)", source, key, lineno, extra=PARSE
            )
            continue
        entries[key] = value.strip()
    return entries


def _parse_float(value: str) -> float | None:
    try:
        number = float(value)
    except ValueError:
        _LOGGER.warning("unable to parse a floating-point number from '%s'", value, extra=PARSE)
        return None
    if not math.isfinite(number):
        _LOGGER.warning("'%s' is not a finite number (ignoring)", value, extra=PARSE)
        return None
    return number


def _parse_unsigned(value: str) -> int | None:
    try:
        number = int(value)
    except ValueError:
        number = 0
    if number <= 0:
        _LOGGER.warning("unable to parse an unsigned number from '%s'", value, extra=PARSE)
        return None
    return number


def _parse_frequencies(value: str) -> tuple[float, ...]:
    tones: list[float] = []
    for token in _FREQ_DELIMS.split(value.strip()):
        if not token:
            continue
        tone = _parse_float(token)
        if tone is None or tone <= 0.0:
            _LOGGER.warning(
                "found illegal tone %r: every tone must be a positive number > 0.0Hz (ignoring)",
                token,
                extra=ARG,
            )
            continue
        tones.append(tone)
    return tuple(tones)


def _lookup(table: Mapping[str, Any], value: str, label: str) -> Any | None:
    key = _strip_quotes(value).lower()
    if key not in table:
        _LOGGER.warning("unrecognized %s: '%s'", label, key, extra=PARSE)
        return None
    return table[key]


def _output_path(value: str) -> Path | None:
    name = _strip_quotes(value)
    if not name:
        _LOGGER.warning("empty output file name (using default value)", extra=ARG)
        return None
    if not name.lower().endswith(".wav"):
        name = f"{name}.wav"
    if len(Path(name).name.encode("utf-8")) >= MAX_FILENAME_BYTES:
        _LOGGER.warning(
            "filename is longer than %d bytes (using default value)", MAX_FILENAME_BYTES, extra=ARG
        )
        return None
    return Path(name)


def resolve_entries(entries: Mapping[str, str]) -> ResolvedConfig:
    """Turn raw `key -> value` strings into parameters, substituting defaults."""
    defaults = SynthesisParameters.model_fields
    frequencies: tuple[float, ...] = (DEFAULT_FREQUENCY,)
    shape: WaveShape = defaults["shape"].default
    duration: float = defaults["duration"].default
    amplitude: float = defaults["amplitude"].default
    sample_rate: int = defaults["sample_rate"].default
    bits: int = defaults["bits_per_sample"].default
    sample_format: SampleFormat = defaults["sample_format"].default
    dither: bool = defaults["dither"].default
    output_path = Path(DEFAULT_OUTPUT_FILE)

    if "frequencies" in entries:
        tones = _parse_frequencies(entries["frequencies"])
        if tones:
            frequencies = tones
        else:
            _LOGGER.warning("no usable tones (using %.1fHz)", DEFAULT_FREQUENCY, extra=ARG)

    if "wave_type" in entries:
        parsed_shape = _lookup(_WAVE_SHAPES, entries["wave_type"], "wave type")
        if parsed_shape is not None:
            shape = parsed_shape

    if "duration" in entries:
        parsed_duration = _parse_float(entries["duration"])
        if parsed_duration is not None and parsed_duration > 0.0:
            duration = parsed_duration
        elif parsed_duration is not None:
            _LOGGER.warning(
                "duration must be positive, got %g (ignoring)", parsed_duration, extra=ARG
            )

    if "amplitude" in entries:
        parsed_amplitude = _parse_float(entries["amplitude"])
        if parsed_amplitude is not None:
            amplitude = min(parsed_amplitude, MAX_DECIBELS)

    if "sample_rate" in entries:
        parsed_rate = _parse_unsigned(entries["sample_rate"])
        if parsed_rate is not None:
            nyquist_limit = int(max(frequencies) * 2)
            if parsed_rate <= nyquist_limit:
                _LOGGER.warning(
                    "sample rate must be at least > %dHz (ignoring)", nyquist_limit, extra=ARG
                )
            else:
                sample_rate = parsed_rate

    if "bits_per_sample" in entries:
        parsed_bits = _parse_unsigned(entries["bits_per_sample"])
        if parsed_bits is not None:
            bits = parsed_bits

    if "sample_format" in entries:
        parsed_format = _lookup(_SAMPLE_FORMATS, entries["sample_format"], "sample format")
        if parsed_format is not None:
            sample_format = parsed_format

    if not bits_supported(bits, sample_format):
        _LOGGER.warning(
            "%d-bit %s PCM is invalid/unsupported (using %d-bit)",
            bits,
            sample_format,
            FALLBACK_BITS,
            extra=ARG,
        )
        bits = FALLBACK_BITS

    if "dither" in entries:
        parsed_dither = _lookup(_BOOLEANS, entries["dither"], "boolean value")
        if parsed_dither is not None:
            dither = parsed_dither

    if "output_file" in entries:
        parsed_output = _output_path(entries["output_file"])
        if parsed_output is not None:
            output_path = parsed_output

    try:
        params = SynthesisParameters(
            frequencies=frequencies,
            shape=shape,
            duration=duration,
            amplitude=amplitude,
            sample_rate=sample_rate,
            bits_per_sample=bits,
            sample_format=sample_format,
            dither=dither,
        )
    except ValidationError as exc:
        raise InvalidConfigError(f"config does not resolve to valid parameters: {exc}") from exc
    return ResolvedConfig(params=params, output_path=output_path)


def parse_config(text: str, *, source: str = "<string>") -> ResolvedConfig:
    return resolve_entries(_split_entries(text, source))


def load_parameters(path: str | Path = DEFAULT_CONFIG_FILE) -> ResolvedConfig:
    """Load a config file; an unreadable file yields the defaults."""
    target = Path(path)
    try:
        text = target.read_text(encoding="utf-8")
    except OSError as exc:
        _LOGGER.warning("unable to read config file '%s': %s", target, exc, extra=READ)
        text = ""
    resolved = parse_config(text, source=str(target))
    for line in summary_lines(resolved):
        _LOGGER.info(line, extra=INFO)
    return resolved


def summary_lines(resolved: ResolvedConfig) -> list[str]:
    params = resolved.params
    tones = ", ".join(f"{freq:.1f}Hz" for freq in params.frequencies)
    size_kb = (params.total_samples * params.bytes_per_sample + HEADER_SIZE) / 1024
    if params.sample_format == "float":
        dither = "(ignored)"
    else:
        dither = "Yes" if params.dither else "No"
    return [
        f"Generating {len(params.frequencies)} {params.shape} wave(s)...",
        f"Frequencies:   {tones}",
        f"Length:        {params.duration:.2f}s ({size_kb:.2f}KB)",
        f"Sample Peak:   {params.amplitude:+.2f}dBFS",
        f"Sample Rate:   {params.sample_rate}Hz",
        f"Sample Format: {params.sample_format}",
        f"Bit Depth:     {params.bits_per_sample}-bit",
        f"Dither:        {dither}",
        f"Output File:   '{resolved.output_path}'",
    ]
