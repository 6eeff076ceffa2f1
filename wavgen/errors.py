from __future__ import annotations


class WavgenError(Exception):
    """Base error for the wavgen library."""


class InvalidParameterError(WavgenError):
    """Raised when a synthesis precondition is violated."""


class AllocationError(WavgenError):
    """Raised when a chunk or encoded buffer cannot be allocated."""


class InvalidConfigError(WavgenError):
    """Raised when a config cannot be resolved into synthesis parameters."""
