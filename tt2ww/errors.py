"""Typed, caller-recoverable error conditions."""

from __future__ import annotations


class Tt2wwError(Exception):
    """Base class for all recoverable tt2ww conditions."""


class InvalidRangeError(Tt2wwError, ValueError):
    """Raised when the configured dB range is empty or inverted."""


class EmptyInputError(Tt2wwError, ValueError):
    """Raised when there is no text, no valid timestamps, or no audio duration."""


class InvalidAudioError(Tt2wwError, OSError):
    """Raised when an audio file cannot be decoded into a usable buffer."""


class TranscriptFormatError(Tt2wwError, ValueError):
    """Raised when a transcript file cannot be read as word timings."""


class CreationFormatError(Tt2wwError, ValueError):
    """Raised when a saved creation payload is malformed."""
