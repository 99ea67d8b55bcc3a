"""Coarse autocorrelation pitch estimates for word windows."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np

from tt2ww.domain import AudioBuffer, WordRecord
from tt2ww.utils.logger import get_logger

MIN_PITCH_HZ = 75.0
MAX_PITCH_HZ = 500.0
MIN_PEAK_CORRELATION = 0.3

logger: logging.Logger = get_logger(__name__)


def estimate_pitch(
    buffer: AudioBuffer,
    start_seconds: float,
    end_seconds: float,
    *,
    min_hz: float = MIN_PITCH_HZ,
    max_hz: float = MAX_PITCH_HZ,
) -> float | None:
    """Estimates the fundamental frequency of one time window.

    The channels are mixed to mono, the mean is removed, and the lag with the
    strongest normalized autocorrelation between `sr / max_hz` and
    `sr / min_hz` wins.

    Returns:
        Frequency in Hz, or ``None`` for short, silent, or unvoiced windows.
    """
    if not 0.0 < min_hz < max_hz:
        raise ValueError("Pitch bounds must satisfy 0 < min_hz < max_hz.")
    sample_rate = buffer.sample_rate
    first = max(0, math.floor(start_seconds * sample_rate))
    last = min(buffer.length, math.floor(end_seconds * sample_rate))
    min_lag = max(1, math.floor(sample_rate / max_hz))
    max_lag = math.ceil(sample_rate / min_hz)
    if last - first < 2 * max_lag:
        return None

    mono = np.mean(buffer.channels[:, first:last].astype(np.float64), axis=0)
    mono = mono - np.mean(mono)
    if not np.all(np.isfinite(mono)):
        return None

    size = mono.size
    spectrum = np.fft.rfft(mono, n=2 * size)
    autocorrelation = np.fft.irfft(spectrum * np.conj(spectrum))[:size]
    energy = float(autocorrelation[0])
    if energy <= 1e-12:
        return None

    search = autocorrelation[min_lag : max_lag + 1] / energy
    best_offset = int(np.argmax(search))
    if float(search[best_offset]) < MIN_PEAK_CORRELATION:
        return None

    lag = float(min_lag + best_offset)
    if 0 < best_offset < search.size - 1:
        left, center, right = search[best_offset - 1 : best_offset + 2]
        curvature = left - 2.0 * center + right
        if curvature < 0.0:
            lag += 0.5 * float(left - right) / float(curvature)
    return sample_rate / lag


def attach_pitch(
    records: Sequence[WordRecord],
    buffer: AudioBuffer,
    *,
    min_hz: float = MIN_PITCH_HZ,
    max_hz: float = MAX_PITCH_HZ,
) -> list[WordRecord]:
    """Returns copies of `records` with `pitch_hz` estimated per word."""
    pitched = [
        record._replace(
            pitch_hz=estimate_pitch(
                buffer,
                record.start_seconds,
                record.end_seconds,
                min_hz=min_hz,
                max_hz=max_hz,
            )
        )
        for record in records
    ]
    voiced = sum(1 for record in pitched if record.pitch_hz is not None)
    logger.debug("Estimated pitch for %s of %s words.", voiced, len(pitched))
    return pitched
