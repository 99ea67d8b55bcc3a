"""Instantaneous amplitude and decibel readings from a decoded buffer."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from tt2ww.domain import AudioBuffer

DB_FLOOR = -80.0


def amplitude_at_time(buffer: AudioBuffer | None, time_seconds: float) -> float:
    """Returns the channel-averaged absolute sample nearest `time_seconds`.

    The sample index is `floor(time_seconds * sample_rate)` with no
    interpolation. Times outside the buffer, or a missing buffer, read as 0.
    """
    if buffer is None or not math.isfinite(time_seconds):
        return 0.0
    index = math.floor(time_seconds * buffer.sample_rate)
    if index < 0 or index >= buffer.length:
        return 0.0
    return float(np.mean(np.abs(buffer.channels[:, index])))


def amplitudes_at_times(
    buffer: AudioBuffer | None,
    times_seconds: Sequence[float] | NDArray[np.float64],
) -> NDArray[np.float64]:
    """Vectorized `amplitude_at_time` over many time points."""
    times = np.asarray(times_seconds, dtype=np.float64)
    amplitudes = np.zeros(times.shape, dtype=np.float64)
    if buffer is None or times.size == 0:
        return amplitudes
    indices = np.floor(times * buffer.sample_rate)
    valid = np.isfinite(indices) & (indices >= 0) & (indices < buffer.length)
    if not np.any(valid):
        return amplitudes
    selected = buffer.channels[:, indices[valid].astype(np.int64)]
    amplitudes[valid] = np.mean(np.abs(selected.astype(np.float64)), axis=0)
    return amplitudes


def amplitude_to_db(amplitude: float, *, floor_db: float = DB_FLOOR) -> float:
    """Converts linear amplitude to dB, flooring non-positive input."""
    if not amplitude > 0.0:
        return floor_db
    return 20.0 * math.log10(amplitude)


def amplitudes_to_db(
    amplitudes: NDArray[np.float64], *, floor_db: float = DB_FLOOR
) -> NDArray[np.float64]:
    """Vectorized `amplitude_to_db`."""
    values = np.asarray(amplitudes, dtype=np.float64)
    db = np.full(values.shape, floor_db, dtype=np.float64)
    positive = values > 0.0
    db[positive] = 20.0 * np.log10(values[positive])
    return db
