"""Per-word loudness aggregation over dB timeline samples."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType

import numpy as np
from numpy.typing import NDArray

from tt2ww.domain import TimelineSample, WordRecord, WordWindow
from tt2ww.utils.logger import get_logger

SILENCE_FLOOR_DB = -60.0
PEAK_SMOOTH_FRACTION = 0.3
GAUSSIAN_SPREAD = 3.0

type DbSamples = NDArray[np.float64]
type AggregationFn = Callable[[DbSamples], float]

logger: logging.Logger = get_logger(__name__)


def _aggregate_mean(samples: DbSamples) -> float:
    return float(np.mean(samples))


def _aggregate_rms(samples: DbSamples) -> float:
    """RMS of the linear amplitudes, converted back to dB."""
    linear = np.power(10.0, samples / 20.0)
    rms = math.sqrt(float(np.mean(linear * linear)))
    if rms <= 0.0:
        return float(np.min(samples))
    return 20.0 * math.log10(rms)


def _aggregate_weighted(samples: DbSamples) -> float:
    """Gaussian-weighted mean over sample position within the window."""
    count = samples.size
    positions = np.arange(count, dtype=np.float64) / max(count - 1, 1)
    weights = np.exp(-(((positions - 0.5) * GAUSSIAN_SPREAD) ** 2))
    return float(np.sum(samples * weights) / np.sum(weights))


def _aggregate_peak_smooth(samples: DbSamples) -> float:
    """Mean of the loudest 30% of samples (at least one)."""
    top_count = max(1, math.ceil(samples.size * PEAK_SMOOTH_FRACTION))
    loudest = np.sort(samples)[::-1][:top_count]
    return float(np.mean(loudest))


def _aggregate_median(samples: DbSamples) -> float:
    return float(np.median(samples))


AGGREGATION_METHODS: Mapping[str, AggregationFn] = MappingProxyType(
    {
        "mean": _aggregate_mean,
        "rms": _aggregate_rms,
        "weighted": _aggregate_weighted,
        "peak_smooth": _aggregate_peak_smooth,
        "median": _aggregate_median,
    }
)


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def _window_samples(
    window: WordWindow,
    times: NDArray[np.float64],
    db_values: NDArray[np.float64],
) -> DbSamples:
    """Returns finite dB values whose time falls inside `[start, end]`."""
    lower = int(np.searchsorted(times, window.start_seconds, side="left"))
    upper = int(np.searchsorted(times, window.end_seconds, side="right"))
    if upper <= lower:
        return np.empty(0, dtype=np.float64)
    selected = db_values[lower:upper]
    return selected[np.isfinite(selected)]


def aggregate_word_loudness(
    windows: Sequence[WordWindow],
    timeline: Sequence[TimelineSample],
    min_db: float,
    max_db: float,
    method: str = "rms",
    *,
    silence_floor_db: float = SILENCE_FLOOR_DB,
) -> list[WordRecord]:
    """Collapses the timeline samples inside each word window to loudness values.

    Args:
        windows: Word windows in time order.
        timeline: Fixed-step loudness samples with increasing times.
        min_db: Lower clamp bound for every produced value.
        max_db: Upper clamp bound for every produced value.
        method: One of the `AGGREGATION_METHODS` names.
        silence_floor_db: Loudness assigned to windows with no samples.

    Returns:
        One record per window. `db_mean` and `db_max` are always populated.

    Raises:
        ValueError: If `method` is not a known aggregation method.
    """
    aggregate = AGGREGATION_METHODS.get(method)
    if aggregate is None:
        raise ValueError(
            f"Unknown aggregation method {method!r}; "
            f"expected one of {', '.join(AGGREGATION_METHODS)}."
        )
    if not windows:
        return []

    times = np.asarray([sample.time_seconds for sample in timeline], dtype=np.float64)
    db_values = np.asarray([sample.db for sample in timeline], dtype=np.float64)
    silence_db = _clamp(silence_floor_db, min_db, max_db)

    records: list[WordRecord] = []
    empty_windows = 0
    for window in windows:
        samples = _window_samples(window, times, db_values)
        if samples.size == 0:
            empty_windows += 1
            records.append(
                WordRecord(
                    word=window.word,
                    start_seconds=window.start_seconds,
                    end_seconds=window.end_seconds,
                    db=silence_db,
                    db_mean=silence_db,
                    db_max=silence_db,
                )
            )
            continue

        db_max = _clamp(float(np.max(samples)), min_db, max_db)
        # Float summation can push the mean of identical samples past the max.
        db_mean = min(_clamp(float(np.mean(samples)), min_db, max_db), db_max)
        if method == "mean":
            db = db_mean
        else:
            db = _clamp(aggregate(samples), min_db, max_db)
        records.append(
            WordRecord(
                word=window.word,
                start_seconds=window.start_seconds,
                end_seconds=window.end_seconds,
                db=db,
                db_mean=db_mean,
                db_max=db_max,
            )
        )

    if empty_windows:
        logger.debug(
            "%s of %s word windows had no timeline samples; used silence floor %.1f dB.",
            empty_windows,
            len(windows),
            silence_db,
        )
    return records
