"""Fixed-step loudness timeline covering a whole clip."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np

from tt2ww.domain import AudioBuffer, TimelineSample
from tt2ww.loudness.sampler import DB_FLOOR, amplitudes_at_times, amplitudes_to_db
from tt2ww.utils.logger import get_logger

TIMELINE_STEP_SECONDS = 0.05
_STEP_EPSILON = 1e-9

logger: logging.Logger = get_logger(__name__)


def timeline_times(
    duration_seconds: float, *, step_seconds: float = TIMELINE_STEP_SECONDS
) -> list[float]:
    """Returns sample times `i * step` for every `i * step <= duration`."""
    if step_seconds <= 0.0 or not math.isfinite(step_seconds):
        raise ValueError("step_seconds must be a positive finite float.")
    if not math.isfinite(duration_seconds) or duration_seconds < 0.0:
        return []
    count = math.floor(duration_seconds / step_seconds + _STEP_EPSILON) + 1
    return [index * step_seconds for index in range(count)]


def build_db_timeline(
    buffer: AudioBuffer | None,
    duration_seconds: float,
    min_db: float,
    max_db: float,
    *,
    step_seconds: float = TIMELINE_STEP_SECONDS,
    floor_db: float = DB_FLOOR,
) -> list[TimelineSample]:
    """Samples the buffer at a fixed step and clamps loudness to a range.

    Args:
        buffer: Decoded audio, or ``None`` to read silence throughout.
        duration_seconds: Clip length to cover, inclusive of the end point.
        min_db: Lower clamp bound.
        max_db: Upper clamp bound.
        step_seconds: Sampling step in seconds.
        floor_db: dB value used for zero amplitude before clamping.

    Returns:
        Ordered samples with times rounded to two decimals.
    """
    times = timeline_times(duration_seconds, step_seconds=step_seconds)
    if not times:
        return []
    db_values = amplitudes_to_db(amplitudes_at_times(buffer, times), floor_db=floor_db)
    clamped = np.clip(db_values, min_db, max_db)
    timeline = [
        TimelineSample(time_seconds=round(time, 2), db=float(db))
        for time, db in zip(times, clamped)
    ]
    logger.debug(
        "Built dB timeline with %s samples over %.2fs.", len(timeline), duration_seconds
    )
    return timeline


def db_at_time(
    timeline: Sequence[TimelineSample],
    time_seconds: float,
    *,
    step_seconds: float = TIMELINE_STEP_SECONDS,
) -> float:
    """Returns the loudness of the sample nearest `time_seconds`, or NaN.

    Times exactly halfway between two samples resolve to the later one.
    """
    if not timeline or not math.isfinite(time_seconds):
        return math.nan
    index = math.floor(time_seconds / step_seconds + 0.5)
    index = min(max(index, 0), len(timeline) - 1)
    return timeline[index].db
