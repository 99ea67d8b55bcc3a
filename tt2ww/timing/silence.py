"""Leading-silence detection and correction for evenly spaced words."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from tt2ww.domain import TimelineSample, WordWindow
from tt2ww.utils.logger import get_logger

THRESHOLD_OFFSET_DB = 5.0
THRESHOLD_CEILING_DB = -40.0
MIN_OFFSET_SECONDS = 0.5

logger: logging.Logger = get_logger(__name__)


def speech_threshold_db(
    min_db: float,
    *,
    threshold_offset_db: float = THRESHOLD_OFFSET_DB,
    threshold_ceiling_db: float = THRESHOLD_CEILING_DB,
) -> float:
    """Loudness above which the timeline is considered to contain speech."""
    return max(min_db + threshold_offset_db, threshold_ceiling_db)


def find_speech_onset(
    timeline: Sequence[TimelineSample],
    min_db: float,
    *,
    threshold_offset_db: float = THRESHOLD_OFFSET_DB,
    threshold_ceiling_db: float = THRESHOLD_CEILING_DB,
) -> float | None:
    """Returns the time of the first sample at or above the speech threshold."""
    threshold = speech_threshold_db(
        min_db,
        threshold_offset_db=threshold_offset_db,
        threshold_ceiling_db=threshold_ceiling_db,
    )
    for sample in timeline:
        if sample.db >= threshold:
            return sample.time_seconds
    return None


def apply_leading_silence_offset(
    windows: Sequence[WordWindow],
    timeline: Sequence[TimelineSample],
    duration_seconds: float,
    min_db: float,
    *,
    min_offset_seconds: float = MIN_OFFSET_SECONDS,
    threshold_offset_db: float = THRESHOLD_OFFSET_DB,
    threshold_ceiling_db: float = THRESHOLD_CEILING_DB,
) -> tuple[list[WordWindow], float]:
    """Shifts windows forward so the first word starts when speech starts.

    Only applies when the detected onset is later than `min_offset_seconds`.
    Shifted windows are clamped to the clip; windows pushed entirely past
    the end are dropped.

    Returns:
        The corrected windows and the applied offset (0.0 when unchanged).
    """
    onset = find_speech_onset(
        timeline,
        min_db,
        threshold_offset_db=threshold_offset_db,
        threshold_ceiling_db=threshold_ceiling_db,
    )
    if onset is None or onset <= min_offset_seconds or not windows:
        return list(windows), 0.0

    shifted: list[WordWindow] = []
    for window in windows:
        start = min(window.start_seconds + onset, duration_seconds)
        if start >= duration_seconds:
            continue
        end = min(window.end_seconds + onset, duration_seconds)
        shifted.append(window._replace(start_seconds=start, end_seconds=end))

    dropped = len(windows) - len(shifted)
    logger.info(
        "Leading silence of %.2fs detected; shifted word timings forward%s.",
        onset,
        f" and dropped {dropped} trailing words" if dropped else "",
    )
    return shifted, onset
