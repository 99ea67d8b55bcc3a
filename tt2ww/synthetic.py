"""Seeded synthetic word timings and loudness for demos without audio."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

import numpy as np

from tt2ww.domain import WordRecord
from tt2ww.utils.logger import get_logger

MIN_SYNTHETIC_WORD_SECONDS = 0.12

logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class SyntheticPreset:
    """Statistical shape of generated timings and loudness.

    Attributes:
        pause_probability: Chance of a pause after each word.
        min_pause_seconds: Shortest generated pause.
        max_pause_seconds: Longest generated pause.
        jitter_fraction: Maximum relative deviation from the base word length.
        smoothing_factor: Weight of the new random target in each dB step.
        spike_probability: Chance a word jumps most of the way to `max_db`.
    """

    pause_probability: float
    min_pause_seconds: float
    max_pause_seconds: float
    jitter_fraction: float
    smoothing_factor: float
    spike_probability: float


SYNTHETIC_PRESETS: Mapping[str, SyntheticPreset] = MappingProxyType(
    {
        "calm": SyntheticPreset(
            pause_probability=0.10,
            min_pause_seconds=0.2,
            max_pause_seconds=0.5,
            jitter_fraction=0.1,
            smoothing_factor=0.2,
            spike_probability=0.0,
        ),
        "conversational": SyntheticPreset(
            pause_probability=0.15,
            min_pause_seconds=0.2,
            max_pause_seconds=0.8,
            jitter_fraction=0.2,
            smoothing_factor=0.3,
            spike_probability=0.05,
        ),
        "dramatic": SyntheticPreset(
            pause_probability=0.25,
            min_pause_seconds=0.3,
            max_pause_seconds=1.0,
            jitter_fraction=0.4,
            smoothing_factor=0.6,
            spike_probability=0.15,
        ),
    }
)


def _lerp(start: float, end: float, fraction: float) -> float:
    return start + (end - start) * fraction


def generate_synthetic(
    words: Sequence[str],
    duration_seconds: float,
    min_db: float,
    max_db: float,
    *,
    seed: int = 0,
    preset: str = "conversational",
) -> list[WordRecord]:
    """Fabricates plausible word records from a seeded random sequence.

    The same seed, words, and parameters always give the same records.

    Raises:
        ValueError: If the preset is unknown.
    """
    shape = SYNTHETIC_PRESETS.get(preset)
    if shape is None:
        raise ValueError(
            f"Unknown preset {preset!r}; expected one of {', '.join(SYNTHETIC_PRESETS)}."
        )
    if not words or not duration_seconds > 0.0:
        return []

    rng = np.random.default_rng(seed)
    base_seconds = duration_seconds / len(words)
    previous_db = _lerp(min_db, max_db, 0.5)
    records: list[WordRecord] = []
    clock = 0.0
    for word in words:
        jitter = (float(rng.random()) - 0.5) * 2.0 * shape.jitter_fraction * base_seconds
        word_seconds = max(MIN_SYNTHETIC_WORD_SECONDS, base_seconds + jitter)
        start = clock
        end = min(duration_seconds, clock + word_seconds)

        target_db = _lerp(min_db, max_db, float(rng.random()))
        smoothed_db = min(
            max(
                previous_db * (1.0 - shape.smoothing_factor)
                + target_db * shape.smoothing_factor,
                min_db,
            ),
            max_db,
        )
        previous_db = smoothed_db
        db = smoothed_db
        if float(rng.random()) < shape.spike_probability:
            db = _lerp(smoothed_db, max_db, 0.7)

        records.append(
            WordRecord(
                word=word,
                start_seconds=start,
                end_seconds=end,
                db=db,
                db_mean=db,
                db_max=db,
            )
        )
        clock = end
        if float(rng.random()) < shape.pause_probability:
            clock += float(
                rng.uniform(shape.min_pause_seconds, shape.max_pause_seconds)
            )
        if clock >= duration_seconds:
            break

    records[-1] = records[-1]._replace(end_seconds=duration_seconds)
    logger.debug(
        "Generated %s synthetic words (seed=%s, preset=%s).", len(records), seed, preset
    )
    return records
