"""Loudness sampling, timeline, aggregation, and pitch helpers."""

from .aggregation import AGGREGATION_METHODS, SILENCE_FLOOR_DB, aggregate_word_loudness
from .pitch import attach_pitch, estimate_pitch
from .sampler import DB_FLOOR, amplitude_at_time, amplitude_to_db, amplitudes_at_times
from .timeline import TIMELINE_STEP_SECONDS, build_db_timeline, db_at_time

__all__ = [
    "AGGREGATION_METHODS",
    "DB_FLOOR",
    "SILENCE_FLOOR_DB",
    "TIMELINE_STEP_SECONDS",
    "aggregate_word_loudness",
    "amplitude_at_time",
    "amplitude_to_db",
    "amplitudes_at_times",
    "attach_pitch",
    "build_db_timeline",
    "db_at_time",
    "estimate_pitch",
]
