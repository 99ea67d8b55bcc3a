"""Word timing strategies: even spacing, timestamped text, and bank remapping."""

from .bank import remap_to_timestamp_bank
from .silence import apply_leading_silence_offset, find_speech_onset, speech_threshold_db
from .spacing import ends_with_pause, make_even_timestamps, tokenize
from .timestamped_text import (
    TimestampedSegment,
    has_timestamp_markers,
    make_timestamps_from_segments,
    parse_timestamped_text,
)

__all__ = [
    "TimestampedSegment",
    "apply_leading_silence_offset",
    "ends_with_pause",
    "find_speech_onset",
    "has_timestamp_markers",
    "make_even_timestamps",
    "make_timestamps_from_segments",
    "parse_timestamped_text",
    "remap_to_timestamp_bank",
    "speech_threshold_db",
    "tokenize",
]
