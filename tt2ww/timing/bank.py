"""Remapping of an edited word list onto a previously obtained timestamp bank."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from tt2ww.domain import WordWindow
from tt2ww.utils.logger import get_logger

MIN_WORD_SECONDS = 0.05

logger: logging.Logger = get_logger(__name__)


def _lerp(start: float, end: float, fraction: float) -> float:
    return start + (end - start) * fraction


def remap_to_timestamp_bank(
    words: Sequence[str],
    bank: Sequence[WordWindow],
    duration_seconds: float,
    *,
    min_word_seconds: float = MIN_WORD_SECONDS,
) -> list[WordWindow]:
    """Assigns timings to `words` by proportional position within `bank`.

    Word `i` of `N` sits at fractional bank position `i / (N - 1) * (M - 1)`;
    its start and end interpolate linearly between the bracketing bank
    entries. This keeps the shape of the original timing when the word count
    changed after editing. It is an approximation, not a re-alignment.

    Args:
        words: Edited word tokens.
        bank: Trusted timings, e.g. from a transcription service.
        duration_seconds: Clip length; results are clamped into it.
        min_word_seconds: Minimum window width.

    Returns:
        One window per word inside `[0, duration_seconds]`, at least
        `min_word_seconds` wide unless the clip itself is shorter.
    """
    if not words or not bank:
        return []

    word_count = len(words)
    last_entry = len(bank) - 1
    upper_bound = max(0.0, duration_seconds)
    windows: list[WordWindow] = []
    for index, word in enumerate(words):
        position = 0.0 if word_count == 1 else index / (word_count - 1) * last_entry
        lower_entry = bank[math.floor(position)]
        upper_entry = bank[math.ceil(position)]
        fraction = position - math.floor(position)

        start = _lerp(lower_entry.start_seconds, upper_entry.start_seconds, fraction)
        end = _lerp(lower_entry.end_seconds, upper_entry.end_seconds, fraction)
        start = min(max(start, 0.0), upper_bound)
        end = min(max(end, 0.0), upper_bound)
        if end - start < min_word_seconds:
            end = start + min_word_seconds
            if end > upper_bound:
                # Clips shorter than the minimum width get the whole clip.
                end = upper_bound
                start = max(0.0, end - min_word_seconds)
        windows.append(WordWindow(word=word, start_seconds=start, end_seconds=end))

    if word_count != len(bank):
        logger.debug(
            "Remapped %s edited words onto %s bank timings.", word_count, len(bank)
        )
    return windows
