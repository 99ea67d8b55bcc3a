"""Deterministic even word spacing with punctuation pauses."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from tt2ww.domain import WordWindow
from tt2ww.utils.logger import get_logger

PAUSE_SECONDS = 0.15
MIN_USABLE_SECONDS = 0.1
PAUSE_PUNCTUATION = frozenset(".,!?;:")

_WHITESPACE = re.compile(r"\s+")

logger: logging.Logger = get_logger(__name__)


def tokenize(text: str | None) -> list[str]:
    """Splits text on runs of whitespace, dropping empty tokens."""
    return [token for token in _WHITESPACE.split((text or "").strip()) if token]


def ends_with_pause(word: str) -> bool:
    """Returns whether a token ends in pause-inducing punctuation."""
    return bool(word) and word[-1] in PAUSE_PUNCTUATION


def make_even_timestamps(
    words: Sequence[str],
    duration_seconds: float,
    *,
    pause_seconds: float = PAUSE_SECONDS,
    min_usable_seconds: float = MIN_USABLE_SECONDS,
) -> list[WordWindow]:
    """Spreads words uniformly over a clip, pausing after punctuation.

    Every word gets the same share of the speaking time left after one pause
    per punctuated word is set aside. Word length does not affect timing.

    Args:
        words: Word tokens in reading order.
        duration_seconds: Total clip length.
        pause_seconds: Silence inserted after a punctuated word.
        min_usable_seconds: Lower bound on the speaking time.

    Returns:
        Contiguous windows whose last end is exactly `duration_seconds`.
        Words that would start at or after the clip end are dropped.
    """
    if not words or not duration_seconds > 0.0:
        return []

    pause_count = sum(1 for word in words if ends_with_pause(word))
    usable_seconds = max(min_usable_seconds, duration_seconds - pause_count * pause_seconds)
    word_seconds = usable_seconds / len(words)

    windows: list[WordWindow] = []
    clock = 0.0
    for word in words:
        end = min(duration_seconds, clock + word_seconds)
        windows.append(WordWindow(word=word, start_seconds=clock, end_seconds=end))
        clock = end
        if ends_with_pause(word):
            clock = min(duration_seconds, clock + pause_seconds)
        if clock >= duration_seconds:
            break

    windows[-1] = windows[-1]._replace(end_seconds=duration_seconds)
    if len(windows) < len(words):
        logger.debug(
            "Clip ended after %s of %s words; remaining words were not timed.",
            len(windows),
            len(words),
        )
    return windows
