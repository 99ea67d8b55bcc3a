"""Parsing of `m:ss` marker lines paired with lines of words."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from tt2ww.domain import WordWindow
from tt2ww.timing.spacing import tokenize
from tt2ww.utils.logger import get_logger

_TIMESTAMP_LINE = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIMESTAMP_MARKER = re.compile(r"^\d{1,2}:\d{2}$", re.MULTILINE)

logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class TimestampedSegment:
    """Words spoken from `start_seconds` until the next segment starts."""

    start_seconds: float
    words: tuple[str, ...]


def has_timestamp_markers(text: str) -> bool:
    """Returns whether any line of `text` is a bare `m:ss` marker."""
    return bool(_TIMESTAMP_MARKER.search(text or ""))


def parse_timestamped_text(text: str) -> list[TimestampedSegment]:
    """Parses alternating timestamp and word lines into segments.

    Blank lines are ignored. A timestamp line followed by a line of words
    forms one segment and both lines are consumed. Any other line is skipped.
    """
    lines = [line.strip() for line in (text or "").strip().splitlines() if line.strip()]
    segments: list[TimestampedSegment] = []
    index = 0
    while index < len(lines):
        match = _TIMESTAMP_LINE.match(lines[index])
        if match is None or index + 1 >= len(lines):
            logger.debug("Skipping unpaired line %s: %r", index + 1, lines[index])
            index += 1
            continue
        minutes, seconds = int(match.group(1)), int(match.group(2))
        segments.append(
            TimestampedSegment(
                start_seconds=float(minutes * 60 + seconds),
                words=tuple(tokenize(lines[index + 1])),
            )
        )
        index += 2
    return segments


def make_timestamps_from_segments(
    segments: Sequence[TimestampedSegment],
    duration_seconds: float,
) -> list[WordWindow]:
    """Spaces each segment's words uniformly until the next segment starts.

    The last segment runs until `duration_seconds`.
    """
    windows: list[WordWindow] = []
    for index, segment in enumerate(segments):
        if not segment.words:
            continue
        start = segment.start_seconds
        if index + 1 < len(segments):
            end = segments[index + 1].start_seconds
        else:
            end = duration_seconds
        # Out-of-order markers collapse to zero-width windows.
        end = max(end, start)
        word_seconds = (end - start) / len(segment.words)
        for position, word in enumerate(segment.words):
            windows.append(
                WordWindow(
                    word=word,
                    start_seconds=start + position * word_seconds,
                    end_seconds=min(start + (position + 1) * word_seconds, end),
                )
            )
    return windows
