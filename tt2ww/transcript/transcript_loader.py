"""
Transcript loading for externally time-stamped word lists.

A transcript is produced by a separate speech-to-text process and stored as
either a JSON list of `{"word", "start", "end"}` objects or a CSV file with
`word,start,end` columns. Loaded transcripts serve as timestamp banks.

Functions:
    - format_transcript: Converts raw word entries into sorted word windows.
    - load_transcript: Reads a JSON or CSV transcript file.
"""

from __future__ import annotations

import csv
import json
import logging
import math
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from tt2ww.domain import WordWindow
from tt2ww.errors import TranscriptFormatError
from tt2ww.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)


def _entry_time(entry: Mapping[str, Any], key: str) -> float:
    value = entry.get(key, entry.get(f"{key}_seconds"))
    seconds = float(value)
    if not math.isfinite(seconds):
        raise ValueError(f"{key} is not finite")
    return seconds


def format_transcript(entries: Iterable[Any]) -> list[WordWindow]:
    """
    Converts raw transcript entries into word windows ordered by start time.

    Entries without a word, with unparsable times, or with `end < start` are
    skipped with a warning.

    Arguments:
        entries (Iterable[Any]): Mappings with `word`, `start`, and `end` keys.

    Returns:
        list[WordWindow]: Valid word windows sorted by start time.
    """
    windows: list[WordWindow] = []
    skipped = 0
    for entry in entries:
        try:
            if not isinstance(entry, Mapping):
                raise ValueError("entry is not an object")
            word = str(entry.get("word") or "").strip()
            if not word:
                raise ValueError("missing word")
            start = _entry_time(entry, "start")
            end = _entry_time(entry, "end")
            if end < start:
                raise ValueError("end precedes start")
        except (TypeError, ValueError) as err:
            skipped += 1
            logger.debug("Skipping transcript entry %r: %s", entry, err)
            continue
        windows.append(WordWindow(word=word, start_seconds=start, end_seconds=end))

    if skipped:
        logger.warning("Skipped %s invalid transcript entries.", skipped)
    return sorted(windows, key=lambda window: window.start_seconds)


def load_transcript(file_path: str | Path) -> list[WordWindow]:
    """
    Loads word timings from a JSON or CSV transcript file.

    Arguments:
        file_path (str | Path): Path to a `.json` or `.csv` transcript.

    Returns:
        list[WordWindow]: Word windows sorted by start time.

    Raises:
        TranscriptFormatError: If the file cannot be read or parsed.
    """
    path = Path(file_path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as err:
        raise TranscriptFormatError(f"Could not read transcript {path}: {err}") from err

    if path.suffix.lower() == ".csv":
        reader = csv.DictReader(text.splitlines())
        if not reader.fieldnames or "word" not in reader.fieldnames:
            raise TranscriptFormatError(f"Transcript CSV {path} needs a 'word' column.")
        entries: list[Any] = list(reader)
    else:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as err:
            raise TranscriptFormatError(f"Transcript {path} is not valid JSON: {err}") from err
        if isinstance(payload, Mapping):
            payload = payload.get("words")
        if not isinstance(payload, list):
            raise TranscriptFormatError(f"Transcript {path} must contain a list of words.")
        entries = payload

    windows = format_transcript(entries)
    logger.info("Loaded %s timed words from %s", len(windows), path)
    return windows
