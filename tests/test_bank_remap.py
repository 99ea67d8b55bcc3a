"""Tests for remapping edited words onto a timestamp bank."""

import pytest

from tt2ww.domain import WordWindow
from tt2ww.timing import remap_to_timestamp_bank

BANK = [
    WordWindow("one", 0.0, 1.0),
    WordWindow("two", 1.0, 2.0),
    WordWindow("three", 2.0, 3.0),
]


def test_remap_interpolates_between_bracketing_bank_entries() -> None:
    """Five words over three entries should sit at positions 0, .5, 1, 1.5, 2."""
    windows = remap_to_timestamp_bank(["a", "b", "c", "d", "e"], BANK, 3.0)

    assert [(w.start_seconds, w.end_seconds) for w in windows] == [
        (0.0, 1.0),
        (0.5, 1.5),
        (1.0, 2.0),
        (1.5, 2.5),
        (2.0, 3.0),
    ]
    assert all(
        later.start_seconds > earlier.start_seconds
        for earlier, later in zip(windows, windows[1:])
    )
    assert windows[0].start_seconds == 0.0
    assert windows[-1].end_seconds == 3.0


def test_remap_keeps_bank_timing_when_word_count_is_unchanged() -> None:
    """Equal counts should reproduce the bank timings with the new words."""
    windows = remap_to_timestamp_bank(["uno", "dos", "tres"], BANK, 3.0)

    assert windows == [
        WordWindow("uno", 0.0, 1.0),
        WordWindow("dos", 1.0, 2.0),
        WordWindow("tres", 2.0, 3.0),
    ]


def test_remap_single_word_uses_first_bank_entry() -> None:
    """A single edited word should map to position zero."""
    assert remap_to_timestamp_bank(["solo"], BANK, 3.0) == [WordWindow("solo", 0.0, 1.0)]


def test_remap_clamps_into_clip_and_enforces_minimum_width() -> None:
    """Bank times past the clip end should clamp and keep a positive width."""
    bank = [WordWindow("a", 0.0, 0.0), WordWindow("b", 4.0, 5.0)]

    windows = remap_to_timestamp_bank(["x", "y"], bank, 3.0)

    assert windows[0].start_seconds == 0.0
    assert windows[0].end_seconds == pytest.approx(0.05)
    assert windows[1].end_seconds == 3.0
    assert windows[1].start_seconds == pytest.approx(2.95)
    assert all(w.end_seconds > w.start_seconds for w in windows)


def test_remap_returns_empty_without_words_or_bank() -> None:
    """Missing inputs should produce no windows."""
    assert remap_to_timestamp_bank([], BANK, 3.0) == []
    assert remap_to_timestamp_bank(["a"], [], 3.0) == []


def test_remap_stays_inside_clips_shorter_than_minimum_width() -> None:
    """A tiny clip caps every window at its end instead of overrunning it."""
    windows = remap_to_timestamp_bank(["x", "y"], BANK, 0.02)

    assert windows == [WordWindow("x", 0.0, 0.02), WordWindow("y", 0.0, 0.02)]
