"""Tests for m:ss marker parsing and per-segment spacing."""

import pytest

from tt2ww.timing import (
    TimestampedSegment,
    has_timestamp_markers,
    make_timestamps_from_segments,
    parse_timestamped_text,
)


def test_has_timestamp_markers_detects_marker_lines() -> None:
    """Only whole-line `m:ss` markers should count."""
    assert has_timestamp_markers("intro\n0:05\nhello there")
    assert has_timestamp_markers("12:30\nlate words")
    assert not has_timestamp_markers("meet at 10:30 today")
    assert not has_timestamp_markers("0:5\nwords")


def test_parse_timestamped_text_pairs_markers_with_word_lines() -> None:
    """Each marker should take the next non-blank line as its words."""
    text = "0:00\nHello there\n\n0:04\nGeneral Kenobi\n1:02\nYou are a bold one"

    segments = parse_timestamped_text(text)

    assert segments == [
        TimestampedSegment(0.0, ("Hello", "there")),
        TimestampedSegment(4.0, ("General", "Kenobi")),
        TimestampedSegment(62.0, ("You", "are", "a", "bold", "one")),
    ]


def test_parse_timestamped_text_skips_malformed_and_unpaired_lines() -> None:
    """Stray text, bad markers, and a trailing marker should be skipped."""
    text = "stray words\n0:7\nnot a marker\n0:02\nkept words\n0:09"

    segments = parse_timestamped_text(text)

    assert segments == [TimestampedSegment(2.0, ("kept", "words"))]


def test_parse_timestamped_text_returns_empty_without_valid_segments() -> None:
    """Text with no usable marker pair should yield no segments."""
    assert parse_timestamped_text("0:05") == []
    assert parse_timestamped_text("") == []


def test_segments_space_words_until_next_segment() -> None:
    """Words share their segment span; the last segment ends at the clip end."""
    segments = [
        TimestampedSegment(0.0, ("a", "b")),
        TimestampedSegment(4.0, ("c", "d", "e", "f")),
    ]

    windows = make_timestamps_from_segments(segments, 6.0)

    assert [(w.word, w.start_seconds, w.end_seconds) for w in windows] == [
        ("a", 0.0, 2.0),
        ("b", 2.0, 4.0),
        ("c", 4.0, 4.5),
        ("d", 4.5, 5.0),
        ("e", 5.0, 5.5),
        ("f", 5.5, 6.0),
    ]


def test_segments_out_of_order_collapse_to_zero_width() -> None:
    """A marker later than its successor should not produce inverted windows."""
    segments = [
        TimestampedSegment(5.0, ("late",)),
        TimestampedSegment(2.0, ("early",)),
    ]

    windows = make_timestamps_from_segments(segments, 8.0)

    assert windows[0].start_seconds == windows[0].end_seconds == 5.0
    assert windows[1].end_seconds == pytest.approx(8.0)
