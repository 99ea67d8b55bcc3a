"""Tests for the fixed-step dB timeline builder."""

import math

import pytest

from tt2ww.domain import TimelineSample
from tt2ww.loudness.timeline import build_db_timeline, db_at_time, timeline_times


def test_timeline_covers_clip_inclusive_at_fixed_step(make_buffer) -> None:
    """A 1s clip should produce 21 samples from 0.00 to 1.00."""
    buffer = make_buffer([(1.0, 0.5)])

    timeline = build_db_timeline(buffer, 1.0, -60.0, 0.0)

    assert len(timeline) == 21
    assert timeline[0].time_seconds == 0.0
    assert timeline[-1].time_seconds == 1.0
    assert all(
        later.time_seconds > earlier.time_seconds
        for earlier, later in zip(timeline, timeline[1:])
    )


def test_timeline_clamps_every_value_into_range(make_buffer) -> None:
    """Silence and full-scale samples should clamp to the configured range."""
    buffer = make_buffer([(0.5, 0.0), (0.5, 1.0)])

    timeline = build_db_timeline(buffer, 1.0, -50.0, -10.0)

    assert all(-50.0 <= sample.db <= -10.0 for sample in timeline)
    assert all(math.isfinite(sample.db) for sample in timeline)
    assert timeline[0].db == -50.0
    assert timeline[15].db == -10.0


def test_timeline_reads_silence_past_buffer_end(make_buffer) -> None:
    """The inclusive end sample lies past the last index and reads as floor."""
    buffer = make_buffer([(1.0, 0.5)])

    timeline = build_db_timeline(buffer, 1.0, -60.0, 0.0)

    assert timeline[-1].db == -60.0
    assert timeline[-2].db == pytest.approx(-6.0206, abs=1e-3)


def test_timeline_times_handle_non_multiple_durations() -> None:
    """A duration that is not a step multiple stops at the last full step."""
    times = timeline_times(0.12)

    assert times == pytest.approx([0.0, 0.05, 0.1])


def test_timeline_is_empty_for_invalid_duration() -> None:
    """Negative or non-finite durations should produce no samples."""
    assert build_db_timeline(None, -1.0, -60.0, 0.0) == []
    assert build_db_timeline(None, math.nan, -60.0, 0.0) == []


def test_db_at_time_returns_nearest_sample(make_buffer) -> None:
    """Scrub lookups should pick the nearest step and clamp to the ends."""
    buffer = make_buffer([(0.5, 0.0), (0.5, 1.0)])
    timeline = build_db_timeline(buffer, 1.0, -60.0, 0.0)

    assert db_at_time(timeline, 0.1) == -60.0
    assert db_at_time(timeline, 0.74) == pytest.approx(0.0)
    assert db_at_time(timeline, 50.0) == timeline[-1].db
    assert math.isnan(db_at_time([], 0.0))


def test_db_at_time_rounds_halfway_times_up() -> None:
    """A time midway between samples reads the later sample."""
    timeline = [
        TimelineSample(0.0, -10.0),
        TimelineSample(0.5, -20.0),
        TimelineSample(1.0, -30.0),
    ]

    assert db_at_time(timeline, 0.25, step_seconds=0.5) == -20.0
    assert db_at_time(timeline, 0.75, step_seconds=0.5) == -30.0
    assert db_at_time(timeline, 0.24, step_seconds=0.5) == -10.0
