"""Behavior tests for the generate pipeline and its session wrapper."""

import dataclasses
import math

import pytest

import tt2ww.runtime.pipeline as pipeline
from tt2ww.config import get_settings
from tt2ww.domain import MappingConfig, WordWindow
from tt2ww.errors import EmptyInputError, InvalidRangeError
from tt2ww.runtime import GenerationSession, generate
from tt2ww.runtime.phase_contract import PHASE_GENERATE, PHASE_LOUDNESS_AGGREGATION

SPEECH_DB = 20.0 * math.log10(0.5)


@pytest.fixture
def speech_buffer(make_buffer):
    """Just under a second of silence, then steady speech until 4.0s."""
    return make_buffer([(0.98, 0.0), (3.02, 0.5)])


def test_generate_is_idempotent(speech_buffer) -> None:
    """Identical inputs must give identical results."""
    config = MappingConfig()

    first = generate(speech_buffer, "one two three", config)
    second = generate(speech_buffer, "one two three", config)

    assert first == second
    assert PHASE_GENERATE in first.phase_timings_seconds
    assert PHASE_LOUDNESS_AGGREGATION in first.phase_timings_seconds


def test_even_spacing_is_shifted_past_leading_silence(speech_buffer) -> None:
    """Plain text is spaced evenly and moved to the detected speech onset."""
    result = generate(speech_buffer, "one two three", MappingConfig())

    assert result.timing_source == "even"
    assert result.onset_offset_seconds == pytest.approx(1.0)
    assert [record.word for record in result.records] == ["one", "two", "three"]
    assert result.records[0].start_seconds == pytest.approx(1.0)
    assert result.records[-1].end_seconds == pytest.approx(4.0)
    assert result.records[0].db == pytest.approx(SPEECH_DB, abs=1e-4)
    assert all(
        record.db_max == pytest.approx(SPEECH_DB, abs=1e-4) for record in result.records
    )
    assert result.status_message() == "Generated 3 words • Duration: 4.00s"


def test_timestamped_text_takes_precedence_over_bank(speech_buffer) -> None:
    """Marker lines define the timing even when a bank is loaded."""
    bank = [WordWindow("x", 0.0, 4.0)]

    result = generate(
        speech_buffer,
        "0:00\none two\n0:02\nthree",
        MappingConfig(),
        timestamp_bank=bank,
    )

    assert result.timing_source == "timestamped"
    assert result.onset_offset_seconds == 0.0
    assert [
        (record.word, record.start_seconds, record.end_seconds)
        for record in result.records
    ] == [("one", 0.0, 1.0), ("two", 1.0, 2.0), ("three", 2.0, 4.0)]


def test_bank_is_used_for_plain_text(speech_buffer) -> None:
    """Plain text is remapped onto a loaded bank instead of spaced evenly."""
    bank = [WordWindow("a", 1.0, 2.0), WordWindow("b", 2.0, 3.0)]

    result = generate(speech_buffer, "alpha beta", MappingConfig(), timestamp_bank=bank)

    assert result.timing_source == "bank"
    assert [
        (record.word, record.start_seconds, record.end_seconds)
        for record in result.records
    ] == [("alpha", 1.0, 2.0), ("beta", 2.0, 3.0)]


def test_generate_validates_inputs(make_buffer, speech_buffer) -> None:
    """Range, text, timestamps, and duration are checked before processing."""
    with pytest.raises(InvalidRangeError, match="Max dB must be greater"):
        generate(speech_buffer, "hi", MappingConfig(min_db=-10.0, max_db=-10.0))
    with pytest.raises(EmptyInputError, match="Please enter text"):
        generate(speech_buffer, "   \n", MappingConfig())
    with pytest.raises(EmptyInputError, match="No valid timestamps"):
        generate(speech_buffer, "0:05", MappingConfig())
    with pytest.raises(EmptyInputError, match="Invalid audio duration"):
        generate(make_buffer([]), "hi", MappingConfig())


def test_settings_control_pause_length(speech_buffer) -> None:
    """Timing constants flow in from application settings."""
    settings = get_settings()
    no_pause = dataclasses.replace(
        settings,
        timing=dataclasses.replace(settings.timing, pause_seconds=0.0),
        silence=dataclasses.replace(settings.silence, min_offset_seconds=10.0),
    )

    result = generate(speech_buffer, "one, two", MappingConfig(), settings=no_pause)

    assert result.records[0].end_seconds == pytest.approx(2.0)
    assert result.records[1].start_seconds == pytest.approx(2.0)


def test_generate_with_pitch_fills_pitch_field(speech_buffer) -> None:
    """A constant signal has no periodicity, so pitch stays empty."""
    result = generate(speech_buffer, "one two", MappingConfig(), estimate_pitch=True)

    assert all(record.pitch_hz is None for record in result.records)


def test_session_requires_audio_before_generate() -> None:
    """Generating without loaded audio is a user error."""
    session = GenerationSession()

    with pytest.raises(EmptyInputError, match="upload an audio file"):
        session.generate("hello", MappingConfig())
    assert math.isnan(session.db_at_time(0.0))


def test_session_keeps_bank_and_result_until_new_audio(
    monkeypatch: pytest.MonkeyPatch, speech_buffer
) -> None:
    """Loading audio resets the previous bank and result."""
    monkeypatch.setattr(pipeline, "read_audio_file", lambda _path: speech_buffer)
    session = GenerationSession()
    session.load_audio("speech.wav")
    session.set_timestamp_bank([WordWindow("a", 1.0, 4.0)])

    result = session.generate("hello", MappingConfig())

    assert result.timing_source == "bank"
    assert session.last_result is result
    assert session.db_at_time(0.0) == -60.0
    assert session.db_at_time(2.0) == pytest.approx(SPEECH_DB, abs=1e-4)

    session.load_audio("other.wav")

    assert session.timestamp_bank == []
    assert session.last_result is None
