"""Generate pipeline: audio buffer + word text + mapping -> word records."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from tt2ww.config import AppConfig, get_settings
from tt2ww.domain import (
    AudioBuffer,
    MappingConfig,
    TimelineSample,
    TimingSource,
    WordWindow,
)
from tt2ww.errors import EmptyInputError
from tt2ww.loudness.aggregation import aggregate_word_loudness
from tt2ww.loudness.pitch import attach_pitch
from tt2ww.loudness.timeline import build_db_timeline, db_at_time
from tt2ww.runtime.contracts import GenerationResult
from tt2ww.runtime.phase_contract import (
    PHASE_AUDIO_DECODE,
    PHASE_GENERATE,
    PHASE_LOUDNESS_AGGREGATION,
    PHASE_PITCH_ESTIMATION,
    PHASE_TIMELINE_BUILD,
    PHASE_WORD_TIMING,
)
from tt2ww.runtime.phase_timing import timed_phase
from tt2ww.timing import (
    apply_leading_silence_offset,
    has_timestamp_markers,
    make_even_timestamps,
    make_timestamps_from_segments,
    parse_timestamped_text,
    remap_to_timestamp_bank,
    tokenize,
)
from tt2ww.utils.audio_utils import read_audio_file
from tt2ww.utils.logger import get_logger

logger = get_logger(__name__)


def resolve_word_windows(
    text: str,
    duration_seconds: float,
    timeline: Sequence[TimelineSample],
    config: MappingConfig,
    *,
    timestamp_bank: Sequence[WordWindow] | None = None,
    settings: AppConfig,
) -> tuple[list[WordWindow], TimingSource, float]:
    """Chooses a timing strategy for `text` and returns its windows.

    Text with `m:ss` marker lines is parsed as timestamped segments. Otherwise
    a non-empty timestamp bank is remapped onto the words. Otherwise words are
    spaced evenly and shifted past any leading silence.

    Returns:
        Windows, the strategy used, and the leading-silence offset applied.

    Raises:
        EmptyInputError: If the text holds markers but no valid segments.
    """
    if has_timestamp_markers(text):
        segments = parse_timestamped_text(text)
        if not segments:
            raise EmptyInputError("No valid timestamps found.")
        return make_timestamps_from_segments(segments, duration_seconds), "timestamped", 0.0

    words = tokenize(text)
    if timestamp_bank:
        windows = remap_to_timestamp_bank(
            words,
            timestamp_bank,
            duration_seconds,
            min_word_seconds=settings.timing.min_word_seconds,
        )
        return windows, "bank", 0.0

    windows = make_even_timestamps(
        words,
        duration_seconds,
        pause_seconds=settings.timing.pause_seconds,
        min_usable_seconds=settings.timing.min_usable_seconds,
    )
    corrected, offset = apply_leading_silence_offset(
        windows,
        timeline,
        duration_seconds,
        config.min_db,
        min_offset_seconds=settings.silence.min_offset_seconds,
        threshold_offset_db=settings.silence.threshold_offset_db,
        threshold_ceiling_db=settings.silence.threshold_ceiling_db,
    )
    return corrected, "even", offset


def generate(
    buffer: AudioBuffer,
    text: str,
    config: MappingConfig,
    *,
    timestamp_bank: Sequence[WordWindow] | None = None,
    estimate_pitch: bool = False,
    settings: AppConfig | None = None,
) -> GenerationResult:
    """Runs the full word loudness pipeline once.

    The run is stateless: identical inputs give identical records.

    Args:
        buffer: Fully decoded audio.
        text: Plain words, or alternating `m:ss` and word lines.
        config: Range, size curve, aggregation method, and pixel bounds.
        timestamp_bank: Trusted word timings to remap edited words onto.
        estimate_pitch: Whether to fill `pitch_hz` on each record.
        settings: Application settings; defaults to `get_settings()`.

    Returns:
        Records plus the timeline and timing metadata of the run.

    Raises:
        InvalidRangeError: If `config.max_db <= config.min_db`.
        EmptyInputError: If the text is blank, holds no valid timestamps, or
            the audio duration is not positive.
    """
    active_settings = settings if settings is not None else get_settings()
    config.validate()
    duration_seconds = buffer.duration_seconds
    if not math.isfinite(duration_seconds) or duration_seconds <= 0.0:
        raise EmptyInputError("Invalid audio duration.")
    if not (text or "").strip():
        raise EmptyInputError("Please enter text.")

    timings: dict[str, float] = {}
    with timed_phase(logger, PHASE_GENERATE, timings):
        with timed_phase(logger, PHASE_TIMELINE_BUILD, timings):
            timeline = build_db_timeline(
                buffer,
                duration_seconds,
                config.min_db,
                config.max_db,
                step_seconds=active_settings.timeline.step_seconds,
                floor_db=active_settings.timeline.db_floor,
            )

        with timed_phase(logger, PHASE_WORD_TIMING, timings):
            windows, timing_source, offset = resolve_word_windows(
                text,
                duration_seconds,
                timeline,
                config,
                timestamp_bank=timestamp_bank,
                settings=active_settings,
            )

        with timed_phase(logger, PHASE_LOUDNESS_AGGREGATION, timings):
            records = aggregate_word_loudness(
                windows,
                timeline,
                config.min_db,
                config.max_db,
                config.aggregation_method,
                silence_floor_db=active_settings.timeline.silence_floor_db,
            )

        if estimate_pitch:
            with timed_phase(logger, PHASE_PITCH_ESTIMATION, timings):
                records = attach_pitch(
                    records,
                    buffer,
                    min_hz=active_settings.pitch.min_hz,
                    max_hz=active_settings.pitch.max_hz,
                )

    result = GenerationResult(
        records=records,
        timeline=timeline,
        timing_source=timing_source,
        duration_seconds=duration_seconds,
        onset_offset_seconds=offset,
        config=config,
        phase_timings_seconds=timings,
    )
    logger.info("%s (timing=%s).", result.status_message(), timing_source)
    return result


@dataclass
class GenerationSession:
    """Holds the loaded audio, timestamp bank, and last result between runs.

    Not thread-safe; callers serialize `generate` calls.
    """

    settings: AppConfig = field(default_factory=get_settings)
    buffer: AudioBuffer | None = None
    timestamp_bank: list[WordWindow] = field(default_factory=list)
    last_result: GenerationResult | None = None

    def load_audio(self, file_path: str) -> AudioBuffer:
        """Decodes a new file, discarding any previous audio and result."""
        self.reset()
        timings: dict[str, float] = {}
        with timed_phase(logger, PHASE_AUDIO_DECODE, timings):
            self.buffer = read_audio_file(file_path)
        logger.info(
            "Loaded: %s (%.2fs).", file_path, self.buffer.duration_seconds
        )
        return self.buffer

    def set_timestamp_bank(self, bank: Sequence[WordWindow]) -> None:
        """Stores trusted word timings for later remapping of edited text."""
        self.timestamp_bank = list(bank)

    def generate(
        self,
        text: str,
        config: MappingConfig,
        *,
        estimate_pitch: bool = False,
    ) -> GenerationResult:
        """Runs `generate` against the loaded audio and keeps the result.

        Raises:
            EmptyInputError: If no audio has been loaded.
        """
        if self.buffer is None:
            raise EmptyInputError("Please upload an audio file first.")
        self.last_result = generate(
            self.buffer,
            text,
            config,
            timestamp_bank=self.timestamp_bank or None,
            estimate_pitch=estimate_pitch,
            settings=self.settings,
        )
        return self.last_result

    def db_at_time(self, time_seconds: float) -> float:
        """Loudness of the last timeline near `time_seconds`, or NaN."""
        if self.last_result is None:
            return math.nan
        return db_at_time(
            self.last_result.timeline,
            time_seconds,
            step_seconds=self.settings.timeline.step_seconds,
        )

    def reset(self) -> None:
        """Drops the audio buffer, timestamp bank, and last result."""
        self.buffer = None
        self.timestamp_bank = []
        self.last_result = None
