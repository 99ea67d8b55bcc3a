"""Typed application settings resolved from environment variables.

Settings are immutable once loaded. `reload_settings()` re-reads the
environment (the CLI loads `.env` files first), and `get_settings()` returns
the cached instance.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from tt2ww.domain import MappingConfig

MIN_TIMELINE_STEP_SECONDS = 0.01


@dataclass(frozen=True)
class TimelineConfig:
    """Fixed-step loudness sampling controls."""

    step_seconds: float = 0.05
    db_floor: float = -80.0
    silence_floor_db: float = -60.0


@dataclass(frozen=True)
class TimingConfig:
    """Deterministic word-spacing controls."""

    pause_seconds: float = 0.15
    min_usable_seconds: float = 0.1
    min_word_seconds: float = 0.05


@dataclass(frozen=True)
class SilenceConfig:
    """Leading-silence detection constants."""

    threshold_offset_db: float = 5.0
    threshold_ceiling_db: float = -40.0
    min_offset_seconds: float = 0.5


@dataclass(frozen=True)
class PitchConfig:
    """Coarse autocorrelation pitch search bounds."""

    min_hz: float = 75.0
    max_hz: float = 500.0


@dataclass(frozen=True)
class AudioReadConfig:
    """Audio decode retry and size limits."""

    max_retries: int = 3
    retry_delay_seconds: float = 1.0
    max_duration_seconds: float = 600.0


@dataclass(frozen=True)
class OutputConfig:
    """Output file locations."""

    folder: Path = Path("output")
    csv_file_name: str = "tt2ww_data.csv"


@dataclass(frozen=True)
class AppConfig:
    """Top-level application settings."""

    mapping: MappingConfig = field(default_factory=MappingConfig)
    timeline: TimelineConfig = field(default_factory=TimelineConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    silence: SilenceConfig = field(default_factory=SilenceConfig)
    pitch: PitchConfig = field(default_factory=PitchConfig)
    audio_read: AudioReadConfig = field(default_factory=AudioReadConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def _read_str(name: str, default: str) -> str:
    value = os.getenv(name, "").strip()
    return value or default


def _read_float(name: str, default: float) -> float:
    raw_value = os.getenv(name, "").strip()
    if not raw_value:
        return default
    try:
        return float(raw_value)
    except ValueError as err:
        raise ValueError(f"{name} must be a number, got {raw_value!r}.") from err


def _read_int(name: str, default: int) -> int:
    raw_value = os.getenv(name, "").strip()
    if not raw_value:
        return default
    try:
        return int(raw_value)
    except ValueError as err:
        raise ValueError(f"{name} must be an integer, got {raw_value!r}.") from err


def _read_timeline_step(default: float) -> float:
    step_seconds = _read_float("TT2WW_TIMELINE_STEP", default)
    # Timeline times are rounded to two decimals; finer steps would collide.
    if not step_seconds >= MIN_TIMELINE_STEP_SECONDS:
        raise ValueError(
            f"TT2WW_TIMELINE_STEP must be at least {MIN_TIMELINE_STEP_SECONDS} seconds, "
            f"got {step_seconds}."
        )
    return step_seconds


def _load_settings() -> AppConfig:
    """Builds settings from the current process environment."""
    defaults = AppConfig()
    mapping = MappingConfig(
        min_db=_read_float("TT2WW_MIN_DB", defaults.mapping.min_db),
        max_db=_read_float("TT2WW_MAX_DB", defaults.mapping.max_db),
        mode=_read_str("TT2WW_MODE", defaults.mapping.mode),  # type: ignore[arg-type]
        aggregation_method=_read_str(  # type: ignore[arg-type]
            "TT2WW_METHOD", defaults.mapping.aggregation_method
        ),
        min_px=_read_int("TT2WW_MIN_PX", defaults.mapping.min_px),
        max_px=_read_int("TT2WW_MAX_PX", defaults.mapping.max_px),
    )
    return AppConfig(
        mapping=mapping,
        timeline=TimelineConfig(
            step_seconds=_read_timeline_step(defaults.timeline.step_seconds),
        ),
        timing=TimingConfig(
            pause_seconds=_read_float(
                "TT2WW_PAUSE_SECONDS", defaults.timing.pause_seconds
            ),
        ),
        silence=SilenceConfig(
            threshold_offset_db=_read_float(
                "TT2WW_SILENCE_THRESHOLD_OFFSET_DB",
                defaults.silence.threshold_offset_db,
            ),
            threshold_ceiling_db=_read_float(
                "TT2WW_SILENCE_THRESHOLD_CEILING_DB",
                defaults.silence.threshold_ceiling_db,
            ),
            min_offset_seconds=_read_float(
                "TT2WW_SILENCE_MIN_OFFSET", defaults.silence.min_offset_seconds
            ),
        ),
        pitch=PitchConfig(
            min_hz=_read_float("TT2WW_PITCH_MIN_HZ", defaults.pitch.min_hz),
            max_hz=_read_float("TT2WW_PITCH_MAX_HZ", defaults.pitch.max_hz),
        ),
        audio_read=AudioReadConfig(
            max_retries=max(
                1, _read_int("TT2WW_AUDIO_MAX_RETRIES", defaults.audio_read.max_retries)
            ),
            retry_delay_seconds=_read_float(
                "TT2WW_AUDIO_RETRY_DELAY", defaults.audio_read.retry_delay_seconds
            ),
            max_duration_seconds=_read_float(
                "TT2WW_MAX_DURATION", defaults.audio_read.max_duration_seconds
            ),
        ),
        output=OutputConfig(
            folder=Path(_read_str("TT2WW_OUTPUT_DIR", str(defaults.output.folder))),
        ),
    )


_SETTINGS: AppConfig | None = None


def reload_settings() -> AppConfig:
    """Re-reads the environment and replaces the cached settings."""
    global _SETTINGS
    _SETTINGS = _load_settings()
    return _SETTINGS


def get_settings() -> AppConfig:
    """Returns cached settings, loading them on first access."""
    if _SETTINGS is None:
        return reload_settings()
    return _SETTINGS
