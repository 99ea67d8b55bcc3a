"""Domain data structures for audio buffers, loudness timelines, and words."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, NamedTuple, get_args

import numpy as np
from numpy.typing import NDArray

from tt2ww.errors import InvalidRangeError

type SizeMode = Literal["neutral", "peak", "silence"]
type AggregationMethod = Literal["mean", "rms", "weighted", "peak_smooth", "median"]
type TimingSource = Literal["even", "timestamped", "bank"]

SIZE_MODES: tuple[str, ...] = get_args(SizeMode.__value__)
AGGREGATION_METHOD_NAMES: tuple[str, ...] = get_args(AggregationMethod.__value__)


@dataclass(frozen=True)
class AudioBuffer:
    """Decoded multi-channel audio, read-only for one processing session.

    Attributes:
        sample_rate: Samples per second.
        channels: Float samples shaped `(number_of_channels, length)`.
    """

    sample_rate: int
    channels: NDArray[np.float32]

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ValueError("sample_rate must be a positive integer.")
        if self.channels.ndim != 2:
            raise ValueError("channels must be shaped (number_of_channels, length).")

    @classmethod
    def from_samples(cls, samples: NDArray[np.floating], sample_rate: int) -> AudioBuffer:
        """Builds a buffer from mono `(n,)` or channel-first `(c, n)` samples."""
        array = np.asarray(samples, dtype=np.float32)
        if array.ndim == 1:
            array = array[np.newaxis, :]
        return cls(sample_rate=int(sample_rate), channels=array)

    @property
    def number_of_channels(self) -> int:
        return int(self.channels.shape[0])

    @property
    def length(self) -> int:
        return int(self.channels.shape[1])

    @property
    def duration_seconds(self) -> float:
        return self.length / float(self.sample_rate)

    def get_channel_samples(self, channel: int) -> NDArray[np.float32]:
        """Returns the sample array for one channel."""
        return self.channels[channel]


class TimelineSample(NamedTuple):
    """Loudness measured at one fixed-step point in time."""

    time_seconds: float
    db: float


class WordWindow(NamedTuple):
    """A word assigned to the time interval `[start_seconds, end_seconds]`."""

    word: str
    start_seconds: float
    end_seconds: float


class WordRecord(NamedTuple):
    """A word window with its representative and auxiliary loudness."""

    word: str
    start_seconds: float
    end_seconds: float
    db: float
    db_mean: float
    db_max: float
    pitch_hz: float | None = None


@dataclass(frozen=True)
class MappingConfig:
    """Caller-supplied settings for one generate run.

    Attributes:
        min_db: Quietest loudness represented (maps to `min_px`).
        max_db: Loudest loudness represented (maps to `max_px`).
        mode: Size curve applied after normalization.
        aggregation_method: Strategy collapsing window samples into one value.
        min_px: Smallest font size in pixels.
        max_px: Largest font size in pixels.
    """

    min_db: float = -60.0
    max_db: float = 0.0
    mode: SizeMode = "neutral"
    aggregation_method: AggregationMethod = "rms"
    min_px: int = 14
    max_px: int = 120

    def validate(self) -> None:
        """Rejects inconsistent settings before any processing starts.

        Raises:
            InvalidRangeError: If `max_db` is not strictly greater than `min_db`.
            ValueError: If the mode, method, or pixel bounds are invalid.
        """
        if not (np.isfinite(self.min_db) and np.isfinite(self.max_db)):
            raise InvalidRangeError("min_db and max_db must be finite numbers.")
        if not self.max_db > self.min_db:
            raise InvalidRangeError("Max dB must be greater than Min dB.")
        if self.mode not in SIZE_MODES:
            raise ValueError(
                f"Unsupported mode {self.mode!r}; expected one of {', '.join(SIZE_MODES)}."
            )
        if self.aggregation_method not in AGGREGATION_METHOD_NAMES:
            raise ValueError(
                f"Unsupported aggregation method {self.aggregation_method!r}; "
                f"expected one of {', '.join(AGGREGATION_METHOD_NAMES)}."
            )
        if self.max_px < self.min_px:
            raise ValueError("max_px must be greater than or equal to min_px.")
