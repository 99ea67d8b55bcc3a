"""Audio decoding into channel-first buffers."""

from __future__ import annotations

import logging
import time
import warnings

import librosa
import numpy as np
import soundfile as sf
from numpy.typing import NDArray

from tt2ww.config import get_settings
from tt2ww.domain import AudioBuffer
from tt2ww.errors import InvalidAudioError
from tt2ww.utils.logger import get_logger

logger: logging.Logger = get_logger(__name__)


def _channels_first(audio: NDArray[np.floating], *, frames_first: bool) -> NDArray[np.float32]:
    """Returns audio shaped `(channels, samples)` as float32."""
    array = np.asarray(audio, dtype=np.float32)
    if array.ndim == 1:
        return array[np.newaxis, :]
    if array.ndim != 2:
        raise InvalidAudioError(f"Unsupported audio array shape {array.shape}.")
    return np.ascontiguousarray(array.T if frames_first else array)


def _prepare_audio_buffer(
    channels: NDArray[np.float32],
    sample_rate: int,
    *,
    max_duration_seconds: float,
) -> AudioBuffer:
    """Validates decoded samples and wraps them in an `AudioBuffer`."""
    if channels.size == 0 or channels.shape[-1] == 0:
        raise InvalidAudioError("Decoded audio contains no samples.")
    buffer = AudioBuffer(sample_rate=int(sample_rate), channels=channels)
    if buffer.duration_seconds > max_duration_seconds:
        raise InvalidAudioError(
            f"File too long ({buffer.duration_seconds:.2f}s); "
            f"max is {max_duration_seconds:.0f}s."
        )
    return buffer


def _decode_with_librosa(file_path: str) -> tuple[NDArray[np.float32], int]:
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore")
        audio, sample_rate = librosa.load(file_path, sr=None, mono=False)
    return _channels_first(audio, frames_first=False), int(sample_rate)


def _decode_with_soundfile(file_path: str) -> tuple[NDArray[np.float32], int]:
    with sf.SoundFile(file_path) as sound_file:
        audio = sound_file.read(dtype="float32")
        sample_rate = sound_file.samplerate
    return _channels_first(audio, frames_first=True), int(sample_rate)


def read_audio_file(file_path: str) -> AudioBuffer:
    """Decodes an audio file at its native sample rate, keeping all channels.

    librosa is tried first and soundfile is the fallback within each attempt.
    Samples are not normalized.

    Arguments:
        file_path (str): Path to the audio file.

    Returns:
        AudioBuffer: Decoded audio.

    Raises:
        InvalidAudioError: If decoding fails on every attempt, or the result is
            empty or longer than the configured maximum duration.
    """
    settings = get_settings().audio_read
    logger.debug("Starting to read audio file: %s", file_path)
    for attempt in range(settings.max_retries):
        logger.debug("Attempt %s to read audio file using librosa.", attempt + 1)
        try:
            channels, sample_rate = _decode_with_librosa(file_path)
        except Exception as err:
            logger.warning("Librosa failed to read audio file: %s", err)
            logger.warning("Falling back to soundfile...")
            try:
                channels, sample_rate = _decode_with_soundfile(file_path)
            except Exception as fallback_err:
                logger.warning("Soundfile also failed: %s", fallback_err)
                if attempt + 1 < settings.max_retries:
                    logger.info(
                        "Retrying with librosa in %s seconds...",
                        settings.retry_delay_seconds,
                    )
                    time.sleep(settings.retry_delay_seconds)
                continue

        buffer = _prepare_audio_buffer(
            channels,
            sample_rate,
            max_duration_seconds=settings.max_duration_seconds,
        )
        logger.debug(
            "Read %s (%s channel(s), %s Hz, %.2fs).",
            file_path,
            buffer.number_of_channels,
            buffer.sample_rate,
            buffer.duration_seconds,
        )
        return buffer

    logger.error(
        "Failed to read audio file %s after %s retries.",
        file_path,
        settings.max_retries,
    )
    raise InvalidAudioError(f"Error reading {file_path}")
