"""Behavior tests for audio decoding and buffer guards."""

from pathlib import Path
from types import SimpleNamespace

import numpy as np
import pytest

from tt2ww.errors import InvalidAudioError
from tt2ww.utils import audio_utils as au


def _settings(max_retries: int = 2, max_duration_seconds: float = 600.0) -> SimpleNamespace:
    return SimpleNamespace(
        audio_read=SimpleNamespace(
            max_retries=max_retries,
            retry_delay_seconds=0.0,
            max_duration_seconds=max_duration_seconds,
        )
    )


def _fail(*_args, **_kwargs):
    raise RuntimeError("decode failure")


class DummySoundFile:
    """Minimal context manager for soundfile fallback tests."""

    samplerate = 16000

    def __init__(self, _path: str) -> None:
        pass

    def __enter__(self) -> "DummySoundFile":
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:
        return None

    def read(self, dtype: str = "float32") -> np.ndarray:
        assert dtype == "float32"
        return np.asarray([[0.2, -0.1], [0.4, 0.3]], dtype=np.float32)


def test_prepare_audio_buffer_rejects_empty_audio() -> None:
    """Empty decoded buffers should fail fast with a clear error."""
    with pytest.raises(OSError, match="contains no samples"):
        au._prepare_audio_buffer(
            np.zeros((1, 0), dtype=np.float32), 16000, max_duration_seconds=10.0
        )


def test_prepare_audio_buffer_rejects_long_audio() -> None:
    """Clips longer than the configured maximum are refused."""
    with pytest.raises(InvalidAudioError, match="File too long"):
        au._prepare_audio_buffer(
            np.zeros((1, 50), dtype=np.float32), 10, max_duration_seconds=4.0
        )


def test_read_audio_file_keeps_channels_from_librosa(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """librosa output is channel-first already and is kept unmixed."""
    audio_path = tmp_path / "stereo.wav"
    audio_path.write_bytes(b"fake-audio")
    stereo = np.asarray([[0.1, 0.2, 0.3], [0.0, -0.2, 0.5]], dtype=np.float32)
    monkeypatch.setattr(au.librosa, "load", lambda *_args, **_kwargs: (stereo, 22050))
    monkeypatch.setattr(au, "get_settings", _settings)

    buffer = au.read_audio_file(str(audio_path))

    assert buffer.sample_rate == 22050
    assert buffer.number_of_channels == 2
    assert buffer.get_channel_samples(1).tolist() == pytest.approx([0.0, -0.2, 0.5])


def test_read_audio_file_uses_soundfile_fallback(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """When librosa fails, soundfile should be used on the same retry cycle."""
    audio_path = tmp_path / "sample.wav"
    audio_path.write_bytes(b"fake-audio")
    monkeypatch.setattr(au.librosa, "load", _fail)
    monkeypatch.setattr(au.sf, "SoundFile", DummySoundFile)
    monkeypatch.setattr(au, "get_settings", _settings)

    buffer = au.read_audio_file(str(audio_path))

    assert buffer.sample_rate == 16000
    assert buffer.length == 2
    assert buffer.get_channel_samples(0).tolist() == pytest.approx([0.2, 0.4])
    assert buffer.get_channel_samples(1).tolist() == pytest.approx([-0.1, 0.3])


def test_read_audio_file_raises_after_all_retries(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Every attempt failing surfaces as an invalid audio error."""
    attempts: list[str] = []

    def _count_and_fail(path, *_args, **_kwargs):
        attempts.append(path)
        raise RuntimeError("decode failure")

    monkeypatch.setattr(au.librosa, "load", _count_and_fail)
    monkeypatch.setattr(au.sf, "SoundFile", _fail)
    monkeypatch.setattr(au, "get_settings", lambda: _settings(max_retries=3))

    with pytest.raises(InvalidAudioError, match="Error reading"):
        au.read_audio_file(str(tmp_path / "broken.wav"))
    assert len(attempts) == 3
