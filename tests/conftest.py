from collections.abc import Callable, Generator, Sequence

import numpy as np
import pytest

import tt2ww.config as config
from tt2ww.domain import AudioBuffer

SAMPLE_RATE = 1000


@pytest.fixture(autouse=True)
def _reset_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> Generator[None, None, None]:
    """Keeps global settings stable and output files inside a temp folder."""
    for name in (
        "TT2WW_MIN_DB",
        "TT2WW_MAX_DB",
        "TT2WW_MODE",
        "TT2WW_METHOD",
        "TT2WW_MIN_PX",
        "TT2WW_MAX_PX",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TT2WW_OUTPUT_DIR", str(tmp_path_factory.mktemp("output")))
    monkeypatch.setenv("TT2WW_AUDIO_RETRY_DELAY", "0")
    config.reload_settings()
    yield
    monkeypatch.undo()
    config.reload_settings()


@pytest.fixture(autouse=True)
def _silence_halo(monkeypatch: pytest.MonkeyPatch) -> None:
    """Replace Halo spinners with a no-op context manager for tests."""

    class _DummyHalo:
        def __init__(self, *args, **kwargs):
            self.text = kwargs.get("text")

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

    monkeypatch.setattr("tt2ww.utils.csv_export.Halo", _DummyHalo)
    monkeypatch.setattr("tt2ww.__main__.Halo", _DummyHalo)


@pytest.fixture
def make_buffer() -> Callable[..., AudioBuffer]:
    """Builds buffers from `(seconds, amplitude)` constant-level segments."""

    def _make_buffer(
        segments: Sequence[tuple[float, float]],
        *,
        channels: int = 1,
        sample_rate: int = SAMPLE_RATE,
    ) -> AudioBuffer:
        parts = [
            np.full(int(round(seconds * sample_rate)), amplitude, dtype=np.float32)
            for seconds, amplitude in segments
        ]
        mono = np.concatenate(parts) if parts else np.zeros(0, dtype=np.float32)
        return AudioBuffer(
            sample_rate=sample_rate,
            channels=np.tile(mono, (channels, 1)),
        )

    return _make_buffer
