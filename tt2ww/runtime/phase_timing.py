"""Phase-oriented timing and logging helpers."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from time import perf_counter

from tt2ww.runtime.phase_contract import phase_label


def format_duration(duration_seconds: float) -> str:
    """Formats duration in a human-readable style for CLI logs."""
    total_milliseconds = max(0, int(round(duration_seconds * 1000.0)))
    if total_milliseconds <= 0:
        return "<1ms"

    total_seconds, milliseconds = divmod(total_milliseconds, 1000)
    minutes, seconds = divmod(total_seconds, 60)
    parts: list[str] = []
    if minutes > 0:
        parts.append(f"{minutes}m")
    if seconds > 0 or minutes > 0:
        parts.append(f"{seconds}s")
    if milliseconds > 0:
        parts.append(f"{milliseconds}ms")
    return ", ".join(parts)


def log_phase_started(
    logger: logging.Logger, *, phase_name: str, level: int = logging.DEBUG
) -> float:
    """Logs phase start and returns monotonic start timestamp."""
    logger.log(level, "%s started.", phase_label(phase_name))
    return perf_counter()


def log_phase_completed(
    logger: logging.Logger,
    *,
    phase_name: str,
    started_at: float,
    level: int = logging.DEBUG,
) -> float:
    """Logs phase completion and returns elapsed duration in seconds."""
    elapsed_seconds = perf_counter() - started_at
    logger.log(
        level,
        "%s completed in %s.",
        phase_label(phase_name),
        format_duration(elapsed_seconds),
    )
    return elapsed_seconds


def log_phase_failed(
    logger: logging.Logger,
    *,
    phase_name: str,
    started_at: float,
    level: int = logging.WARNING,
) -> float:
    """Logs phase failure duration and returns elapsed duration in seconds."""
    elapsed_seconds = perf_counter() - started_at
    logger.log(
        level,
        "%s failed after %s.",
        phase_label(phase_name),
        format_duration(elapsed_seconds),
    )
    return elapsed_seconds


@contextmanager
def timed_phase(
    logger: logging.Logger,
    phase_name: str,
    timings: dict[str, float] | None = None,
) -> Iterator[None]:
    """Logs start, completion, or failure of the wrapped block.

    When `timings` is given, the elapsed seconds are stored under `phase_name`.
    """
    started_at = log_phase_started(logger, phase_name=phase_name)
    try:
        yield
    except Exception:
        elapsed = log_phase_failed(logger, phase_name=phase_name, started_at=started_at)
        if timings is not None:
            timings[phase_name] = elapsed
        raise
    elapsed = log_phase_completed(logger, phase_name=phase_name, started_at=started_at)
    if timings is not None:
        timings[phase_name] = elapsed
