"""Canonical phase names for generate workflow observability."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

PHASE_GENERATE: Final[str] = "generate"
PHASE_AUDIO_DECODE: Final[str] = "audio_decode"
PHASE_TIMELINE_BUILD: Final[str] = "timeline_build"
PHASE_WORD_TIMING: Final[str] = "word_timing"
PHASE_LOUDNESS_AGGREGATION: Final[str] = "loudness_aggregation"
PHASE_PITCH_ESTIMATION: Final[str] = "pitch_estimation"
PHASE_OUTPUT: Final[str] = "output"

PHASE_LABELS: Final[Mapping[str, str]] = {
    PHASE_GENERATE: "Generate",
    PHASE_AUDIO_DECODE: "Audio decode",
    PHASE_TIMELINE_BUILD: "dB timeline build",
    PHASE_WORD_TIMING: "Word timing",
    PHASE_LOUDNESS_AGGREGATION: "Loudness aggregation",
    PHASE_PITCH_ESTIMATION: "Pitch estimation",
    PHASE_OUTPUT: "Output",
}


def phase_label(phase_name: str) -> str:
    """Returns a human-readable label for one phase identifier."""
    label = PHASE_LABELS.get(phase_name)
    if label is not None:
        return label
    fallback = phase_name.strip().replace("_", " ")
    if not fallback:
        return "Workflow step"
    return fallback[0].upper() + fallback[1:]
