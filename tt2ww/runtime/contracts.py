"""Result contracts for generate runs."""

from __future__ import annotations

from dataclasses import dataclass, field

from tt2ww.domain import MappingConfig, TimelineSample, TimingSource, WordRecord


@dataclass(frozen=True)
class GenerationResult:
    """Output of one generate run.

    Attributes:
        records: Word records in time order.
        timeline: The dB timeline the records were aggregated from.
        timing_source: Which word timing strategy produced the windows.
        duration_seconds: Clip duration used for timing.
        onset_offset_seconds: Leading-silence shift applied to even spacing.
        config: The mapping configuration of the run.
        phase_timings_seconds: Elapsed seconds per pipeline phase.
    """

    records: list[WordRecord]
    timeline: list[TimelineSample]
    timing_source: TimingSource
    duration_seconds: float
    onset_offset_seconds: float
    config: MappingConfig
    phase_timings_seconds: dict[str, float] = field(
        default_factory=dict, compare=False
    )

    @property
    def word_count(self) -> int:
        return len(self.records)

    def status_message(self) -> str:
        """Short summary for the presentation layer."""
        return (
            f"Generated {self.word_count} words • "
            f"Duration: {self.duration_seconds:.2f}s"
        )
