"""Data models for the ingestion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class LogEvent:
    """One row of the event log; ``time`` anchors every offset of the event."""

    time: datetime
    name: str
    audio_data_file: str
    audio_sample_rate: int
    transcript_data_file: str


@dataclass
class AudioSample:
    """An audio level at a frame index, with its absolute instant once aligned."""

    frame: int
    audio_level: float
    ts: datetime | None = None


@dataclass
class TranscriptSegment:
    """A transcript word with a relative start and duration in seconds."""

    start_seconds: float
    duration: float
    word: str
    ts_start: datetime | None = None
    ts_end: datetime | None = None


@dataclass(frozen=True)
class EventSummary:
    """Rows written for a single event."""

    name: str
    audio_rows: int
    transcript_rows: int
    audio_skipped: bool = False


@dataclass
class RunSummary:
    """Aggregated result of one experiment run."""

    experiment: str
    audio_table: str
    transcript_table: str
    audio_skipped: bool = False
    events: list[EventSummary] = field(default_factory=list)

    @property
    def audio_rows(self) -> int:
        return sum(e.audio_rows for e in self.events)

    @property
    def transcript_rows(self) -> int:
        return sum(e.transcript_rows for e in self.events)
