"""Convert event-relative offsets into absolute instants.

QuestDB stores timestamps with microsecond resolution, so every offset is
truncated toward zero to a whole number of microseconds before being added to
the event's anchor time. No timezone conversion happens here: derived instants
carry the anchor's ``tzinfo`` (or lack of one).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timedelta
from fractions import Fraction

from process_audio.errors import InvalidConfiguration
from process_audio.ingestion.models import AudioSample, LogEvent, TranscriptSegment

MICROSECONDS_PER_SECOND = 1_000_000


def check_sample_rate(sample_rate: int, event_name: str | None = None) -> None:
    """Raise InvalidConfiguration unless *sample_rate* is a positive number."""
    if sample_rate <= 0:
        where = f" for event {event_name!r}" if event_name else ""
        raise InvalidConfiguration(f"audio sample rate must be positive{where}, got {sample_rate}")


def frame_offset(frame: int, sample_rate: int) -> timedelta:
    """Offset of *frame* from the start of the recording.

    Computed as an exact fraction so ``frame / sample_rate`` seconds is never
    short by a microsecond due to float rounding.
    """
    check_sample_rate(sample_rate)
    micros = int(Fraction(frame * MICROSECONDS_PER_SECOND, sample_rate))
    return timedelta(microseconds=micros)


def seconds_offset(seconds: float) -> timedelta:
    """Truncate a (possibly fractional) number of seconds to whole microseconds."""
    return timedelta(microseconds=int(seconds * MICROSECONDS_PER_SECOND))


def align_audio_frame(anchor: datetime, frame: int, sample_rate: int) -> datetime:
    return anchor + frame_offset(frame, sample_rate)


def align_transcript(anchor: datetime, start_seconds: float, duration: float) -> tuple[datetime, datetime]:
    """Return ``(start, end)``; end is measured from the segment's own start."""
    start = anchor + seconds_offset(start_seconds)
    return start, start + seconds_offset(duration)


def align_audio_samples(event: LogEvent, samples: Iterable[AudioSample]) -> list[AudioSample]:
    """Stamp every sample of *event* with its absolute instant.

    Raises:
        InvalidConfiguration: If the event's sample rate is zero or negative.
    """
    check_sample_rate(event.audio_sample_rate, event.name)
    return [
        replace(s, ts=align_audio_frame(event.time, s.frame, event.audio_sample_rate))
        for s in samples
    ]


def align_transcript_segments(
    event: LogEvent, segments: Iterable[TranscriptSegment]
) -> list[TranscriptSegment]:
    aligned: list[TranscriptSegment] = []
    for seg in segments:
        start, end = align_transcript(event.time, seg.start_seconds, seg.duration)
        aligned.append(replace(seg, ts_start=start, ts_end=end))
    return aligned
