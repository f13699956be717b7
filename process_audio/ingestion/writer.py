"""ILP row writer: aligned records -> rows buffered on a QuestDB sender.

Rows are only buffered here; nothing is acknowledged per row. Errors surface
when a row is enqueued or when the buffer is flushed, and either one aborts
the run.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

from questdb.ingress import IngressError, Sender, TimestampMicros, TimestampNanos

from process_audio.errors import IngestionFailed
from process_audio.ingestion.models import AudioSample, TranscriptSegment
from process_audio.ingestion.schema import AUDIO_LAYOUT, TRANSCRIPT_LAYOUT

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MICROSECOND = timedelta(microseconds=1)

# Column order of the values each writer passes; checked against the layouts.
AUDIO_SYMBOLS = ("name",)
AUDIO_FIELDS = ("audio_level",)
TRANSCRIPT_SYMBOLS = ("name",)
TRANSCRIPT_FIELDS = ("duration", "ts_end", "word")


def validate_row_shapes() -> None:
    AUDIO_LAYOUT.check_row_shape(AUDIO_SYMBOLS, AUDIO_FIELDS)
    TRANSCRIPT_LAYOUT.check_row_shape(TRANSCRIPT_SYMBOLS, TRANSCRIPT_FIELDS)


def epoch_micros(ts: datetime) -> int:
    """Microseconds since the Unix epoch; naive instants are read as UTC."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return (ts - _EPOCH) // _ONE_MICROSECOND


def _write_row(
    sender: Sender,
    table: str,
    event_name: str,
    symbols: dict[str, str],
    columns: dict[str, Any],
    at: datetime | None,
) -> None:
    if at is None:
        raise IngestionFailed(table, event_name, "row has no aligned timestamp")
    try:
        sender.row(table, symbols=symbols, columns=columns, at=TimestampNanos(epoch_micros(at) * 1000))
    except IngressError as exc:
        raise IngestionFailed(table, event_name, str(exc)) from exc


def write_audio_samples(
    sender: Sender, table: str, event_name: str, samples: Iterable[AudioSample]
) -> int:
    """Buffer one audio row per sample and return how many were written."""
    count = 0
    for sample in samples:
        _write_row(
            sender,
            table,
            event_name,
            symbols=dict(zip(AUDIO_SYMBOLS, (event_name,), strict=True)),
            columns=dict(zip(AUDIO_FIELDS, (sample.audio_level,), strict=True)),
            at=sample.ts,
        )
        count += 1
    return count


def write_transcript_segments(
    sender: Sender, table: str, event_name: str, segments: Iterable[TranscriptSegment]
) -> int:
    """Buffer one transcript row per segment and return how many were written."""
    count = 0
    for seg in segments:
        if seg.ts_end is None:
            raise IngestionFailed(table, event_name, "row has no aligned end timestamp")
        _write_row(
            sender,
            table,
            event_name,
            symbols=dict(zip(TRANSCRIPT_SYMBOLS, (event_name,), strict=True)),
            columns=dict(
                zip(
                    TRANSCRIPT_FIELDS,
                    (seg.duration, TimestampMicros(epoch_micros(seg.ts_end)), seg.word),
                    strict=True,
                )
            ),
            at=seg.ts_start,
        )
        count += 1
    return count


def flush(sender: Sender) -> None:
    """Send every buffered row; a rejected batch raises IngestionFailed."""
    try:
        sender.flush()
    except IngressError as exc:
        raise IngestionFailed(None, None, f"flush failed: {exc}") from exc
