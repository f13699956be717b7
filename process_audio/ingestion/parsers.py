"""CSV readers for the event log and the per-event audio and transcript files."""

from __future__ import annotations

import csv
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path
from typing import TypeVar

from process_audio.errors import InputParseError
from process_audio.ingestion.models import AudioSample, LogEvent, TranscriptSegment

T = TypeVar("T")

LOG_EVENT_COLUMNS = ("time", "name", "audio_data_file", "audio_sample_rate", "transcript_data_file")
AUDIO_COLUMNS = ("frame", "audio_level")
# VALUE is present in Sonic Visualiser exports but carries nothing we store.
TRANSCRIPT_COLUMNS = ("TIME", "DURATION", "LABEL")


def _parse_time(value: str | None) -> datetime:
    """Parse an RFC 3339 / ISO 8601 timestamp (``Z`` suffix accepted)."""
    if not value:
        raise ValueError("missing timestamp")
    return datetime.fromisoformat(value.strip())


def _read_csv(
    path: str | Path,
    required: Sequence[str],
    convert: Callable[[dict[str, str]], T],
) -> list[T]:
    """Read *path* as a headed CSV and convert each row with *convert*.

    Raises:
        InputParseError: If the file cannot be read, has no header, lacks one of
            the *required* columns, a row is short or long, or a row fails
            conversion.
    """
    path = Path(path)
    records: list[T] = []
    try:
        with path.open(encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is None:
                raise InputParseError(path, "empty csv file given")
            reader.fieldnames = [h.strip() for h in reader.fieldnames]
            missing = [col for col in required if col not in reader.fieldnames]
            if missing:
                raise InputParseError(path, f"missing columns: {', '.join(missing)}")

            for row in reader:
                # DictReader pads short rows with None and files surplus values under None.
                if None in row:
                    raise InputParseError(path, f"line {reader.line_num}: more values than columns")
                absent = next((col for col in required if row[col] is None), None)
                if absent:
                    raise InputParseError(path, f"line {reader.line_num}: missing value for {absent}")
                try:
                    records.append(convert(row))
                except (TypeError, ValueError) as exc:
                    raise InputParseError(path, f"line {reader.line_num}: {exc}") from exc
    except OSError as exc:
        raise InputParseError(path, str(exc)) from exc
    except (csv.Error, UnicodeDecodeError) as exc:
        raise InputParseError(path, str(exc)) from exc

    return records


def _log_event(row: dict[str, str]) -> LogEvent:
    return LogEvent(
        time=_parse_time(row["time"]),
        name=row["name"],
        audio_data_file=row["audio_data_file"],
        audio_sample_rate=int(row["audio_sample_rate"]),
        transcript_data_file=row["transcript_data_file"],
    )


def _audio_sample(row: dict[str, str]) -> AudioSample:
    return AudioSample(frame=int(row["frame"]), audio_level=float(row["audio_level"]))


def _transcript_segment(row: dict[str, str]) -> TranscriptSegment:
    return TranscriptSegment(
        start_seconds=float(row["TIME"]),
        duration=float(row["DURATION"]),
        word=row["LABEL"],
    )


def parse_log_events(path: str | Path) -> list[LogEvent]:
    """Parse the experiment's event log.

    Expected headers: ``time,name,audio_data_file,audio_sample_rate,transcript_data_file``.
    """
    return _read_csv(path, LOG_EVENT_COLUMNS, _log_event)


def parse_audio_samples(path: str | Path) -> list[AudioSample]:
    """Parse an audio-level export (headers ``frame,audio_level``)."""
    return _read_csv(path, AUDIO_COLUMNS, _audio_sample)


def parse_transcript_segments(path: str | Path) -> list[TranscriptSegment]:
    """Parse a word-level transcript (headers ``TIME,VALUE,DURATION,LABEL``)."""
    return _read_csv(path, TRANSCRIPT_COLUMNS, _transcript_segment)
