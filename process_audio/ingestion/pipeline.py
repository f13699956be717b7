"""End-to-end ingestion pipeline: parse -> provision -> align -> write -> flush."""

from __future__ import annotations

import logging

from questdb.ingress import Sender

from process_audio.config import Settings
from process_audio.ingestion.alignment import (
    align_audio_samples,
    align_transcript_segments,
    check_sample_rate,
)
from process_audio.ingestion.models import EventSummary, LogEvent, RunSummary
from process_audio.ingestion.parsers import (
    parse_audio_samples,
    parse_log_events,
    parse_transcript_segments,
)
from process_audio.ingestion.schema import validate_experiment_name, validate_layouts
from process_audio.ingestion.storage import get_questdb_client, open_sender, provision_experiment
from process_audio.ingestion.writer import (
    flush,
    validate_row_shapes,
    write_audio_samples,
    write_transcript_segments,
)
from process_audio.pipeline_config import ExperimentConfig

logger = logging.getLogger(__name__)


def ingest_event(
    sender: Sender,
    config: ExperimentConfig,
    event: LogEvent,
    audio_table: str,
    transcript_table: str,
) -> EventSummary:
    """Align and buffer the audio (unless skipped) and transcript rows of one event."""
    audio_rows = 0
    if not config.skip_audio_data:
        samples = parse_audio_samples(config.audio_file(event.audio_data_file))
        audio_rows = write_audio_samples(
            sender, audio_table, event.name, align_audio_samples(event, samples)
        )

    segments = parse_transcript_segments(config.transcript_file(event.transcript_data_file))
    transcript_rows = write_transcript_segments(
        sender, transcript_table, event.name, align_transcript_segments(event, segments)
    )

    if config.skip_audio_data:
        logger.info("[%s] Skipped audio data, saved transcript data: %d", event.name, transcript_rows)
    else:
        logger.info(
            "[%s] Saved audio data: %d, transcript data: %d", event.name, audio_rows, transcript_rows
        )

    return EventSummary(
        name=event.name,
        audio_rows=audio_rows,
        transcript_rows=transcript_rows,
        audio_skipped=config.skip_audio_data,
    )


def run_experiment(config: ExperimentConfig, settings: Settings | None = None) -> RunSummary:
    """Ingest every event of an experiment into freshly provisioned tables.

    The event log is parsed and validated before the tables are touched, so bad
    input never destroys a previous run's data. Any error aborts the whole run;
    rows buffered for earlier events are discarded without being flushed.

    Args:
        config: Run parameters (files, experiment name, audio skipping).
        settings: QuestDB connection settings; defaults to the cached settings.

    Returns:
        Per-event and total row counts.
    """
    experiment = config.experiment_name
    validate_experiment_name(experiment)
    validate_layouts()
    validate_row_shapes()

    if config.skip_audio_data:
        logger.warning("Skipping audio data file process and upload")

    events = parse_log_events(config.log_event_file)
    if not config.skip_audio_data:
        for event in events:
            check_sample_rate(event.audio_sample_rate, event.name)

    with get_questdb_client(settings) as client:
        audio_table, transcript_table = provision_experiment(client, experiment)

    summary = RunSummary(
        experiment=experiment,
        audio_table=audio_table,
        transcript_table=transcript_table,
        audio_skipped=config.skip_audio_data,
    )
    with open_sender(settings) as sender:
        for event in events:
            summary.events.append(ingest_event(sender, config, event, audio_table, transcript_table))
        flush(sender)

    logger.info(
        "Experiment %s done: %d events, audio data: %d, transcript data: %d",
        experiment,
        len(summary.events),
        summary.audio_rows,
        summary.transcript_rows,
    )
    return summary
