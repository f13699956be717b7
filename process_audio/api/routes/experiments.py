"""Experiment endpoints: trigger an ingestion run and probe the store."""

from __future__ import annotations

import asyncio
from pathlib import Path

from fastapi import APIRouter, HTTPException

from process_audio.api.models import (
    EventSummaryResponse,
    ExperimentRequest,
    ExperimentResponse,
    StoreHealthResponse,
)
from process_audio.config import settings
from process_audio.errors import (
    IngestionFailed,
    InputParseError,
    InvalidConfiguration,
    ProcessAudioError,
    ProvisioningFailed,
    StoreUnreachable,
)
from process_audio.ingestion.pipeline import run_experiment
from process_audio.ingestion.storage import get_questdb_client, ping
from process_audio.pipeline_config import ExperimentConfig

router = APIRouter()


def _status_for(exc: ProcessAudioError) -> int:
    if isinstance(exc, (InvalidConfiguration, InputParseError)):
        return 400
    if isinstance(exc, StoreUnreachable):
        return 503
    if isinstance(exc, (ProvisioningFailed, IngestionFailed)):
        return 502
    return 500


@router.post("/api/experiments", response_model=ExperimentResponse)
async def create_experiment(request: ExperimentRequest) -> ExperimentResponse:
    """Run the ingestion pipeline for one experiment.

    Existing ``audio_<name>`` / ``transcript_<name>`` tables are dropped and
    re-created before any row is written.
    """
    config = ExperimentConfig(
        log_event_file=Path(request.log_event_file),
        audio_data_file_dir=Path(request.audio_data_file_dir),
        transcript_file_dir=Path(request.transcript_file_dir),
        name=request.name or "",
        skip_audio_data=request.skip_audio_data,
    )

    # Synchronous pipeline; run in a thread so the event loop stays responsive.
    try:
        summary = await asyncio.to_thread(run_experiment, config, settings)
    except ProcessAudioError as exc:
        raise HTTPException(status_code=_status_for(exc), detail=str(exc)) from exc

    return ExperimentResponse(
        experiment=summary.experiment,
        audio_table=summary.audio_table,
        transcript_table=summary.transcript_table,
        audio_skipped=summary.audio_skipped,
        events_processed=len(summary.events),
        audio_rows=summary.audio_rows,
        transcript_rows=summary.transcript_rows,
        events=[
            EventSummaryResponse(
                name=e.name,
                audio_rows=e.audio_rows,
                transcript_rows=e.transcript_rows,
                audio_skipped=e.audio_skipped,
            )
            for e in summary.events
        ],
    )


@router.get("/api/store/health", response_model=StoreHealthResponse)
async def store_health() -> StoreHealthResponse:
    """Ping QuestDB; 503 when it does not answer."""
    try:
        with get_questdb_client(settings) as client:
            await asyncio.to_thread(ping, client)
    except StoreUnreachable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return StoreHealthResponse(status="ok", url=settings.questdb_url)
