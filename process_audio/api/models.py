"""Pydantic request/response schemas for the ingestion API."""

from __future__ import annotations

from pydantic import BaseModel


class ExperimentRequest(BaseModel):
    """Request body for the /api/experiments endpoint.

    Paths are resolved on the server. ``name`` defaults to the event log's
    base name without extension.
    """

    log_event_file: str
    name: str | None = None
    audio_data_file_dir: str = ""
    transcript_file_dir: str = ""
    skip_audio_data: bool = False


class EventSummaryResponse(BaseModel):
    name: str
    audio_rows: int
    transcript_rows: int
    audio_skipped: bool = False


class ExperimentResponse(BaseModel):
    """Response body for the /api/experiments endpoint."""

    experiment: str
    audio_table: str
    transcript_table: str
    audio_skipped: bool
    events_processed: int
    audio_rows: int
    transcript_rows: int
    events: list[EventSummaryResponse] = []


class StoreHealthResponse(BaseModel):
    status: str
    url: str
