"""Tests for API endpoints (no QuestDB required)."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from process_audio.api.main import app
from process_audio.errors import (
    IngestionFailed,
    InputParseError,
    InvalidConfiguration,
    ProvisioningFailed,
    StoreUnreachable,
)
from process_audio.ingestion.models import EventSummary, RunSummary

client = TestClient(app)


def _summary() -> RunSummary:
    return RunSummary(
        experiment="pilot",
        audio_table="audio_pilot",
        transcript_table="transcript_pilot",
        events=[
            EventSummary(name="intro", audio_rows=3, transcript_rows=2),
            EventSummary(name="task", audio_rows=1, transcript_rows=1),
        ],
    )


def test_health():
    response = client.get("/health")
    assert response.status_code == 200


def test_experiment_requires_log_file():
    response = client.post("/api/experiments", json={})
    assert response.status_code == 422


def test_experiment_run():
    with patch(
        "process_audio.api.routes.experiments.run_experiment", return_value=_summary()
    ) as mock_run:
        response = client.post(
            "/api/experiments",
            json={
                "log_event_file": "/data/pilot.csv",
                "audio_data_file_dir": "/data/audio",
                "transcript_file_dir": "/data/transcripts",
            },
        )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["experiment"] == "pilot"
    assert body["events_processed"] == 2
    assert body["audio_rows"] == 4
    assert body["transcript_rows"] == 3
    assert body["events"][0] == {
        "name": "intro",
        "audio_rows": 3,
        "transcript_rows": 2,
        "audio_skipped": False,
    }

    config = mock_run.call_args.args[0]
    assert str(config.log_event_file) == "/data/pilot.csv"
    assert config.experiment_name == "pilot"
    assert config.skip_audio_data is False


def test_experiment_name_and_skip_forwarded():
    with patch(
        "process_audio.api.routes.experiments.run_experiment", return_value=_summary()
    ) as mock_run:
        client.post(
            "/api/experiments",
            json={"log_event_file": "/data/pilot.csv", "name": "session_b", "skip_audio_data": True},
        )
    config = mock_run.call_args.args[0]
    assert config.experiment_name == "session_b"
    assert config.skip_audio_data is True


@pytest.mark.parametrize(
    "exc,status",
    [
        (InvalidConfiguration("audio sample rate must be positive"), 400),
        (InputParseError("/data/pilot.csv", "missing columns: time"), 400),
        (StoreUnreachable("http://127.0.0.1:9000", "connection refused"), 503),
        (ProvisioningFailed("creating", "audio_pilot", 400, "syntax"), 502),
        (IngestionFailed("audio_pilot", "intro", "bad row"), 502),
    ],
)
def test_experiment_errors_map_to_status(exc, status):
    with patch("process_audio.api.routes.experiments.run_experiment", side_effect=exc):
        response = client.post("/api/experiments", json={"log_event_file": "/data/pilot.csv"})
    assert response.status_code == status
    assert response.json()["detail"] == str(exc)


def test_store_health_ok():
    with patch("process_audio.api.routes.experiments.ping") as mock_ping:
        response = client.get("/api/store/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    mock_ping.assert_called_once()


def test_store_health_unreachable():
    with patch(
        "process_audio.api.routes.experiments.ping",
        side_effect=StoreUnreachable("http://127.0.0.1:9000", "connection refused"),
    ):
        response = client.get("/api/store/health")
    assert response.status_code == 503
    assert "connection refused" in response.json()["detail"]
