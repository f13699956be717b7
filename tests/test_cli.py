"""Tests for the command-line entry point."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from process_audio.cli import build_parser, main
from process_audio.errors import StoreUnreachable
from process_audio.ingestion.models import RunSummary

RUN = "process_audio.ingestion.pipeline.run_experiment"


def _summary() -> RunSummary:
    return RunSummary(experiment="pilot", audio_table="audio_pilot", transcript_table="transcript_pilot")


class TestParser:
    def test_ingest_defaults(self) -> None:
        args = build_parser().parse_args(["ingest", "--log-event-file", "logs/pilot.csv"])
        assert args.log_event_file == Path("logs/pilot.csv")
        assert args.name == ""
        assert args.skip_audio_data is False
        assert args.audio_data_file_dir == Path()

    def test_log_event_file_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["ingest"])


class TestMain:
    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 0
        assert "process-audio" in capsys.readouterr().out

    def test_ingest_builds_config(self) -> None:
        with patch(RUN, return_value=_summary()) as mock_run:
            code = main(
                [
                    "ingest",
                    "--log-event-file", "logs/pilot.csv",
                    "--audio-data-file-dir", "audio",
                    "--transcript-file-dir", "words",
                    "--skip-audio-data",
                ]
            )
        assert code == 0
        config = mock_run.call_args.args[0]
        assert config.experiment_name == "pilot"
        assert config.audio_file("a.csv") == Path("audio/a.csv")
        assert config.transcript_file("t.csv") == Path("words/t.csv")
        assert config.skip_audio_data is True

    def test_log_level_after_subcommand(self) -> None:
        with (
            patch(RUN, return_value=_summary()),
            patch("process_audio.cli.configure_logging") as mock_logging,
        ):
            code = main(["ingest", "--log-event-file", "logs/pilot.csv", "--log-level", "DEBUG"])
        assert code == 0
        mock_logging.assert_called_once_with("DEBUG")

    def test_serve_accepts_log_level(self) -> None:
        args = build_parser().parse_args(["serve", "--log-level", "WARNING"])
        assert args.log_level == "WARNING"

    def test_explicit_name(self) -> None:
        with patch(RUN, return_value=_summary()) as mock_run:
            main(["ingest", "--log-event-file", "logs/pilot.csv", "--name", "rerun"])
        assert mock_run.call_args.args[0].experiment_name == "rerun"

    def test_pipeline_error_exits_non_zero(self, caplog: pytest.LogCaptureFixture) -> None:
        with patch(RUN, side_effect=StoreUnreachable("http://127.0.0.1:9000", "connection refused")):
            code = main(["ingest", "--log-event-file", "logs/pilot.csv"])
        assert code == 1
        assert "unable to ping database" in caplog.text

    def test_serve(self) -> None:
        with patch("uvicorn.run") as mock_run:
            assert main(["serve", "--port", "9100"]) == 0
        assert mock_run.call_args.kwargs["port"] == 9100
