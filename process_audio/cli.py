"""Thin CLI entry point — builds an ExperimentConfig and runs the pipeline."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from process_audio.config import get_settings
from process_audio.errors import ProcessAudioError
from process_audio.pipeline_config import ExperimentConfig

logger = logging.getLogger("process_audio")

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(filename)s:%(lineno)d %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="process-audio",
        description="Load experiment audio levels and transcripts into QuestDB.",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command")

    ingest = sub.add_parser("ingest", parents=[common], help="Ingest one experiment")
    ingest.add_argument(
        "--name", default="", help="Name of the experiment. It will overwrite any existing ones"
    )
    ingest.add_argument(
        "--log-event-file", type=Path, required=True, help="Path to the csv log events data"
    )
    ingest.add_argument(
        "--audio-data-file-dir",
        type=Path,
        default=Path(),
        help="Directory containing the csv audio data files exported from Sonic Visualiser",
    )
    ingest.add_argument(
        "--transcript-file-dir",
        type=Path,
        default=Path(),
        help="Directory containing the csv transcript files. Expected headers: "
        "TIME,VALUE,DURATION,LABEL. VALUE is ignored",
    )
    ingest.add_argument(
        "--skip-audio-data",
        action="store_true",
        help="Skip the processing and upload of audio data files",
    )

    serve = sub.add_parser("serve", parents=[common], help="Launch the HTTP API")
    serve.add_argument("--host", type=str, default=None, help="Host to bind to (default: API_HOST)")
    serve.add_argument("--port", type=int, default=None, help="Port to listen on (default: API_PORT)")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    configure_logging(getattr(args, "log_level", None) or settings.log_level)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "serve":
        import uvicorn

        uvicorn.run(
            "process_audio.api.main:app",
            host=args.host or settings.api_host,
            port=args.port or settings.api_port,
        )
        return 0

    from process_audio.ingestion.pipeline import run_experiment

    config = ExperimentConfig(
        log_event_file=args.log_event_file,
        audio_data_file_dir=args.audio_data_file_dir,
        transcript_file_dir=args.transcript_file_dir,
        name=args.name,
        skip_audio_data=args.skip_audio_data,
    )
    try:
        run_experiment(config, settings)
    except ProcessAudioError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
