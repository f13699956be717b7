"""Run configuration: the immutable ExperimentConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


def experiment_name_from_log_file(log_event_file: str | Path) -> str:
    """Derive an experiment name from the event log's base name without extension."""
    return Path(log_event_file).stem


@dataclass(frozen=True)
class ExperimentConfig:
    """Immutable parameters for one ingestion run.

    ``name`` falls back to the event log's file stem when left empty, so
    ``data/pilot_03.csv`` ingests into ``audio_pilot_03`` / ``transcript_pilot_03``.
    """

    log_event_file: Path
    audio_data_file_dir: Path = Path()
    transcript_file_dir: Path = Path()
    name: str = ""
    skip_audio_data: bool = False

    @property
    def experiment_name(self) -> str:
        return self.name or experiment_name_from_log_file(self.log_event_file)

    def audio_file(self, filename: str) -> Path:
        return self.audio_data_file_dir / filename

    def transcript_file(self, filename: str) -> Path:
        return self.transcript_file_dir / filename
