"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

WriteCSV = Callable[[str, str], Path]


@pytest.fixture
def write_csv(tmp_path: Path) -> WriteCSV:
    """Return a helper that writes ``content`` to ``tmp_path / name``."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def experiment_dir(write_csv: WriteCSV, tmp_path: Path) -> Path:
    """A two-event experiment laid out like a real export."""
    write_csv(
        "pilot.csv",
        "time,name,audio_data_file,audio_sample_rate,transcript_data_file\n"
        "2024-01-01T00:00:00Z,intro,intro_audio.csv,100,intro_words.csv\n"
        "2024-01-01T00:05:00Z,task,task_audio.csv,50,task_words.csv\n",
    )
    write_csv("audio/intro_audio.csv", "frame,audio_level\n0,0.1\n50,0.2\n100,0.3\n")
    write_csv("audio/task_audio.csv", "frame,audio_level\n25,0.7\n")
    write_csv(
        "transcripts/intro_words.csv",
        "TIME,VALUE,DURATION,LABEL\n2.5,0,1.25,hello\n4.0,0,0.5,world\n",
    )
    write_csv("transcripts/task_words.csv", "TIME,VALUE,DURATION,LABEL\n1.0,0,0.75,go\n")
    return tmp_path
