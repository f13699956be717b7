"""Exception hierarchy for the ingestion pipeline.

Every error is terminal for a run; callers (CLI, API) decide how to report it.
"""

from __future__ import annotations

from pathlib import Path


class ProcessAudioError(RuntimeError):
    """Base class for all pipeline errors."""


class StoreUnreachable(ProcessAudioError):
    """The QuestDB liveness probe failed before any provisioning."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"unable to ping database at {url}: {reason}")


class ProvisioningFailed(ProcessAudioError):
    """A DROP or CREATE statement was rejected by the store."""

    def __init__(self, action: str, table: str, status: int | None, body: str) -> None:
        self.action = action
        self.table = table
        self.status = status
        self.body = body
        super().__init__(f"error {action} table {table}, status: {status}, body: {body}")


class InvalidConfiguration(ProcessAudioError, ValueError):
    """Run parameters that can never produce valid rows (e.g. sample rate of 0)."""


class InputParseError(ProcessAudioError):
    """An input CSV file is missing or malformed."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"error parsing csv file {self.path}: {reason}")


class IngestionFailed(ProcessAudioError):
    """The ILP sender rejected a row or a flush."""

    def __init__(self, table: str | None, event: str | None, reason: str) -> None:
        self.table = table
        self.event = event
        self.reason = reason
        context: list[str] = []
        if table:
            context.append(f"table {table}")
        if event:
            context.append(f"event {event}")
        prefix = f"ingestion failed ({', '.join(context)})" if context else "ingestion failed"
        super().__init__(f"{prefix}: {reason}")
