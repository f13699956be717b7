"""QuestDB helpers: table provisioning over the HTTP ``/exec`` endpoint and
the ILP sender factory."""

from __future__ import annotations

import logging

import httpx
from questdb.ingress import IngressError, Sender

from process_audio.config import Settings, get_settings
from process_audio.errors import IngestionFailed, ProvisioningFailed, StoreUnreachable
from process_audio.ingestion.schema import LAYOUTS, PING_QUERY, TableLayout, drop_sql

logger = logging.getLogger(__name__)


def get_questdb_client(settings: Settings | None = None) -> httpx.Client:
    """Create an HTTP client for the QuestDB REST API from settings."""
    settings = settings or get_settings()
    auth = (settings.questdb_username, settings.questdb_password) if settings.questdb_username else None
    return httpx.Client(base_url=settings.questdb_url, auth=auth, timeout=settings.questdb_timeout)


def execute_query(client: httpx.Client, query: str) -> httpx.Response:
    """Send *query* to ``GET /exec``; the caller interprets the status."""
    return client.get("/exec", params={"query": query})


def ping(client: httpx.Client) -> None:
    """Raise StoreUnreachable unless QuestDB answers a trivial query."""
    try:
        resp = execute_query(client, PING_QUERY)
    except httpx.HTTPError as exc:
        raise StoreUnreachable(str(client.base_url), str(exc)) from exc
    if resp.status_code >= 300:
        raise StoreUnreachable(str(client.base_url), f"status code: {resp.status_code}, body: {resp.text}")


def _execute_ddl(client: httpx.Client, action: str, table: str, query: str) -> None:
    try:
        resp = execute_query(client, query)
    except httpx.HTTPError as exc:
        raise ProvisioningFailed(action, table, None, str(exc)) from exc
    if resp.status_code >= 300:
        raise ProvisioningFailed(action, table, resp.status_code, resp.text)


def drop_table(client: httpx.Client, table: str) -> None:
    _execute_ddl(client, "dropping", table, drop_sql(table))


def create_table(client: httpx.Client, layout: TableLayout, table: str) -> None:
    _execute_ddl(client, "creating", table, layout.create_sql(table))


def provision_experiment(client: httpx.Client, experiment: str) -> list[str]:
    """Ping the store, then drop and re-create every table of *experiment*.

    Any data previously ingested under the same experiment name is discarded.

    Returns:
        The provisioned table names (audio first, then transcript).
    """
    ping(client)

    tables: list[str] = []
    for layout in LAYOUTS:
        table = layout.table_name(experiment)
        drop_table(client, table)
        create_table(client, layout, table)
        logger.info("Provisioned table %s", table)
        tables.append(table)
    return tables


def open_sender(settings: Settings | None = None) -> Sender:
    """Create the ILP sender for a run; use it as a context manager.

    Leaving the ``with`` block normally flushes and closes the sender; leaving
    it through an exception closes it without flushing.
    """
    settings = settings or get_settings()
    try:
        return Sender.from_conf(settings.sender_conf())
    except IngressError as exc:
        raise IngestionFailed(None, None, f"failed to create QuestDB client: {exc}") from exc
