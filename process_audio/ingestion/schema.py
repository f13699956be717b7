"""Typed table layouts for the per-experiment QuestDB tables."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from process_audio.errors import InvalidConfiguration

# Characters QuestDB rejects in table names (SQL and ILP alike), plus dots.
_FORBIDDEN_NAME_CHARS = re.compile(r"[\s.?,'\"\\/:()+*%~\x00-\x1f\x7f]")

PING_QUERY = "SELECT NOW();"


class ColumnType(StrEnum):
    TIMESTAMP = "TIMESTAMP"
    DOUBLE = "DOUBLE"
    SYMBOL = "SYMBOL"
    VARCHAR = "VARCHAR"


@dataclass(frozen=True)
class Column:
    name: str
    type: ColumnType


@dataclass(frozen=True)
class TableLayout:
    """Column layout of one table family, shared by provisioning and the writer.

    ``prefix`` plus the experiment name gives the table name; ``timestamp`` is
    the designated timestamp column (the ILP ``at`` value).
    """

    prefix: str
    columns: tuple[Column, ...]
    timestamp: str

    def table_name(self, experiment: str) -> str:
        return f"{self.prefix}_{experiment}"

    @property
    def symbols(self) -> tuple[str, ...]:
        return tuple(c.name for c in self.columns if c.type is ColumnType.SYMBOL)

    @property
    def fields(self) -> tuple[str, ...]:
        """Non-symbol columns other than the designated timestamp."""
        return tuple(
            c.name
            for c in self.columns
            if c.type is not ColumnType.SYMBOL and c.name != self.timestamp
        )

    def validate(self) -> None:
        names = [c.name for c in self.columns]
        if len(set(names)) != len(names):
            raise InvalidConfiguration(f"duplicate column in layout {self.prefix!r}: {names}")
        designated = next((c for c in self.columns if c.name == self.timestamp), None)
        if designated is None or designated.type is not ColumnType.TIMESTAMP:
            raise InvalidConfiguration(
                f"layout {self.prefix!r} must declare {self.timestamp!r} as a TIMESTAMP column"
            )

    def check_row_shape(self, symbols: Iterable[str], fields: Iterable[str]) -> None:
        """Raise InvalidConfiguration if a writer's row does not match this layout."""
        symbols, fields = tuple(symbols), tuple(fields)
        if symbols != self.symbols or fields != self.fields:
            raise InvalidConfiguration(
                f"row shape for {self.prefix!r} does not match table layout: "
                f"symbols={symbols} fields={fields}, "
                f"expected symbols={self.symbols} fields={self.fields}"
            )

    def create_sql(self, table: str) -> str:
        cols = ",\n".join(f"    {c.name} {c.type.value}" for c in self.columns)
        return (
            f'CREATE TABLE IF NOT EXISTS "{table}" (\n{cols}\n'
            f") TIMESTAMP({self.timestamp}) PARTITION BY DAY WAL;"
        )


def drop_sql(table: str) -> str:
    return f'DROP TABLE IF EXISTS "{table}";'


AUDIO_LAYOUT = TableLayout(
    prefix="audio",
    columns=(
        Column("ts", ColumnType.TIMESTAMP),
        Column("audio_level", ColumnType.DOUBLE),
        Column("name", ColumnType.SYMBOL),
    ),
    timestamp="ts",
)

TRANSCRIPT_LAYOUT = TableLayout(
    prefix="transcript",
    columns=(
        Column("ts_start", ColumnType.TIMESTAMP),
        Column("duration", ColumnType.DOUBLE),
        Column("ts_end", ColumnType.TIMESTAMP),
        Column("word", ColumnType.VARCHAR),
        Column("name", ColumnType.SYMBOL),
    ),
    timestamp="ts_start",
)

LAYOUTS = (AUDIO_LAYOUT, TRANSCRIPT_LAYOUT)


def audio_table_name(experiment: str) -> str:
    return AUDIO_LAYOUT.table_name(experiment)


def transcript_table_name(experiment: str) -> str:
    return TRANSCRIPT_LAYOUT.table_name(experiment)


def validate_experiment_name(experiment: str) -> None:
    """Reject names that cannot be embedded in a QuestDB table name."""
    if not experiment:
        raise InvalidConfiguration("experiment name must not be empty")
    bad = _FORBIDDEN_NAME_CHARS.search(experiment)
    if bad:
        raise InvalidConfiguration(
            f"experiment name {experiment!r} contains forbidden character {bad.group()!r}"
        )


def validate_layouts() -> None:
    for layout in LAYOUTS:
        layout.validate()
