"""Mapping – column specifications shared by the writer and DDL builders."""
from __future__ import annotations

import dataclasses
from typing import Literal

type ColumnKind = Literal["uuid", "text", "timestamp", "integer", "double", "numeric", "json"]

COLUMN_KINDS: tuple[str, ...] = ("uuid", "text", "timestamp", "integer", "double", "numeric", "json")

#: Columns holding actor attributes; some warehouses fold them into one value.
ACTOR_COLUMNS: tuple[str, ...] = ("actor_id", "actor_type", "actor_name")


@dataclasses.dataclass(frozen=True)
class ColumnSpec:
    """One warehouse column.

    ``server_default`` marks columns filled by the database; they are
    created by provisioning but never written by the sink.
    """

    name: str
    kind: ColumnKind
    nullable: bool = True
    primary_key: bool = False
    server_default: str | None = None

    def __post_init__(self) -> None:
        if self.kind not in COLUMN_KINDS:
            raise ValueError(f"Unknown column kind {self.kind!r} for column {self.name!r}")

    @property
    def writable(self) -> bool:
        return self.server_default is None


def base_columns() -> tuple[ColumnSpec, ...]:
    """Envelope columns present on every analytics table."""
    return (
        ColumnSpec("event_id", "uuid", nullable=False, primary_key=True),
        ColumnSpec("occurred_at", "timestamp", nullable=False),
        ColumnSpec("source", "text", nullable=False),
        ColumnSpec("schema_version", "integer", nullable=False),
        ColumnSpec("actor_id", "text"),
        ColumnSpec("actor_type", "text"),
        ColumnSpec("actor_name", "text"),
        ColumnSpec("context", "json"),
        ColumnSpec("payload", "json"),
    )


CREATED_AT = ColumnSpec("created_at", "timestamp", nullable=False, server_default="now()")


__all__ = ["ACTOR_COLUMNS", "COLUMN_KINDS", "CREATED_AT", "ColumnKind", "ColumnSpec", "base_columns"]
