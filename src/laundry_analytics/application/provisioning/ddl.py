"""Provisioning – CREATE TABLE statements per warehouse provider.

Postgres DDL is compiled by SQLAlchemy from the same typed tables the
writer inserts into.  BigQuery and Snowflake are rendered from the column
specifications directly; both fold the actor columns into a single
``actor`` value.
"""
from __future__ import annotations

from typing import Any

from laundry_analytics.application.mapping import (
    ACTOR_COLUMNS,
    ColumnSpec,
    TableMapping,
    TableMappingRegistry,
    default_table_registry,
)
from laundry_analytics.config.settings.pipeline import WAREHOUSE_PROVIDERS
from laundry_analytics.config.validation import ConfigError

_BIGQUERY_TYPES = {
    "uuid": "STRING",
    "text": "STRING",
    "timestamp": "TIMESTAMP",
    "integer": "INT64",
    "double": "FLOAT64",
    "numeric": "NUMERIC",
    "json": "JSON",
}

_SNOWFLAKE_TYPES = {
    "uuid": "STRING",
    "text": "STRING",
    "timestamp": "TIMESTAMP_TZ",
    "integer": "NUMBER",
    "double": "FLOAT",
    "numeric": "NUMBER",
    "json": "VARIANT",
}


def build_statements(
    provider: str,
    *,
    registry: TableMappingRegistry | None = None,
    dataset: str = "laundry_analytics",
    schema: str = "ANALYTICS",
) -> list[str]:
    """Return the DDL provisioning every registered table on *provider*.

    Raises
    ------
    ConfigError
        If *provider* is not one of ``postgres``, ``bigquery``, ``snowflake``.
    """
    registry = registry or default_table_registry()
    provider = provider.lower()
    if provider == "postgres":
        return postgres_statements(registry)
    if provider == "bigquery":
        return [bigquery_table(m, dataset) for m in registry]
    if provider == "snowflake":
        return [snowflake_table(m, schema) for m in registry]
    raise ConfigError(
        f"Unsupported warehouse provider: {provider!r}",
        detail={"supported": list(WAREHOUSE_PROVIDERS)},
    )


def postgres_statements(registry: TableMappingRegistry) -> list[str]:
    from sqlalchemy.dialects import postgresql  # type: ignore[import-untyped]
    from sqlalchemy.schema import CreateIndex, CreateTable  # type: ignore[import-untyped]

    from laundry_analytics.adapters.sqlalchemy.schema import warehouse_metadata

    dialect = postgresql.dialect()
    metadata = warehouse_metadata(registry)
    statements: list[str] = []
    for mapping in registry:
        table = metadata.tables[mapping.table]
        statements.append(_compile(CreateTable(table, if_not_exists=True), dialect))
        for index in sorted(table.indexes, key=lambda i: _index_position(mapping, i.name)):
            statements.append(_compile(CreateIndex(index, if_not_exists=True), dialect))
    return statements


def bigquery_table(mapping: TableMapping, dataset: str) -> str:
    lines = _folded_columns(
        mapping,
        render=lambda c: f"{c.name} {_BIGQUERY_TYPES[c.kind]}",
        actor="actor STRUCT<" + ", ".join(f"{name} STRING" for name in ACTOR_COLUMNS) + ">",
        include_server_defaults=False,
    )
    return _create(f"`{dataset}.{mapping.table}`", lines)


def snowflake_table(mapping: TableMapping, schema: str) -> str:
    def render(column: ColumnSpec) -> str:
        sql = f"{column.name} {_SNOWFLAKE_TYPES[column.kind]}"
        if column.primary_key:
            sql += " PRIMARY KEY"
        if column.server_default is not None:
            sql += " DEFAULT CURRENT_TIMESTAMP"
        return sql

    lines = _folded_columns(mapping, render=render, actor="actor VARIANT", include_server_defaults=True)
    return _create(f"{schema}.{mapping.table}", lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _folded_columns(
    mapping: TableMapping,
    *,
    render: Any,
    actor: str,
    include_server_defaults: bool,
) -> list[str]:
    lines: list[str] = []
    for column in mapping.columns:
        if column.name in ACTOR_COLUMNS:
            if actor not in lines:
                lines.append(actor)
            continue
        if column.server_default is not None and not include_server_defaults:
            continue
        lines.append(render(column))
    return lines


def _create(qualified_name: str, lines: list[str]) -> str:
    body = ",\n".join(f"  {line}" for line in lines)
    return f"CREATE TABLE IF NOT EXISTS {qualified_name} (\n{body}\n)"


def _compile(element: Any, dialect: Any) -> str:
    return str(element.compile(dialect=dialect)).strip()


def _index_position(mapping: TableMapping, name: str | None) -> int:
    names = [n for n, _ in mapping.indexes]
    return names.index(name) if name in names else len(names)


__all__ = ["bigquery_table", "build_statements", "postgres_statements", "snowflake_table"]
