"""SQLAlchemy adapter – typed warehouse tables built from the mapping registry."""
from __future__ import annotations

from typing import Any

from sqlalchemy import (  # type: ignore[import-untyped]
    JSON,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    MetaData,
    Numeric,
    Table,
    Text,
    Uuid,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import DOUBLE_PRECISION, JSONB  # type: ignore[import-untyped]

from laundry_analytics.application.mapping import ColumnSpec, TableMapping, TableMappingRegistry, default_table_registry


def column_type(kind: str) -> Any:
    """SQLAlchemy type for a :class:`ColumnSpec` kind.

    JSON columns become ``JSONB`` and doubles ``DOUBLE PRECISION`` on
    Postgres; other dialects get the generic types.
    """
    if kind == "uuid":
        return Uuid(as_uuid=False)
    if kind == "text":
        return Text()
    if kind == "timestamp":
        return DateTime(timezone=True)
    if kind == "integer":
        return Integer()
    if kind == "double":
        return Float().with_variant(DOUBLE_PRECISION(), "postgresql")
    if kind == "numeric":
        return Numeric(asdecimal=False)
    if kind == "json":
        return JSON().with_variant(JSONB(), "postgresql")
    raise ValueError(f"Unknown column kind {kind!r}")


def _server_default(expression: str | None) -> Any:
    if expression is None:
        return None
    # now() is spelled CURRENT_TIMESTAMP on dialects other than Postgres
    if expression == "now()":
        return func.now()
    return text(expression)


def _column(spec: ColumnSpec) -> Column:
    server_default = _server_default(spec.server_default)
    return Column(
        spec.name,
        column_type(spec.kind),
        primary_key=spec.primary_key,
        nullable=spec.nullable and not spec.primary_key,
        server_default=server_default,
    )


def mapping_table(mapping: TableMapping, metadata: MetaData) -> Table:
    """Declare *mapping*'s table (and its secondary indexes) on *metadata*."""
    table = Table(mapping.table, metadata, *(_column(spec) for spec in mapping.columns))
    for name, column in mapping.indexes:
        Index(name, table.c[column])
    return table


def warehouse_metadata(registry: TableMappingRegistry | None = None) -> MetaData:
    """Return a :class:`MetaData` holding one table per registered mapping."""
    metadata = MetaData()
    for mapping in registry or default_table_registry():
        mapping_table(mapping, metadata)
    return metadata


__all__ = ["column_type", "mapping_table", "warehouse_metadata"]
