"""SQLAlchemy adapter – SqlAlchemyWarehouseWriter."""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from laundry_analytics.adapters.sqlalchemy.engine import create_warehouse_engine
from laundry_analytics.adapters.sqlalchemy.schema import warehouse_metadata
from laundry_analytics.application.mapping import Row, TableMappingRegistry, default_table_registry
from laundry_analytics.application.writer import WarehouseWriter
from laundry_analytics.config.settings import SettingsFactory, WarehouseSettings
from laundry_analytics.config.validation import ConfigError
from laundry_analytics.kernel.errors import WriteError
from laundry_analytics.observability.logging import get_logger

logger = get_logger(__name__)

# Postgres caps a statement at 32767 bind parameters
_MAX_BIND_PARAMS = 32_000


class SqlAlchemyWarehouseWriter(WarehouseWriter):
    """Warehouse writer over an async SQLAlchemy engine.

    Each :meth:`write_batch` call is one transaction holding a multi-row
    ``INSERT ... ON CONFLICT (event_id) DO NOTHING``, so replayed rows are
    ignored rather than duplicated.  On dialects without ``ON CONFLICT`` a
    plain insert is issued.

    Only tables declared by the mapping registry are accepted.

    Parameters
    ----------
    database_url:
        Warehouse URL; bare ``postgres://`` URLs use asyncpg.  Mutually
        exclusive with *engine*.
    engine:
        An existing :class:`~sqlalchemy.ext.asyncio.AsyncEngine`.  It is not
        disposed by :meth:`close`.
    registry:
        Mapping registry declaring the writable tables.
    **engine_kwargs:
        Passed to ``create_async_engine`` when *database_url* is given.
    """

    def __init__(
        self,
        database_url: str | None = None,
        *,
        engine: Any | None = None,
        registry: TableMappingRegistry | None = None,
        **engine_kwargs: Any,
    ) -> None:
        if (database_url is None) == (engine is None):
            raise ConfigError("Pass exactly one of database_url or engine")
        self._owns_engine = engine is None
        self._engine = engine if engine is not None else create_warehouse_engine(database_url, **engine_kwargs)  # type: ignore[arg-type]
        self._registry = registry or default_table_registry()
        self._metadata = warehouse_metadata(self._registry)

    @property
    def engine(self) -> Any:
        return self._engine

    @property
    def metadata(self) -> Any:
        return self._metadata

    async def create_tables(self) -> None:
        """Create every registered table and index if missing."""
        async with self._engine.begin() as conn:
            await conn.run_sync(self._metadata.create_all)

    async def write_batch(self, table: str, rows: Sequence[Row]) -> None:
        if not rows:
            return
        target = self._metadata.tables.get(table)
        if target is None:
            raise WriteError(
                table,
                f"Table '{table}' is not permitted for analytics ingestion",
                row_count=len(rows),
            )

        mapping = self._registry.for_table(table)
        assert mapping is not None
        columns = mapping.writable_columns
        values = [{name: row.get(name) for name in columns} for row in rows]
        chunk = max(1, _MAX_BIND_PARAMS // len(columns))

        try:
            async with self._engine.begin() as conn:
                for start in range(0, len(values), chunk):
                    await conn.execute(self._insert(target, values[start:start + chunk]))
        except Exception as exc:
            raise WriteError(
                table,
                f"Failed to write {len(rows)} row(s) to '{table}': {exc}",
                row_count=len(rows),
                cause=exc,
            ) from exc
        logger.debug("writer.batch_written", table=table, rows=len(rows))

    async def close(self) -> None:
        if self._owns_engine:
            await self._engine.dispose()

    def _insert(self, target: Any, values: list[Row]) -> Any:
        dialect = self._engine.dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert  # type: ignore[import-untyped]
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert  # type: ignore[import-untyped]
        else:
            from sqlalchemy import insert  # type: ignore[import-untyped]

            return insert(target).values(values)
        return insert(target).values(values).on_conflict_do_nothing(index_elements=["event_id"])


def create_warehouse_writer(
    settings: WarehouseSettings | None = None,
    *,
    registry: TableMappingRegistry | None = None,
    **engine_kwargs: Any,
) -> SqlAlchemyWarehouseWriter | None:
    """Build a writer from ``WAREHOUSE_*`` settings.

    Returns ``None`` when no ``database_url`` is configured, so callers can
    run without a warehouse.
    """
    settings = settings or SettingsFactory.create(WarehouseSettings)
    if not settings.database_url:
        return None
    return SqlAlchemyWarehouseWriter(settings.database_url, registry=registry, **engine_kwargs)


__all__ = ["SqlAlchemyWarehouseWriter", "create_warehouse_writer"]
