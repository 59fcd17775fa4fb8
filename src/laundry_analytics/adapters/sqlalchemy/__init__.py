"""SQLAlchemy adapter – async engine, warehouse tables and batch writer."""
from laundry_analytics.adapters.sqlalchemy.engine import async_database_url, create_warehouse_engine
from laundry_analytics.adapters.sqlalchemy.schema import column_type, mapping_table, warehouse_metadata
from laundry_analytics.adapters.sqlalchemy.writer import SqlAlchemyWarehouseWriter, create_warehouse_writer

__all__ = [
    "SqlAlchemyWarehouseWriter",
    "async_database_url",
    "column_type",
    "create_warehouse_engine",
    "create_warehouse_writer",
    "mapping_table",
    "warehouse_metadata",
]
