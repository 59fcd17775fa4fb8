"""Application mapping – category → table naming, columns and projections."""
from laundry_analytics.application.mapping.columns import (
    ACTOR_COLUMNS,
    COLUMN_KINDS,
    CREATED_AT,
    ColumnKind,
    ColumnSpec,
    base_columns,
)
from laundry_analytics.application.mapping.naming import table_name_for
from laundry_analytics.application.mapping.registry import (
    CAMPAIGN_INTERACTION_MAPPING,
    DRIVER_TELEMETRY_MAPPING,
    ORDER_LIFECYCLE_MAPPING,
    Row,
    TableMapping,
    TableMappingRegistry,
    default_table_registry,
)

__all__ = [
    "ACTOR_COLUMNS",
    "CAMPAIGN_INTERACTION_MAPPING",
    "COLUMN_KINDS",
    "CREATED_AT",
    "ColumnKind",
    "ColumnSpec",
    "DRIVER_TELEMETRY_MAPPING",
    "ORDER_LIFECYCLE_MAPPING",
    "Row",
    "TableMapping",
    "TableMappingRegistry",
    "base_columns",
    "default_table_registry",
    "table_name_for",
]
