"""Provisioning – ingestion plan and DDL application."""
from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from laundry_analytics.application.mapping import TableMappingRegistry, default_table_registry
from laundry_analytics.config.settings import EventBusSettings, WarehouseSettings
from laundry_analytics.config.validation import ConfigError
from laundry_analytics.observability.logging import get_logger

logger = get_logger(__name__)


def _camel(category: str) -> str:
    head, *tail = re.split(r"[._\-]+", category)
    return head.lower() + "".join(part.capitalize() for part in tail)


def build_ingestion_plan(
    provider: str,
    *,
    bus_settings: EventBusSettings | None = None,
    warehouse_settings: WarehouseSettings | None = None,
    registry: TableMappingRegistry | None = None,
) -> dict[str, Any]:
    """Describe how events reach *provider*: source topic, tables, connector.

    The result is JSON-ready and written to ``provisioning-plan.json`` by
    the provisioning command.
    """
    bus_settings = bus_settings or EventBusSettings()
    warehouse_settings = warehouse_settings or WarehouseSettings()
    registry = registry or default_table_registry()
    provider = provider.lower()

    plan: dict[str, Any] = {
        "provider": provider,
        "kafkaTopic": bus_settings.kafka_topic,
        "tables": {_camel(m.category): m.table for m in registry},
    }
    if provider == "postgres":
        return plan
    if provider == "bigquery":
        plan["dataset"] = warehouse_settings.bigquery_dataset
        plan["recommendedConnector"] = {"type": "dataflow", "template": "KafkaToBigQuery"}
        return plan
    if provider == "snowflake":
        plan["schema"] = warehouse_settings.snowflake_schema
        plan["recommendedConnector"] = {
            "type": "snowpipe-streaming",
            "stage": warehouse_settings.snowflake_stage,
        }
        return plan
    raise ConfigError(f"Unsupported warehouse provider: {provider!r}")


async def apply_statements(statements: Sequence[str], engine: Any) -> None:
    """Execute *statements* against *engine* in a single transaction."""
    async with engine.begin() as conn:
        for statement in statements:
            await conn.exec_driver_sql(statement)
    logger.info("provisioning.applied", statements=len(statements))


__all__ = ["apply_statements", "build_ingestion_plan"]
