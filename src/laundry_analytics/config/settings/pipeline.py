"""Settings consumed by the event bus, the sink and the warehouse writer."""
from __future__ import annotations

import dataclasses

from laundry_analytics.config.settings.base import Settings
from laundry_analytics.config.validation import InvalidSettingValueError

BUS_DRIVERS = ("memory", "kafka")
WAREHOUSE_PROVIDERS = ("postgres", "bigquery", "snowflake")


@dataclasses.dataclass
class EventBusSettings(Settings):
    """``EVENT_BUS_*`` – bus driver and external transport."""

    _prefix = "EVENT_BUS"

    driver: str = "memory"
    kafka_brokers: list[str] = dataclasses.field(default_factory=list)
    kafka_topic: str = "analytics.events"
    client_id: str = "laundryao-api"
    max_retries: int = 3
    retry_delay_ms: int = 100

    def _validate(self) -> None:
        self.driver = self.driver.lower()
        if self.driver not in BUS_DRIVERS:
            raise InvalidSettingValueError("driver", self.driver, f"expected one of {BUS_DRIVERS}")
        if self.driver == "kafka" and not self.kafka_brokers:
            raise InvalidSettingValueError(
                "kafka_brokers", self.kafka_brokers, "must be set when driver=kafka"
            )
        if self.max_retries < 1:
            raise InvalidSettingValueError("max_retries", self.max_retries, "must be >= 1")
        if self.retry_delay_ms < 0:
            raise InvalidSettingValueError("retry_delay_ms", self.retry_delay_ms, "must be >= 0")


@dataclasses.dataclass
class SinkSettings(Settings):
    """``ANALYTICS_SINK_*`` – batching thresholds and flush failure policy.

    ``retry_backoff_ms=0`` disables backoff; ``max_flush_attempts=0`` means
    failed batches are retried on every trigger forever.
    """

    _prefix = "ANALYTICS_SINK"

    max_batch_size: int = 100
    flush_interval_ms: int = 5000
    retry_backoff_ms: int = 0
    max_retry_backoff_ms: int = 60_000
    max_flush_attempts: int = 0

    def _validate(self) -> None:
        for name in ("flush_interval_ms", "retry_backoff_ms", "max_retry_backoff_ms", "max_flush_attempts"):
            value = getattr(self, name)
            if value < 0:
                raise InvalidSettingValueError(name, value, "must be >= 0")


@dataclasses.dataclass
class WarehouseSettings(Settings):
    """``WAREHOUSE_*`` – connection and provisioning targets."""

    _prefix = "WAREHOUSE"

    database_url: str = ""
    provider: str = "postgres"
    bigquery_dataset: str = "laundry_analytics"
    snowflake_schema: str = "ANALYTICS"
    snowflake_stage: str = "kafka_stage"

    def _validate(self) -> None:
        self.provider = self.provider.lower()
        if self.provider not in WAREHOUSE_PROVIDERS:
            raise InvalidSettingValueError(
                "provider", self.provider, f"expected one of {WAREHOUSE_PROVIDERS}"
            )

    def __repr__(self) -> str:
        url = "[REDACTED]" if self.database_url else ""
        return (
            f"WarehouseSettings(database_url={url!r}, provider={self.provider!r}, "
            f"bigquery_dataset={self.bigquery_dataset!r}, snowflake_schema={self.snowflake_schema!r})"
        )


__all__ = ["BUS_DRIVERS", "WAREHOUSE_PROVIDERS", "EventBusSettings", "SinkSettings", "WarehouseSettings"]
