"""Config – build the bus and the sink from settings.

Kept out of ``laundry_analytics.config`` so the application layer can
import settings without importing itself back.
"""
from __future__ import annotations

from typing import Any

from laundry_analytics.application.bus import EventBus, InMemoryEventBus
from laundry_analytics.application.mapping import TableMappingRegistry
from laundry_analytics.application.sink import EventSink, FlushFailurePolicy
from laundry_analytics.application.writer import DeadLetterSink, WarehouseWriter
from laundry_analytics.config.settings import EventBusSettings, SettingsFactory, SinkSettings
from laundry_analytics.observability.metrics import Metrics
from laundry_analytics.resilience.retry import ExponentialBackoff, RetryPolicy


def create_event_bus(settings: EventBusSettings | None = None) -> InMemoryEventBus:
    """In-process bus, forwarding to Kafka when ``EVENT_BUS_DRIVER=kafka``."""
    settings = settings or SettingsFactory.create(EventBusSettings)
    if settings.driver != "kafka":
        return InMemoryEventBus()

    from laundry_analytics.adapters.kafka import KafkaEventTransport

    transport = KafkaEventTransport(
        settings.kafka_brokers,
        settings.kafka_topic,
        client_id=settings.client_id,
    )
    retry = RetryPolicy(
        max_attempts=settings.max_retries,
        backoff=ExponentialBackoff(base_delay=settings.retry_delay_ms / 1000),
    )
    return InMemoryEventBus(transport=transport, retry_policy=retry)


def create_event_sink(
    bus: EventBus,
    writer: WarehouseWriter,
    settings: SinkSettings | None = None,
    *,
    dead_letters: DeadLetterSink | None = None,
    registry: TableMappingRegistry | None = None,
    metrics: Metrics | None = None,
    **kwargs: Any,
) -> EventSink:
    """Sink wired with ``ANALYTICS_SINK_*`` thresholds and failure policy."""
    settings = settings or SettingsFactory.create(SinkSettings)
    backoff = None
    if settings.retry_backoff_ms > 0:
        backoff = ExponentialBackoff(
            base_delay=settings.retry_backoff_ms / 1000,
            max_delay=max(settings.max_retry_backoff_ms, settings.retry_backoff_ms) / 1000,
            jitter=True,
        )
    policy = FlushFailurePolicy(
        backoff=backoff,
        max_attempts=settings.max_flush_attempts or None,
        dead_letters=dead_letters,
    )
    return EventSink(
        bus,
        writer,
        max_batch_size=settings.max_batch_size,
        flush_interval_ms=settings.flush_interval_ms,
        registry=registry,
        failure_policy=policy,
        metrics=metrics,
        **kwargs,
    )


__all__ = ["create_event_bus", "create_event_sink"]
