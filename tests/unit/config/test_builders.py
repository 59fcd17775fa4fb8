"""Unit tests for building the bus and the sink from settings."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock, patch

import pytest

from laundry_analytics.adapters.kafka import KafkaEventTransport
from laundry_analytics.application.bus import InMemoryEventBus
from laundry_analytics.config.builders import create_event_bus, create_event_sink
from laundry_analytics.config.settings import EventBusSettings, SinkSettings
from laundry_analytics.config.validation import ConfigError
from laundry_analytics.kernel.events import EventCategory, create_analytics_event
from laundry_analytics.testing.fakes import FakeClock, InMemoryDeadLetterSink, RecordingWarehouseWriter

ORDER_TABLE = "analytics_order_lifecycle_events"


def _order(order_id: str):
    return create_analytics_event(
        source="orders-api",
        category=EventCategory.ORDER_LIFECYCLE,
        name="created",
        payload={"orderId": order_id, "status": "received"},
    )


class TestCreateEventBus:
    def test_memory_driver(self) -> None:
        bus = create_event_bus(EventBusSettings())
        assert isinstance(bus, InMemoryEventBus)
        assert bus.transport is None

    def test_kafka_driver_attaches_transport(self) -> None:
        settings = EventBusSettings(driver="kafka", kafka_brokers=["k1:9092"], kafka_topic="events.v1")
        with patch(
            "laundry_analytics.adapters.kafka.transport._require_aiokafka", return_value=MagicMock()
        ):
            bus = create_event_bus(settings)
        assert isinstance(bus.transport, KafkaEventTransport)
        assert bus.transport.topic == "events.v1"


class TestCreateEventSink:
    def test_thresholds_from_settings(self) -> None:
        async def _run() -> None:
            bus, writer = InMemoryEventBus(), RecordingWarehouseWriter()
            sink = create_event_sink(bus, writer, SinkSettings(max_batch_size=2, flush_interval_ms=0))
            await sink.start()
            await bus.publish(_order("a"))
            assert writer.calls == []
            await bus.publish(_order("b"))
            assert len(writer.calls) == 1
            await sink.stop()

        asyncio.run(_run())

    def test_backoff_enabled_by_settings(self) -> None:
        async def _run() -> None:
            bus, writer = InMemoryEventBus(), RecordingWarehouseWriter()
            settings = SinkSettings(max_batch_size=1, flush_interval_ms=0, retry_backoff_ms=10_000)
            sink = create_event_sink(bus, writer, settings, clock=FakeClock())
            await sink.start()
            writer.fail_table(ORDER_TABLE)
            await bus.publish(_order("a"))
            await bus.publish(_order("b"))
            assert writer.attempts(ORDER_TABLE) == 1
            writer.recover()
            await sink.stop()

        asyncio.run(_run())

    def test_max_flush_attempts_requires_dead_letters(self) -> None:
        with pytest.raises(ConfigError):
            create_event_sink(
                InMemoryEventBus(), RecordingWarehouseWriter(), SinkSettings(max_flush_attempts=2)
            )

    def test_max_flush_attempts_dead_letters(self) -> None:
        async def _run() -> None:
            bus, writer = InMemoryEventBus(), RecordingWarehouseWriter()
            dead_letters = InMemoryDeadLetterSink()
            settings = SinkSettings(flush_interval_ms=0, max_flush_attempts=1)
            sink = create_event_sink(bus, writer, settings, dead_letters=dead_letters)
            await sink.start()
            writer.fail_table(ORDER_TABLE)
            await bus.publish(_order("a"))
            await sink.flush()
            assert [r["order_id"] for r in dead_letters.rows(ORDER_TABLE)] == ["a"]
            await sink.stop()

        asyncio.run(_run())
