"""Unit tests for InMemoryEventBus."""

from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from laundry_analytics.application.bus import EventTransport, InMemoryEventBus
from laundry_analytics.kernel.errors import PublishError, ValidationError
from laundry_analytics.kernel.events import (
    AnalyticsEvent,
    CategorySchema,
    EventCategory,
    PayloadField,
    create_analytics_event,
    default_category_registry,
)
from laundry_analytics.kernel.events.schema import STRING
from laundry_analytics.resilience.retry import ConstantBackoff, RetryPolicy


def _event(order_id: str = "order-1") -> AnalyticsEvent:
    return create_analytics_event(
        source="orders-api",
        category=EventCategory.ORDER_LIFECYCLE,
        name="status_changed",
        payload={"orderId": order_id, "status": "ready"},
    )


def _unchecked_event(
    *,
    category: str = "order.lifecycle",
    name: str = "created",
    payload: dict | None = None,
) -> AnalyticsEvent:
    return AnalyticsEvent(
        event_id=str(uuid4()),
        occurred_at=datetime.now(UTC),
        source="orders-api",
        category=category,
        name=name,
        payload=payload if payload is not None else {"orderId": "order-1", "status": "received"},
    )


class _RecordingTransport(EventTransport):
    def __init__(self, failures: int = 0) -> None:
        self.sent: list[tuple[bytes, str, dict[str, str]]] = []
        self.failures = failures
        self.attempts = 0
        self.closed = False

    async def send(self, event_json, key, attributes) -> None:  # type: ignore[override]
        self.attempts += 1
        if self.failures:
            self.failures -= 1
            raise ConnectionError("broker unavailable")
        self.sent.append((event_json, key, dict(attributes)))

    async def close(self) -> None:
        self.closed = True


async def _no_sleep(_: float) -> None:
    return None


# ---------------------------------------------------------------------------
# Delivery
# ---------------------------------------------------------------------------


class TestPublishSubscribe:
    def test_delivers_to_every_subscriber(self) -> None:
        async def _run() -> None:
            bus = InMemoryEventBus()
            first: list[AnalyticsEvent] = []
            second: list[AnalyticsEvent] = []

            async def h1(e: AnalyticsEvent) -> None:
                first.append(e)

            async def h2(e: AnalyticsEvent) -> None:
                second.append(e)

            bus.subscribe(h1)
            bus.subscribe(h2)
            event = _event()
            await bus.publish(event)
            assert first == [event]
            assert second == [event]
            assert bus.subscriber_count == 2

        asyncio.run(_run())

    def test_no_replay_for_late_subscribers(self) -> None:
        async def _run() -> None:
            bus = InMemoryEventBus()
            seen: list[AnalyticsEvent] = []
            await bus.publish(_event("early"))

            async def handler(e: AnalyticsEvent) -> None:
                seen.append(e)

            bus.subscribe(handler)
            await bus.publish(_event("late"))
            assert [e.payload["orderId"] for e in seen] == ["late"]

        asyncio.run(_run())

    def test_publish_without_subscribers(self) -> None:
        asyncio.run(InMemoryEventBus().publish(_event()))

    def test_rejects_non_events(self) -> None:
        async def _run() -> None:
            with pytest.raises(ValidationError):
                await InMemoryEventBus().publish({"category": "order.lifecycle"})  # type: ignore[arg-type]

        asyncio.run(_run())

    def test_rejects_directly_built_event_with_missing_field(self) -> None:
        async def _run() -> None:
            transport = _RecordingTransport()
            bus = InMemoryEventBus(transport=transport)
            seen: list[AnalyticsEvent] = []

            async def handler(e: AnalyticsEvent) -> None:
                seen.append(e)

            bus.subscribe(handler)
            event = _unchecked_event(payload={"status": "received"})
            with pytest.raises(ValidationError) as exc_info:
                await bus.publish(event)
            assert exc_info.value.fields == ["payload.orderId"]
            assert exc_info.value.detail["event_id"] == event.event_id
            assert seen == []
            assert transport.attempts == 0

        asyncio.run(_run())

    def test_rejects_directly_built_event_with_unknown_category(self) -> None:
        async def _run() -> None:
            with pytest.raises(ValidationError) as exc_info:
                await InMemoryEventBus().publish(_unchecked_event(category="billing.invoice"))
            assert exc_info.value.fields == ["category"]

        asyncio.run(_run())

    def test_custom_registry_admits_its_categories(self) -> None:
        async def _run() -> None:
            registry = default_category_registry()
            registry.register(
                CategorySchema(
                    category="billing.invoice",
                    names=frozenset({"issued"}),
                    fields=(PayloadField("invoiceId", STRING, required=True),),
                )
            )
            bus = InMemoryEventBus(registry=registry)
            seen: list[str] = []

            async def handler(e: AnalyticsEvent) -> None:
                seen.append(e.payload["invoiceId"])

            bus.subscribe(handler)
            await bus.publish(
                _unchecked_event(category="billing.invoice", name="issued", payload={"invoiceId": "inv-1"})
            )
            assert seen == ["inv-1"]

        asyncio.run(_run())

    def test_publish_many_keeps_order(self) -> None:
        async def _run() -> None:
            bus = InMemoryEventBus()
            seen: list[str] = []

            async def handler(e: AnalyticsEvent) -> None:
                seen.append(e.payload["orderId"])

            bus.subscribe(handler)
            await bus.publish_many([_event("a"), _event("b"), _event("c")])
            assert seen == ["a", "b", "c"]

        asyncio.run(_run())


class TestIsolation:
    def test_failing_handler_does_not_reach_publisher_or_peers(self) -> None:
        async def _run() -> None:
            logger = MagicMock()
            bus = InMemoryEventBus(logger=logger)
            seen: list[AnalyticsEvent] = []

            async def broken(e: AnalyticsEvent) -> None:
                raise RuntimeError("boom")

            async def healthy(e: AnalyticsEvent) -> None:
                seen.append(e)

            bus.subscribe(broken)
            bus.subscribe(healthy)
            event = _event()
            await bus.publish(event)
            assert seen == [event]
            logger.error.assert_called_once()
            assert logger.error.call_args.args[0] == "bus.handler_failed"
            assert logger.error.call_args.kwargs["event_id"] == event.event_id

        asyncio.run(_run())


class TestUnsubscribe:
    def test_unsubscribe_stops_delivery_and_is_idempotent(self) -> None:
        async def _run() -> None:
            bus = InMemoryEventBus()
            seen: list[AnalyticsEvent] = []

            async def handler(e: AnalyticsEvent) -> None:
                seen.append(e)

            unsubscribe = bus.subscribe(handler)
            await bus.publish(_event())
            unsubscribe()
            unsubscribe()
            await bus.publish(_event())
            assert len(seen) == 1
            assert bus.subscriber_count == 0

        asyncio.run(_run())

    def test_unsubscribe_during_delivery(self) -> None:
        async def _run() -> None:
            bus = InMemoryEventBus()
            seen: list[str] = []
            unsubscribers: list = []

            async def self_removing(e: AnalyticsEvent) -> None:
                unsubscribers[0]()
                seen.append("self_removing")

            async def other(e: AnalyticsEvent) -> None:
                seen.append("other")

            unsubscribers.append(bus.subscribe(self_removing))
            bus.subscribe(other)
            await bus.publish(_event())
            assert sorted(seen) == ["other", "self_removing"]
            await bus.publish(_event())
            assert seen.count("self_removing") == 1
            assert seen.count("other") == 2

        asyncio.run(_run())


class TestOrdering:
    def test_handler_sees_overlapping_publishes_in_order(self) -> None:
        async def _run() -> None:
            bus = InMemoryEventBus()
            seen: list[str] = []

            async def slow(e: AnalyticsEvent) -> None:
                # first event yields longest so a reordering would show up
                await asyncio.sleep(0.02 if e.payload["orderId"] == "1" else 0)
                seen.append(e.payload["orderId"])

            bus.subscribe(slow)
            await asyncio.gather(*(bus.publish(_event(str(i))) for i in range(1, 5)))
            assert seen == ["1", "2", "3", "4"]

        asyncio.run(_run())


class TestShutdown:
    def test_publish_after_shutdown_is_a_noop(self) -> None:
        async def _run() -> None:
            logger = MagicMock()
            bus = InMemoryEventBus(logger=logger)
            seen: list[AnalyticsEvent] = []

            async def handler(e: AnalyticsEvent) -> None:
                seen.append(e)

            bus.subscribe(handler)
            await bus.shutdown()
            await bus.publish(_event())
            assert seen == []
            assert bus.closed
            assert bus.subscriber_count == 0
            logger.debug.assert_called_once()
            assert logger.debug.call_args.args[0] == "bus.publish_after_shutdown"

        asyncio.run(_run())

    def test_shutdown_closes_transport_once(self) -> None:
        async def _run() -> None:
            transport = _RecordingTransport()
            bus = InMemoryEventBus(transport=transport)
            await bus.shutdown()
            await bus.shutdown()
            assert transport.closed

        asyncio.run(_run())


# ---------------------------------------------------------------------------
# External transport
# ---------------------------------------------------------------------------


class TestTransport:
    def test_forwards_serialised_event(self) -> None:
        async def _run() -> None:
            transport = _RecordingTransport()
            bus = InMemoryEventBus(transport=transport)
            event = _event()
            await bus.publish(event)
            body, key, attributes = transport.sent[0]
            assert json.loads(body)["eventId"] == event.event_id
            assert key == event.event_id
            assert attributes == {"category": "order.lifecycle", "name": "status_changed", "event_id": event.event_id}

        asyncio.run(_run())

    def test_retries_transient_failures(self) -> None:
        async def _run() -> None:
            transport = _RecordingTransport(failures=2)
            retry = RetryPolicy(max_attempts=3, backoff=ConstantBackoff(0.1), sleep=_no_sleep)
            bus = InMemoryEventBus(transport=transport, retry_policy=retry)
            await bus.publish(_event())
            assert transport.attempts == 3
            assert len(transport.sent) == 1

        asyncio.run(_run())

    def test_exhausted_retries_raise_publish_error_and_skip_delivery(self) -> None:
        async def _run() -> None:
            transport = _RecordingTransport(failures=5)
            retry = RetryPolicy(max_attempts=2, backoff=ConstantBackoff(0.1), sleep=_no_sleep)
            bus = InMemoryEventBus(transport=transport, retry_policy=retry)
            seen: list[AnalyticsEvent] = []

            async def handler(e: AnalyticsEvent) -> None:
                seen.append(e)

            bus.subscribe(handler)
            event = _event()
            with pytest.raises(PublishError) as exc_info:
                await bus.publish(event)
            assert exc_info.value.event_id == event.event_id
            assert isinstance(exc_info.value.__cause__, ConnectionError)
            assert transport.attempts == 2
            assert seen == []

        asyncio.run(_run())
