"""Application bus – InMemoryEventBus."""
from __future__ import annotations

import asyncio
import dataclasses
from typing import Any

from laundry_analytics.application.bus.ports import EventBus, EventHandler, EventTransport, Unsubscribe
from laundry_analytics.kernel.errors import PublishError, ValidationError
from laundry_analytics.kernel.events import AnalyticsEvent, CategoryRegistry, validate_event
from laundry_analytics.observability.logging import get_logger
from laundry_analytics.resilience.retry import RetryPolicy


@dataclasses.dataclass(eq=False)
class _Subscription:
    handler: EventHandler
    # FIFO per handler: asyncio.Lock wakes waiters in acquisition order
    lock: asyncio.Lock = dataclasses.field(default_factory=asyncio.Lock)


class InMemoryEventBus(EventBus):
    """In-process event bus with fan-out via :func:`asyncio.gather`.

    Each published event is handed to a snapshot of the current
    subscribers; ``publish`` returns once every handler has finished.  A
    failing handler is logged and isolated from the publisher and from the
    other handlers.  Handlers see events in publish order even when
    publishes overlap.

    Events are re-validated against *registry* before anything else, so an
    event built without :func:`create_analytics_event` cannot reach the
    transport or a subscriber in a malformed shape.

    When a *transport* is configured the event is first forwarded to the
    external broker under *retry_policy*; exhausting the retries raises
    :class:`PublishError` and skips local delivery.
    """

    def __init__(
        self,
        transport: EventTransport | None = None,
        retry_policy: RetryPolicy | None = None,
        logger: Any = None,
        registry: CategoryRegistry | None = None,
    ) -> None:
        self._transport = transport
        self._registry = registry
        self._retry = retry_policy or RetryPolicy(max_attempts=1)
        self._logger = logger or get_logger(__name__)
        self._subscriptions: list[_Subscription] = []
        self._closed = False

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def transport(self) -> EventTransport | None:
        return self._transport

    def subscribe(self, handler: EventHandler) -> Unsubscribe:
        subscription = _Subscription(handler)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    async def publish(self, event: AnalyticsEvent) -> None:
        if not isinstance(event, AnalyticsEvent):
            raise ValidationError(
                f"Only AnalyticsEvent instances can be published, got {type(event).__name__}",
                errors=[{"field": "event", "message": "must be an AnalyticsEvent"}],
            )
        validate_event(event, registry=self._registry)
        if self._closed:
            self._logger.debug("bus.publish_after_shutdown", event_id=event.event_id)
            return
        if self._transport is not None:
            await self._forward(event)
        subscriptions = list(self._subscriptions)
        if subscriptions:
            await asyncio.gather(*(self._deliver(s, event) for s in subscriptions))

    async def shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._subscriptions.clear()
        if self._transport is not None:
            await self._transport.close()

    # ------------------------------------------------------------------

    async def _forward(self, event: AnalyticsEvent) -> None:
        transport = self._transport
        assert transport is not None
        body = event.to_json().encode("utf-8")
        attributes = {"category": event.category, "name": event.name, "event_id": event.event_id}

        async def _send() -> None:
            await transport.send(body, event.event_id, attributes)

        try:
            await self._retry.execute_async(_send)
        except Exception as exc:
            raise PublishError(event.event_id, cause=exc) from exc

    async def _deliver(self, subscription: _Subscription, event: AnalyticsEvent) -> None:
        async with subscription.lock:
            try:
                await subscription.handler(event)
            except Exception as exc:
                self._logger.error(
                    "bus.handler_failed",
                    event_id=event.event_id,
                    event_type=event.event_type,
                    handler=getattr(subscription.handler, "__qualname__", repr(subscription.handler)),
                    error=repr(exc),
                    exc_info=exc,
                )


__all__ = ["InMemoryEventBus"]
