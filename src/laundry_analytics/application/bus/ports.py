"""Application bus – EventBus and EventTransport ports."""
from __future__ import annotations

import abc
from collections.abc import Awaitable, Callable, Iterable, Mapping

from laundry_analytics.kernel.events import AnalyticsEvent

type EventHandler = Callable[[AnalyticsEvent], Awaitable[None]]
type Unsubscribe = Callable[[], None]


class EventBus(abc.ABC):
    """Port: publish analytics events to the handlers subscribed right now.

    There is no replay: a handler only sees events published while it is
    subscribed.
    """

    @abc.abstractmethod
    async def publish(self, event: AnalyticsEvent) -> None: ...

    async def publish_many(self, events: Iterable[AnalyticsEvent]) -> None:
        for event in events:
            await self.publish(event)

    @abc.abstractmethod
    def subscribe(self, handler: EventHandler) -> Unsubscribe: ...

    @abc.abstractmethod
    async def shutdown(self) -> None: ...


class EventTransport(abc.ABC):
    """Port: forward serialised events to an external broker."""

    @abc.abstractmethod
    async def send(self, event_json: bytes, key: str, attributes: Mapping[str, str]) -> None: ...

    async def close(self) -> None:
        return None


__all__ = ["EventBus", "EventHandler", "EventTransport", "Unsubscribe"]
