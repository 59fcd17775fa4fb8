"""Application bus – in-process publish/subscribe for analytics events."""
from laundry_analytics.application.bus.memory import InMemoryEventBus
from laundry_analytics.application.bus.ports import EventBus, EventHandler, EventTransport, Unsubscribe

__all__ = ["EventBus", "EventHandler", "EventTransport", "InMemoryEventBus", "Unsubscribe"]
