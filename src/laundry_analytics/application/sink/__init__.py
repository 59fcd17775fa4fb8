"""Application sink – batching bridge from the event bus to the warehouse."""
from laundry_analytics.application.sink.policy import FlushFailurePolicy
from laundry_analytics.application.sink.sink import EventSink, FlushTrigger, SinkState

__all__ = ["EventSink", "FlushFailurePolicy", "FlushTrigger", "SinkState"]
