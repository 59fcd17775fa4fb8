"""Testing fakes – in-memory doubles for the sink's ports."""
from laundry_analytics.testing.fakes.clock import FakeClock
from laundry_analytics.testing.fakes.dead_letter import InMemoryDeadLetterSink
from laundry_analytics.testing.fakes.metrics import FakeMetricsRegistry
from laundry_analytics.testing.fakes.writer import RecordingWarehouseWriter
from laundry_analytics.kernel.time import FrozenClock

__all__ = [
    "FakeClock",
    "FakeMetricsRegistry",
    "FrozenClock",
    "InMemoryDeadLetterSink",
    "RecordingWarehouseWriter",
]
