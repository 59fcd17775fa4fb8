"""Testing support – fakes, fixtures and property-based strategies.

Import in your ``conftest.py``::

    pytest_plugins = ["laundry_analytics.testing.fixtures"]
"""

from laundry_analytics.testing.fakes import (
    FakeClock,
    FakeMetricsRegistry,
    InMemoryDeadLetterSink,
    RecordingWarehouseWriter,
)

__all__ = [
    "FakeClock",
    "FakeMetricsRegistry",
    "InMemoryDeadLetterSink",
    "RecordingWarehouseWriter",
]
