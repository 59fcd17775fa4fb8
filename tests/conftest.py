"""Shared pytest fixtures."""
from laundry_analytics.testing.fixtures import (  # noqa: F401
    dead_letters,
    fake_clock,
    fake_metrics,
    memory_bus,
    recording_writer,
)
