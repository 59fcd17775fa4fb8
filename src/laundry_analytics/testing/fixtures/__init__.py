"""Testing fixtures – pytest fixtures for fake doubles."""
try:
    import pytest  # noqa: F401

    from laundry_analytics.testing.fixtures.pipeline import (
        dead_letters,
        fake_clock,
        fake_metrics,
        memory_bus,
        recording_writer,
    )

except ImportError:
    pass

__all__ = [
    "dead_letters",
    "fake_clock",
    "fake_metrics",
    "memory_bus",
    "recording_writer",
]
