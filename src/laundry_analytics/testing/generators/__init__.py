"""Testing generators – Hypothesis strategies for analytics events."""
from laundry_analytics.testing.generators.strategies import (
    category_strategy,
    driver_telemetry_event_strategy,
    order_lifecycle_event_strategy,
)

__all__ = ["category_strategy", "driver_telemetry_event_strategy", "order_lifecycle_event_strategy"]
