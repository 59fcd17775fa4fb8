"""Property-based checks for the Hypothesis strategies."""

from __future__ import annotations

import re

from hypothesis import given, settings

from laundry_analytics.application.mapping import default_table_registry, table_name_for
from laundry_analytics.kernel.events import AnalyticsEvent
from laundry_analytics.testing.generators import (
    category_strategy,
    driver_telemetry_event_strategy,
    order_lifecycle_event_strategy,
)

_REGISTRY = default_table_registry()


class TestStrategies:
    @given(category_strategy())
    def test_categories_are_valid_names(self, category: str) -> None:
        assert re.fullmatch(r"analytics_[a-z0-9_]+_events", table_name_for(category))

    @settings(max_examples=25)
    @given(order_lifecycle_event_strategy())
    def test_order_events_project_to_rows(self, event: AnalyticsEvent) -> None:
        row = _REGISTRY.resolve(event.category).project(event)
        assert row["order_id"] == event.payload["orderId"]
        assert row["total"] == event.payload["total"]

    @settings(max_examples=25)
    @given(driver_telemetry_event_strategy())
    def test_driver_events_project_to_rows(self, event: AnalyticsEvent) -> None:
        row = _REGISTRY.resolve(event.category).project(event)
        assert row["driver_id"] == event.payload["driverId"]
        assert set(row) == set(_REGISTRY.resolve(event.category).writable_columns)
