"""Unit tests for the metrics ports and the no-op backend."""

from __future__ import annotations

import pytest

from laundry_analytics.observability.metrics import Counter, Gauge, Histogram, Metrics, NoopMetrics


class TestMetricsPorts:
    @pytest.mark.parametrize("port", [Counter, Histogram, Gauge, Metrics])
    def test_ports_are_abstract(self, port: type) -> None:
        with pytest.raises(TypeError):
            port()


class TestNoopMetrics:
    def test_instruments_accept_calls(self) -> None:
        metrics = NoopMetrics()
        metrics.counter("analytics_sink_rows_written_total").add(3, {"table": "t"})
        metrics.histogram("analytics_sink_flush_duration_ms").record(12.5)
        metrics.gauge("analytics_sink_pending_rows").set(7)

    def test_instrument_types(self) -> None:
        metrics = NoopMetrics()
        assert isinstance(metrics.counter("c"), Counter)
        assert isinstance(metrics.histogram("h"), Histogram)
        assert isinstance(metrics.gauge("g"), Gauge)

    def test_instruments_are_shared(self) -> None:
        metrics = NoopMetrics()
        assert metrics.counter("a") is metrics.counter("b")
        assert metrics.histogram("h") is NoopMetrics().gauge("g")
