"""Observability – metrics ports."""
from laundry_analytics.observability.metrics.ports import Counter, Gauge, Histogram, Metrics
from laundry_analytics.observability.metrics.noop import NoopMetrics

__all__ = ["Counter", "Gauge", "Histogram", "Metrics", "NoopMetrics"]
