"""Observability – correlation, structured logging, metrics."""

from laundry_analytics.observability.correlation import CorrelationContext, RequestContext
from laundry_analytics.observability.logging import JsonLoggerFactory, SensitiveFieldsFilter, get_logger
from laundry_analytics.observability.metrics import Metrics, NoopMetrics

__all__ = [
    "CorrelationContext",
    "JsonLoggerFactory",
    "Metrics",
    "NoopMetrics",
    "RequestContext",
    "SensitiveFieldsFilter",
    "get_logger",
]
