"""Observability – correlation context."""
from laundry_analytics.observability.correlation.context import CorrelationContext, RequestContext

__all__ = ["CorrelationContext", "RequestContext"]
