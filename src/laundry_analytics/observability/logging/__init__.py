"""Observability – structured logging helpers."""
from laundry_analytics.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from laundry_analytics.observability.logging.factory import JsonLoggerFactory
from laundry_analytics.observability.logging.processors import CorrelationProcessor, get_logger

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "CorrelationProcessor",
    "JsonLoggerFactory",
    "SensitiveFieldsFilter",
    "get_logger",
]
