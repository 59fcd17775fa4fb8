"""Resilience – retry and backoff for the bus transport and sink flushes."""
from laundry_analytics.resilience.retry import (
    BackoffStrategy,
    ConstantBackoff,
    ExponentialBackoff,
    LinearBackoff,
    RetryPolicy,
)

__all__ = ["BackoffStrategy", "ConstantBackoff", "ExponentialBackoff", "LinearBackoff", "RetryPolicy"]
