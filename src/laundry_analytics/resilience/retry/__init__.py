"""Resilience – retry with configurable backoff strategies."""
from laundry_analytics.resilience.retry.backoff import BackoffStrategy, ConstantBackoff, ExponentialBackoff, LinearBackoff
from laundry_analytics.resilience.retry.policy import RetryPolicy

__all__ = ["BackoffStrategy", "ConstantBackoff", "ExponentialBackoff", "LinearBackoff", "RetryPolicy"]
