"""Kernel – framework-agnostic building blocks: errors, events, time."""

from laundry_analytics.kernel.errors import (
    ApplicationError,
    BaseError,
    DomainError,
    IllegalStateError,
    InfrastructureError,
    PublishError,
    SerializationError,
    ValidationError,
    WriteError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "DomainError",
    "IllegalStateError",
    "InfrastructureError",
    "PublishError",
    "SerializationError",
    "ValidationError",
    "WriteError",
]
