"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError          (domain.py)
    │   └── ValidationError
    ├── ApplicationError     (application.py)
    │   └── IllegalStateError
    └── InfrastructureError  (infrastructure.py)
        ├── WriteError
        ├── PublishError
        └── SerializationError
"""

from laundry_analytics.kernel.errors.application import ApplicationError, IllegalStateError
from laundry_analytics.kernel.errors.base import BaseError
from laundry_analytics.kernel.errors.domain import DomainError, ValidationError
from laundry_analytics.kernel.errors.infrastructure import (
    InfrastructureError,
    PublishError,
    SerializationError,
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
