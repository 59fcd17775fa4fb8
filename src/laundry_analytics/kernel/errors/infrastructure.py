"""Infrastructure errors – warehouse and transport I/O failures."""

from __future__ import annotations

from typing import Any

from laundry_analytics.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class WriteError(InfrastructureError):
    """A warehouse ``write_batch`` call failed (connectivity, constraint, auth, …).

    The batch was not applied; the caller keeps the rows for a later retry.
    """

    default_code = "warehouse_write_error"

    def __init__(
        self,
        table: str,
        message: str | None = None,
        *,
        row_count: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Failed to write batch to '{table}'", **kwargs)
        self.table = table
        self.row_count = row_count
        self.detail.setdefault("table", table)
        self.detail.setdefault("row_count", row_count)


class PublishError(InfrastructureError):
    """The external event transport rejected a publish after all retries."""

    default_code = "event_publish_error"

    def __init__(
        self,
        event_id: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Failed to publish event '{event_id}'", **kwargs)
        self.event_id = event_id


class SerializationError(InfrastructureError):
    """Failed to serialise an event or row payload."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


__all__ = [
    "InfrastructureError",
    "PublishError",
    "SerializationError",
    "WriteError",
]
