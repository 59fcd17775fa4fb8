"""Domain errors – malformed analytics events."""

from __future__ import annotations

from typing import Any

from laundry_analytics.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when an event violates the analytics domain rules."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Event construction input does not meet validation rules.

    ``errors`` is a list of field-level failures, each a dict with
    ``field`` and ``message`` keys.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    @property
    def fields(self) -> list[str]:
        return [e.get("field", "") for e in self.errors]

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


__all__ = ["DomainError", "ValidationError"]
