"""Kernel errors – BaseError, root of the laundry-analytics error hierarchy."""

from __future__ import annotations

import json
from typing import Any


class BaseError(Exception):
    """Root of every error the pipeline raises on purpose.

    Producers catch ``ValidationError`` from the event factory and the bus;
    the sink catches ``WriteError`` from writers and never lets it escape a
    flush.  Anything else deriving from :class:`Exception` is a bug or a
    driver failure that has not been wrapped yet.

    Args:
        message: Human-readable description.
        code: Stable slug for dashboards and alerts (defaults to ``default_code``).
        detail: JSON-friendly context such as the table or event id.
        cause: Driver or broker exception being wrapped; chained as ``__cause__``.
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = detail or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form, ``cause`` included as its ``repr``."""
        data: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }
        if self.cause is not None:
            data["cause"] = repr(self.cause)
        return data

    def log_fields(self) -> dict[str, Any]:
        """Key-value pairs to bind on a structlog event describing this error."""
        return {"error_code": self.code, "error_detail": dict(self.detail)}


__all__ = ["BaseError"]
