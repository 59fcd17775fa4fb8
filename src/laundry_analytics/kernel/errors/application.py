"""Application-layer errors – lifecycle misuse of pipeline components."""

from __future__ import annotations

from typing import Any

from laundry_analytics.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class IllegalStateError(ApplicationError):
    """An operation was attempted in a state that does not allow it.

    Raised by ``EventSink.start()`` when called twice, and by any sink
    operation attempted after ``stop()``.
    """

    default_code = "illegal_state"

    def __init__(
        self,
        message: str,
        *,
        state: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.state = state
        if state is not None:
            self.detail.setdefault("state", state)


__all__ = ["ApplicationError", "IllegalStateError"]
