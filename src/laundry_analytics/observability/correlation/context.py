"""Observability – RequestContext, CorrelationContext.

Producers (order routes, delivery telemetry handlers, campaign dispatch)
set a :class:`RequestContext` at the start of a request; events created
while it is active inherit its correlation and tenant ids, and log lines
pick them up through :class:`~laundry_analytics.observability.logging.CorrelationProcessor`.
"""
from __future__ import annotations

import contextlib
import dataclasses
from collections.abc import Iterator
from contextvars import ContextVar
from uuid import uuid4


@dataclasses.dataclass(frozen=True)
class RequestContext:
    """Ambient context for a single request/use-case execution."""
    correlation_id: str
    tenant_id: str | None = None
    user_id: str | None = None
    request_id: str | None = None

    @classmethod
    def new(cls, tenant_id: str | None = None, user_id: str | None = None) -> "RequestContext":
        return cls(correlation_id=str(uuid4()), tenant_id=tenant_id, user_id=user_id)


_CTX_VAR: ContextVar[RequestContext | None] = ContextVar("_la_request_ctx", default=None)


class CorrelationContext:
    """Ambient correlation context stored in a ``ContextVar``."""

    @staticmethod
    def set(ctx: RequestContext) -> None:
        _CTX_VAR.set(ctx)

    @staticmethod
    def get() -> RequestContext | None:
        return _CTX_VAR.get()

    @staticmethod
    def get_or_new() -> RequestContext:
        ctx = _CTX_VAR.get()
        if ctx is None:
            ctx = RequestContext.new()
            _CTX_VAR.set(ctx)
        return ctx

    @staticmethod
    def clear() -> None:
        _CTX_VAR.set(None)

    @staticmethod
    @contextlib.contextmanager
    def scope(ctx: RequestContext) -> Iterator[RequestContext]:
        """Activate *ctx* for the duration of a ``with`` block."""
        token = _CTX_VAR.set(ctx)
        try:
            yield ctx
        finally:
            _CTX_VAR.reset(token)


__all__ = ["CorrelationContext", "RequestContext"]
