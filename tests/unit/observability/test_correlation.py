"""Unit tests for CorrelationContext and RequestContext."""

from __future__ import annotations

import asyncio
import uuid

from laundry_analytics.observability.correlation import CorrelationContext, RequestContext


class TestRequestContext:
    def test_new_generates_correlation_id(self) -> None:
        ctx = RequestContext.new(tenant_id="branch-1")
        uuid.UUID(ctx.correlation_id)
        assert ctx.tenant_id == "branch-1"
        assert ctx.user_id is None

    def test_new_ids_are_unique(self) -> None:
        assert RequestContext.new().correlation_id != RequestContext.new().correlation_id


class TestCorrelationContext:
    def setup_method(self) -> None:
        CorrelationContext.clear()

    def teardown_method(self) -> None:
        CorrelationContext.clear()

    def test_set_and_get(self) -> None:
        ctx = RequestContext(correlation_id="cid-1")
        CorrelationContext.set(ctx)
        assert CorrelationContext.get() is ctx

    def test_get_or_new_creates_once(self) -> None:
        first = CorrelationContext.get_or_new()
        assert CorrelationContext.get_or_new() is first

    def test_clear(self) -> None:
        CorrelationContext.set(RequestContext(correlation_id="cid-1"))
        CorrelationContext.clear()
        assert CorrelationContext.get() is None

    def test_scope_restores_previous(self) -> None:
        outer = RequestContext(correlation_id="outer")
        CorrelationContext.set(outer)
        with CorrelationContext.scope(RequestContext(correlation_id="inner")) as inner:
            assert CorrelationContext.get() is inner
        assert CorrelationContext.get() is outer

    def test_tasks_do_not_leak_context(self) -> None:
        async def _child() -> str:
            CorrelationContext.set(RequestContext(correlation_id="child"))
            return CorrelationContext.get().correlation_id

        async def _run() -> None:
            assert await asyncio.create_task(_child()) == "child"
            assert CorrelationContext.get() is None

        asyncio.run(_run())
