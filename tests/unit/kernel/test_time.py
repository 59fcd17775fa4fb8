"""Unit tests for kernel time utilities."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from laundry_analytics.kernel.time import FrozenClock, SystemClock, utc_now


class TestSystemClock:
    def test_now_returns_utc_aware_datetime(self) -> None:
        result = SystemClock().now()
        assert result.tzinfo is not None
        assert result.utcoffset() == timedelta(0)

    def test_monotonic_does_not_go_backwards(self) -> None:
        clk = SystemClock()
        first = clk.monotonic()
        assert clk.monotonic() >= first


class TestFrozenClock:
    def test_now_is_fixed(self) -> None:
        fixed = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        clk = FrozenClock(fixed)
        assert clk.now() == fixed
        assert clk.now() == fixed

    def test_naive_datetime_is_treated_as_utc(self) -> None:
        clk = FrozenClock(datetime(2026, 1, 1, 12, 0))
        assert clk.now().tzinfo == UTC

    def test_advance_moves_now_and_monotonic(self) -> None:
        clk = FrozenClock(datetime(2026, 1, 1, tzinfo=UTC))
        assert clk.monotonic() == 0.0
        clk.advance(seconds=90)
        assert clk.now() == datetime(2026, 1, 1, 0, 1, 30, tzinfo=UTC)
        assert clk.monotonic() == 90.0


def test_utc_now_is_aware() -> None:
    assert utc_now().tzinfo is not None
