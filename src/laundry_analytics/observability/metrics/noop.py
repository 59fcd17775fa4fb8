"""Observability – NoopMetrics, the sink's default metrics backend."""
from __future__ import annotations

from laundry_analytics.observability.metrics.ports import Counter, Gauge, Histogram, Metrics


class _Discard(Counter, Histogram, Gauge):
    """One stateless instrument standing in for every kind."""

    __slots__ = ()

    def add(self, value: float = 1.0, labels: dict[str, str] | None = None) -> None:
        return None

    def record(self, value: float, labels: dict[str, str] | None = None) -> None:
        return None

    def set(self, value: float, labels: dict[str, str] | None = None) -> None:
        return None


_DISCARD = _Discard()


class NoopMetrics(Metrics):
    """Drops every measurement.

    Used by :class:`~laundry_analytics.application.sink.EventSink` when no
    backend is passed; all names resolve to the same shared instrument.
    """

    def counter(self, name: str, description: str = "", unit: str = "") -> Counter:
        return _DISCARD

    def histogram(self, name: str, description: str = "", unit: str = "ms") -> Histogram:
        return _DISCARD

    def gauge(self, name: str, description: str = "", unit: str = "") -> Gauge:
        return _DISCARD


__all__ = ["NoopMetrics"]
