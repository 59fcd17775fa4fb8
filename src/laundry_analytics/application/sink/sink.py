"""Application sink – EventSink.

Subscribes to an :class:`~laundry_analytics.application.bus.EventBus`,
projects every event into a row for its category's table and buffers rows
per table.  A table is flushed when its buffer reaches ``max_batch_size``,
on every ``flush_interval_ms`` tick, on an explicit :meth:`EventSink.flush`
and once more on :meth:`EventSink.stop`.

Delivery is at-least-once: a failed ``write_batch`` puts the rows back in
front of the table's buffer and they are sent again by the next flush.
"""
from __future__ import annotations

import asyncio
import enum
from typing import Any, Literal

from laundry_analytics.application.bus import EventBus, Unsubscribe
from laundry_analytics.application.mapping import Row, TableMappingRegistry, default_table_registry
from laundry_analytics.application.sink.policy import FlushFailurePolicy
from laundry_analytics.application.writer import WarehouseWriter
from laundry_analytics.config.validation import ConfigError
from laundry_analytics.kernel.errors import BaseError, IllegalStateError
from laundry_analytics.kernel.events import AnalyticsEvent
from laundry_analytics.kernel.time import Clock, SystemClock
from laundry_analytics.observability.logging import get_logger
from laundry_analytics.observability.metrics import Metrics, NoopMetrics

type FlushTrigger = Literal["size", "timer", "explicit", "final"]

# triggers that honour the failure backoff window
_SCHEDULED: frozenset[str] = frozenset({"size", "timer"})


class SinkState(str, enum.Enum):
    STOPPED = "STOPPED"
    RUNNING = "RUNNING"
    FLUSHING = "FLUSHING"


class EventSink:
    """Batching bridge from the event bus to a :class:`WarehouseWriter`.

    Parameters
    ----------
    bus:
        Bus to subscribe to on :meth:`start`.
    writer:
        Destination for flushed batches; closed on :meth:`stop`.
    max_batch_size:
        Buffer length that triggers a flush of that table.  ``<= 0`` flushes
        on every event.
    flush_interval_ms:
        Period of the background flush.  ``0`` disables the timer.
    registry:
        Category → table mappings (default: the built-in categories).
    failure_policy:
        Backoff and dead-letter behaviour for failing tables.
    metrics:
        Metrics backend (default: no-op).
    clock:
        Monotonic time source for backoff windows and flush durations.
    """

    def __init__(
        self,
        bus: EventBus,
        writer: WarehouseWriter,
        *,
        max_batch_size: int = 100,
        flush_interval_ms: int = 5000,
        registry: TableMappingRegistry | None = None,
        failure_policy: FlushFailurePolicy | None = None,
        metrics: Metrics | None = None,
        clock: Clock | None = None,
        logger: Any = None,
    ) -> None:
        if flush_interval_ms < 0:
            raise ConfigError(f"flush_interval_ms must be >= 0, got {flush_interval_ms}")
        self._bus = bus
        self._writer = writer
        self._max_batch_size = max_batch_size
        self._flush_interval_ms = flush_interval_ms
        self._registry = registry or default_table_registry()
        self._policy = failure_policy or FlushFailurePolicy()
        self._clock = clock or SystemClock()
        self._logger = logger or get_logger(__name__)

        metrics = metrics or NoopMetrics()
        self._buffered_total = metrics.counter(
            "analytics_sink_events_buffered_total", "Events accepted into a table buffer"
        )
        self._written_total = metrics.counter(
            "analytics_sink_rows_written_total", "Rows acknowledged by the warehouse writer"
        )
        self._failures_total = metrics.counter(
            "analytics_sink_flush_failures_total", "Failed write_batch calls"
        )
        self._unmapped_total = metrics.counter(
            "analytics_sink_events_unmapped_total", "Events skipped for lack of a table mapping"
        )
        self._dead_lettered_total = metrics.counter(
            "analytics_sink_rows_dead_lettered_total", "Rows handed to the dead-letter sink"
        )
        self._flush_duration = metrics.histogram(
            "analytics_sink_flush_duration_ms", "write_batch latency", unit="ms"
        )

        self._buffers: dict[str, list[Row]] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._failures: dict[str, int] = {}
        self._retry_at: dict[str, float] = {}
        self._inflight = 0
        self._started = False
        self._stopping = False
        self._stopped = False
        self._unsubscribe: Unsubscribe | None = None
        self._timer: asyncio.Task[None] | None = None
        self._timer_stop = asyncio.Event()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> SinkState:
        if not self._started or self._stopped:
            return SinkState.STOPPED
        if self._inflight:
            return SinkState.FLUSHING
        return SinkState.RUNNING

    @property
    def pending_rows(self) -> int:
        return sum(len(rows) for rows in self._buffers.values())

    def buffered(self, table: str | None = None) -> list[Row]:
        """Copy of the rows waiting in *table*'s buffer (all tables when ``None``)."""
        if table is not None:
            return [dict(row) for row in self._buffers.get(table, [])]
        return [dict(row) for rows in self._buffers.values() for row in rows]

    def consecutive_failures(self, table: str) -> int:
        return self._failures.get(table, 0)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Subscribe to the bus and arm the flush timer."""
        if self._stopped or self._stopping:
            raise IllegalStateError("EventSink cannot be restarted after stop()", state=self.state.value)
        if self._started:
            raise IllegalStateError("EventSink is already running", state=self.state.value)
        self._started = True
        self._unsubscribe = self._bus.subscribe(self._handle)
        if self._flush_interval_ms > 0:
            self._timer = asyncio.create_task(self._run_timer(), name="event-sink-flush-timer")
        self._logger.info(
            "sink.started",
            max_batch_size=self._max_batch_size,
            flush_interval_ms=self._flush_interval_ms,
            tables=self._registry.tables(),
        )

    async def flush(self) -> int:
        """Flush every non-empty table buffer; return the number of rows written.

        Write failures are logged and the rows stay buffered; they are not
        raised.
        """
        if self._stopped:
            raise IllegalStateError("EventSink is stopped", state=SinkState.STOPPED.value)
        return await self._flush_all("explicit")

    async def stop(self) -> None:
        """Unsubscribe, stop the timer, drain the buffers and close the writer.

        ``stop()`` is terminal; calling it again is a no-op.
        """
        if self._stopped or self._stopping:
            return
        self._stopping = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._timer is not None:
            self._timer_stop.set()
            await self._timer
            self._timer = None
        try:
            written = await self._flush_all("final")
            if self.pending_rows:
                self._logger.error(
                    "sink.final_flush_failed",
                    pending_rows=self.pending_rows,
                    tables=sorted(t for t, rows in self._buffers.items() if rows),
                )
            try:
                await self._writer.close()
            except Exception as exc:
                self._logger.error("sink.writer_close_failed", error=repr(exc), exc_info=exc)
        finally:
            self._stopped = True
            self._stopping = False
        self._logger.info("sink.stopped", rows_written=written, rows_abandoned=self.pending_rows)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _handle(self, event: AnalyticsEvent) -> None:
        if self._stopping or self._stopped:
            self._logger.debug("sink.event_refused", event_id=event.event_id, event_type=event.event_type)
            return
        mapping = self._registry.resolve(event.category)
        if mapping is None:
            self._unmapped_total.add(1, {"category": event.category})
            self._logger.warning(
                "sink.unmapped_event", category=event.category, event_name=event.name, event_id=event.event_id
            )
            return

        table = mapping.table
        buffer = self._buffers.setdefault(table, [])
        buffer.append(mapping.project(event))
        self._buffered_total.add(1, {"table": table})
        if self._max_batch_size <= 0 or len(buffer) >= self._max_batch_size:
            await self._flush_table(table, "size")

    async def _run_timer(self) -> None:
        interval = self._flush_interval_ms / 1000
        while True:
            try:
                await asyncio.wait_for(self._timer_stop.wait(), timeout=interval)
                return
            except TimeoutError:
                pass
            await self._flush_all("timer")

    async def _flush_all(self, trigger: FlushTrigger) -> int:
        written = 0
        for table in list(self._buffers):
            written += await self._flush_table(table, trigger)
        return written

    async def _flush_table(self, table: str, trigger: FlushTrigger) -> int:
        lock = self._locks.setdefault(table, asyncio.Lock())
        async with lock:
            rows = self._buffers.get(table)
            if not rows:
                return 0
            if trigger in _SCHEDULED and not self._due(table):
                return 0

            self._buffers[table] = []
            self._inflight += 1
            started = self._clock.monotonic()
            try:
                await self._writer.write_batch(table, rows)
            except asyncio.CancelledError:
                self._restore(table, rows)
                raise
            except Exception as exc:
                self._record_duration(table, started, "error")
                await self._on_failure(table, rows, exc)
                return 0
            finally:
                self._inflight -= 1

            self._record_duration(table, started, "ok")
            self._failures.pop(table, None)
            self._retry_at.pop(table, None)
            self._written_total.add(len(rows), {"table": table})
            self._logger.info("sink.flushed", table=table, rows=len(rows), trigger=trigger)
            return len(rows)

    async def _on_failure(self, table: str, rows: list[Row], exc: Exception) -> None:
        attempts = self._failures.get(table, 0) + 1
        self._failures[table] = attempts
        self._failures_total.add(1, {"table": table})
        self._logger.error(
            "sink.flush_failed",
            table=table,
            rows=len(rows),
            attempt=attempts,
            error=repr(exc),
            exc_info=exc,
            **(exc.log_fields() if isinstance(exc, BaseError) else {}),
        )

        if self._policy.gives_up_after(attempts):
            dead_letters = self._policy.dead_letters
            assert dead_letters is not None
            try:
                await dead_letters.push(table, rows, repr(exc))
            except Exception as dl_exc:
                self._logger.error("sink.dead_letter_failed", table=table, rows=len(rows), error=repr(dl_exc))
                self._restore(table, rows)
                return
            self._failures.pop(table, None)
            self._retry_at.pop(table, None)
            self._dead_lettered_total.add(len(rows), {"table": table})
            self._logger.warning("sink.dead_lettered", table=table, rows=len(rows), attempts=attempts)
            return

        self._restore(table, rows)
        if self._policy.backoff is not None:
            self._retry_at[table] = self._clock.monotonic() + self._policy.backoff.compute(attempts)

    def _restore(self, table: str, rows: list[Row]) -> None:
        # failed rows go back ahead of anything buffered during the write
        self._buffers[table] = rows + self._buffers.get(table, [])

    def _due(self, table: str) -> bool:
        retry_at = self._retry_at.get(table)
        return retry_at is None or self._clock.monotonic() >= retry_at

    def _record_duration(self, table: str, started: float, outcome: str) -> None:
        elapsed_ms = (self._clock.monotonic() - started) * 1000
        self._flush_duration.record(elapsed_ms, {"table": table, "outcome": outcome})


__all__ = ["EventSink", "FlushTrigger", "SinkState"]
