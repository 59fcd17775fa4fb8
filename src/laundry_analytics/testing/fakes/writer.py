"""Testing fakes – RecordingWarehouseWriter."""
from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Sequence

from laundry_analytics.application.writer import Row, WarehouseWriter
from laundry_analytics.kernel.errors import WriteError


@dataclasses.dataclass(frozen=True)
class WriteCall:
    table: str
    rows: list[Row]
    succeeded: bool


class RecordingWarehouseWriter(WarehouseWriter):
    """In-memory :class:`WarehouseWriter` that records every ``write_batch`` call.

    Failures can be injected per table (:meth:`fail_table`) or for the next
    *n* calls (:meth:`fail_next`).  :meth:`hold` makes writes wait until
    :meth:`release` is called, for observing a flush while it is in flight.
    Setting ``close_error`` makes :meth:`close` raise it.

    Usage::

        writer = RecordingWarehouseWriter()
        writer.fail_table("analytics_order_lifecycle_events")
        ...
        assert writer.rows("analytics_driver_telemetry_events")
    """

    def __init__(self) -> None:
        self.calls: list[WriteCall] = []
        self.closed = False
        self.close_error: BaseException | None = None
        self._failing_tables: set[str] = set()
        self._fail_next = 0
        self._gate: asyncio.Event | None = None
        self.in_flight = 0

    # ------------------------------------------------------------------
    # Failure injection
    # ------------------------------------------------------------------

    def fail_table(self, table: str) -> None:
        self._failing_tables.add(table)

    def recover_table(self, table: str) -> None:
        self._failing_tables.discard(table)

    def fail_next(self, n: int = 1) -> None:
        self._fail_next = n

    def recover(self) -> None:
        self._failing_tables.clear()
        self._fail_next = 0

    def hold(self) -> None:
        self._gate = asyncio.Event()

    def release(self) -> None:
        if self._gate is not None:
            self._gate.set()
            self._gate = None

    # ------------------------------------------------------------------
    # WarehouseWriter
    # ------------------------------------------------------------------

    async def write_batch(self, table: str, rows: Sequence[Row]) -> None:
        batch = [dict(row) for row in rows]
        self.in_flight += 1
        try:
            if self._gate is not None:
                await self._gate.wait()
            if table in self._failing_tables or self._fail_next > 0:
                self._fail_next = max(0, self._fail_next - 1)
                self.calls.append(WriteCall(table, batch, succeeded=False))
                raise WriteError(table, "injected failure", row_count=len(batch))
            self.calls.append(WriteCall(table, batch, succeeded=True))
        finally:
            self.in_flight -= 1

    async def close(self) -> None:
        if self.close_error is not None:
            raise self.close_error
        self.closed = True

    # ------------------------------------------------------------------
    # Assertion helpers
    # ------------------------------------------------------------------

    @property
    def successful_calls(self) -> list[WriteCall]:
        return [c for c in self.calls if c.succeeded]

    def rows(self, table: str | None = None) -> list[Row]:
        """All successfully written rows, optionally for one *table*."""
        return [
            row
            for call in self.successful_calls
            if table is None or call.table == table
            for row in call.rows
        ]

    def attempts(self, table: str) -> int:
        return sum(1 for c in self.calls if c.table == table)

    def clear(self) -> None:
        self.calls.clear()


__all__ = ["RecordingWarehouseWriter", "WriteCall"]
