"""Application writer – WarehouseWriter and DeadLetterSink ports."""
from __future__ import annotations

import abc
from collections.abc import Sequence
from typing import Any

type Row = dict[str, Any]


class WarehouseWriter(abc.ABC):
    """Port: persist a batch of rows into one warehouse table.

    ``write_batch`` either applies the whole batch or raises
    :class:`~laundry_analytics.kernel.errors.WriteError`; the caller keeps
    the rows and tries again later.  Writers should tolerate re-delivery of
    rows already written (the sink is at-least-once).
    """

    @abc.abstractmethod
    async def write_batch(self, table: str, rows: Sequence[Row]) -> None: ...

    async def close(self) -> None:
        """Release connections; called once when the sink stops."""
        return None


class DeadLetterSink(abc.ABC):
    """Port: hand-off for batches the sink has given up on."""

    @abc.abstractmethod
    async def push(self, table: str, rows: Sequence[Row], reason: str) -> None:
        """Accept *rows* destined for *table* that failed with *reason*."""
        ...


__all__ = ["DeadLetterSink", "Row", "WarehouseWriter"]
