"""Application sink – FlushFailurePolicy."""
from __future__ import annotations

import dataclasses

from laundry_analytics.application.writer import DeadLetterSink
from laundry_analytics.config.validation import ConfigError
from laundry_analytics.resilience.retry import BackoffStrategy


@dataclasses.dataclass(frozen=True)
class FlushFailurePolicy:
    """What the sink does with a table whose flushes keep failing.

    The default keeps failed rows buffered and retries them on every
    trigger, forever.

    Parameters
    ----------
    backoff:
        After the n-th consecutive failure of a table, timer and
        size-triggered flushes skip that table until ``backoff.compute(n)``
        seconds have elapsed.  Explicit ``flush()`` and ``stop()`` always
        attempt.
    max_attempts:
        After this many consecutive failures the failed batch is pushed to
        *dead_letters* and removed from the buffer.
    dead_letters:
        Required together with *max_attempts*.
    """

    backoff: BackoffStrategy | None = None
    max_attempts: int | None = None
    dead_letters: DeadLetterSink | None = None

    def __post_init__(self) -> None:
        if self.max_attempts is None:
            return
        if self.max_attempts < 1:
            raise ConfigError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.dead_letters is None:
            raise ConfigError("max_attempts requires a dead_letters sink; batches are never dropped")

    def gives_up_after(self, attempts: int) -> bool:
        return self.max_attempts is not None and attempts >= self.max_attempts


__all__ = ["FlushFailurePolicy"]
