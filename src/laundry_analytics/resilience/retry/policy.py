"""Resilience – RetryPolicy."""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

from laundry_analytics.observability.logging import get_logger
from laundry_analytics.resilience.retry.backoff import BackoffStrategy, ExponentialBackoff

T = TypeVar("T")
logger = get_logger(__name__)

#: Callback invoked before each retry sleep: ``(attempt, exc, delay_seconds)``.
RetryHook = Callable[[int, Exception, float], None]


class RetryPolicy:
    """Bounded async retry with a backoff strategy.

    Parameters
    ----------
    max_attempts:
        Total attempts including the first call; values below 1 count as 1.
    backoff:
        Delay strategy between attempts (default: exponential from 100 ms).
    retryable_exceptions:
        Only these exception types trigger a retry; anything else propagates.
    on_retry:
        Optional hook called before each sleep.
    sleep:
        Awaitable sleep function, replaceable in tests.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        backoff: BackoffStrategy | None = None,
        retryable_exceptions: tuple[type[Exception], ...] = (Exception,),
        on_retry: RetryHook | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.max_attempts = max(1, max_attempts)
        self.backoff = backoff or ExponentialBackoff()
        self.retryable_exceptions = retryable_exceptions
        self._on_retry = on_retry
        self._sleep = sleep

    async def execute_async(self, func: Callable[[], Awaitable[T]]) -> T:
        """Run *func*, retrying retryable failures until attempts run out."""
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await func()
            except self.retryable_exceptions as exc:
                if attempt == self.max_attempts:
                    raise
                delay = self.backoff.compute(attempt)
                logger.debug("retry.scheduled", attempt=attempt, delay_s=round(delay, 3), error=repr(exc))
                if self._on_retry is not None:
                    self._on_retry(attempt, exc, delay)
                await self._sleep(delay)
        raise AssertionError("unreachable")  # pragma: no cover


__all__ = ["RetryHook", "RetryPolicy"]
