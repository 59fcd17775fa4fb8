"""Resilience – backoff strategies.

``compute(attempt)`` returns the wait in seconds after the *attempt*-th
consecutive failure (``attempt`` starts at 1).  With ``jitter=True`` the
delay is drawn uniformly from ``[delay/2, delay]`` so that many sinks
recovering from the same warehouse outage do not retry in lockstep.
"""
from __future__ import annotations

import abc
import random


class BackoffStrategy(abc.ABC):
    """Compute wait duration (seconds) after the *attempt*-th failure."""

    def __init__(self, *, jitter: bool = False) -> None:
        self._jitter = jitter

    def compute(self, attempt: int) -> float:
        delay = max(0.0, self._raw(max(1, attempt)))
        if self._jitter and delay > 0:
            half = delay / 2
            return half + random.uniform(0, half)
        return delay

    @abc.abstractmethod
    def _raw(self, attempt: int) -> float: ...


class ConstantBackoff(BackoffStrategy):
    """Fixed delay between attempts."""

    def __init__(self, delay: float = 1.0, *, jitter: bool = False) -> None:
        super().__init__(jitter=jitter)
        self._delay = delay

    def _raw(self, attempt: int) -> float:  # noqa: ARG002
        return self._delay


class LinearBackoff(BackoffStrategy):
    """Delay grows linearly: ``base_delay * attempt``, capped at ``max_delay``."""

    def __init__(self, base_delay: float = 0.5, max_delay: float = 30.0, *, jitter: bool = False) -> None:
        super().__init__(jitter=jitter)
        self._base = base_delay
        self._max = max_delay

    def _raw(self, attempt: int) -> float:
        return min(self._base * attempt, self._max)


class ExponentialBackoff(BackoffStrategy):
    """Delay doubles per attempt: ``base_delay * 2^(attempt-1)``, capped at ``max_delay``."""

    def __init__(self, base_delay: float = 0.1, max_delay: float = 30.0, *, jitter: bool = False) -> None:
        super().__init__(jitter=jitter)
        self._base = base_delay
        self._max = max_delay

    def _raw(self, attempt: int) -> float:
        return min(self._base * (2 ** (attempt - 1)), self._max)


__all__ = ["BackoffStrategy", "ConstantBackoff", "ExponentialBackoff", "LinearBackoff"]
