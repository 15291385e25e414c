"""Millisecond clocks for the scheduler."""

import time
from typing import Callable

Clock = Callable[[], int]


def monotonic_ms() -> int:
    """Return a monotonic timestamp in milliseconds."""
    return time.monotonic_ns() // 1_000_000


class ManualClock:
    """Clock that only moves when told to. Used for simulation and tests."""

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms

    def __call__(self) -> int:
        return self._now

    @property
    def now(self) -> int:
        return self._now

    def set(self, ms: int) -> None:
        if ms < self._now:
            raise ValueError(f"Clock cannot go backwards ({ms} < {self._now})")
        self._now = ms

    def advance(self, ms: int) -> int:
        """Move the clock forward by ``ms`` and return the new time."""
        self.set(self._now + ms)
        return self._now
