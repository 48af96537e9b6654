"""Measures the share of time spent in the idle task."""

from __future__ import annotations

import time
from typing import Callable


def _microseconds() -> int:
    return time.monotonic_ns() // 1000


class IdleTimer:
    """Accumulates time between start and stop calls for the idle task."""

    def __init__(self, idle_tid: int, clock: Callable[[], int] = _microseconds) -> None:
        self.idle_tid = idle_tid
        self._clock = clock
        self._start_time = clock()
        self._total_idle = 0
        self._last_idle = 0

    def start(self, tid: int) -> None:
        """Note that tid starts running."""
        if tid == self.idle_tid:
            self._last_idle = self._clock()

    def stop(self, tid: int) -> None:
        """Note that tid stops running."""
        if tid == self.idle_tid:
            self._total_idle += self._clock() - self._last_idle

    def percentage(self) -> int:
        """Whole percentage of elapsed time spent idle."""
        total = self._clock() - self._start_time
        return self._total_idle * 100 // total