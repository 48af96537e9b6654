"""Periodic tick timer built on a free-running microsecond counter."""

from __future__ import annotations

import time
from typing import Callable, Optional

TICK_TIME = 10000  # microseconds, 10 ms

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _microseconds() -> int:
    return time.monotonic_ns() // 1000


def next_compare(compare: int, now: int, tick: int = TICK_TIME) -> int:
    """First 32-bit compare value after now that stays on the tick grid of compare."""
    elapsed = (now - compare) & _MASK64
    return (compare + (elapsed // tick + 1) * tick) & _MASK32


class TickTimer:
    """Emulates a 32-bit compare register that fires every tick."""

    def __init__(self, clock: Callable[[], int] = _microseconds, tick: int = TICK_TIME) -> None:
        if tick <= 0:
            raise ValueError(f"tick must be positive, got {tick}")
        self._clock = clock
        self.tick = tick
        self.compare: Optional[int] = None

    def start(self) -> None:
        """Arm the compare register one tick from now."""
        self.compare = (self._clock() + self.tick) & _MASK32

    def _armed(self) -> int:
        if self.compare is None:
            raise RuntimeError("tick timer has not been started")
        return self.compare

    def due(self) -> bool:
        """Whether the counter has reached the compare value."""
        compare = self._armed()
        return ((self._clock() - compare) & _MASK32) < 0x80000000

    def reset(self) -> None:
        """Advance the compare value past the current time."""
        self.compare = next_compare(self._armed(), self._clock(), self.tick)