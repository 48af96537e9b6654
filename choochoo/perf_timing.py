"""Start/stop timers with running maximum and average."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable


class TimingType(IntEnum):
    SSR_TIME = 0


@dataclass
class _TimingState:
    start: int = 0
    end: int = 0
    perf_time: int = 0
    max_time: int = 0
    sum_time: int = 0
    count_gets: int = 0


def _microseconds() -> int:
    return time.monotonic_ns() // 1000


class PerfTimer:
    """One timer per TimingType, read from the given clock."""

    def __init__(self, clock: Callable[[], int] = _microseconds) -> None:
        self._clock = clock
        self._timers = {kind: _TimingState() for kind in TimingType}

    def start(self, kind: TimingType) -> None:
        self._timers[kind].start = self._clock()

    def end(self, kind: TimingType) -> None:
        state = self._timers[kind]
        state.end = self._clock()
        state.perf_time = state.end - state.start
        if state.perf_time > state.max_time:
            state.max_time = state.perf_time

    def perf_time(self, kind: TimingType) -> int:
        """Last measured duration; also adds it to the running average."""
        state = self._timers[kind]
        state.sum_time += state.perf_time
        state.count_gets += 1
        return state.perf_time

    def average(self, kind: TimingType) -> int:
        """Mean of the durations read so far, truncated toward zero."""
        state = self._timers[kind]
        quotient = abs(state.sum_time) // state.count_gets
        return -quotient if state.sum_time < 0 else quotient

    def maximum(self, kind: TimingType) -> int:
        return self._timers[kind].max_time