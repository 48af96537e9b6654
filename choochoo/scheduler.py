"""Multi-level round-robin ready queue."""

from __future__ import annotations

from collections import deque
from typing import Optional

from .task import EventType, TaskStatus, TaskTable

NUM_PRIORITY_LEVELS = 32

_RUNNABLE = (TaskStatus.READY, TaskStatus.RUNNING)


class Scheduler:
    """Picks the runnable task at the lowest priority number, round robin per level."""

    def __init__(self, tasks: TaskTable) -> None:
        self._tasks = tasks
        self._levels: list[deque[int]] = [deque() for _ in range(NUM_PRIORITY_LEVELS)]

    def add(self, tid: int, priority: int) -> None:
        if not 0 <= priority < NUM_PRIORITY_LEVELS:
            raise ValueError(f"invalid priority {priority}")
        self._levels[priority].append(tid)

    def next_task(self) -> Optional[int]:
        """Rotate queues and return the first runnable tid, or None."""
        for level in self._levels:
            for _ in range(len(level)):
                tid = level.popleft()
                level.append(tid)
                task = self._tasks.get(tid)
                if task is not None and task.status in _RUNNABLE:
                    return tid
        return None

    def delete(self, tid: int) -> None:
        for level in self._levels:
            if tid in level:
                level.remove(tid)
                return
        raise KeyError(f"could not find task {tid} in scheduler")

    def _waiting_on(self, event: EventType):
        for level in self._levels:
            for tid in level:
                task = self._tasks.get(tid)
                if (
                    task is not None
                    and task.status == TaskStatus.EVENT_WAIT
                    and task.event_wait_type == event
                ):
                    yield task

    def unblock_events(self, event: EventType) -> None:
        """Make every task waiting on event ready."""
        for task in self._waiting_on(event):
            task.status = TaskStatus.READY
            task.event_wait_type = EventType.NONE

    def unblock_event(self, event: EventType, exited_tid: int) -> None:
        """Make waiters ready and hand them exited_tid as their result."""
        for task in self._waiting_on(event):
            task.status = TaskStatus.READY
            task.event_wait_type = EventType.NONE
            task.return_value = exited_tid