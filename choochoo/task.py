"""Task descriptors and the table that owns them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Optional

from .addrspace import AddrSpace, PageTable, PageTableFull
from .byte_queue import ByteQueue

TASK_SIZE = 128


class TaskStatus(IntEnum):
    RUNNING = 0
    READY = 1
    FINISHED = 2
    ERROR = 3
    SEND_WAIT = 4
    RECEIVE_WAIT = 5
    REPLY_WAIT = 6
    EVENT_WAIT = 7


class EventType(IntEnum):
    NONE = 0
    CLOCK_TICK = 1
    MARKLIN_RECEIVE = 2
    MARKLIN_SEND = 3
    CONSOLE_RECEIVE = 4
    CONSOLE_SEND = 5
    TASK_FINISHED = 6
    MAX = 7


class TaskLimitReached(RuntimeError):
    """Raised when no more tasks can be created."""


@dataclass(eq=False)
class Task:
    """Everything the kernel keeps about one task."""

    tid: int
    parent_tid: int
    priority: int
    entrypoint: Callable[..., Any]
    addrspace: AddrSpace
    status: TaskStatus = TaskStatus.READY
    send_listeners: ByteQueue = field(default_factory=ByteQueue)
    send_state: Any = None
    receive_state: Any = None
    event_wait_type: EventType = EventType.NONE
    return_value: Any = 0
    context: Any = None


class TaskTable:
    """Allocates task ids and address spaces; ids are never reused."""

    def __init__(self, page_table: Optional[PageTable] = None) -> None:
        self._page_table = page_table if page_table is not None else PageTable()
        self._tasks: dict[int, Task] = {}
        self._next_tid = 1
        self.current_tid = 0

    def create(self, priority: int, entrypoint: Callable[..., Any]) -> Task:
        """Create a READY task whose parent is the current task."""
        if self._next_tid >= TASK_SIZE:
            raise TaskLimitReached(f"at most {TASK_SIZE - 1} tasks can be created")
        try:
            space = self._page_table.create_page()
        except PageTableFull as exc:
            raise TaskLimitReached("no free address space") from exc
        tid = self._next_tid
        self._next_tid += 1
        task = Task(
            tid=tid,
            parent_tid=self.current_tid,
            priority=priority,
            entrypoint=entrypoint,
            addrspace=space,
        )
        self._tasks[tid] = task
        return task

    def get(self, tid: int) -> Optional[Task]:
        """The live task with this id, or None."""
        if not 0 < tid < TASK_SIZE:
            return None
        return self._tasks.get(tid)

    def set_current(self, tid: int) -> None:
        """Mark tid as the running task."""
        task = self.get(tid)
        if task is None:
            raise KeyError(tid)
        task.status = TaskStatus.RUNNING
        self.current_tid = tid

    def current(self) -> Optional[Task]:
        return self.get(self.current_tid)

    def delete(self, tid: int) -> None:
        """Finish the task and release its address space."""
        task = self.get(tid)
        if task is None:
            raise KeyError(tid)
        task.status = TaskStatus.FINISHED
        self._page_table.delete_page(task.addrspace)
        del self._tasks[tid]