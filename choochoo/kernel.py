"""The kernel: runs generator tasks and services the requests they yield."""

from __future__ import annotations

import inspect
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .idle_perf import IdleTimer
from .logger import Logger
from .scheduler import NUM_PRIORITY_LEVELS, Scheduler
from .syscalls import (
    AwaitEvent,
    Create,
    Exit,
    IpcError,
    Kill,
    MyParentTid,
    MyTid,
    Receive,
    Reply,
    Send,
    TaskExists,
    Yield,
)
from .task import EventType, Task, TaskLimitReached, TaskStatus, TaskTable
from .timer import TickTimer

IDLE_PRIORITY = 31
INIT_PRIORITY = 30


def _microseconds() -> int:
    return time.monotonic_ns() // 1000


@dataclass
class _SendState:
    reply_capacity: int
    message: bytes = b""


@dataclass(frozen=True)
class _Raise:
    """A result to be raised inside the task instead of returned."""

    error: BaseException


_FINISHED = object()


class Kernel:
    """Schedules tasks, passes messages between them and delivers events.

    A task is a callable returning a generator; each value the generator
    yields is a system call request, and the kernel sends back its result.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], int]] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self._clock = clock if clock is not None else _microseconds
        self.logger = logger if logger is not None else Logger()
        self.tasks = TaskTable()
        self.scheduler = Scheduler(self.tasks)
        self._timer = TickTimer(self._clock)
        self._timer.start()
        self._idle: Optional[IdleTimer] = None

    def _start_idle_timer(self, idle_tid: int) -> None:
        self._idle = IdleTimer(idle_tid, self._clock)

    def create(self, priority: int, entrypoint: Callable[..., Any]) -> int:
        """Create a ready task and return its tid."""
        if not 0 <= priority < NUM_PRIORITY_LEVELS:
            raise ValueError(f"invalid priority {priority}")
        task = self.tasks.create(priority, entrypoint)
        self.scheduler.add(task.tid, priority)
        self.logger.debug("[SYSCALL - Create]: Task #%d", task.tid)
        return task.tid

    def step(self) -> bool:
        """Run the next runnable task up to its next request; False if none is runnable."""
        if self._timer.due():
            self.raise_event(EventType.CLOCK_TICK)
            self._timer.reset()

        tid = self.scheduler.next_task()
        if tid is None:
            return False
        task = self.tasks.get(tid)
        self.tasks.set_current(tid)
        if self._idle is not None:
            self._idle.start(tid)
        try:
            try:
                request = self._resume(task)
            except StopIteration:
                request = _FINISHED
        finally:
            if self._idle is not None:
                self._idle.stop(tid)

        if request is _FINISHED:
            self._finish(tid)
        else:
            self._dispatch(task, request)
        return True

    def run(self, max_steps: Optional[int] = None) -> int:
        """Step until nothing is runnable or max_steps is reached; return the steps taken."""
        steps = 0
        while max_steps is None or steps < max_steps:
            if not self.step():
                break
            steps += 1
        return steps

    def raise_event(self, event: EventType) -> None:
        """Make every task waiting on event ready."""
        self.scheduler.unblock_events(EventType(event))

    def send(self, sender: Task, tid: int, message: bytes, reply_capacity: int) -> None:
        """Deliver message to tid, blocking sender until a reply arrives."""
        receiver = self.tasks.get(tid)
        if receiver is None:
            raise IpcError(-1, f"no task with tid {tid}")
        if sender.send_state is not None:
            raise IpcError(-2, f"task {sender.tid} is already sending")

        state = _SendState(reply_capacity=reply_capacity)
        sender.send_state = state

        if receiver.status != TaskStatus.RECEIVE_WAIT:
            sender.status = TaskStatus.SEND_WAIT
            receiver.send_listeners.push(sender.tid)
            state.message = bytes(message)
            return

        if receiver.receive_state is None:
            sender.send_state = None
            self.logger.error("Receiving task does not have receive state intialized")
            raise IpcError(-2, f"task {tid} has no receive state")

        receiver.status = TaskStatus.READY
        sender.status = TaskStatus.REPLY_WAIT
        capacity = receiver.receive_state
        receiver.return_value = (sender.tid, bytes(message)[:capacity])
        receiver.receive_state = None

    def receive(self, receiver: Task, capacity: int) -> Optional[tuple[int, bytes]]:
        """Take the oldest waiting message, or block receiver and return None."""
        while not receiver.send_listeners.is_empty():
            sender_tid = receiver.send_listeners.pop()
            sender = self.tasks.get(sender_tid)
            if sender is None or sender.send_state is None:
                continue
            if sender.status != TaskStatus.SEND_WAIT:
                self.logger.warn(
                    "[SYSCALL ERROR] - sender task %d not in Send Wait as expected", sender_tid
                )
            sender.status = TaskStatus.REPLY_WAIT
            return sender_tid, sender.send_state.message[:capacity]

        receiver.status = TaskStatus.RECEIVE_WAIT
        receiver.receive_state = capacity
        return None

    def reply(self, tid: int, reply: bytes) -> int:
        """Unblock tid with reply (truncated to its capacity); return the length delivered."""
        sender = self.tasks.get(tid)
        if sender is None:
            raise IpcError(-1, f"no task with tid {tid}")
        if sender.status != TaskStatus.REPLY_WAIT or sender.send_state is None:
            raise IpcError(-2, f"task {tid} is not waiting for a reply")
        sender.status = TaskStatus.READY
        data = bytes(reply)[: sender.send_state.reply_capacity]
        sender.send_state = None
        sender.return_value = data
        return len(data)

    def await_event(self, task: Task, event_id: int) -> int:
        """Block task until event_id is raised."""
        if not EventType.NONE < event_id < EventType.MAX:
            raise ValueError(f"invalid event id {event_id}")
        task.status = TaskStatus.EVENT_WAIT
        task.event_wait_type = EventType(event_id)
        return 0

    def kill(self, tid: int) -> None:
        """Remove task tid, waking tasks waiting for it to finish."""
        if self.tasks.get(tid) is None:
            raise KeyError(tid)
        self._finish(tid)

    def idle_percentage(self) -> int:
        """Share of time spent in the idle task, as a whole percentage."""
        if self._idle is None:
            raise RuntimeError("no idle task has been started")
        return self._idle.percentage()

    def _resume(self, task: Task) -> Any:
        if task.context is None:
            started = task.entrypoint()
            if not inspect.isgenerator(started):
                return _FINISHED
            task.context = started
            return next(started)
        value, task.return_value = task.return_value, 0
        if isinstance(value, _Raise):
            return task.context.throw(value.error)
        return task.context.send(value)

    def _finish(self, tid: int) -> None:
        self.scheduler.unblock_event(EventType.TASK_FINISHED, tid)
        self.scheduler.delete(tid)
        context = self.tasks.get(tid).context
        self.tasks.delete(tid)
        if context is not None:
            context.close()

    def _dispatch(self, task: Task, request: Any) -> None:
        try:
            result = self._handle(task, request)
        except (IpcError, ValueError, KeyError, TaskLimitReached) as exc:
            result = _Raise(exc)
        if self.tasks.get(task.tid) is task:
            task.return_value = result

    def _handle(self, task: Task, request: Any) -> Any:
        match request:
            case Create(priority=priority, entrypoint=entrypoint):
                return self.create(priority, entrypoint)
            case MyTid():
                return task.tid
            case MyParentTid():
                return task.parent_tid
            case Yield():
                return None
            case Exit():
                self._finish(task.tid)
                return None
            case Kill(tid=tid):
                self.kill(tid)
                return None
            case Send(tid=tid, message=message, reply_capacity=capacity):
                self.send(task, tid, message, capacity)
                return None
            case Receive(capacity=capacity):
                return self.receive(task, capacity)
            case Reply(tid=tid, reply=reply):
                return self.reply(tid, reply)
            case AwaitEvent(event=event):
                return self.await_event(task, event)
            case TaskExists(tid=tid):
                return self.tasks.get(tid) is not None
        self.logger.warn("[SYSCALL - ERROR]: Uncaught System Call [%s]", type(request).__name__)
        return None


def idle_task():
    """Lowest-priority task that only gives up the processor."""
    while True:
        yield Yield()


def boot(init_task: Callable[..., Any], kernel: Optional[Kernel] = None) -> Kernel:
    """Create the idle task and init_task on kernel (a new one if None) and return it."""
    if kernel is None:
        kernel = Kernel()
    idle_tid = kernel.create(IDLE_PRIORITY, idle_task)
    kernel._start_idle_timer(idle_tid)
    kernel.create(INIT_PRIORITY, init_task)
    return kernel