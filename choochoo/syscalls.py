"""System call requests that tasks yield to the kernel."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, ClassVar, Generator, Optional

from .task import EventType


class Opcode(IntEnum):
    CREATE = 0
    MY_TID = 1
    MY_PARENT_TID = 2
    YIELD = 3
    EXIT = 4
    SEND = 5
    RECEIVE = 6
    REPLY = 7
    AWAIT_EVENT = 8
    KILL = 9


class IpcError(Exception):
    """A message-passing call failed; code is the kernel's negative status."""

    def __init__(self, code: int, message: str = "") -> None:
        super().__init__(message or f"IPC error {code}")
        self.code = code


@dataclass(frozen=True)
class Create:
    priority: int
    entrypoint: Callable[..., Any]
    opcode: ClassVar[Optional[Opcode]] = Opcode.CREATE


@dataclass(frozen=True)
class MyTid:
    opcode: ClassVar[Optional[Opcode]] = Opcode.MY_TID


@dataclass(frozen=True)
class MyParentTid:
    opcode: ClassVar[Optional[Opcode]] = Opcode.MY_PARENT_TID


@dataclass(frozen=True)
class Yield:
    opcode: ClassVar[Optional[Opcode]] = Opcode.YIELD


@dataclass(frozen=True)
class Exit:
    opcode: ClassVar[Optional[Opcode]] = Opcode.EXIT


@dataclass(frozen=True)
class Kill:
    tid: int
    opcode: ClassVar[Optional[Opcode]] = Opcode.KILL


@dataclass(frozen=True)
class Send:
    tid: int
    message: bytes
    reply_capacity: int
    opcode: ClassVar[Optional[Opcode]] = Opcode.SEND


@dataclass(frozen=True)
class Receive:
    capacity: int
    opcode: ClassVar[Optional[Opcode]] = Opcode.RECEIVE


@dataclass(frozen=True)
class Reply:
    tid: int
    reply: bytes
    opcode: ClassVar[Optional[Opcode]] = Opcode.REPLY


@dataclass(frozen=True)
class AwaitEvent:
    event: int
    opcode: ClassVar[Optional[Opcode]] = Opcode.AWAIT_EVENT


@dataclass(frozen=True)
class TaskExists:
    """Asks the kernel whether tid names a live task."""

    tid: int
    opcode: ClassVar[Optional[Opcode]] = None


def await_tid(tid: int) -> Generator[Any, Any, None]:
    """Block until task tid has exited; use with ``yield from``."""
    while True:
        exists = yield TaskExists(tid)
        if not exists:
            return
        exited = yield AwaitEvent(EventType.TASK_FINISHED)
        if exited == tid:
            return