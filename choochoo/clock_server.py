"""Clock server counting ticks and releasing delayed tasks, with its client calls."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from functools import partial
from typing import Any, Generator

from .logger import Logger
from .nameserver import register_as, who_is
from .syscalls import AwaitEvent, Create, IpcError, Receive, Reply, Send
from .task import EventType

CLOCK_ADDRESS = "TICK-TOCK"

_MESSAGE = struct.Struct("<Bi")
_log = Logger()


class ClockMessageType(IntEnum):
    TIME = 1
    DELAY = 2
    DELAY_UNTIL = 3
    TICK = 4


@dataclass
class _Pending:
    tid: int
    until: int
    kind: ClockMessageType


def _encode(kind: ClockMessageType, ticks: int) -> bytes:
    return _MESSAGE.pack(kind, ticks)


def _decode(data: bytes) -> tuple[int, int]:
    if len(data) < _MESSAGE.size:
        raise IpcError(-1, "malformed clock message")
    return _MESSAGE.unpack_from(data)


def clock_server(ns_tid: int) -> Generator[Any, Any, None]:
    """Count clock ticks and answer time and delay requests forever."""
    yield from register_as(ns_tid, CLOCK_ADDRESS)
    pending: list[_Pending] = []
    tick_count = 0
    yield Create(1, partial(clock_notifier, ns_tid))

    while True:
        sender, message = yield Receive(_MESSAGE.size)
        try:
            kind, ticks = _decode(message)
        except IpcError:
            _log.error("[CLOCK SERVER]: receive request error")
            continue

        if kind == ClockMessageType.TIME:
            yield Reply(sender, _encode(ClockMessageType.TIME, tick_count))
        elif kind == ClockMessageType.DELAY:
            pending.append(_Pending(sender, ticks + tick_count, ClockMessageType.DELAY))
        elif kind == ClockMessageType.DELAY_UNTIL:
            pending.append(_Pending(sender, ticks, ClockMessageType.DELAY_UNTIL))
        elif kind == ClockMessageType.TICK:
            tick_count += 1
            yield Reply(sender, _encode(ClockMessageType.TICK, tick_count))
            due = [request for request in pending if request.until <= tick_count]
            pending = [request for request in pending if request.until > tick_count]
            for request in due:
                try:
                    yield Reply(request.tid, _encode(request.kind, tick_count))
                except IpcError:
                    continue
        else:
            _log.error("[CLOCK SERVER]: Unhandled Clock Message Type - %d", kind)


def clock_notifier(ns_tid: int) -> Generator[Any, Any, None]:
    """Forward every clock tick event to the clock server."""
    server = yield from who_is(ns_tid, CLOCK_ADDRESS)
    while True:
        yield AwaitEvent(EventType.CLOCK_TICK)
        yield Send(server, _encode(ClockMessageType.TICK, -1), _MESSAGE.size)


def _request(tid: int, kind: ClockMessageType, ticks: int) -> Generator[Any, Any, int]:
    reply = yield Send(tid, _encode(kind, ticks), _MESSAGE.size)
    reply_kind, reply_ticks = _decode(reply)
    if reply_kind != kind:
        raise IpcError(-1, f"clock server {tid} answered with the wrong message type")
    return reply_ticks


def time(tid: int) -> Generator[Any, Any, int]:
    """Ticks counted so far by clock server tid."""
    return (yield from _request(tid, ClockMessageType.TIME, 0))


def delay(tid: int, ticks: int) -> Generator[Any, Any, int]:
    """Block for ticks ticks; returns the tick count on waking."""
    if ticks < 0:
        raise ValueError(f"negative delay {ticks}")
    return (yield from _request(tid, ClockMessageType.DELAY, ticks))


def delay_until(tid: int, ticks: int) -> Generator[Any, Any, int]:
    """Block until the tick count reaches ticks; returns the tick count on waking."""
    if ticks < 0:
        raise ValueError(f"negative tick count {ticks}")
    return (yield from _request(tid, ClockMessageType.DELAY_UNTIL, ticks))