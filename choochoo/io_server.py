"""Buffered serial I/O server tasks, their event notifiers and client calls."""

from __future__ import annotations

from collections import deque
from enum import IntEnum
from functools import partial
from typing import Any, Generator

from .logger import Logger
from .nameserver import register_as, who_is
from .syscalls import AwaitEvent, Create, IpcError, Receive, Reply, Send
from .task import EventType
from .uart import Line, Uart

MARKLIN_IO_ADDRESS = "MARKLIN-IO"
CONSOLE_IO_ADDRESS = "CONSOLE-IO"
PUTS_BLOCK_SIZE = 100
NOTIFIER_PRIORITY = 2

_REQUEST_CAPACITY = 1 + PUTS_BLOCK_SIZE
_RESPONSE_SIZE = 2

_log = Logger()


class IORequestType(IntEnum):
    GETC = 1
    PUTC = 2
    PUTS = 3
    RECEIVE_EVENT = 4
    SEND_EVENT = 5


_EVENTS = {
    Line.CONSOLE: (EventType.CONSOLE_RECEIVE, EventType.CONSOLE_SEND),
    Line.MARKLIN: (EventType.MARKLIN_RECEIVE, EventType.MARKLIN_SEND),
}


def _response(kind: IORequestType, data: int = 0) -> bytes:
    return bytes([kind, data & 0xFF])


def _reply(tid: int, data: bytes) -> Generator[Any, Any, None]:
    try:
        yield Reply(tid, data)
    except IpcError as exc:
        _log.warn("[IOServer] could not reply to %d: %s", tid, str(exc))


def io_server(ns_tid: int, uart: Uart, address: str) -> Generator[Any, Any, None]:
    """Register as address and serve character I/O on uart forever."""
    yield from register_as(ns_tid, address)
    rx_event, tx_event = _EVENTS[uart.line]
    yield Create(NOTIFIER_PRIORITY, partial(receive_notifier, ns_tid, address, rx_event))
    yield Create(NOTIFIER_PRIORITY, partial(send_notifier, ns_tid, address, tx_event))

    clear_to_send = True
    getc_waiters: deque[int] = deque()
    pending: deque[int] = deque()

    while True:
        sender, message = yield Receive(_REQUEST_CAPACITY)
        if not message:
            _log.warn("[IOServer] Error when receiving on %d", int(uart.line))
            continue
        kind, payload = message[0], message[1:]

        if kind == IORequestType.GETC:
            ch = uart.getc_queued()
            if ch is None:
                getc_waiters.append(sender)
            else:
                yield from _reply(sender, _response(IORequestType.GETC, ch))

        elif kind == IORequestType.PUTC:
            ch = payload[0] if payload else 0
            if clear_to_send:
                uart.putc(ch)
                clear_to_send = False
            else:
                pending.append(ch)
            yield from _reply(sender, _response(IORequestType.PUTC))

        elif kind == IORequestType.PUTS:
            for index, ch in enumerate(payload[:PUTS_BLOCK_SIZE]):
                if index == 0 and clear_to_send:
                    uart.putc(ch)
                    clear_to_send = False
                else:
                    pending.append(ch)
            yield from _reply(sender, _response(IORequestType.PUTS))

        elif kind == IORequestType.RECEIVE_EVENT:
            yield from _reply(sender, _response(IORequestType.RECEIVE_EVENT))
            if getc_waiters:
                ch = uart.getc_queued()
                value = 0 if ch is None else ch
                while getc_waiters:
                    yield from _reply(
                        getc_waiters.popleft(), _response(IORequestType.GETC, value)
                    )

        elif kind == IORequestType.SEND_EVENT:
            yield from _reply(sender, _response(IORequestType.SEND_EVENT))
            if uart.line == Line.MARKLIN:
                if pending:
                    uart.putc(pending.popleft())
                else:
                    clear_to_send = True
            else:
                while pending and uart.try_putc(pending[0]):
                    pending.popleft()
                clear_to_send = not pending

        else:
            _log.error("[IOServer]: Unhandled IO Request Type - %d", kind)


def _notifier(
    ns_tid: int, address: str, event: EventType, kind: IORequestType
) -> Generator[Any, Any, None]:
    server = yield from who_is(ns_tid, address)
    while True:
        yield AwaitEvent(event)
        try:
            reply = yield Send(server, _response(kind), _RESPONSE_SIZE)
        except IpcError:
            _log.warn("[IO notifier] Send to %d failed", server)
            continue
        if not reply or reply[0] != kind:
            _log.warn("[IO notifier] reply from %d is not the right type", server)


def receive_notifier(ns_tid: int, address: str, event: EventType) -> Generator[Any, Any, None]:
    """Tell the server at address each time event signals received data."""
    yield from _notifier(ns_tid, address, event, IORequestType.RECEIVE_EVENT)


def send_notifier(ns_tid: int, address: str, event: EventType) -> Generator[Any, Any, None]:
    """Tell the server at address each time event signals room to transmit."""
    yield from _notifier(ns_tid, address, event, IORequestType.SEND_EVENT)


def getc(tid: int) -> Generator[Any, Any, int]:
    """Next byte received by I/O server tid, waiting for one if necessary."""
    reply = yield Send(tid, bytes([IORequestType.GETC]), _RESPONSE_SIZE)
    if len(reply) < _RESPONSE_SIZE:
        raise IpcError(-1, "malformed I/O server reply")
    return reply[1]


def putc(tid: int, ch: int) -> Generator[Any, Any, None]:
    """Hand one byte to I/O server tid for transmission."""
    yield Send(tid, bytes([IORequestType.PUTC, ch & 0xFF]), _RESPONSE_SIZE)


def puts(tid: int, data: bytes) -> Generator[Any, Any, None]:
    """Hand up to PUTS_BLOCK_SIZE bytes to I/O server tid for transmission."""
    block = bytes(data)[:PUTS_BLOCK_SIZE]
    yield Send(tid, bytes([IORequestType.PUTS]) + block, _RESPONSE_SIZE)