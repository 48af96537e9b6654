"""Name server task mapping names to task ids, and its client calls."""

from __future__ import annotations

import struct
from enum import IntEnum
from typing import Any, Generator

from .hashmap import HashMap
from .syscalls import IpcError, Receive, Reply, Send

NAME_SERVER_PRIORITY = 3

_REQUEST_CAPACITY = 256
_REPLY_CAPACITY = 8
_TID = struct.Struct("<i")


class _MessageType(IntEnum):
    REGISTER_AS = 0
    WHO_IS = 1


def name_server() -> Generator[Any, Any, None]:
    """Serve register and lookup requests forever."""
    names = HashMap()
    while True:
        sender, message = yield Receive(_REQUEST_CAPACITY)
        if not message:
            continue
        kind = message[0]
        name = message[1:].decode("utf-8", errors="replace")
        if kind == _MessageType.REGISTER_AS:
            try:
                names.insert(name, sender)
                registered = True
            except ValueError:
                registered = False
            reply = bytes([kind, int(registered)])
        elif kind == _MessageType.WHO_IS:
            try:
                tid = names.get(name)
            except KeyError:
                tid = -1
            reply = bytes([kind]) + _TID.pack(tid)
        else:
            continue
        try:
            yield Reply(sender, reply)
        except IpcError:
            continue


def register_as(ns_tid: int, name: str) -> Generator[Any, Any, None]:
    """Register the calling task under name; use with ``yield from``."""
    reply = yield Send(
        ns_tid, bytes([_MessageType.REGISTER_AS]) + name.encode("utf-8"), _REPLY_CAPACITY
    )
    if len(reply) < 2 or not reply[1]:
        raise ValueError(f"could not register name {name!r}")


def who_is(ns_tid: int, name: str) -> Generator[Any, Any, int]:
    """Tid registered under name; raises KeyError if there is none."""
    reply = yield Send(
        ns_tid, bytes([_MessageType.WHO_IS]) + name.encode("utf-8"), _REPLY_CAPACITY
    )
    if len(reply) < 1 + _TID.size:
        raise IpcError(-1, "malformed name server reply")
    (tid,) = _TID.unpack_from(reply, 1)
    if tid < 0:
        raise KeyError(name)
    return tid