"""Serial line model: a received-byte queue and a bounded transmit FIFO."""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Optional, Union

from .byte_queue import ByteQueue
from .util import _expand

TX_FIFO_SIZE = 16


class Line(IntEnum):
    """Serial lines on the hat: 1 drives the console, 2 the train controller."""

    CONSOLE = 1
    MARKLIN = 2


def _byte(c: Union[int, str]) -> int:
    if isinstance(c, str):
        if len(c) != 1:
            raise ValueError("expected a single character")
        return ord(c) & 0xFF
    return c & 0xFF


class Uart:
    """One serial line: bytes received wait in a queue, bytes sent wait in a FIFO."""

    def __init__(self, line: Line, tx_capacity: int = TX_FIFO_SIZE) -> None:
        self.line = Line(line)
        if tx_capacity < 1:
            raise ValueError(f"transmit capacity must be positive, got {tx_capacity}")
        self.tx_capacity = tx_capacity
        self._rx = ByteQueue()
        self._tx = bytearray()

    def receive_byte(self, byte: int) -> bool:
        """Store a byte that arrived on the line; False if the receive queue is full."""
        return self._rx.push(byte)

    def getc_queued(self) -> Optional[int]:
        """Oldest received byte, or None if nothing is waiting."""
        if self._rx.is_empty():
            return None
        return self._rx.pop()

    def _tx_full(self) -> bool:
        return len(self._tx) >= self.tx_capacity

    def putc(self, c: Union[int, str]) -> None:
        """Queue a byte for transmission; raises BlockingIOError if the FIFO is full."""
        if self._tx_full():
            raise BlockingIOError("transmit FIFO is full")
        self._tx.append(_byte(c))

    def try_putc(self, c: Union[int, str]) -> bool:
        """Queue a byte for transmission unless the FIFO is full."""
        if self._tx_full():
            return False
        self._tx.append(_byte(c))
        return True

    def drain(self) -> bytes:
        """Return everything waiting to be transmitted and empty the FIFO."""
        data = bytes(self._tx)
        self._tx.clear()
        return data

    def printf(self, fmt: str, *args: Any) -> None:
        """Transmit fmt expanded with %u, %d, %x, %s and %%."""
        for byte in _expand(fmt, args).encode("latin-1", errors="replace"):
            self.putc(byte)