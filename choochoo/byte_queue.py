"""A bounded FIFO queue of bytes."""

from __future__ import annotations

from collections import deque

MAX_QUEUE_LENGTH = 1024


class ByteQueue:
    """FIFO of values in 0..255 holding at most MAX_QUEUE_LENGTH items."""

    def __init__(self) -> None:
        self._items: deque[int] = deque()

    def push(self, byte: int) -> bool:
        """Append a byte (truncated to 8 bits); return False if the queue is full."""
        if len(self._items) >= MAX_QUEUE_LENGTH:
            return False
        self._items.append(byte & 0xFF)
        return True

    def pop(self) -> int:
        """Remove and return the oldest byte."""
        if not self._items:
            raise IndexError("pop from an empty byte queue")
        return self._items.popleft()

    def front(self) -> int:
        """Return the oldest byte without removing it."""
        if not self._items:
            raise IndexError("front of an empty byte queue")
        return self._items[0]

    def back(self) -> int:
        """Return the newest byte without removing it."""
        if not self._items:
            raise IndexError("back of an empty byte queue")
        return self._items[-1]

    def is_full(self) -> bool:
        return len(self._items) == MAX_QUEUE_LENGTH

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ByteQueue({list(self._items)!r})"