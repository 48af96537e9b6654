"""A string with a fixed maximum length."""

from __future__ import annotations

from typing import Any

from .util import _expand

MAX_STRING_LEN = 128


class BoundedString:
    """Mutable text of at most MAX_STRING_LEN characters."""

    def __init__(self, text: str = "") -> None:
        self._data = str(text)[:MAX_STRING_LEN]

    def push_char(self, c: str) -> None:
        """Append one character; raises OverflowError when the string is full."""
        if len(c) != 1:
            raise ValueError("push_char takes a single character")
        if len(self._data) >= MAX_STRING_LEN:
            raise OverflowError("bounded string is full")
        self._data += c

    def pop_char(self) -> None:
        """Drop the last character, if any."""
        self._data = self._data[:-1]

    def clear(self) -> None:
        self._data = ""

    def concat(self, other: BoundedString | str) -> None:
        """Append other, dropping whatever does not fit."""
        room = MAX_STRING_LEN - len(self._data)
        self._data += str(other)[:room]

    def copy(self) -> BoundedString:
        return BoundedString(self._data)

    def suffix(self, length: int) -> BoundedString:
        """The last length characters, or a copy if the string is not longer."""
        if len(self._data) <= length:
            return self.copy()
        if length <= 0:
            return BoundedString()
        return BoundedString(self._data[-length:])

    def __str__(self) -> str:
        return self._data

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BoundedString):
            return self._data == other._data
        if isinstance(other, str):
            return self._data == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"BoundedString({self._data!r})"


def string_format(fmt: str, *args: Any) -> BoundedString:
    """Format with %u, %d, %x, %s and %%, truncated to MAX_STRING_LEN."""
    return BoundedString(_expand(fmt, args))