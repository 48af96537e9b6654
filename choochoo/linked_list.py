"""A doubly linked list with a cursor that survives removal of visited items."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional


class _Node:
    __slots__ = ("data", "next", "prev")

    def __init__(self, data: Any) -> None:
        self.data = data
        self.next: Optional[_Node] = None
        self.prev: Optional[_Node] = None


class Cursor:
    """Iterator over list nodes that can also step backwards."""

    def __init__(self, node: Optional[_Node]) -> None:
        self._current = node

    def __iter__(self) -> Cursor:
        return self

    def __next__(self) -> Any:
        if self._current is None:
            raise StopIteration
        data = self._current.data
        self._current = self._current.next
        return data

    def prev(self) -> bool:
        """Move back one node; False if there is nowhere to go."""
        if self._current is None or self._current.prev is None:
            return False
        self._current = self._current.prev
        return True


class LinkedList:
    """Doubly linked list of arbitrary items."""

    def __init__(self, items: Iterable[Any] = ()) -> None:
        self._head: Optional[_Node] = None
        self._tail: Optional[_Node] = None
        self._length = 0
        for item in items:
            self.append(item)

    def append(self, item: Any) -> None:
        node = _Node(item)
        if self._tail is None:
            self._head = self._tail = node
        else:
            node.prev = self._tail
            self._tail.next = node
            self._tail = node
        self._length += 1

    def append_front(self, item: Any) -> None:
        node = _Node(item)
        if self._head is None:
            self._head = self._tail = node
        else:
            node.next = self._head
            self._head.prev = node
            self._head = node
        self._length += 1

    def pop(self) -> Any:
        """Remove and return the last item."""
        node = self._tail
        if node is None:
            raise IndexError("pop from an empty list")
        self._tail = node.prev
        if self._tail is not None:
            self._tail.next = None
        else:
            self._head = None
        self._length -= 1
        return node.data

    def pop_front(self) -> Any:
        """Remove and return the first item."""
        node = self._head
        if node is None:
            raise IndexError("pop from an empty list")
        self._head = node.next
        if self._head is not None:
            self._head.prev = None
        else:
            self._tail = None
        self._length -= 1
        return node.data

    def front(self) -> Any:
        if self._head is None:
            raise IndexError("front of an empty list")
        return self._head.data

    def back(self) -> Any:
        if self._tail is None:
            raise IndexError("back of an empty list")
        return self._tail.data

    def remove(self, item: Any) -> bool:
        """Unlink the first node holding item; False if there is none."""
        node = self._head
        while node is not None:
            if node.data == item:
                if node.prev is not None:
                    node.prev.next = node.next
                else:
                    self._head = node.next
                if node.next is not None:
                    node.next.prev = node.prev
                else:
                    self._tail = node.prev
                self._length -= 1
                return True
            node = node.next
        return False

    def cursor(self) -> Cursor:
        return Cursor(self._head)

    def __iter__(self) -> Iterator[Any]:
        node = self._head
        while node is not None:
            nxt = node.next
            yield node.data
            node = nxt

    def __len__(self) -> int:
        return self._length

    def __repr__(self) -> str:
        return f"LinkedList({list(self)!r})"