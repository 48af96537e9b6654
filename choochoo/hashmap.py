"""A string-keyed hash map with a fixed number of chained buckets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .linked_list import LinkedList

HM_BUCKETS = 67
MAX_KEY_LEN = 39


def bucket_hash(key: str) -> int:
    """Bucket index of key: a 31-multiplier rolling hash over its bytes."""
    value = 0
    for byte in key.encode("utf-8"):
        value = (31 * value + byte) & 0xFFFFFFFF
    return value % HM_BUCKETS


@dataclass(eq=False)
class _Entry:
    key: str
    value: Any


class HashMap:
    """Maps short string keys to arbitrary values."""

    def __init__(self) -> None:
        self._buckets = [LinkedList() for _ in range(HM_BUCKETS)]
        self._size = 0

    def _find(self, key: str) -> _Entry | None:
        for entry in self._buckets[bucket_hash(key)]:
            if entry.key == key:
                return entry
        return None

    def insert(self, key: str, value: Any) -> None:
        """Set the value for key, replacing any previous value."""
        if len(key.encode("utf-8")) > MAX_KEY_LEN:
            raise ValueError(f"key longer than {MAX_KEY_LEN} bytes: {key!r}")
        entry = self._find(key)
        if entry is not None:
            entry.value = value
            return
        self._buckets[bucket_hash(key)].append(_Entry(key, value))
        self._size += 1

    def contains(self, key: str) -> bool:
        return self._find(key) is not None

    def remove(self, key: str) -> bool:
        """Drop key; False if it was not present."""
        entry = self._find(key)
        if entry is None:
            return False
        self._buckets[bucket_hash(key)].remove(entry)
        self._size -= 1
        return True

    def get(self, key: str) -> Any:
        """Value stored for key; raises KeyError if absent."""
        entry = self._find(key)
        if entry is None:
            raise KeyError(key)
        return entry.value

    def __len__(self) -> int:
        return self._size