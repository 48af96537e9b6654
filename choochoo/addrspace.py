"""User address spaces handed out from a fixed page table."""

from __future__ import annotations

from dataclasses import dataclass

KERN_BASE = 0x00200000
USER_BASE = 0x00220000
USER_ADDRSPACE_SIZE = 0x00010000
PAGE_COUNT = 1024


@dataclass(frozen=True)
class AddrSpace:
    base: int
    stackbase: int


class PageTableFull(MemoryError):
    """Raised when every page is in use."""


class PageTable:
    """Tracks which of the PAGE_COUNT user pages are in use."""

    def __init__(self) -> None:
        self._in_use = [False] * PAGE_COUNT

    def create_page(self) -> AddrSpace:
        """Claim the lowest free page."""
        for index, used in enumerate(self._in_use):
            if not used:
                self._in_use[index] = True
                base = USER_BASE + USER_ADDRSPACE_SIZE * index
                return AddrSpace(base=base, stackbase=base + USER_ADDRSPACE_SIZE)
        raise PageTableFull("out of space in page table")

    def delete_page(self, space: AddrSpace) -> None:
        """Return the page holding space to the free pool."""
        index, rem = divmod(space.base - USER_BASE, USER_ADDRSPACE_SIZE)
        if rem or not 0 <= index < PAGE_COUNT:
            raise ValueError(f"address {space.base:#x} is not a user page base")
        self._in_use[index] = False