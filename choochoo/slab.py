"""Fixed-block slab allocator with one partition per allocation type."""

from __future__ import annotations

from enum import IntEnum

SLAB_ALLOCATOR_SIZE = 40906


class AllocationType(IntEnum):
    TASK = 0
    SWITCH_FRAME = 1
    SCHEDULER_NODE = 2
    SEND_STATE = 3
    RECEIVE_STATE = 4
    LLIST = 5
    LLIST_NODE = 6
    LLIST_ITERATOR = 7
    HASHMAP = 8
    HASHMAP_BUCKETS = 9
    HASHMAP_NODE = 10
    RPS_STATE = 11
    STRING = 12
    CLK_BUFFER_REQUEST = 13
    SNSR_BUFFER_REQUEST = 14
    SWCH_BUFFER_REQUEST = 15
    ZN_BUFFER_REQUEST = 16


class AllocationError(Exception):
    """Raised when a partition is exhausted or a free is invalid."""


class _Partition:
    __slots__ = ("block_size", "in_use")

    def __init__(self) -> None:
        self.block_size = 0
        self.in_use: set[int] = set()


class SlabAllocator:
    """Hands out block offsets within per-type partitions of SLAB_ALLOCATOR_SIZE bytes."""

    def __init__(self) -> None:
        self._slabs = {kind: _Partition() for kind in AllocationType}

    def set_block_size(self, kind: AllocationType, block_size: int) -> None:
        if block_size <= 0:
            raise ValueError(f"block size must be positive, got {block_size}")
        self._slabs[AllocationType(kind)].block_size = block_size

    def alloc(self, kind: AllocationType) -> int:
        """Reserve a block and return its offset within the partition."""
        kind = AllocationType(kind)
        slab = self._slabs[kind]
        if slab.block_size <= 0:
            raise AllocationError(f"no block size set for {kind.name}")
        for offset in range(0, SLAB_ALLOCATOR_SIZE, slab.block_size):
            if offset not in slab.in_use and offset + slab.block_size < SLAB_ALLOCATOR_SIZE:
                slab.in_use.add(offset)
                return offset
        raise AllocationError(f"slab allocator is out of memory for {kind.name}")

    def free(self, offset: int, kind: AllocationType) -> None:
        """Release the block at offset."""
        slab = self._slabs[AllocationType(kind)]
        if offset not in slab.in_use:
            raise AllocationError("attempt to free an unallocated or out-of-bounds slot")
        slab.in_use.remove(offset)