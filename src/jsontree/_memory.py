"""
Allocation accounting for value trees.

Python manages the memory itself; the allocator keeps the books so that a
host can bound a parse and check that freeing a tree gives everything back.
Every node is charged as one block sized like its C layout.
"""

from dataclasses import dataclass

# Tagged node header: tag plus the widest payload (a double or a pointer)
NODE_SIZE = 16
# One child pointer in an array node
SLOT_SIZE = 8
# Map header
MAP_SIZE = 32


class AllocationError(MemoryError):
    """Raised when an allocation would exceed the allocator's block limit."""


@dataclass
class AllocationStats:
    """Running totals for an allocator."""

    live_blocks: int = 0
    live_bytes: int = 0
    total_blocks: int = 0
    peak_blocks: int = 0


class Allocator:
    """Charges and releases blocks, optionally capping live blocks."""

    def __init__(self, block_limit: int | None = None) -> None:
        if block_limit is not None and (
            not isinstance(block_limit, int) or block_limit < 0
        ):
            raise ValueError("block_limit must be a non-negative integer")
        self.block_limit = block_limit
        self.stats = AllocationStats()

    @property
    def live_blocks(self) -> int:
        return self.stats.live_blocks

    def acquire(self, nbytes: int) -> None:
        stats = self.stats
        if (
            self.block_limit is not None
            and stats.live_blocks >= self.block_limit
        ):
            raise AllocationError(
                f"block limit of {self.block_limit} reached"
            )
        stats.live_blocks += 1
        stats.live_bytes += nbytes
        stats.total_blocks += 1
        stats.peak_blocks = max(stats.peak_blocks, stats.live_blocks)

    def release(self, nbytes: int) -> None:
        stats = self.stats
        if stats.live_blocks <= 0:
            raise ValueError("release without a matching acquire")
        stats.live_blocks -= 1
        stats.live_bytes -= nbytes
