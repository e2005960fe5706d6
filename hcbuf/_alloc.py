"""
Allocators backing every hcbuf buffer.

An allocator hands out ``bytearray`` blocks and reports failure by
returning ``None``; it never raises. The active allocator is read from
``hcbuf.config.allocator`` at call time, so swapping it affects every
subsequent allocation.

Example:
    >>> from hcbuf import config
    >>> from hcbuf._alloc import LimitedAllocator
    >>> config.allocator = LimitedAllocator(1024)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ._logging import scoped_logger

__all__ = ["Allocator", "HeapAllocator", "LimitedAllocator"]

log = scoped_logger("alloc")


@runtime_checkable
class Allocator(Protocol):
    """Interface expected by the array and string cores."""

    def allocate(self, nbytes: int) -> bytearray | None: ...

    def reallocate(self, block: bytearray | None, nbytes: int) -> bytearray | None: ...

    def free(self, block: bytearray | None) -> None: ...


class HeapAllocator:
    """
    Default allocator: fresh zeroed ``bytearray`` blocks.

    ``reallocate`` always returns a new block holding the common prefix of
    the old one; the old block is left untouched so a failed call cannot
    corrupt the caller's data. Outstanding ``memoryview`` objects keep the
    old block alive, so ``free`` does not shrink it in place.
    """

    def allocate(self, nbytes: int) -> bytearray | None:
        if nbytes <= 0:
            return None
        try:
            return bytearray(nbytes)
        except MemoryError:
            log.debug("Heap allocation failed", extra={"nbytes": nbytes})
            return None

    def reallocate(self, block: bytearray | None, nbytes: int) -> bytearray | None:
        new_block = self.allocate(nbytes)
        if new_block is None:
            return None
        if block:
            keep = min(len(block), nbytes)
            new_block[:keep] = block[:keep]
        return new_block

    def free(self, block: bytearray | None) -> None:
        return None

    def __repr__(self) -> str:
        return "HeapAllocator()"


class LimitedAllocator:
    """
    Allocator with a ceiling on live bytes.

    Wraps another allocator and refuses any request that would push the
    number of live bytes above ``max_bytes``. Useful for bounding memory in
    long-running processes and for exercising out-of-memory paths.

    Attributes
    ----------
    max_bytes : int
        Ceiling on live bytes.
    in_use : int
        Bytes currently handed out and not yet freed.
    peak : int
        Highest value ``in_use`` has reached.
    failures : int
        Number of refused requests.
    """

    def __init__(self, max_bytes: int, parent: Allocator | None = None) -> None:
        if max_bytes < 0:
            raise ValueError(f"max_bytes must be >= 0, got {max_bytes}")
        self.max_bytes = max_bytes
        self.parent = parent if parent is not None else HeapAllocator()
        self.in_use = 0
        self.peak = 0
        self.failures = 0

    def _refuse(self, nbytes: int) -> None:
        self.failures += 1
        log.debug(
            "Allocation refused by limit",
            extra={"nbytes": nbytes, "in_use": self.in_use, "max_bytes": self.max_bytes},
        )

    def _account(self, delta: int) -> None:
        self.in_use += delta
        self.peak = max(self.peak, self.in_use)

    def allocate(self, nbytes: int) -> bytearray | None:
        if self.in_use + nbytes > self.max_bytes:
            self._refuse(nbytes)
            return None
        block = self.parent.allocate(nbytes)
        if block is not None:
            self._account(len(block))
        return block

    def reallocate(self, block: bytearray | None, nbytes: int) -> bytearray | None:
        old_size = len(block) if block is not None else 0
        if self.in_use - old_size + nbytes > self.max_bytes:
            self._refuse(nbytes)
            return None
        new_block = self.parent.reallocate(block, nbytes)
        if new_block is not None:
            self._account(len(new_block) - old_size)
        return new_block

    def free(self, block: bytearray | None) -> None:
        if block is None:
            return
        self.in_use -= len(block)
        self.parent.free(block)

    def __repr__(self) -> str:
        return f"LimitedAllocator(max_bytes={self.max_bytes}, in_use={self.in_use})"
