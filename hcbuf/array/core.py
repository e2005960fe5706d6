"""
Status layer of the type-erased array.

Plain functions over a ``RawArray`` record. Nothing here raises for
expected failures: mutating calls return a ``Status`` and removals return
``(Status, bytes | None)``. Elements are opaque byte strings of
``elem_size`` bytes; callers keep the element size consistent.

Every capacity increase goes through ``reserve``, which asks the record's
allocator for a new block and only swaps it in on success, so a failed
call leaves the record exactly as it was.
"""

from __future__ import annotations

from typing import Any

from .._alloc import Allocator
from .._logging import scoped_logger
from .._status import Status
from ..config import config

__all__ = [
    "RawArray",
    "grow_capacity",
    "create",
    "destroy",
    "copy",
    "is_valid",
    "is_empty",
    "reserve",
    "shrink_to_fit",
    "clear",
    "fill",
    "insert",
    "push_back",
    "push_front",
    "push_at",
    "pop_back",
    "pop_front",
    "pop_at",
    "at",
    "front",
    "back",
    "end",
    "live_bytes",
    "compare",
]

log = scoped_logger("array")


class RawArray:
    """
    Storage record for one array.

    Attributes
    ----------
    data : bytearray | None
        Block of ``capacity * elem_size`` bytes, None when capacity is 0.
    count : int
        Number of live elements.
    capacity : int
        Allocated element slots.
    elem_size : int
        Bytes per element, fixed at creation.
    allocator : Allocator | None
        Allocator that produced ``data``; used for every later resize/free.
    """

    __slots__ = ("data", "count", "capacity", "elem_size", "allocator")

    def __init__(
        self,
        data: bytearray | None = None,
        count: int = 0,
        capacity: int = 0,
        elem_size: int = 0,
        allocator: Allocator | None = None,
    ) -> None:
        self.data = data
        self.count = count
        self.capacity = capacity
        self.elem_size = elem_size
        self.allocator = allocator

    def __repr__(self) -> str:
        return (
            f"RawArray(count={self.count}, capacity={self.capacity}, "
            f"elem_size={self.elem_size})"
        )


def grow_capacity(required: int) -> int:
    """
    Capacity to allocate when ``required`` slots no longer fit.

    Smallest power of two >= ``required``, except that an exact power of
    two is doubled. Depends only on ``required``, never on prior growth.

    Example:
        >>> grow_capacity(6)
        8
        >>> grow_capacity(8)
        16
    """
    if required <= 0:
        return 1
    if required & (required - 1) == 0:
        return required << 1
    return 1 << (required - 1).bit_length()


def _allocator_of(vec: RawArray) -> Allocator:
    return vec.allocator if vec.allocator is not None else config.allocator


def _as_bytes(value: Any) -> bytes | None:
    """Snapshot a bytes-like value, None when it does not expose a buffer."""
    if value is None:
        return None
    try:
        return bytes(memoryview(value))
    except TypeError:
        return None


def _move(data: bytearray, dst: int, src: int, nbytes: int) -> None:
    # The right-hand slice is a copy, so overlapping ranges are safe.
    if nbytes > 0 and dst != src:
        data[dst : dst + nbytes] = data[src : src + nbytes]


# =============================================================================
# Lifecycle
# =============================================================================


def create(capacity: int, elem_size: int) -> RawArray:
    """
    Create an array with ``capacity`` slots of ``elem_size`` bytes.

    Returns an empty, invalid record when either argument is not positive
    or the allocator refuses the request.
    """
    if capacity <= 0 or elem_size <= 0:
        return RawArray()

    allocator = config.allocator
    data = allocator.allocate(capacity * elem_size)
    if data is None:
        log.debug("Array allocation failed", extra={"capacity": capacity, "elem_size": elem_size})
        return RawArray()

    return RawArray(data, 0, capacity, elem_size, allocator)


def destroy(vec: RawArray) -> None:
    """Release storage and reset every field. Safe to call repeatedly."""
    if vec.data is not None:
        _allocator_of(vec).free(vec.data)
        vec.data = None
    vec.count = 0
    vec.capacity = 0
    vec.elem_size = 0
    vec.allocator = None


def copy(src: RawArray) -> RawArray:
    """Deep copy of the live elements; the copy's capacity equals ``src.count``."""
    nbytes = src.count * src.elem_size
    if nbytes == 0 or src.data is None:
        return RawArray()

    allocator = config.allocator
    data = allocator.allocate(nbytes)
    if data is None:
        log.debug("Array copy allocation failed", extra={"nbytes": nbytes})
        return RawArray()

    data[:] = src.data[:nbytes]
    return RawArray(data, src.count, src.count, src.elem_size, allocator)


def is_valid(vec: RawArray) -> bool:
    return vec.data is not None and vec.capacity > 0 and vec.elem_size > 0


def is_empty(vec: RawArray) -> bool:
    return vec.count == 0


# =============================================================================
# Capacity
# =============================================================================


def reserve(vec: RawArray, new_capacity: int) -> Status:
    """
    Grow to at least ``new_capacity`` slots.

    No-op success when the capacity already suffices. Returns
    ``INVALID_DESTINATION`` for a record without an element size and
    ``OUT_OF_MEMORY`` when the allocator refuses (record unchanged).
    """
    if vec.capacity >= new_capacity:
        return Status.SUCCESS
    if vec.elem_size <= 0:
        return Status.INVALID_DESTINATION

    allocator = _allocator_of(vec)
    new_data = allocator.reallocate(vec.data, new_capacity * vec.elem_size)
    if new_data is None:
        log.debug(
            "Array reserve failed",
            extra={"capacity": vec.capacity, "requested": new_capacity},
        )
        return Status.OUT_OF_MEMORY

    log.debug("Array capacity grown", extra={"capacity": new_capacity, "old_capacity": vec.capacity})
    vec.data = new_data
    vec.capacity = new_capacity
    vec.allocator = allocator
    return Status.SUCCESS


def shrink_to_fit(vec: RawArray) -> Status:
    """
    Reallocate down to exactly ``count`` slots.

    ``EMPTY`` when there is nothing to keep, success no-op when already
    tight, ``OUT_OF_MEMORY`` (record unchanged) when reallocation fails.
    """
    if vec.count == 0:
        return Status.EMPTY
    if vec.count == vec.capacity:
        return Status.SUCCESS

    new_data = _allocator_of(vec).reallocate(vec.data, vec.count * vec.elem_size)
    if new_data is None:
        return Status.OUT_OF_MEMORY

    log.debug("Array shrunk", extra={"capacity": vec.count, "old_capacity": vec.capacity})
    vec.data = new_data
    vec.capacity = vec.count
    return Status.SUCCESS


def clear(vec: RawArray) -> None:
    """Drop every element; storage is kept."""
    vec.count = 0


def fill(vec: RawArray, value: Any) -> Status:
    """Copy ``value`` into every slot up to capacity and mark them live."""
    if vec.data is None:
        return Status.INVALID_DESTINATION
    raw = _as_bytes(value)
    if raw is None or len(raw) != vec.elem_size:
        return Status.INVALID_SOURCE

    vec.data[:] = raw * vec.capacity
    vec.count = vec.capacity
    return Status.SUCCESS


# =============================================================================
# Insertion
# =============================================================================


def _insert_raw(vec: RawArray, index: int, raw: bytes, n: int) -> Status:
    required = vec.count + n
    if required > vec.capacity:
        status = reserve(vec, grow_capacity(required))
        if status != Status.SUCCESS:
            return status

    es = vec.elem_size
    _move(vec.data, (index + n) * es, index * es, (vec.count - index) * es)
    vec.data[index * es : (index + n) * es] = raw
    vec.count = required
    return Status.SUCCESS


def insert(vec: RawArray, index: int, elements: Any, n: int | None = None) -> Status:
    """
    Insert ``n`` contiguous elements at ``index`` (``0 <= index <= count``).

    ``elements`` is any bytes-like object of ``n * elem_size`` bytes; when
    ``n`` is omitted it is derived from the length of ``elements``.
    Existing elements from ``index`` onward shift right.
    """
    if vec.elem_size <= 0:
        return Status.INVALID_DESTINATION
    if index < 0 or index > vec.count:
        return Status.OUT_OF_BOUNDS

    raw = _as_bytes(elements)
    if raw is None:
        return Status.INVALID_SOURCE
    if n is None:
        n, rem = divmod(len(raw), vec.elem_size)
        if rem:
            return Status.INVALID_SOURCE
    if n < 0 or len(raw) != n * vec.elem_size:
        return Status.INVALID_SOURCE
    if n == 0:
        return Status.SUCCESS

    return _insert_raw(vec, index, raw, n)


def _element(vec: RawArray, element: Any) -> bytes | None:
    # None means "a zero-filled slot"
    if element is None:
        return bytes(vec.elem_size)
    raw = _as_bytes(element)
    if raw is None or len(raw) != vec.elem_size:
        return None
    return raw


def push_back(vec: RawArray, element: Any = None) -> Status:
    """Append one element (zero-filled when ``element`` is None)."""
    if vec.elem_size <= 0:
        return Status.INVALID_DESTINATION
    raw = _element(vec, element)
    if raw is None:
        return Status.INVALID_SOURCE
    return _insert_raw(vec, vec.count, raw, 1)


def push_front(vec: RawArray, element: Any = None) -> Status:
    """Prepend one element (zero-filled when ``element`` is None)."""
    if vec.elem_size <= 0:
        return Status.INVALID_DESTINATION
    raw = _element(vec, element)
    if raw is None:
        return Status.INVALID_SOURCE
    return _insert_raw(vec, 0, raw, 1)


def push_at(vec: RawArray, index: int, element: Any = None) -> Status:
    """
    Insert one element before the existing element at ``index``.

    Unlike ``insert``, the index must name an existing slot
    (``0 <= index < count``); ``index == count`` is out of bounds.
    """
    if vec.elem_size <= 0:
        return Status.INVALID_DESTINATION
    if index < 0 or index >= vec.count:
        return Status.OUT_OF_BOUNDS
    raw = _element(vec, element)
    if raw is None:
        return Status.INVALID_SOURCE
    return _insert_raw(vec, index, raw, 1)


# =============================================================================
# Removal
# =============================================================================


def pop_back(vec: RawArray) -> tuple[Status, bytes | None]:
    """Remove the last element; returns ``(status, element)``."""
    if vec.count == 0:
        return Status.EMPTY, None

    es = vec.elem_size
    vec.count -= 1
    start = vec.count * es
    return Status.SUCCESS, bytes(vec.data[start : start + es])


def pop_front(vec: RawArray) -> tuple[Status, bytes | None]:
    """Remove the first element; returns ``(status, element)``."""
    if vec.count == 0:
        return Status.EMPTY, None
    return pop_at(vec, 0)


def pop_at(vec: RawArray, index: int) -> tuple[Status, bytes | None]:
    """Remove the element at ``index`` (``0 <= index < count``)."""
    if index < 0 or index >= vec.count:
        return Status.OUT_OF_BOUNDS, None

    es = vec.elem_size
    start = index * es
    element = bytes(vec.data[start : start + es])
    _move(vec.data, start, start + es, (vec.count - index - 1) * es)
    vec.count -= 1
    return Status.SUCCESS, element


# =============================================================================
# Access
# =============================================================================


def at(vec: RawArray, index: int) -> memoryview | None:
    """Writable view over the element at ``index``, None when out of range."""
    if index < 0 or index >= vec.count or vec.data is None:
        return None
    es = vec.elem_size
    return memoryview(vec.data)[index * es : (index + 1) * es]


def front(vec: RawArray) -> memoryview | None:
    return at(vec, 0)


def back(vec: RawArray) -> memoryview | None:
    return at(vec, vec.count - 1)


def end(vec: RawArray) -> int:
    """Byte offset one past the last live element. Compare only."""
    return vec.count * vec.elem_size


def live_bytes(vec: RawArray) -> memoryview:
    """Read-only view over the live region (capacity tail excluded)."""
    if vec.data is None:
        return memoryview(b"")
    return memoryview(vec.data)[: vec.count * vec.elem_size].toreadonly()


def compare(a: RawArray, b: RawArray) -> bool:
    """Equal when count, element size and live bytes all match."""
    if a.count != b.count or a.elem_size != b.elem_size:
        return False
    return live_bytes(a) == live_bytes(b)
