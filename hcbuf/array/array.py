"""
Array - owning handle over the type-erased array core.

Provides a ``MutableSequence`` over fixed-size elements with explicit
capacity control and zero-copy NumPy access.

Memory Safety Contract:
- Each Array exclusively owns one block; ``copy()`` never shares storage
- ``at()``, ``front()``, ``back()`` return writable views into the current
  block. A later reallocation (growth or shrink) moves the elements to a
  new block; previously returned views keep referring to the old one
- ``close()`` releases the block; any later use raises ``StateError``

Elements:
- Without ``fmt`` elements are ``bytes`` of exactly ``elem_size`` bytes
- With a ``struct`` format (e.g. ``"<i"``, ``"<ff"``) values are packed and
  unpacked; single-field formats yield scalars, multi-field ones tuples
"""

from __future__ import annotations

import struct
import sys
from collections.abc import Iterable, Iterator, MutableSequence
from typing import Any, overload

from .._status import Status, check
from ..exceptions import (
    EmptyError,
    InteropError,
    InvalidArgumentError,
    OutOfMemoryError,
    StateError,
)
from . import core
from .core import RawArray

__all__ = ["Array"]

# struct type code -> NumPy typestr kind
_TYPESTR_KIND = {
    "b": "i",
    "h": "i",
    "i": "i",
    "l": "i",
    "q": "i",
    "n": "i",
    "B": "u",
    "H": "u",
    "I": "u",
    "L": "u",
    "Q": "u",
    "N": "u",
    "e": "f",
    "f": "f",
    "d": "f",
    "?": "b",
}

_NATIVE_ORDER = "<" if sys.byteorder == "little" else ">"


class Array(MutableSequence):
    """
    Resizable array of fixed-size elements.

    Storage is one contiguous block tracked in element units: ``len()`` is
    the number of live elements, ``capacity`` the number of allocated
    slots. Growth follows a power-of-two policy, so repeated appends cost
    O(1) on average. Implements ``collections.abc.MutableSequence``.

    Args:
        capacity: Number of slots to reserve up front (must be > 0).
        elem_size: Bytes per element. Optional when ``fmt`` is given.
        fmt: ``struct`` format describing one element.

    Raises
    ------
        InvalidArgumentError: If capacity or element size is not positive,
            or ``elem_size`` disagrees with ``fmt``.
        OutOfMemoryError: If the allocator refuses the initial block.

    Key Features
    ------------

    **Typed elements** via ``struct`` formats:

        >>> arr = Array(4, fmt="<i")
        >>> arr.extend([3, 1, 2])
        >>> arr.tolist()
        [3, 1, 2]

    **Positional insert/remove** with distinct bounds:

        >>> arr.push_at(0, 9)      # index must name an existing slot
        >>> arr.insert_many(4, [7, 8])  # index may equal len(arr)
        >>> arr.pop_front()
        9

    **Zero-copy NumPy view**:

        >>> import numpy as np
        >>> np.asarray(arr)
        array([3, 1, 2, 7, 8], dtype=int32)
    """

    __slots__ = ("_vec", "_struct")

    def __init__(
        self,
        capacity: int,
        elem_size: int | None = None,
        *,
        fmt: str | None = None,
    ) -> None:
        self._vec: RawArray | None = None
        self._struct: struct.Struct | None = None

        if fmt is not None:
            try:
                self._struct = struct.Struct(fmt)
            except struct.error as e:
                raise InvalidArgumentError(
                    f"Invalid element format {fmt!r}: {e}",
                    details={"param": "fmt", "value": fmt},
                ) from e
            if elem_size is None:
                elem_size = self._struct.size
            elif elem_size != self._struct.size:
                raise InvalidArgumentError(
                    f"elem_size={elem_size} does not match format {fmt!r} "
                    f"({self._struct.size} bytes)",
                    details={"elem_size": elem_size, "fmt": fmt},
                )

        if elem_size is None or elem_size <= 0:
            raise InvalidArgumentError(
                f"elem_size must be > 0, got {elem_size}",
                details={"param": "elem_size", "value": elem_size},
            )
        if capacity <= 0:
            raise InvalidArgumentError(
                f"capacity must be > 0, got {capacity}",
                details={"param": "capacity", "value": capacity},
            )

        vec = core.create(capacity, elem_size)
        if not core.is_valid(vec):
            raise OutOfMemoryError(
                f"Failed to allocate {capacity} x {elem_size} bytes",
                details={"capacity": capacity, "elem_size": elem_size},
            )
        self._vec = vec

    @classmethod
    def from_iterable(
        cls,
        values: Iterable[Any],
        elem_size: int | None = None,
        *,
        fmt: str | None = None,
    ) -> Array:
        """
        Build a tight array holding ``values``.

        Example:
            >>> Array.from_iterable([1.5, 2.5], fmt="<d").capacity
            2
        """
        items = list(values)
        arr = cls(max(len(items), 1), elem_size, fmt=fmt)
        arr.extend(items)
        return arr

    @classmethod
    def _wrap(cls, vec: RawArray, packer: struct.Struct | None) -> Array:
        """Adopt an already-created record without calling __init__."""
        instance = cls.__new__(cls)
        instance._vec = vec
        instance._struct = packer
        return instance

    # =========================================================================
    # State
    # =========================================================================

    @property
    def _raw(self) -> RawArray:
        vec = self._vec
        if vec is None:
            raise StateError("Array is closed", code="STATE_CLOSED")
        return vec

    @property
    def raw(self) -> RawArray:
        """Underlying storage record, for use with ``hcbuf.array.core``."""
        return self._raw

    @property
    def closed(self) -> bool:
        return self._vec is None

    @property
    def capacity(self) -> int:
        """Allocated element slots."""
        return self._raw.capacity

    @property
    def elem_size(self) -> int:
        """Bytes per element."""
        return self._raw.elem_size

    @property
    def fmt(self) -> str | None:
        """``struct`` format of one element, or None for raw bytes."""
        return self._struct.format if self._struct is not None else None

    def is_valid(self) -> bool:
        return self._vec is not None and core.is_valid(self._vec)

    def is_empty(self) -> bool:
        return core.is_empty(self._raw)

    # =========================================================================
    # Element encoding
    # =========================================================================

    def _encode(self, value: Any) -> bytes:
        """Element bytes for ``value``; raises InvalidArgumentError on a bad value."""
        if self._struct is not None:
            try:
                if isinstance(value, tuple):
                    return self._struct.pack(*value)
                return self._struct.pack(value)
            except struct.error as e:
                raise InvalidArgumentError(
                    f"Cannot pack {value!r} with format {self._struct.format!r}: {e}",
                    code="INVALID_SOURCE",
                    details={"value": value, "fmt": self._struct.format},
                ) from e

        try:
            raw = bytes(memoryview(value))
        except TypeError:
            raise InvalidArgumentError(
                f"Element must be bytes-like, got {type(value).__name__}",
                code="INVALID_SOURCE",
                details={"type": type(value).__name__},
            ) from None
        elem_size = self._raw.elem_size
        if len(raw) != elem_size:
            raise InvalidArgumentError(
                f"Element must be {elem_size} bytes, got {len(raw)}",
                code="INVALID_SOURCE",
                details={"elem_size": elem_size, "nbytes": len(raw)},
            )
        return raw

    def _unpack(self, raw: bytes | memoryview) -> Any:
        if self._struct is None:
            return bytes(raw)
        values = self._struct.unpack(raw)
        return values[0] if len(values) == 1 else values

    def _normalize(self, index: int) -> int:
        return index + len(self) if index < 0 else index

    # =========================================================================
    # Capacity
    # =========================================================================

    def reserve(self, capacity: int) -> None:
        """
        Ensure room for at least ``capacity`` elements.

        Raises
        ------
            OutOfMemoryError: If the allocator refuses. The array is unchanged.
        """
        vec = self._raw
        check(core.reserve(vec, capacity), capacity=vec.capacity, requested=capacity)

    def shrink_to_fit(self) -> bool:
        """
        Release unused slots.

        Returns
        -------
            False when the array is empty (nothing to shrink into),
            True otherwise.

        Raises
        ------
            OutOfMemoryError: If reallocation fails. The array is unchanged.
        """
        status = core.shrink_to_fit(self._raw)
        if status == Status.EMPTY:
            return False
        check(status)
        return True

    def clear(self) -> None:
        """Remove all elements in O(1); capacity is kept."""
        core.clear(self._raw)

    def fill(self, value: Any) -> None:
        """Set every slot up to ``capacity`` to ``value``; ``len()`` becomes ``capacity``."""
        check(core.fill(self._raw, self._encode(value)))

    # =========================================================================
    # Insertion
    # =========================================================================

    def insert(self, index: int, value: Any) -> None:
        """
        Insert one element before ``index`` (``0 <= index <= len``).

        Negative indices count from the end. Unlike ``list.insert``, an
        index past the end raises ``OutOfBoundsError`` instead of clamping.
        """
        self.insert_many(index, (value,))

    def insert_many(self, index: int, values: Iterable[Any]) -> None:
        """Insert ``values`` contiguously before ``index`` (``0 <= index <= len``)."""
        vec = self._raw
        index = self._normalize(index)
        payload = b"".join(self._encode(v) for v in values)
        check(
            core.insert(vec, index, payload),
            index=index,
            count=vec.count,
            nbytes=len(payload),
        )

    def extend(self, values: Iterable[Any]) -> None:
        self.insert_many(len(self), values)

    def push_back(self, value: Any = None) -> None:
        """Append ``value``; None appends a zero-filled element."""
        vec = self._raw
        element = None if value is None else self._encode(value)
        check(core.push_back(vec, element), count=vec.count, capacity=vec.capacity)

    def push_front(self, value: Any = None) -> None:
        """Prepend ``value``; None prepends a zero-filled element."""
        vec = self._raw
        element = None if value is None else self._encode(value)
        check(core.push_front(vec, element), count=vec.count, capacity=vec.capacity)

    def push_at(self, index: int, value: Any = None) -> None:
        """
        Insert ``value`` before the existing element at ``index``.

        The index must name an existing element (``0 <= index < len``);
        use ``insert`` to add at ``len``.
        """
        vec = self._raw
        index = self._normalize(index)
        element = None if value is None else self._encode(value)
        check(core.push_at(vec, index, element), index=index, count=vec.count)

    # =========================================================================
    # Removal
    # =========================================================================

    def pop_back(self) -> Any:
        """Remove and return the last element. Raises EmptyError when empty."""
        status, raw = core.pop_back(self._raw)
        check(status)
        return self._unpack(raw)

    def pop_front(self) -> Any:
        """Remove and return the first element. Raises EmptyError when empty."""
        status, raw = core.pop_front(self._raw)
        check(status)
        return self._unpack(raw)

    def pop_at(self, index: int) -> Any:
        """Remove and return the element at ``index`` (``0 <= index < len``)."""
        vec = self._raw
        index = self._normalize(index)
        status, raw = core.pop_at(vec, index)
        check(status, index=index, count=vec.count)
        return self._unpack(raw)

    def pop(self, index: int = -1) -> Any:
        if len(self) == 0:
            raise EmptyError("pop from empty Array")
        return self.pop_at(index)

    # =========================================================================
    # Access
    # =========================================================================

    def at(self, index: int) -> memoryview | None:
        """Writable view over the element at ``index``, None when out of range."""
        return core.at(self._raw, index)

    def front(self) -> memoryview:
        """Writable view over the first element."""
        view = core.front(self._raw)
        if view is None:
            raise EmptyError("front() on empty Array")
        return view

    def back(self) -> memoryview:
        """Writable view over the last element."""
        view = core.back(self._raw)
        if view is None:
            raise EmptyError("back() on empty Array")
        return view

    def end(self) -> int:
        """Byte offset one past the last element (for comparison only)."""
        return core.end(self._raw)

    # =========================================================================
    # Sequence protocol
    # =========================================================================

    def __len__(self) -> int:
        vec = self._vec
        return vec.count if vec is not None else 0

    @overload
    def __getitem__(self, index: int) -> Any: ...

    @overload
    def __getitem__(self, index: slice) -> list[Any]: ...

    def __getitem__(self, index: int | slice) -> Any:
        vec = self._raw
        if isinstance(index, slice):
            start, stop, step = index.indices(vec.count)
            return [self._unpack(core.at(vec, i)) for i in range(start, stop, step)]

        i = self._normalize(index)
        view = core.at(vec, i)
        if view is None:
            check(Status.OUT_OF_BOUNDS, f"Array index {index} out of range [0, {vec.count})")
        return self._unpack(view)

    def __setitem__(self, index: int, value: Any) -> None:
        if isinstance(index, slice):
            raise TypeError("Array does not support slice assignment")
        vec = self._raw
        view = core.at(vec, self._normalize(index))
        if view is None:
            check(Status.OUT_OF_BOUNDS, f"Array index {index} out of range [0, {vec.count})")
        view[:] = self._encode(value)

    def __delitem__(self, index: int | slice) -> None:
        if isinstance(index, slice):
            # Highest index first so earlier indices stay put
            for i in sorted(range(*index.indices(len(self))), reverse=True):
                self.pop_at(i)
            return
        self.pop_at(index)

    def __iter__(self) -> Iterator[Any]:
        vec = self._raw
        es = vec.elem_size
        for i in range(vec.count):
            yield self._unpack(vec.data[i * es : (i + 1) * es])

    def __eq__(self, other: object) -> bool:
        """Structural equality: same length, element size and bytes."""
        if isinstance(other, Array):
            return core.compare(self._raw, other._raw)
        if isinstance(other, list):
            return self.tolist() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    # =========================================================================
    # Conversion
    # =========================================================================

    def copy(self) -> Array:
        """
        Deep copy holding only the live elements (capacity == len).

        Copying an empty array yields a new empty array with one slot.
        """
        vec = self._raw
        if vec.count == 0:
            return Array(1, vec.elem_size, fmt=self.fmt)
        duplicate = core.copy(vec)
        if not core.is_valid(duplicate):
            raise OutOfMemoryError(
                "Failed to allocate array copy",
                details={"count": vec.count, "elem_size": vec.elem_size},
            )
        return Array._wrap(duplicate, self._struct)

    __copy__ = copy

    def tobytes(self) -> bytes:
        """Live elements as one bytes object."""
        return bytes(core.live_bytes(self._raw))

    def tolist(self) -> list[Any]:
        return list(self)

    def _numpy_layout(self) -> tuple[str, tuple[int, ...]]:
        """NumPy typestr and shape describing the live elements."""
        vec = self._raw
        if self._struct is None:
            return "|u1", (vec.count, vec.elem_size)

        fmt = self._struct.format
        order = _NATIVE_ORDER
        if fmt and fmt[0] in "@=<>!":
            order = {"@": _NATIVE_ORDER, "=": _NATIVE_ORDER, "!": ">"}.get(fmt[0], fmt[0])
            fmt = fmt[1:]
        kind = _TYPESTR_KIND.get(fmt)
        if kind is None:
            raise InteropError(
                f"Format {self._struct.format!r} has no NumPy equivalent",
                code="UNSUPPORTED_FORMAT",
                details={"fmt": self._struct.format},
            )
        if vec.elem_size == 1:
            order = "|"
        return f"{order}{kind}{vec.elem_size}", (vec.count,)

    def __array__(self, dtype: Any = None, copy: bool | None = None) -> Any:
        """
        NumPy conversion without copying.

        The returned array shares the current block: writes through it are
        visible in the Array until the next reallocation. Numeric
        single-field formats map to a 1-D array; untyped arrays map to a
        ``(len, elem_size)`` array of uint8.

        Raises
        ------
            InteropError: If the element format has several fields.

        Example:
            >>> import numpy as np
            >>> arr = Array.from_iterable([1, 2, 3], fmt="<i")
            >>> np.asarray(arr)
            array([1, 2, 3], dtype=int32)
        """
        import numpy as np

        vec = self._raw
        typestr, shape = self._numpy_layout()
        if vec.count == 0 or vec.data is None:
            result = np.empty(shape, dtype=np.dtype(typestr))
        else:
            live = memoryview(vec.data)[: vec.count * vec.elem_size]
            result = np.frombuffer(live, dtype=np.dtype(typestr)).reshape(shape)
        if dtype is not None:
            result = result.astype(dtype, copy=bool(copy))
        elif copy:
            result = result.copy()
        return result

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """
        Release the underlying block.

        After calling close(), the Array cannot be used. Safe to call
        multiple times (idempotent).
        """
        vec = self._vec
        if vec is not None:
            self._vec = None
            core.destroy(vec)

    def __enter__(self) -> Array:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __del__(self):
        """Release the block when garbage collected.

        Robust to interpreter shutdown - silently ignores errors when
        module globals may be unavailable.
        """
        try:
            self.close()
        except Exception:
            pass

    def __repr__(self) -> str:
        vec = self._vec
        if vec is None:
            return "Array(<closed>)"
        if vec.count <= 10:
            items = str(self.tolist())
        else:
            first = [self[i] for i in range(5)]
            last = [self[i] for i in range(vec.count - 3, vec.count)]
            items = f"[{', '.join(map(repr, first))}, ..., {', '.join(map(repr, last))}]"
        return f"Array({items}, len={vec.count}, capacity={vec.capacity})"
