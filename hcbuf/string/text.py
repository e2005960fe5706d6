"""
Text - owning handle over the NUL-terminated byte text core.

Content is a run of single-byte code units followed by a NUL terminator
that is kept in place after every mutation. ``str`` arguments are encoded
as UTF-8; case folding, trimming and word splitting only look at ASCII.

Two growth policies apply:
- ``concat`` grows to twice the required size (sequential appends)
- ``append_char`` grows to the next power of two (single-byte pushes)
"""

from __future__ import annotations

from typing import Any

from .._status import check
from ..exceptions import InvalidArgumentError, OutOfMemoryError, StateError
from . import core
from .core import RawString

__all__ = ["Text"]


class Text:
    """
    Mutable byte text with an explicit capacity.

    Args:
        source: Initial content (str, bytes-like or another Text).
        capacity: Bytes to reserve, terminator included. Defaults to
            exactly ``len(source) + 1``.

    Raises
    ------
        InvalidArgumentError: If ``capacity`` is not positive or ``source``
            is not text-like.
        OutOfMemoryError: If the allocator refuses the initial block.

    Example:
        >>> t = Text("Hello, World!")
        >>> t.substring(7, 5)
        >>> str(t)
        'World'
        >>> greeting = Text("Hello, ")
        >>> greeting += t
        >>> greeting.append_char("!")
        >>> str(greeting)
        'Hello, World!'
    """

    __slots__ = ("_str",)

    def __init__(self, source: Any = "", *, capacity: int | None = None) -> None:
        self._str: RawString | None = None
        if source is None:
            source = ""
        elif isinstance(source, Text):
            source = source._raw

        if capacity is None:
            s = core.create_from_text(source)
            if s.data is None and core.as_text(source) is None:
                raise InvalidArgumentError(
                    f"Text source must be str or bytes-like, got {type(source).__name__}",
                    code="INVALID_SOURCE",
                    details={"type": type(source).__name__},
                )
        else:
            if capacity <= 0:
                raise InvalidArgumentError(
                    f"capacity must be > 0, got {capacity}",
                    details={"param": "capacity", "value": capacity},
                )
            s = core.create(capacity)
            if s.data is not None:
                status = core.concat(s, source)
                if status != 0:
                    core.destroy(s)
                    check(status, type=type(source).__name__)

        if s.data is None:
            raise OutOfMemoryError(
                "Failed to allocate text",
                details={"capacity": capacity},
            )
        self._str = s

    @classmethod
    def _wrap(cls, s: RawString) -> Text:
        """Adopt an already-created record without calling __init__."""
        instance = cls.__new__(cls)
        instance._str = s
        return instance

    @classmethod
    def repeat(cls, char: str | bytes | int, count: int) -> Text:
        """
        Text of ``count`` copies of one byte.

        Example:
            >>> str(Text.repeat("-", 5))
            '-----'
        """
        if core.as_byte(char) is None:
            raise InvalidArgumentError(
                f"char must be a single byte, got {char!r}",
                code="INVALID_SOURCE",
                details={"char": char},
            )
        if count <= 0:
            return cls("")
        s = core.create_with_char(char, count)
        if s.data is None:
            raise OutOfMemoryError("Failed to allocate text", details={"count": count})
        return cls._wrap(s)

    @classmethod
    def format(cls, fmt: str | bytes, *args: Any) -> Text:
        """
        Text built from a printf-style template.

        Raises
        ------
            InvalidArgumentError: If the arguments do not match the template.

        Example:
            >>> str(Text.format("%s has %d items", "cart", 3))
            'cart has 3 items'
        """
        try:
            s = core.format(fmt, *args)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(
                f"Cannot format template {fmt!r}: {e}",
                code="INVALID_SOURCE",
                details={"fmt": fmt},
            ) from e
        if s.data is None:
            raise OutOfMemoryError("Failed to allocate formatted text")
        return cls._wrap(s)

    # =========================================================================
    # State
    # =========================================================================

    @property
    def _raw(self) -> RawString:
        s = self._str
        if s is None:
            raise StateError("Text is closed", code="STATE_CLOSED")
        return s

    @property
    def raw(self) -> RawString:
        """Underlying storage record, for use with ``hcbuf.string.core``."""
        return self._raw

    @property
    def closed(self) -> bool:
        return self._str is None

    @property
    def capacity(self) -> int:
        """Allocated bytes, terminator slot included."""
        return self._raw.capacity

    def is_valid(self) -> bool:
        return self._str is not None and core.is_valid(self._str)

    def is_empty(self) -> bool:
        return core.is_empty(self._raw)

    # =========================================================================
    # Mutation
    # =========================================================================

    def concat(self, other: Text | str | bytes) -> None:
        """Append ``other`` in place."""
        source = other._raw if isinstance(other, Text) else other
        check(core.concat(self._raw, source), type=type(other).__name__)

    def __iadd__(self, other: Text | str | bytes) -> Text:
        self.concat(other)
        return self

    def __add__(self, other: Text | str | bytes) -> Text:
        result = self.copy()
        result.concat(other)
        return result

    def append_char(self, char: str | bytes | int) -> None:
        """Append one byte (int 0-255, 1-byte bytes or 1-char ASCII str)."""
        check(core.append_char(self._raw, char), char=char)

    def substring(self, start: int, length: int) -> None:
        """
        Keep only ``length`` bytes from ``start`` (clamped to the content).

        Raises
        ------
            InvalidArgumentError: If ``start`` is outside the content
                (code="INVALID_DESTINATION").
        """
        s = self._raw
        check(core.substring(s, start, length), start=start, length=length, text_length=s.length)

    def trim(self) -> None:
        """Strip leading and trailing ASCII whitespace in place."""
        check(core.trim(self._raw))

    def to_lower(self) -> None:
        check(core.to_lower(self._raw))

    def to_upper(self) -> None:
        check(core.to_upper(self._raw))

    def replace(self, old: Text | str | bytes, new: Text | str | bytes) -> int:
        """
        Replace every non-overlapping ``old`` with ``new`` in place.

        Returns
        -------
            Number of replacements made.

        Raises
        ------
            InvalidArgumentError: If ``old`` is empty.
            OutOfMemoryError: If the result cannot be allocated; the text
                is left unchanged.
        """
        s = self._raw
        old_src = old._raw if isinstance(old, Text) else old
        new_src = new._raw if isinstance(new, Text) else new
        hits = core.occurrences(s, old_src)
        check(core.replace(s, old_src, new_src), old=old, new=new)
        return hits

    # =========================================================================
    # Queries
    # =========================================================================

    def starts_with(self, prefix: Text | str | bytes) -> bool:
        return core.starts_with(self._raw, prefix._raw if isinstance(prefix, Text) else prefix)

    def ends_with(self, suffix: Text | str | bytes) -> bool:
        return core.ends_with(self._raw, suffix._raw if isinstance(suffix, Text) else suffix)

    def find(self, keyword: Text | str | bytes, start: int = 0) -> int:
        """Byte offset of the first ``keyword`` at or after ``start``, -1 if absent."""
        return core.find(self._raw, keyword._raw if isinstance(keyword, Text) else keyword, start)

    def occurrences(self, keyword: Text | str | bytes) -> int:
        """Count non-overlapping occurrences of ``keyword``."""
        return core.occurrences(self._raw, keyword._raw if isinstance(keyword, Text) else keyword)

    def word_count(self) -> int:
        """Count maximal runs of non-whitespace bytes."""
        return core.word_count(self._raw)

    def __contains__(self, keyword: object) -> bool:
        return self.find(keyword) >= 0  # type: ignore[arg-type]

    def __len__(self) -> int:
        s = self._str
        return s.length if s is not None else 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Text):
            return core.compare(self._raw, other._raw)
        if isinstance(other, str):
            return self.tobytes() == other.encode("utf-8")
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self.tobytes() == bytes(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    # =========================================================================
    # Conversion
    # =========================================================================

    def copy(self) -> Text:
        """Deep copy with capacity ``len + 1``."""
        duplicate = core.copy(self._raw)
        if duplicate.data is None:
            raise OutOfMemoryError("Failed to allocate text copy", details={"length": len(self)})
        return Text._wrap(duplicate)

    __copy__ = copy

    def tobytes(self) -> bytes:
        """Content bytes, terminator excluded."""
        return bytes(core.content(self._raw))

    __bytes__ = tobytes

    def decode(self, encoding: str = "utf-8", errors: str = "strict") -> str:
        return self.tobytes().decode(encoding, errors)

    def __str__(self) -> str:
        return self.decode(errors="replace")

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Release the block. Safe to call multiple times (idempotent)."""
        s = self._str
        if s is not None:
            self._str = None
            core.destroy(s)

    def __enter__(self) -> Text:
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
        s = self._str
        if s is None:
            return "Text(<closed>)"
        preview = self.tobytes()
        if len(preview) > 40:
            preview = preview[:37] + b"..."
        return f"Text({preview!r}, len={s.length}, capacity={s.capacity})"
