"""
Status layer of the byte-oriented text buffer.

Plain functions over a ``RawString`` record whose block always carries a
NUL byte right after the content. Content is raw bytes: ``str`` arguments
are encoded as UTF-8 on the way in, but every operation (case folding,
whitespace, search) works on single bytes.

Mutating calls return a ``Status``; constructors return a record that is
empty (``data is None``) on failure.
"""

from __future__ import annotations

from typing import Any

from .._alloc import Allocator
from .._logging import scoped_logger
from .._status import Status
from ..array.core import grow_capacity
from ..config import config

__all__ = [
    "RawString",
    "WHITESPACE",
    "as_text",
    "as_byte",
    "create",
    "create_from_text",
    "create_with_char",
    "destroy",
    "copy",
    "is_valid",
    "is_empty",
    "content",
    "compare",
    "concat",
    "format",
    "to_lower",
    "to_upper",
    "trim",
    "append_char",
    "substring",
    "replace",
    "starts_with",
    "ends_with",
    "find",
    "occurrences",
    "word_count",
]

log = scoped_logger("string")

# Bytes treated as whitespace (the C locale isspace set)
WHITESPACE = b" \t\n\v\f\r"


class RawString:
    """
    Storage record for one text buffer.

    Attributes
    ----------
    data : bytearray | None
        Block of ``capacity`` bytes; ``data[length] == 0``.
    length : int
        Content bytes, terminator excluded.
    capacity : int
        Allocated bytes, terminator slot included.
    allocator : Allocator | None
        Allocator that produced ``data``.
    """

    __slots__ = ("data", "length", "capacity", "allocator")

    def __init__(
        self,
        data: bytearray | None = None,
        length: int = 0,
        capacity: int = 0,
        allocator: Allocator | None = None,
    ) -> None:
        self.data = data
        self.length = length
        self.capacity = capacity
        self.allocator = allocator

    def __repr__(self) -> str:
        return f"RawString(length={self.length}, capacity={self.capacity})"


def _allocator_of(s: RawString) -> Allocator:
    return s.allocator if s.allocator is not None else config.allocator


def as_text(value: Any) -> bytes | None:
    """
    Bytes of a str/bytes-like/RawString argument, None when missing.

    Every text-taking operation normalizes its argument through this, so a
    None result is what those operations report as ``INVALID_SOURCE``.
    """
    if value is None:
        return None
    if isinstance(value, RawString):
        if value.data is None:
            return None
        return bytes(value.data[: value.length])
    if isinstance(value, str):
        return value.encode("utf-8")
    try:
        return bytes(memoryview(value))
    except TypeError:
        return None


def as_byte(value: Any) -> int | None:
    """Single byte value from an int, 1-byte bytes-like or 1-char str."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value if 0 <= value <= 0xFF else None
    raw = as_text(value)
    if raw is None or len(raw) != 1:
        return None
    return raw[0]


def _move(data: bytearray, dst: int, src: int, nbytes: int) -> None:
    # The right-hand slice is a copy, so overlapping ranges are safe.
    if nbytes > 0 and dst != src:
        data[dst : dst + nbytes] = data[src : src + nbytes]


def _from_bytes(raw: bytes) -> RawString:
    allocator = config.allocator
    data = allocator.allocate(len(raw) + 1)
    if data is None:
        log.debug("String allocation failed", extra={"nbytes": len(raw) + 1})
        return RawString()
    data[: len(raw)] = raw
    data[len(raw)] = 0
    return RawString(data, len(raw), len(raw) + 1, allocator)


# =============================================================================
# Lifecycle
# =============================================================================


def create(capacity: int) -> RawString:
    """Empty text with ``capacity`` bytes reserved (terminator included)."""
    if capacity <= 0:
        return RawString()
    allocator = config.allocator
    data = allocator.allocate(capacity)
    if data is None:
        log.debug("String allocation failed", extra={"nbytes": capacity})
        return RawString()
    data[0] = 0
    return RawString(data, 0, capacity, allocator)


def create_from_text(text: Any) -> RawString:
    """Text seeded from ``text``; capacity is ``len + 1``. Empty record for None."""
    raw = as_text(text)
    if raw is None:
        return RawString()
    return _from_bytes(raw)


def create_with_char(char: Any, count: int) -> RawString:
    """Text of ``count`` copies of one byte. Empty record when ``count <= 0``."""
    byte = as_byte(char)
    if count <= 0 or byte is None:
        return RawString()
    return _from_bytes(bytes((byte,)) * count)


def destroy(s: RawString) -> None:
    """Release storage and reset every field. Safe to call repeatedly."""
    if s.data is not None:
        _allocator_of(s).free(s.data)
        s.data = None
    s.length = 0
    s.capacity = 0
    s.allocator = None


def copy(src: RawString) -> RawString:
    """Deep copy; the copy's capacity is ``length + 1``."""
    if src.data is None:
        return RawString()
    return _from_bytes(bytes(src.data[: src.length]))


def is_valid(s: RawString) -> bool:
    return s.data is not None and s.capacity > s.length


def is_empty(s: RawString) -> bool:
    return s.data is None or s.length == 0


def content(s: RawString) -> memoryview:
    """Read-only view over the content bytes (terminator excluded)."""
    if s.data is None:
        return memoryview(b"")
    return memoryview(s.data)[: s.length].toreadonly()


def compare(a: RawString, b: RawString) -> bool:
    """Equal when both hold the same content bytes."""
    if a.length != b.length:
        return False
    return content(a) == content(b)


# =============================================================================
# Appending
# =============================================================================


def concat(dst: RawString, src: Any) -> Status:
    """
    Append ``src`` (str, bytes-like or RawString) to ``dst``.

    When the result no longer fits, capacity becomes twice the required
    size (``(new_length + 1) * 2``).
    """
    if dst.data is None:
        return Status.INVALID_DESTINATION
    raw = as_text(src)
    if raw is None:
        return Status.INVALID_SOURCE

    new_length = dst.length + len(raw)
    if new_length + 1 > dst.capacity:
        new_capacity = (new_length + 1) * 2
        allocator = _allocator_of(dst)
        new_data = allocator.reallocate(dst.data, new_capacity)
        if new_data is None:
            log.debug("String concat reallocation failed", extra={"nbytes": new_capacity})
            return Status.OUT_OF_MEMORY
        log.debug(
            "String capacity grown",
            extra={"capacity": new_capacity, "old_capacity": dst.capacity},
        )
        dst.data = new_data
        dst.capacity = new_capacity
        dst.allocator = allocator

    dst.data[dst.length : new_length] = raw
    dst.data[new_length] = 0
    dst.length = new_length
    return Status.SUCCESS


def append_char(s: RawString, char: Any) -> Status:
    """Append one byte; grows with the power-of-two policy on ``capacity + 1``."""
    if s.data is None:
        return Status.INVALID_DESTINATION
    byte = as_byte(char)
    if byte is None:
        return Status.INVALID_SOURCE

    if s.length + 1 >= s.capacity:
        new_capacity = grow_capacity(s.capacity + 1)
        allocator = _allocator_of(s)
        new_data = allocator.reallocate(s.data, new_capacity)
        if new_data is None:
            return Status.OUT_OF_MEMORY
        s.data = new_data
        s.capacity = new_capacity
        s.allocator = allocator

    s.data[s.length] = byte
    s.length += 1
    s.data[s.length] = 0
    return Status.SUCCESS


def format(fmt: str | bytes, *args: Any) -> RawString:
    """
    Text built from a printf-style (``%``) template.

    The template is rendered once to measure it, then exactly one block of
    the measured size is allocated. Formatting errors (wrong argument count
    or types) propagate as ``TypeError``/``ValueError``.

    Example:
        >>> s = format("%s=%05.2f", "pi", 3.14159)
        >>> bytes(content(s))
        b'pi=03.14'
    """
    rendered = fmt % args
    if isinstance(rendered, str):
        rendered = rendered.encode("utf-8")
    return _from_bytes(rendered)


# =============================================================================
# In-place transforms
# =============================================================================


def to_lower(s: RawString) -> Status:
    """ASCII lower-casing in place."""
    if s.data is None:
        return Status.INVALID_DESTINATION
    s.data[: s.length] = bytes(s.data[: s.length]).lower()
    return Status.SUCCESS


def to_upper(s: RawString) -> Status:
    """ASCII upper-casing in place."""
    if s.data is None:
        return Status.INVALID_DESTINATION
    s.data[: s.length] = bytes(s.data[: s.length]).upper()
    return Status.SUCCESS


def trim(s: RawString) -> Status:
    """Strip leading and trailing whitespace by shifting the kept span to the front."""
    if s.data is None:
        return Status.INVALID_DESTINATION

    text = bytes(s.data[: s.length])
    start = len(text) - len(text.lstrip(WHITESPACE))
    stop = len(text.rstrip(WHITESPACE))
    if start == 0 and stop == s.length:
        return Status.SUCCESS

    new_length = max(stop - start, 0)
    _move(s.data, 0, start, new_length)
    s.data[new_length] = 0
    s.length = new_length
    return Status.SUCCESS


def substring(s: RawString, start: int, length: int) -> Status:
    """
    Keep only ``[start, start + length)``, clamped to the content.

    ``INVALID_DESTINATION`` when ``start`` is not inside the content.
    """
    if s.data is None or start < 0 or start >= s.length:
        return Status.INVALID_DESTINATION
    if length < 0:
        return Status.INVALID_SOURCE

    length = min(length, s.length - start)
    _move(s.data, 0, start, length)
    s.data[length] = 0
    s.length = length
    return Status.SUCCESS


def replace(s: RawString, old: Any, new: Any) -> Status:
    """
    Replace every non-overlapping occurrence of ``old`` with ``new``.

    Counts matches first, allocates one block of the exact resulting size,
    fills it in a single copy-and-substitute pass and releases the old
    block. ``INVALID_SOURCE`` for a missing/empty ``old`` or missing
    ``new``; the text is unchanged on ``OUT_OF_MEMORY``.
    """
    if s.data is None:
        return Status.INVALID_DESTINATION
    old_raw = as_text(old)
    new_raw = as_text(new)
    if not old_raw or new_raw is None:
        return Status.INVALID_SOURCE

    hits = occurrences(s, old_raw)
    if hits == 0:
        return Status.SUCCESS

    new_length = s.length + hits * (len(new_raw) - len(old_raw))
    allocator = _allocator_of(s)
    new_data = allocator.allocate(new_length + 1)
    if new_data is None:
        log.debug("String replace allocation failed", extra={"nbytes": new_length + 1})
        return Status.OUT_OF_MEMORY

    text = bytes(s.data[: s.length])
    src = 0
    dst = 0
    while True:
        pos = text.find(old_raw, src)
        if pos < 0:
            break
        chunk = pos - src
        new_data[dst : dst + chunk] = text[src:pos]
        dst += chunk
        new_data[dst : dst + len(new_raw)] = new_raw
        dst += len(new_raw)
        src = pos + len(old_raw)
    tail = s.length - src
    new_data[dst : dst + tail] = text[src:]
    new_data[new_length] = 0

    allocator.free(s.data)
    s.data = new_data
    s.length = new_length
    s.capacity = new_length + 1
    s.allocator = allocator
    return Status.SUCCESS


# =============================================================================
# Queries
# =============================================================================


def starts_with(s: RawString, prefix: Any) -> bool:
    raw = as_text(prefix)
    if s.data is None or raw is None or len(raw) > s.length:
        return False
    return s.data[: len(raw)] == raw


def ends_with(s: RawString, suffix: Any) -> bool:
    raw = as_text(suffix)
    if s.data is None or raw is None or len(raw) > s.length:
        return False
    return s.data[s.length - len(raw) : s.length] == raw


def find(s: RawString, keyword: Any, start: int = 0) -> int:
    """Offset of the first ``keyword`` at or after ``start``, -1 when absent."""
    raw = as_text(keyword)
    if s.data is None or raw is None:
        return -1
    return bytes(s.data[: s.length]).find(raw, max(start, 0))


def occurrences(s: RawString, keyword: Any) -> int:
    """Non-overlapping occurrences of ``keyword``, found by search-and-skip."""
    raw = as_text(keyword)
    if s.data is None or not raw:
        return 0

    text = bytes(s.data[: s.length])
    hits = 0
    pos = text.find(raw)
    while pos >= 0:
        hits += 1
        pos = text.find(raw, pos + len(raw))
    return hits


def word_count(s: RawString) -> int:
    """Number of maximal runs of non-whitespace bytes."""
    if s.data is None:
        return 0

    words = 0
    in_word = False
    for byte in s.data[: s.length]:
        if byte in WHITESPACE:
            in_word = False
        elif not in_word:
            in_word = True
            words += 1
    return words
