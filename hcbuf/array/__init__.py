"""
Type-erased resizable array.

Two layers are exposed:

- ``Array``: owning handle implementing ``MutableSequence``; raises typed
  exceptions from ``hcbuf.exceptions``.
- ``core``: status-returning functions over a ``RawArray`` record, for
  callers that prefer codes to exceptions.

Example:
    >>> from hcbuf.array import Array, core
    >>> arr = Array(4, fmt="<H")
    >>> arr.push_back(7)
    >>> core.push_at(arr.raw, 5, b"\\x01\\x00")
    <Status.OUT_OF_BOUNDS: -2>
"""

from . import core
from .array import Array
from .core import RawArray, grow_capacity

__all__ = ["Array", "RawArray", "core", "grow_capacity"]
