"""
hcbuf - Growable byte buffers with explicit capacity control.

Two containers are provided, each in two layers:

- ``Array``: resizable array of fixed-size elements (a type-erased vector)
- ``Text``: NUL-terminated byte text with in-place editing

The handle classes raise exceptions from ``hcbuf.exceptions``. The
``hcbuf.array.core`` and ``hcbuf.string.core`` modules expose the same
operations as plain functions that return a ``Status`` code instead.


Quick Start
-----------

Arrays of packed values:

    >>> from hcbuf import Array
    >>>
    >>> arr = Array(4, fmt="<i")
    >>> for i in range(5):
    ...     arr.push_back(i)
    >>> arr.capacity
    8
    >>> arr.pop_back()
    4

Text editing:

    >>> from hcbuf import Text
    >>>
    >>> t = Text("Hello, World!")
    >>> t.substring(7, 5)
    >>> greeting = Text("Hello, ")
    >>> greeting += t
    >>> greeting.append_char("!")
    >>> str(greeting)
    'Hello, World!'


Allocation
----------

Every block comes from ``config.allocator``. Cap live memory to exercise
out-of-memory paths:

    >>> from hcbuf import config
    >>> config.alloc_limit = 64
    >>> Array(1024, 1)
    Traceback (most recent call last):
        ...
    hcbuf.exceptions.exceptions.OutOfMemoryError: ...
    >>> config.reset()

Failed growth never changes the buffer it was asked to grow.
"""

from hcbuf._alloc import Allocator, HeapAllocator, LimitedAllocator
from hcbuf._logging import setup_logging as setup_logging
from hcbuf._status import Status, check
from hcbuf._version import __version__ as __version__

# Containers
from hcbuf.array import Array
from hcbuf.config import config

# Exceptions (all via hcbuf.exceptions)
from hcbuf.exceptions import (
    EmptyError,
    HcbufError,
    InteropError,
    InvalidArgumentError,
    OutOfBoundsError,
    OutOfMemoryError,
    StateError,
)
from hcbuf.string import Text

__all__ = [
    # Containers
    "Array",
    "Text",
    # Status layer
    "Status",
    "check",
    # Allocation
    "config",
    "Allocator",
    "HeapAllocator",
    "LimitedAllocator",
    # Logging
    "setup_logging",
    # Exceptions
    "HcbufError",
    "OutOfBoundsError",
    "EmptyError",
    "OutOfMemoryError",
    "InvalidArgumentError",
    "InteropError",
    "StateError",
]
