"""
hcbuf exceptions.

This module defines the exception hierarchy for hcbuf:

    HcbufError (base)
    ├── OutOfBoundsError - Index outside the live region
    ├── EmptyError - Pop/peek on a buffer with no elements
    ├── OutOfMemoryError - Allocator refused a request
    ├── InvalidArgumentError - Missing destination/source or malformed value
    ├── InteropError - NumPy export of an unsupported element format
    └── StateError - Handle used after close()
"""

from .exceptions import (
    EmptyError,
    HcbufError,
    InteropError,
    InvalidArgumentError,
    OutOfBoundsError,
    OutOfMemoryError,
    StateError,
)

__all__ = [
    # Base
    "HcbufError",
    # Bounds
    "OutOfBoundsError",
    "EmptyError",
    # Resource
    "OutOfMemoryError",
    # Arguments
    "InvalidArgumentError",
    # Interop
    "InteropError",
    # State
    "StateError",
]
