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

The status layer (``hcbuf.array.core``, ``hcbuf.string.core``) never
raises these; it returns ``Status`` codes. The owning handles
(``hcbuf.Array``, ``hcbuf.Text``) convert codes into exceptions with
``hcbuf.check()``.

Usage:
    try:
        arr.pop_back()
    except hcbuf.EmptyError:
        print("nothing to pop")
    except hcbuf.HcbufError as e:
        print(f"Error {e.code}: {e}")
        print(f"Details: {e.details}")

See Also
--------
    HcbufError : Base exception for all hcbuf errors.
"""

from typing import Any

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


class HcbufError(Exception):
    """
    Base exception for all hcbuf errors.

    All hcbuf-specific exceptions inherit from this class, enabling:
    - Catch-all handling: ``except hcbuf.HcbufError``
    - Stable string-based error codes for programmatic handling
    - Structured details for debugging and logging

    Attributes
    ----------
    message : str
        Human-readable error description.
    code : str
        Stable, string-based error code (e.g., "OUT_OF_BOUNDS").
        Use this for programmatic error handling.
    details : dict[str, Any]
        Structured context (e.g., {"index": 7, "count": 3}).
    original_code : int | None
        The integer ``Status`` value the error was built from, if any.

    Example
    -------
    >>> try:
    ...     arr.pop_at(10)
    ... except hcbuf.HcbufError as e:
    ...     print(f"Error code: {e.code}")
    ...     print(f"Details: {e.details}")
    Error code: OUT_OF_BOUNDS
    Details: {'index': 10, 'count': 3}
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_code = original_code

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.args[0]!r}, code={self.code!r})"


# =============================================================================
# Bounds Errors
# =============================================================================


class OutOfBoundsError(HcbufError, IndexError):
    """
    Index outside the valid range for the operation.

    ``insert`` accepts ``0 <= index <= count``; ``push_at`` and ``pop_at``
    accept ``0 <= index < count``. Inherits from IndexError so generic
    sequence code keeps working::

        except IndexError:   # catches bounds errors (Pythonic)
    """

    def __init__(
        self,
        message: str,
        code: str = "OUT_OF_BOUNDS",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code or -2)


class EmptyError(HcbufError, IndexError):
    """
    Operation needs at least one element but the buffer is empty.

    At the status layer this is the soft ``Status.EMPTY`` result. Handles
    raise it for ``pop_*``, ``front`` and ``back``, mirroring ``list.pop()``
    on an empty list.
    """

    def __init__(
        self,
        message: str | None = None,
        code: str = "EMPTY",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        if message is None:
            message = "Buffer is empty"
        super().__init__(message, code, details, original_code or 1)


# =============================================================================
# Resource Errors
# =============================================================================


class OutOfMemoryError(HcbufError, MemoryError):
    """
    The configured allocator could not satisfy a request.

    The buffer that triggered the request is left exactly as it was before
    the call, so the caller may free memory elsewhere and retry.

    Solutions:
    - Raise or clear ``hcbuf.config.alloc_limit``
    - ``shrink_to_fit()`` or close unused buffers
    """

    def __init__(
        self,
        message: str,
        code: str = "OUT_OF_MEMORY",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code or -1)


# =============================================================================
# Argument Errors
# =============================================================================


class InvalidArgumentError(HcbufError, ValueError):
    """
    Missing or malformed argument.

    Raised when a destination has no backing storage
    (code="INVALID_DESTINATION"), a required source is missing
    (code="INVALID_SOURCE"), or a value has the wrong size or type
    (code="INVALID_ARGUMENT").

    This exception inherits from both HcbufError and ValueError::

        except hcbuf.HcbufError:   # catches all hcbuf errors
        except ValueError:         # catches argument errors (Pythonic)
    """

    def __init__(
        self,
        message: str,
        code: str = "INVALID_ARGUMENT",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code)


# =============================================================================
# State Errors
# =============================================================================


class StateError(HcbufError, RuntimeError):
    """
    Invalid object state error.

    Raised when an operation is attempted on a handle whose storage was
    already released with ``close()``.
    """

    def __init__(
        self,
        message: str,
        code: str = "STATE_ERROR",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code)


# =============================================================================
# Interop Errors
# =============================================================================


class InteropError(HcbufError, TypeError):
    """
    NumPy interop error.

    Raised when an array cannot be described through the NumPy array
    interface, e.g. a ``struct`` format with more than one field.
    """

    def __init__(
        self,
        message: str,
        code: str = "INTEROP_ERROR",
        details: dict[str, Any] | None = None,
        original_code: int | None = None,
    ):
        super().__init__(message, code, details, original_code)
