"""
Status codes shared by the array and string cores, and the mapping from
codes to Python exceptions.

Negative values are hard errors, zero is success, positive values are soft
informational results.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from .exceptions import (
    EmptyError,
    HcbufError,
    InvalidArgumentError,
    OutOfBoundsError,
    OutOfMemoryError,
)

__all__ = ["Status", "check"]


class Status(IntEnum):
    """Result of a status-layer operation."""

    INVALID_SOURCE = -4
    INVALID_DESTINATION = -3
    OUT_OF_BOUNDS = -2
    OUT_OF_MEMORY = -1
    SUCCESS = 0
    EMPTY = 1

    @property
    def ok(self) -> bool:
        """True for SUCCESS and for the soft EMPTY result."""
        return self >= 0


_MESSAGES = {
    Status.INVALID_SOURCE: "Source is missing or has no backing storage",
    Status.INVALID_DESTINATION: "Destination has no backing storage or is out of range",
    Status.OUT_OF_BOUNDS: "Index out of bounds",
    Status.OUT_OF_MEMORY: "Allocation failed",
    Status.EMPTY: "Buffer is empty",
}


def check(status: int, message: str | None = None, **details: Any) -> None:
    """
    Raise the exception matching ``status`` unless it is SUCCESS.

    Args:
        status: A ``Status`` (or its integer value).
        message: Optional message; defaults to a generic text per code.
        **details: Structured context attached to the exception.

    Raises
    ------
        OutOfBoundsError: For ``Status.OUT_OF_BOUNDS``.
        OutOfMemoryError: For ``Status.OUT_OF_MEMORY``.
        InvalidArgumentError: For ``INVALID_DESTINATION``/``INVALID_SOURCE``.
        EmptyError: For ``Status.EMPTY``.
        HcbufError: For any unknown code.
    """
    if status == Status.SUCCESS:
        return

    try:
        status = Status(status)
    except ValueError:
        raise HcbufError(
            message or f"Unknown status code {status}",
            details=details,
            original_code=int(status),
        ) from None

    text = message or _MESSAGES[status]
    if status is Status.OUT_OF_BOUNDS:
        raise OutOfBoundsError(text, details=details, original_code=int(status))
    if status is Status.OUT_OF_MEMORY:
        raise OutOfMemoryError(text, details=details, original_code=int(status))
    if status is Status.EMPTY:
        raise EmptyError(text, details=details, original_code=int(status))
    raise InvalidArgumentError(text, code=status.name, details=details, original_code=int(status))
