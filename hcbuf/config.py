"""
Runtime configuration.

Selects the allocator used by every buffer. Settings can be modified
programmatically or seeded from the environment at import time.

Example:
    >>> from hcbuf import config
    >>> config.alloc_limit = 1 << 20  # refuse allocations past 1 MiB live
    >>> config.reset()

Environment::

    HCBUF_ALLOC_LIMIT=<bytes>  (default: unlimited)
"""

import os

from ._alloc import Allocator, HeapAllocator, LimitedAllocator
from .exceptions import InvalidArgumentError


class _BufferConfig:
    """
    Singleton configuration for allocation settings.

    This is a singleton - import and modify `config` directly:

        from hcbuf import config
        config.alloc_limit = 4096

    Attributes
    ----------
        allocator: Object implementing allocate/reallocate/free. Read by
            the cores on every allocation.
        alloc_limit: Ceiling on live bytes, or None for unlimited. Setting
            it installs a LimitedAllocator over the heap allocator.
    """

    __slots__ = ("_allocator",)

    def __init__(self) -> None:
        self._allocator: Allocator = HeapAllocator()

    @property
    def allocator(self) -> Allocator:
        """Allocator used for every new or resized block."""
        return self._allocator

    @allocator.setter
    def allocator(self, value: Allocator) -> None:
        if not isinstance(value, Allocator):
            raise InvalidArgumentError(
                f"allocator must provide allocate/reallocate/free, got {type(value).__name__}",
                code="INVALID_ARGUMENT",
                details={"param": "allocator", "type": type(value).__name__},
            )
        self._allocator = value

    @property
    def alloc_limit(self) -> int | None:
        """Live-byte ceiling of the active allocator, None when unlimited."""
        if isinstance(self._allocator, LimitedAllocator):
            return self._allocator.max_bytes
        return None

    @alloc_limit.setter
    def alloc_limit(self, value: int | None) -> None:
        if value is None:
            self._allocator = HeapAllocator()
            return
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidArgumentError(
                f"alloc_limit must be a non-negative int or None, got {value!r}",
                code="INVALID_ARGUMENT",
                details={"param": "alloc_limit", "value": value},
            )
        self._allocator = LimitedAllocator(value)

    def reset(self) -> None:
        """Restore the default heap allocator."""
        self._allocator = HeapAllocator()

    def __repr__(self) -> str:
        return f"BufferConfig(allocator={self._allocator!r})"


def _limit_from_env() -> int | None:
    raw = os.environ.get("HCBUF_ALLOC_LIMIT")
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise InvalidArgumentError(
            f"HCBUF_ALLOC_LIMIT must be an integer byte count, got {raw!r}",
            code="INVALID_ARGUMENT",
            details={"env": "HCBUF_ALLOC_LIMIT", "value": raw},
        ) from None


# Module-level singleton
config = _BufferConfig()

_env_limit = _limit_from_env()
if _env_limit is not None:
    config.alloc_limit = _env_limit
