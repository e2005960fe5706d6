"""
Shared fixtures and sample data.

Registered from the root conftest.py via ``pytest_plugins`` so every test
directory can use them.
"""

import pytest

# Passage used by the text walk-through: four occurrences of "sun".
TEXT_WITH_REPETITION = (
    "The sun rose over the hills. The sun warmed the valley, "
    "and by noon the sun was high. Everyone said the sun would stay."
)

SUN_HITS = 4


@pytest.fixture
def limited_allocator():
    """
    Install a LimitedAllocator and return a factory to re-limit it.

    Usage::

        def test_oom(limited_allocator):
            alloc = limited_allocator(64)
            ...
            assert alloc.failures == 1

    The autouse ``reset_config`` fixture restores the heap allocator after
    the test.
    """
    from hcbuf import LimitedAllocator, config

    def _install(max_bytes: int) -> LimitedAllocator:
        allocator = LimitedAllocator(max_bytes)
        config.allocator = allocator
        return allocator

    return _install


@pytest.fixture
def counting_allocator():
    """
    Install an allocator that records every call.

    Returns the allocator; inspect ``calls`` (list of (name, nbytes)) and
    ``live`` (ids of blocks not yet freed).
    """
    from hcbuf import HeapAllocator, config

    class CountingAllocator:
        def __init__(self):
            self.heap = HeapAllocator()
            self.calls: list[tuple[str, int]] = []
            self.live: set[int] = set()

        def allocate(self, nbytes):
            block = self.heap.allocate(nbytes)
            self.calls.append(("allocate", nbytes))
            if block is not None:
                self.live.add(id(block))
            return block

        def reallocate(self, block, nbytes):
            new_block = self.heap.reallocate(block, nbytes)
            self.calls.append(("reallocate", nbytes))
            if new_block is not None:
                self.live.discard(id(block))
                self.live.add(id(new_block))
            return new_block

        def free(self, block):
            self.calls.append(("free", len(block) if block is not None else 0))
            if block is not None:
                self.live.discard(id(block))

    allocator = CountingAllocator()
    config.allocator = allocator
    return allocator


@pytest.fixture
def sun_text():
    """The repeated-word passage used by replace/occurrence tests."""
    return TEXT_WITH_REPETITION


@pytest.fixture
def refusing_allocator():
    """
    Install an allocator whose ``reallocate`` always fails.

    Fresh allocations still succeed unless ``refuse_allocate`` is set, so
    records can be built first and then driven into a failed resize. Unlike
    a LimitedAllocator this also refuses shrinks.
    """
    from hcbuf import HeapAllocator, config

    class RefusingAllocator:
        def __init__(self):
            self.heap = HeapAllocator()
            self.refuse_allocate = False
            self.refused = 0

        def allocate(self, nbytes):
            if self.refuse_allocate:
                self.refused += 1
                return None
            return self.heap.allocate(nbytes)

        def reallocate(self, block, nbytes):
            self.refused += 1
            return None

        def free(self, block):
            self.heap.free(block)

    allocator = RefusingAllocator()
    config.allocator = allocator
    return allocator
