"""
Global pytest fixtures for hcbuf tests.

This module provides:
- Config isolation (every test starts on the default heap allocator)
- Marker registration

=============================================================================
Skip Policy
=============================================================================

pytest.skip() / pytest.importorskip(): missing optional dependencies
(numpy). These are prerequisites, not hcbuf bugs.

Out-of-memory behavior is never skipped: tests install a LimitedAllocator
(see the ``limited_allocator`` fixture in tests/fixtures.py) so refusals
are deterministic on any machine.
"""

import gc

import pytest

# =============================================================================
# Config Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def reset_config():
    """
    Restore the default allocator around every test.

    Tests that install a LimitedAllocator or a custom allocator must not
    leak it into later tests.
    """
    from hcbuf import config

    config.reset()
    yield config
    config.reset()


@pytest.fixture
def force_gc():
    """Return a helper that runs several collection passes."""

    def _collect():
        gc.collect()
        gc.collect()
        gc.collect()

    return _collect


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "memory: marks allocator accounting tests")
    config.addinivalue_line("markers", "numpy: marks tests requiring numpy")
