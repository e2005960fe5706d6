"""
Allocation safety tests.

Tests allocator ownership and failure behavior:
- Allocator accounting (every block freed exactly once)
- Failure atomicity (a refused allocation leaves the buffer unchanged)
- Handle lifecycle (close/with/finalizer release storage)
"""
