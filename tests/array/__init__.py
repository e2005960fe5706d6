"""
Array tests.

Tests for hcbuf.array:
- test_core.py: status-returning functions over RawArray
- test_array.py: the Array handle and its sequence protocol
- test_numpy.py: zero-copy NumPy conversion

Maps to: hcbuf/array/
"""
