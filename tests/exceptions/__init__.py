"""
Exception handling tests.

Tests for hcbuf.exceptions and hcbuf.check():
- Status code to Python exception mapping
- Error codes, details and original status values
- Built-in exception compatibility (IndexError, ValueError, ...)

Maps to: hcbuf/exceptions/, hcbuf/_status.py
"""
