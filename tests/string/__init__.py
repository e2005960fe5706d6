"""
Text buffer tests.

Tests for hcbuf.string:
- test_core.py: status-returning functions over RawString
- test_text.py: the Text handle

Maps to: hcbuf/string/
"""
