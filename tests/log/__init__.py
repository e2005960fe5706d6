"""
Logging tests.

Maps to: hcbuf/_logging.py
"""
