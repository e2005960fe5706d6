"""hcbuf test suite."""
