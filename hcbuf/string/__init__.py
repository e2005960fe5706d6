"""
NUL-terminated byte text buffer.

Two layers are exposed:

- ``Text``: owning handle with str/bytes conversions; raises typed
  exceptions from ``hcbuf.exceptions``.
- ``core``: status-returning functions over a ``RawString`` record.

Example:
    >>> from hcbuf.string import Text
    >>> t = Text("the sun is out, the sun is warm")
    >>> t.replace("sun", "rain")
    2
    >>> t.word_count()
    8
"""

from . import core
from .core import WHITESPACE, RawString
from .text import Text

__all__ = ["Text", "RawString", "WHITESPACE", "core"]
