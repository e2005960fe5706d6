"""
Tests for the error handling system.

Tests that:
1. Status codes are mapped to the right Python exceptions
2. Exceptions carry stable codes, details and the originating status
3. Every error is catchable both as HcbufError and as its built-in base
"""

import pytest


class TestErrorTypes:
    """Tests for error type hierarchy and accessibility."""

    def test_base_error_importable(self):
        """HcbufError is importable from hcbuf."""
        import hcbuf

        assert hasattr(hcbuf, "HcbufError")
        assert issubclass(hcbuf.HcbufError, Exception)

    def test_all_errors_subclass_base(self):
        """Every hcbuf error derives from HcbufError."""
        from hcbuf.exceptions import (
            EmptyError,
            HcbufError,
            InteropError,
            InvalidArgumentError,
            OutOfBoundsError,
            OutOfMemoryError,
            StateError,
        )

        for cls in (
            OutOfBoundsError,
            EmptyError,
            OutOfMemoryError,
            InvalidArgumentError,
            InteropError,
            StateError,
        ):
            assert issubclass(cls, HcbufError), cls.__name__

    def test_builtin_compatibility(self):
        """Errors are catchable through their built-in counterparts."""
        from hcbuf.exceptions import (
            EmptyError,
            InteropError,
            InvalidArgumentError,
            OutOfBoundsError,
            OutOfMemoryError,
            StateError,
        )

        assert issubclass(OutOfBoundsError, IndexError)
        assert issubclass(EmptyError, IndexError)
        assert issubclass(OutOfMemoryError, MemoryError)
        assert issubclass(InvalidArgumentError, ValueError)
        assert issubclass(InteropError, TypeError)
        assert issubclass(StateError, RuntimeError)

    def test_root_exports(self):
        """Exceptions are re-exported at the package root."""
        import hcbuf
        from hcbuf import exceptions

        for name in exceptions.__all__:
            assert getattr(hcbuf, name) is getattr(exceptions, name)


class TestErrorAttributes:
    """Tests for code, details and original_code."""

    def test_default_codes(self):
        """Each class has a stable default code."""
        from hcbuf.exceptions import (
            EmptyError,
            HcbufError,
            InteropError,
            InvalidArgumentError,
            OutOfBoundsError,
            OutOfMemoryError,
            StateError,
        )

        assert HcbufError("x").code == "INTERNAL_ERROR"
        assert OutOfBoundsError("x").code == "OUT_OF_BOUNDS"
        assert EmptyError().code == "EMPTY"
        assert OutOfMemoryError("x").code == "OUT_OF_MEMORY"
        assert InvalidArgumentError("x").code == "INVALID_ARGUMENT"
        assert InteropError("x").code == "INTEROP_ERROR"
        assert StateError("x").code == "STATE_ERROR"

    def test_default_original_codes(self):
        """Status-backed errors default original_code to their status value."""
        from hcbuf import Status
        from hcbuf.exceptions import EmptyError, OutOfBoundsError, OutOfMemoryError

        assert OutOfBoundsError("x").original_code == Status.OUT_OF_BOUNDS
        assert EmptyError().original_code == Status.EMPTY
        assert OutOfMemoryError("x").original_code == Status.OUT_OF_MEMORY

    def test_details_default_empty(self):
        """details defaults to an empty dict."""
        from hcbuf.exceptions import HcbufError

        assert HcbufError("x").details == {}

    def test_empty_error_default_message(self):
        """EmptyError has a default message."""
        from hcbuf.exceptions import EmptyError

        assert str(EmptyError()) == "Buffer is empty"

    def test_repr(self):
        """repr includes class, message and code."""
        from hcbuf.exceptions import OutOfBoundsError

        assert repr(OutOfBoundsError("bad index")) == (
            "OutOfBoundsError('bad index', code='OUT_OF_BOUNDS')"
        )


class TestCheck:
    """Tests for status code to exception mapping."""

    def test_check_success_does_not_raise(self):
        """check(SUCCESS) returns None."""
        from hcbuf import Status, check

        assert check(Status.SUCCESS) is None
        assert check(0) is None

    @pytest.mark.parametrize(
        "status,exc_name,code",
        [
            ("OUT_OF_BOUNDS", "OutOfBoundsError", "OUT_OF_BOUNDS"),
            ("OUT_OF_MEMORY", "OutOfMemoryError", "OUT_OF_MEMORY"),
            ("EMPTY", "EmptyError", "EMPTY"),
            ("INVALID_DESTINATION", "InvalidArgumentError", "INVALID_DESTINATION"),
            ("INVALID_SOURCE", "InvalidArgumentError", "INVALID_SOURCE"),
        ],
    )
    def test_check_mapping(self, status, exc_name, code):
        """Each non-success status raises its exception with its code."""
        from hcbuf import Status, check, exceptions

        exc_type = getattr(exceptions, exc_name)
        with pytest.raises(exc_type) as exc_info:
            check(Status[status])

        assert exc_info.value.code == code
        assert exc_info.value.original_code == Status[status]

    def test_check_accepts_plain_int(self):
        """Integer codes are accepted as well as Status members."""
        from hcbuf import check
        from hcbuf.exceptions import OutOfBoundsError

        with pytest.raises(OutOfBoundsError):
            check(-2)

    def test_check_unknown_code(self):
        """An unknown code raises the base HcbufError."""
        from hcbuf import check
        from hcbuf.exceptions import HcbufError

        with pytest.raises(HcbufError) as exc_info:
            check(42)

        assert exc_info.value.original_code == 42
        assert "42" in str(exc_info.value)

    def test_check_message_and_details(self):
        """A custom message and keyword details are attached."""
        from hcbuf import Status, check
        from hcbuf.exceptions import OutOfBoundsError

        with pytest.raises(OutOfBoundsError) as exc_info:
            check(Status.OUT_OF_BOUNDS, "index 9 out of range", index=9, count=3)

        assert str(exc_info.value) == "index 9 out of range"
        assert exc_info.value.details == {"index": 9, "count": 3}

    def test_default_messages(self):
        """Without a message, a descriptive default is used."""
        from hcbuf import Status, check
        from hcbuf.exceptions import HcbufError

        for status in Status:
            if status is Status.SUCCESS:
                continue
            with pytest.raises(HcbufError) as exc_info:
                check(status)
            message = str(exc_info.value)
            assert message
            assert not message.lstrip("-").isdigit()


class TestStatus:
    """Tests for the Status enum."""

    def test_values(self):
        """Negative codes are hard errors, EMPTY is positive."""
        from hcbuf import Status

        assert Status.SUCCESS == 0
        assert Status.EMPTY > 0
        for status in (
            Status.OUT_OF_BOUNDS,
            Status.OUT_OF_MEMORY,
            Status.INVALID_DESTINATION,
            Status.INVALID_SOURCE,
        ):
            assert status < 0
            assert not status.ok

    def test_ok(self):
        """SUCCESS and EMPTY are ok."""
        from hcbuf import Status

        assert Status.SUCCESS.ok
        assert Status.EMPTY.ok


class TestHandleErrors:
    """Errors raised through the handles carry useful details."""

    def test_pop_at_details(self):
        """pop_at out of range reports index and count."""
        from hcbuf import Array
        from hcbuf.exceptions import OutOfBoundsError

        arr = Array.from_iterable([1, 2, 3], fmt="<i")

        with pytest.raises(OutOfBoundsError) as exc_info:
            arr.pop_at(10)

        assert exc_info.value.details == {"index": 10, "count": 3}

    def test_catch_all(self):
        """HcbufError catches every handle error."""
        from hcbuf import Array, HcbufError, Text

        with pytest.raises(HcbufError):
            Array(1, 4).pop_back()
        with pytest.raises(HcbufError):
            Text("abc").substring(5, 1)
