"""
Structured logging for buffer events.

Records follow the OpenTelemetry Logging Data Model when rendered as JSON.
The cores only log at DEBUG (capacity changes, refused allocations), each
record tagged with a ``scope`` ("array", "string" or "alloc") and the sizes
involved, so nothing is printed at the default level.

Environment::

    HCBUF_LOG_LEVEL=debug|info|warning|error|off (default: info)
    HCBUF_LOG_FORMAT=json|human (default: human if tty, json if piped)
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import MutableMapping
from datetime import datetime, timezone
from typing import Any

from ._version import __version__

__all__ = ["logger", "setup_logging", "scoped_logger"]

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL + 10,
}

# OpenTelemetry severityText
_SEVERITY = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "FATAL",
}

_RECORD_FIELDS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "scope", "taskName"}


def _level(value: str | int) -> int:
    if isinstance(value, int):
        return value
    return _LEVELS.get(value.lower(), logging.INFO)


def _buffer_attributes(record: logging.LogRecord) -> dict[str, Any]:
    """Caller-supplied ``extra`` values, e.g. capacity, nbytes, elem_size."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_FIELDS and not key.startswith("_")
    }


def _scope(record: logging.LogRecord) -> str:
    scope = getattr(record, "scope", None)
    if scope:
        return scope
    # hcbuf.array.core -> array
    parts = record.name.split(".")
    return parts[1] if len(parts) > 1 else "hcbuf"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, OpenTelemetry field names."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        attributes = {"scope": _scope(record), **_buffer_attributes(record)}
        payload = {
            "timestamp": created.isoformat(timespec="microseconds").replace("+00:00", "Z"),
            "severityText": _SEVERITY.get(record.levelno, record.levelname),
            "body": record.getMessage(),
            "attributes": attributes,
            "resource": {"service.name": "hcbuf", "service.version": __version__},
        }
        return json.dumps(payload, separators=(",", ":"), default=str)


class HumanFormatter(logging.Formatter):
    """
    Single-line terminal output.

    Example output::

        DEBUG [array] Array capacity grown capacity=8 old_capacity=4
    """

    def format(self, record: logging.LogRecord) -> str:
        severity = _SEVERITY.get(record.levelno, record.levelname)
        line = f"{severity:<5} [{_scope(record)}] {record.getMessage()}"
        attributes = _buffer_attributes(record)
        if attributes:
            line += " " + " ".join(f"{k}={v}" for k, v in sorted(attributes.items()))
        return line


def _make_handler(format: str | None) -> logging.Handler:
    if format is None:
        format = os.environ.get("HCBUF_LOG_FORMAT") or (
            "human" if sys.stderr.isatty() else "json"
        )
    handler = logging.StreamHandler(sys.stderr)
    if format.lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(HumanFormatter())
    return handler


logger = logging.getLogger("hcbuf")


def setup_logging(level: str | int = "INFO", format: str | None = None) -> None:
    """
    Configure the ``hcbuf`` logger.

    Replaces any handlers already attached to it.

    Parameters
    ----------
    level : str or int, default "INFO"
        Level name ("debug", "info", "warning", "error", "off") or a
        ``logging`` constant. Unknown names fall back to INFO.
    format : str, optional
        "json" or "human". Defaults to ``HCBUF_LOG_FORMAT``, then to
        "human" on a terminal and "json" otherwise.

    Examples
    --------
    Trace every reallocation as JSON::

        >>> import hcbuf
        >>> hcbuf.setup_logging("DEBUG", format="json")
    """
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.addHandler(_make_handler(format))
    logger.setLevel(_level(level))


class _ScopedLoggerAdapter(logging.LoggerAdapter):
    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def scoped_logger(scope: str) -> logging.LoggerAdapter:
    """
    Logger adapter that tags every record with ``scope``.

    Example:
        >>> log = scoped_logger("alloc")
        >>> log.debug("Allocation refused", extra={"nbytes": 4096})
    """
    return _ScopedLoggerAdapter(logger, {"scope": scope})


if not logger.handlers:
    logger.addHandler(_make_handler(None))
    logger.setLevel(_level(os.environ.get("HCBUF_LOG_LEVEL", "info")))
