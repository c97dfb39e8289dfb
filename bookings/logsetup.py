"""Logging configuration for the service."""

import json
import logging
import sys
from datetime import datetime
from typing import Any, TextIO

_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}

_LEVEL_NAMES = {"WARNING": "WARN", "CRITICAL": "ERROR+4"}


def _quote(value: Any) -> str:
    text = str(value)
    if text and all(ch.isprintable() and ch not in ' ="' for ch in text):
        return text
    return json.dumps(text, ensure_ascii=False)


class _TextFormatter(logging.Formatter):
    """Formats records as space separated key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).astimezone()
        parts = [
            f"time={stamp.isoformat(timespec='milliseconds')}",
            f"level={_LEVEL_NAMES.get(record.levelname, record.levelname)}",
            f"msg={_quote(record.getMessage())}",
        ]
        parts.extend(
            f"{key}={_quote(value)}"
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        )
        if record.exc_info:
            parts.append(f"exc={_quote(self.formatException(record.exc_info))}")
        return " ".join(parts)


class _DefaultHandler(logging.StreamHandler):
    """Marker type for the handler installed by setup_logger."""


def setup_logger(stream: TextIO | None = None) -> logging.Logger:
    """Install a debug-level text handler on the root logger and return it.

    Calling it again replaces the handler it installed before.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, _DefaultHandler):
            root.removeHandler(handler)
    handler = _DefaultHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(_TextFormatter())
    handler.setLevel(logging.DEBUG)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    return root


def err(exc: BaseException) -> dict[str, str]:
    """Return the log attribute describing an error, for use as ``extra``."""
    return {"error": str(exc)}