"""Centralized logging helpers.

Provides one-time root configuration driven by environment variables,
structured ``extra=`` payloads for debug events and a small timing helper.
"""
from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Dict, Optional

from constants import Constants

_HANDLER_MARKER = "_rangepull_handler"
_CONTEXT_KEYS_ATTR = "context_keys"

# Attributes every LogRecord carries; structured fields must not shadow them.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted for ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping for a structured log event.

    ``None`` values are dropped. Keys colliding with LogRecord attributes are
    prefixed with ``ctx_`` so logging does not reject them.
    """
    payload: Dict[str, Any] = {}
    for key, value in fields.items():
        if value is None:
            continue
        safe_key = f"ctx_{key}" if key in _RESERVED_ATTRS else key
        payload[safe_key] = value
    payload[_CONTEXT_KEYS_ATTR] = tuple(payload.keys())
    return payload


def _record_context(record: logging.LogRecord) -> Dict[str, Any]:
    keys = getattr(record, _CONTEXT_KEYS_ATTR, ())
    return {key: getattr(record, key) for key in keys if hasattr(record, key)}


class HumanFormatter(logging.Formatter):
    """Plain formatter that appends structured fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        context = _record_context(record)
        if not context:
            return base
        rendered = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{base} [{rendered}]"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, structured fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(_record_context(record))
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


def _resolve_level(level_name: Optional[str]) -> int:
    if not level_name:
        return logging.INFO
    value = getattr(logging, str(level_name).upper(), None)
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Install the project handlers on the root logger.

    Safe to call repeatedly: handlers from an earlier call are closed and
    replaced rather than duplicated. ``level`` overrides ``RANGEPULL_LOG_LEVEL``;
    ``RANGEPULL_LOG_FORMAT=json`` switches the console to JSON lines.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root.removeHandler(handler)
            handler.close()

    handler = logging.StreamHandler()
    setattr(handler, _HANDLER_MARKER, True)
    fmt = os.environ.get(Constants.ENV_LOG_FORMAT, "human").strip().lower()
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(HumanFormatter(Constants.LOG_FORMAT))
    root.addHandler(handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        setattr(file_handler, _HANDLER_MARKER, True)
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        root.addHandler(file_handler)

    root.setLevel(_resolve_level(level or os.environ.get(Constants.ENV_LOG_LEVEL)))


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Elapsed milliseconds, measured up to now while still running."""
        if self._start is None:
            return 0.0
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000.0, 3)
