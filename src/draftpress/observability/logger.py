"""Structured JSON logger for draftpress.

Every record is emitted as one JSON object per line so that staging runs
can be followed per request in any log aggregation pipeline::

    {"ts": "2026-10-19T12:00:00.123456+00:00", "level": "INFO",
     "logger": "draftpress.staging", "message": "staging state",
     "request_id": "5f0c...", "state": "validating"}

The service logs on behalf of many tenants, each with its own integration
token, so the formatter masks secrets before anything is written: fields
whose name marks them as a credential, and ``Bearer`` values in free text
(messages, error strings, tracebacks).

Usage::

    from draftpress.observability import get_logger

    log = get_logger("draftpress.mapper")
    log.debug("node skipped", extra={"extra_fields": {"node": "thematic_break"}})
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any

_SECRET_KEY_PARTS: tuple[str, ...] = (
    "token",
    "secret",
    "password",
    "credential",
    "authorization",
)

_BEARER_RE = re.compile(r"(Bearer\s+)\S+", re.IGNORECASE)

REDACTED = "<redacted>"


def _is_secret_key(key: str) -> bool:
    lowered = key.lower()
    return any(part in lowered for part in _SECRET_KEY_PARTS)


def _scrub(value: Any) -> Any:
    if isinstance(value, str):
        return _BEARER_RE.sub(lambda m: m.group(1) + REDACTED, value)
    if isinstance(value, dict):
        return {
            k: REDACTED if isinstance(k, str) and _is_secret_key(k) else _scrub(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_scrub(v) for v in value]
    return value


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects with secrets masked.

    Guaranteed keys are ``ts``, ``level``, ``logger`` and ``message``.
    Fields passed as ``extra={"extra_fields": {...}}`` are merged into the
    top-level object but cannot replace the guaranteed keys; ``exception``
    and ``stack_info`` appear when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {}

        extra_fields: dict[str, Any] | None = getattr(record, "extra_fields", None)
        if extra_fields:
            log_entry.update(_scrub(extra_fields))

        log_entry.update(
            ts=datetime.now(timezone.utc).isoformat(),
            level=record.levelname,
            logger=record.name,
            message=_scrub(record.getMessage()),
        )

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = _scrub(self.formatException(record.exc_info))

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=str)


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level {level!r}")
    return resolved


# One handler per logger name; repeated calls return the configured logger.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "draftpress",
    *,
    level: int | str = logging.DEBUG,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Parameters
    ----------
    name:
        Logger name.  Module loggers use ``"draftpress.<component>"``.
    level:
        Minimum log level as an ``int`` or a case-insensitive name.  Only
        applied the first time *name* is configured.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.

    Raises
    ------
    ValueError
        If *level* is a name :mod:`logging` does not know.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        logger.setLevel(_resolve_level(level))

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.propagate = False

        _configured_loggers.add(name)

    return logger
