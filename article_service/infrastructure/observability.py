"""Structured Logging — JSON and text formatters carrying article context.

Invariants:
    - Every line carries the record's own time (UTC), level, logger name and message
    - Context fields (CONTEXT_FIELDS) passed through `extra=` are emitted when not None,
      in the same order for both formats
    - setup_logging() installs exactly one service handler on the root logger,
      replacing the one from a previous call

Design Decisions:
    - stdlib logging with a hand-written JSON formatter, no logging dependency
    - Text format appends context as key=value so local logs stay greppable by article_id
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_FIELDS = (
    "operation", "article_id", "author_id", "storage_key",
    "error_code", "attempt", "task", "path",
)


def record_context(record: logging.LogRecord) -> dict:
    """Context fields present on a record, in CONTEXT_FIELDS order."""
    return {
        key: record.__dict__[key]
        for key in CONTEXT_FIELDS
        if record.__dict__.get(key) is not None
    }


def _utc_time(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": _utc_time(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class ContextTextFormatter(logging.Formatter):
    """Human-readable line followed by key=value context."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{_utc_time(record)} {record.levelname} {record.name}: {record.getMessage()}"
        context = record_context(record)
        if context:
            line += " " + " ".join(f"{k}={v}" for k, v in context.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class _ServiceHandler(logging.StreamHandler):
    """Marker type so setup_logging can find its own handler."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure the root logger once per call; safe to call again."""
    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, _ServiceHandler)]:
        root.removeHandler(handler)
    handler = _ServiceHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else ContextTextFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
