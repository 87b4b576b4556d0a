"""Structured Logging — one JSON object per line, carrying the instance and store context.

Invariants:
    - Every line has ts (the record's own creation time, UTC), level, logger, msg
    - Context passed via `extra=` (instance_id, collection, operation, username,
      error_code) is copied only when set; non-JSON values are stringified
    - setup_logging is idempotent: calling it again swaps the origen handler,
      it never stacks a second one (reload-mode servers call the lifespan twice)
    - SQLAlchemy engine echo and uvicorn access lines stay at WARNING unless
      the root level is DEBUG

Design Decisions:
    - stdlib logging only: the store, the debouncer and the gateway all log through
      module-level `logging.getLogger(__name__)`
    - Text mode appends the same context as key=value pairs so both formats
      carry identical information
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_KEYS = (
    "instance_id", "collection", "operation", "username", "error_code",
)

_NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "asyncio")


def _context(record: logging.LogRecord) -> dict:
    return {
        key: record.__dict__[key]
        for key in CONTEXT_KEYS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            **_context(record),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ContextTextFormatter(logging.Formatter):
    """Human-readable line followed by the record's context as key=value."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context(record)
        if context:
            line += " | " + " ".join(f"{k}={v}" for k, v in context.items())
        return line


class _OrigenHandler(logging.StreamHandler):
    """Marker type so setup_logging can find the handler it installed earlier."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install (or replace) the origen handler on the root logger."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _OrigenHandler)]:
        root.removeHandler(existing)

    handler = _OrigenHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else ContextTextFormatter())
    root.addHandler(handler)

    resolved = logging.getLevelName(level.upper())
    root.setLevel(resolved if isinstance(resolved, int) else logging.INFO)
    quiet = logging.DEBUG if root.level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet)
    return handler
