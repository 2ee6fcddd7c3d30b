"""
Structured logging configuration.

One stderr handler on the root logger, chosen by environment:

- production: JSON lines for the log aggregator
- development: colored single lines
- testing: colored single lines, WARNING and above

``LOG_LEVEL`` overrides the level everywhere. Records emitted while a
request is being served carry its request id, so an upload rollback or a
permission warning can be matched with the access line of the same call.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

from flask import g, has_request_context

# Record attributes (set through ``extra=``) copied into JSON output
_EXTRA_KEYS = ("request_id", "method", "path", "status", "duration_ms", "request_bytes")

_LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
_RESET = "\033[0m"

# Third-party loggers that are too chatty below WARNING
_QUIET_LOGGERS = ("werkzeug", "sqlalchemy.engine", "flask_limiter", "multipart")


class RequestContextFilter(logging.Filter):
    """Attach ``request_id`` to records logged inside a request."""

    def filter(self, record):
        if getattr(record, "request_id", None) is None:
            record.request_id = getattr(g, "request_id", None) if has_request_context() else None
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record):
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key)) for key in _EXTRA_KEYS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ReadableFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL [request-id] logger: message``, colored by level."""

    def format(self, record):
        color = _LEVEL_COLORS.get(record.levelno, "")
        parts = [f"{color}{self.formatTime(record, '%H:%M:%S')} {record.levelname:<8}{_RESET}"]
        if getattr(record, "request_id", None):
            parts.append(f"[{record.request_id}]")
        parts.append(f"{record.name}: {record.getMessage()}")
        text = " ".join(parts)
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


def _default_level(app) -> str:
    if app.config.get("TESTING"):
        return "WARNING"
    return "DEBUG" if app.config.get("DEBUG") else "INFO"


def configure_logging(app):
    """Install the root handler for ``app``'s environment."""
    as_json = app.config.get("APP_ENV") == "production"
    level_name = os.getenv("LOG_LEVEL", _default_level(app)).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if as_json else ReadableFormatter())
    handler.addFilter(RequestContextFilter())

    root = logging.getLogger()
    # create_app() runs more than once per process under tests
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    app.logger.setLevel(level)

    logging.getLogger(__name__).info(
        "Logging configured: level=%s format=%s", level_name, "json" if as_json else "readable",
    )
