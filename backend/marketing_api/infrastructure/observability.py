"""Structured Logging - JSON and text formatters for the marketing API.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Marketing extras (entity_type, entity_id, user_id, action_key, scope_mode,
      error_code, path) are surfaced when present, in both formats
    - setup_logging replaces the handler it installed earlier, so repeated
      lifespans (tests, reloads) never double every line

Design Decisions:
    - Formatters on stdlib logging, no extra logging dependency
    - Text format appends extras as key=value so development logs stay greppable
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_KEYS = (
    "entity_type", "entity_id", "user_id", "action_key", "scope_mode",
    "error_code", "path",
)
_HANDLER_NAME = "marketing_api"


def record_extras(record: logging.LogRecord) -> dict:
    """Marketing extras attached to `record` through `extra=`, in a fixed order."""
    extras = {}
    for key in _EXTRA_KEYS:
        val = record.__dict__.get(key)
        if val is not None:
            extras[key] = val
    return extras


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_extras(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = record_extras(record)
        if not extras:
            return line
        pairs = " ".join(f"{key}={val}" for key, val in extras.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure root logging for the application."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
