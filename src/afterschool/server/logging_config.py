"""Structured JSON logging configuration for the lessons API."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

_EXTRA_KEYS = ("request_id", "method", "path", "status", "latency_ms")


class JsonFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in _EXTRA_KEYS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val

        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class AccessFormatter(logging.Formatter):
    """Human-readable formatter that appends request fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        method = getattr(record, "method", None)
        if method is None:
            return line
        return (
            f"{line} {method} {getattr(record, 'path', '')} "
            f"{getattr(record, 'status', '')} {getattr(record, 'latency_ms', '')}ms"
        )


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """Configure root logging; defaults come from LOG_FORMAT and LOG_LEVEL."""
    from afterschool.server.config import settings

    root = logging.getLogger()

    # Avoid duplicate setup
    if getattr(root, "_afterschool_configured", False):
        return
    root._afterschool_configured = True  # type: ignore[attr-defined]

    level_name = (log_level or settings.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if (log_format or settings.log_format) == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            AccessFormatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )

    root.handlers.clear()
    root.addHandler(handler)
