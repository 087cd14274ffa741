"""
Central logging configuration.

One JSON object per line on stdout. Every record carries the active
request_id / extraction_id / filename, plus whatever the call site passed in
`extra={...}` (strategy name, verdict fields, durations).
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.config import dictConfig
from typing import Any

from docextract.core.request_context import get_context


# Attributes every LogRecord has; anything else on the record came from `extra`.
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}

# Noisy third-party loggers, capped regardless of LOG_LEVEL.
_QUIET_LOGGERS = ("pdfminer", "fitz", "pypdf", "multipart")


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        payload.update(get_context())

        for key, value in record.__dict__.items():
            if key in _STANDARD_ATTRS or key.startswith("_") or key in payload:
                continue
            payload[key] = _jsonable(value)

        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


def configure_logging(level: str | None = None) -> None:
    """Call once at process startup. `level` overrides LOG_LEVEL."""
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    loggers: dict[str, dict[str, Any]] = {
        name: {"level": level, "handlers": ["console"], "propagate": False}
        for name in ("uvicorn", "uvicorn.error", "uvicorn.access")
    }
    for name in _QUIET_LOGGERS:
        loggers[name] = {"level": "WARNING"}

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": JsonFormatter},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": sys.stdout,
                }
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": loggers,
        }
    )
