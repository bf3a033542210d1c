# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Structured logging: one JSON line per record.

Callers attach context through ``extra``:

    logger.info("Schedule rebuilt", extra={"group_id": group_id})
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from promptcadence.core.config import settings

CONTEXT_FIELDS: tuple[str, ...] = ("request_id", "group_id", "cadence")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": settings.SERVICE_NAME,
            "logger": record.name,
            "message": record.getMessage(),
        }
        line.update(
            (field, getattr(record, field))
            for field in CONTEXT_FIELDS
            if getattr(record, field, None) is not None
        )
        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            line["error"] = str(exc)
            line["error_type"] = type(exc).__name__
        return json.dumps(line, default=str)


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger writing JSON lines to stdout; the handler is attached once per name."""
    logger = logging.getLogger(name or settings.SERVICE_NAME)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    logger.propagate = False
    return logger
