from __future__ import annotations

import json
import logging
from logging.config import dictConfig
from typing import Any, Dict

from .logging_context import REQUEST_FIELDS

# Attributes every LogRecord carries; anything else was passed via ``extra``.
_STANDARD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}
_NOT_EXTRA = _STANDARD_ATTRS | set(REQUEST_FIELDS)


class JSONFormatter(logging.Formatter):
    """One JSON object per line.

    Request metadata set by :class:`~coursehub.logging_context.RequestContextFilter`
    goes under ``request``; call-site extras go under ``context``.
    """

    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request = {
            name: value
            for name in REQUEST_FIELDS
            if (value := getattr(record, name, None)) is not None
        }
        if request:
            data["request"] = request

        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _NOT_EXTRA and value is not None
        }
        if context:
            data["context"] = context

        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Route the root logger through one JSON stream handler."""

    level = level.upper()
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "request_context": {"()": "coursehub.logging_context.RequestContextFilter"},
            },
            "formatters": {
                "json": {
                    "()": "coursehub.logging_utils.JSONFormatter",
                    "datefmt": "%Y-%m-%dT%H:%M:%S%z",
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "filters": ["request_context"],
                    "level": level,
                },
            },
            "root": {"handlers": ["default"], "level": level},
        }
    )
