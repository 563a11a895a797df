"""Logging configuration helpers for Lumen."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from logging.config import dictConfig
from typing import Any

_DEV_ENVIRONMENTS = {"local", "dev", "development", "test"}

_COLOR_CODES = {
    "red": "\033[31m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
}

_RESERVED = {
    "msg", "args", "levelname", "levelno", "pathname", "filename", "module",
    "exc_info", "exc_text", "stack_info", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName", "processName", "process",
    "taskName", "name",
}


def _color_enabled() -> bool:
    flag = os.getenv("LUMEN_LOG_COLOR", "")
    if not flag:
        return os.getenv("LUMEN_ENVIRONMENT", "dev").lower() in _DEV_ENVIRONMENTS
    return flag == "1"


def colorize(text: str, color: str = "red") -> str:
    if not _color_enabled():
        return text
    prefix = _COLOR_CODES.get(color, "")
    suffix = "\033[0m" if prefix else ""
    return f"{prefix}{text}{suffix}"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, carrying any ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        extras = {k: v for k, v in vars(record).items() if k not in _RESERVED and not k.startswith("_")}
        payload: dict[str, Any] = {
            **extras,
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack_info"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ColorTextFormatter(logging.Formatter):
    """Console formatter; errors red, warnings yellow."""

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        if record.levelno >= logging.ERROR:
            return colorize(formatted, "red")
        if record.levelno >= logging.WARNING:
            return colorize(formatted, "yellow")
        return formatted


# Third-party loggers that are too chatty at DEBUG.
_QUIET_LOGGERS = ("asyncio", "uvicorn.access", "httpx", "httpcore")


def build_logging_config(level: str, fmt: str) -> dict[str, Any]:
    """dictConfig payload for one console handler in ``json`` or ``text`` form."""

    level = level.upper()
    formatters: dict[str, Any] = {
        "json": {"()": JsonFormatter},
        "text": {
            "()": ColorTextFormatter,
            "format": "%(asctime)s %(levelname)-7s %(name)s | %(message)s",
        },
    }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "json" if fmt == "json" else "text",
            }
        },
        "loggers": {
            "lumen": {"level": level},
            **{name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
        },
        "root": {"handlers": ["stderr"], "level": level},
    }


def configure_logging() -> None:
    environment = os.getenv("LUMEN_ENVIRONMENT", "dev").lower()
    level = os.getenv("LUMEN_LOG_LEVEL") or ("DEBUG" if environment in _DEV_ENVIRONMENTS else "INFO")
    dictConfig(build_logging_config(level, os.getenv("LUMEN_LOG_FORMAT", "json").lower()))


__all__ = ["ColorTextFormatter", "JsonFormatter", "build_logging_config", "colorize", "configure_logging"]
