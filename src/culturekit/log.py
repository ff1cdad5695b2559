"""Logging setup for culturekit.

Library modules log through ``logging.getLogger(__name__)`` and never
install handlers. Applications (and the CLI) call :func:`configure_logging`
to attach one handler to the ``culturekit`` logger.

Usage:
    from culturekit.log import configure_logging

    configure_logging(level="DEBUG")              # console format on stderr
    configure_logging(level="INFO", format="json")
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from datetime import datetime, timezone
from enum import IntEnum
from typing import TextIO


ROOT_LOGGER = "culturekit"

_lock = threading.Lock()
_handler: logging.Handler | None = None


class LogLevel(IntEnum):
    """Log severity levels."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @classmethod
    def from_string(cls, level: str) -> "LogLevel":
        """Convert string to LogLevel (unknown names map to WARNING)."""
        mapping = {
            "debug": cls.DEBUG,
            "info": cls.INFO,
            "warning": cls.WARNING,
            "warn": cls.WARNING,
            "error": cls.ERROR,
            "critical": cls.CRITICAL,
            "fatal": cls.CRITICAL,
        }
        return mapping.get(level.lower(), cls.WARNING)


class ConsoleFormatter(logging.Formatter):
    """``2026-01-02 10:00:00 DEBUG    [culturekit.engine] message``"""

    def __init__(self, timestamp_format: str = "%Y-%m-%d %H:%M:%S") -> None:
        super().__init__()
        self._timestamp_format = timestamp_format

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).strftime(self._timestamp_format)
        line = f"{ts} {record.levelname.ljust(8)} [{record.name}] {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


def configure_logging(
    level: str | int = LogLevel.WARNING,
    *,
    format: str = "console",
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the ``culturekit`` logger.

    Calling again replaces the handler installed by the previous call.

    Args:
        level: Level name or number.
        format: Output format ("console" or "json").
        stream: Output stream (default: stderr).

    Returns:
        The configured ``culturekit`` logger.
    """
    global _handler

    if isinstance(level, str):
        level = LogLevel.from_string(level)
    formatter: logging.Formatter = JsonFormatter() if format == "json" else ConsoleFormatter()

    with _lock:
        logger = logging.getLogger(ROOT_LOGGER)
        if _handler is not None:
            logger.removeHandler(_handler)
        _handler = logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(formatter)
        logger.addHandler(_handler)
        logger.setLevel(int(level))
        return logger


def reset_logging() -> None:
    """Remove the handler installed by :func:`configure_logging`."""
    global _handler

    with _lock:
        logger = logging.getLogger(ROOT_LOGGER)
        if _handler is not None:
            logger.removeHandler(_handler)
            _handler = None
        logger.setLevel(logging.NOTSET)
