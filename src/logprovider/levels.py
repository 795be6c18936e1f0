"""
Severity levels shared by every sink.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Ordered severities, ordinal 0 (Trace) to 5 (Critical)."""

    TRACE = 0
    DEBUG = 1
    INFORMATION = 2
    WARNING = 3
    ERROR = 4
    CRITICAL = 5

    @classmethod
    def parse(cls, value: Any) -> "LogLevel":
        """Coerce an ordinal or a level name; anything unknown becomes TRACE."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return cls.TRACE
        if isinstance(value, str):
            text = value.strip()
            if text.lstrip("-").isdigit():
                value = int(text)
            else:
                return _ALIASES.get(text.lower(), cls.TRACE)
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                return cls.TRACE
        return cls.TRACE

    @property
    def label(self) -> str:
        """Display name used in file records, e.g. ``Information``."""
        return self.name.capitalize()

    @property
    def stdlib_level(self) -> int:
        return _STDLIB_LEVELS[self]

    @property
    def method_name(self) -> str:
        """Name of the structlog method that emits this severity."""
        return _METHOD_NAMES[self]


_ALIASES = {
    "trace": LogLevel.TRACE,
    "debug": LogLevel.DEBUG,
    "info": LogLevel.INFORMATION,
    "information": LogLevel.INFORMATION,
    "warn": LogLevel.WARNING,
    "warning": LogLevel.WARNING,
    "error": LogLevel.ERROR,
    "critical": LogLevel.CRITICAL,
}

# structlog only ships filtering loggers for the stdlib levels, so TRACE
# filters at NOTSET and is told apart from DEBUG by a processor.
_STDLIB_LEVELS = {
    LogLevel.TRACE: logging.NOTSET,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFORMATION: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.CRITICAL: logging.CRITICAL,
}

_METHOD_NAMES = {
    LogLevel.TRACE: "debug",
    LogLevel.DEBUG: "debug",
    LogLevel.INFORMATION: "info",
    LogLevel.WARNING: "warning",
    LogLevel.ERROR: "error",
    LogLevel.CRITICAL: "critical",
}
