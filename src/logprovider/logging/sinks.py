"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

import orjson
from structlog.typing import EventDict

from logprovider.eventlog.base import EventLogBackend, EventLogEntryType

from .formatters import ConsoleFormatter


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


def orjson_dumps(v: Any, *, default: Any = str) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    @abstractmethod
    def emit(self, event_dict: EventDict) -> None:
        """Emit a log event to the sink."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...


class StdioSink(BaseSink):
    """Console sink with configurable format.

    Args:
        fmt: Output format - "console" (colored human-readable) or "json"
        stream: Output stream (default: stderr)
    """

    def __init__(self, fmt: LogFormat | str = LogFormat.CONSOLE, stream: Any = None):
        self._fmt = LogFormat(fmt)
        self._stream = stream or sys.stderr
        self._lock = threading.Lock()

    def emit(self, event_dict: EventDict) -> None:
        if self._fmt is LogFormat.JSON:
            output = orjson_dumps(event_dict)
        else:
            use_color = bool(getattr(self._stream, "isatty", lambda: False)())
            output = ConsoleFormatter.format(event_dict, use_color=use_color)

        with self._lock:
            self._stream.write(output + "\n")
            self._stream.flush()

    def close(self) -> None:
        pass


class EventLogSink(BaseSink):
    """OS event-log sink.

    Entries are written under the ``event_source`` bound on the logger;
    events without one (source not reconciled) are skipped.
    """

    def __init__(self, backend: EventLogBackend):
        self._backend = backend

    @property
    def backend(self) -> EventLogBackend:
        return self._backend

    def emit(self, event_dict: EventDict) -> None:
        source = event_dict.get("event_source")
        if not source or not self._backend.available:
            return
        entry_type = EventLogEntryType.from_level(str(event_dict.get("level", "info")))
        self._backend.write_entry(source, str(event_dict.get("message", "")), entry_type)

    def close(self) -> None:
        pass
