"""
Core structured-logging configuration and the process-wide logger factory.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from structlog.typing import EventDict, FilteringBoundLogger, WrappedLogger

from logprovider.eventlog import EventLogBackend, default_backend
from logprovider.levels import LogLevel

from .sinks import BaseSink, EventLogSink, LogFormat, StdioSink

# =============================================================================
# Structlog Processors
# =============================================================================


def apply_trace_level(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Relabel trace events and drop them below the logger's minimum level."""
    minimum = event_dict.pop("_minimum_level", LogLevel.TRACE)
    if event_dict.pop("_trace", False):
        if minimum > LogLevel.TRACE:
            raise structlog.DropEvent
        event_dict["level"] = "trace"
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log event."""
    event_dict["logger"] = event_dict.pop("_name", "root")
    return event_dict


def rename_event_key(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename 'event' to 'message'."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


class _NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


_NOP_FILE = _NopFile()


# =============================================================================
# Logger Factory
# =============================================================================


class LoggerFactory:
    """Owns the console and event-log sinks shared by every logger.

    Args:
        fmt: Console format, "console" or "json".
        stream: Console stream (default: stderr).
        backend: Event-log backend (default: the platform backend).
    """

    def __init__(
        self,
        *,
        fmt: LogFormat | str = LogFormat.CONSOLE,
        stream: Any = None,
        backend: Optional[EventLogBackend] = None,
    ):
        self.backend = backend if backend is not None else default_backend()
        self._sinks: list[BaseSink] = [StdioSink(fmt=fmt, stream=stream), EventLogSink(self.backend)]
        self._processors = [
            structlog.stdlib.add_log_level,
            apply_trace_level,
            add_timestamp,
            add_logger_name,
            rename_event_key,
            structlog.processors.format_exc_info,
            self._render,
        ]

    @property
    def sinks(self) -> list[BaseSink]:
        return list(self._sinks)

    def _render(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        """Render to every sink. Returns empty to suppress default output."""
        for sink in self._sinks:
            try:
                sink.emit(event_dict)
            except Exception:
                pass  # a failing sink never reaches the caller or the other sinks
        return ""

    def create_logger(
        self,
        name: str,
        *,
        minimum_level: LogLevel | int | str = LogLevel.TRACE,
        source: Optional[str] = None,
        log_name: Optional[str] = None,
    ) -> FilteringBoundLogger:
        """Create a logger for ``name`` filtered at ``minimum_level``.

        ``source`` and ``log_name`` route entries to the OS event log; leave
        ``source`` unset to keep the logger off the event log.
        """
        level = LogLevel.parse(minimum_level)
        return structlog.wrap_logger(
            structlog.PrintLogger(file=_NOP_FILE),
            processors=self._processors,
            wrapper_class=structlog.make_filtering_bound_logger(level.stdlib_level),
            context_class=dict,
            cache_logger_on_first_use=False,
            _name=name,
            _minimum_level=level,
            event_source=source,
            event_log=log_name,
        )

    def close(self) -> None:
        for sink in self._sinks:
            sink.close()


# =============================================================================
# Global State
# =============================================================================

_factory: Optional[LoggerFactory] = None
_factory_lock = threading.Lock()


def get_logger_factory() -> LoggerFactory:
    """Return the process-wide factory, creating it on first use."""
    global _factory
    if _factory is None:
        with _factory_lock:
            if _factory is None:
                from logprovider.config import settings

                _factory = LoggerFactory(fmt=settings.logging.console_format)
    return _factory


def reset_logger_factory() -> None:
    """Close and forget the process-wide factory."""
    global _factory
    with _factory_lock:
        if _factory is not None:
            _factory.close()
        _factory = None


def get_logger(name: str | None = None, **kwargs: Any) -> FilteringBoundLogger:
    """Get a structured logger from the process-wide factory."""
    return get_logger_factory().create_logger(name or "root", **kwargs)
