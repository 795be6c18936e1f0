"""
Structured logging for logprovider.

One process-wide factory feeds two sinks:
- stdio: console (human-readable or JSON)
- eventlog: OS event log (Windows Event Log or syslog)

Design Pattern: Strategy Pattern for sink abstraction.
Library: structlog + orjson for JSON serialization.
"""

from .core import LoggerFactory, get_logger, get_logger_factory, reset_logger_factory
from .sinks import BaseSink, EventLogSink, LogFormat, StdioSink

__all__ = [
    "BaseSink",
    "EventLogSink",
    "LogFormat",
    "LoggerFactory",
    "StdioSink",
    "get_logger",
    "get_logger_factory",
    "reset_logger_factory",
]
