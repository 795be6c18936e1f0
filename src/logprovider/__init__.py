"""
logprovider: multi-sink application logging.

A single call reaches the console, the OS event log and a day-rotated text
file, with optional redaction of sensitive data.
"""

import logging as _stdlib_logging

from .caller import UNKNOWN_CALLER, resolve_caller_identity
from .dispatcher import LogDispatcher, LogEntry
from .eventlog import EventSourceReconciler, SourceState
from .exceptions import ConfigurationError, LogProviderError, SourceMismatchError
from .file_sink import FileSink, LogFileRecord
from .levels import LogLevel
from .options import LoggerOptions
from .redaction import redact

_stdlib_logging.getLogger(__name__).addHandler(_stdlib_logging.NullHandler())

__all__ = [
    "ConfigurationError",
    "EventSourceReconciler",
    "FileSink",
    "LogDispatcher",
    "LogEntry",
    "LogFileRecord",
    "LogLevel",
    "LogProviderError",
    "LoggerOptions",
    "SourceMismatchError",
    "SourceState",
    "UNKNOWN_CALLER",
    "redact",
    "resolve_caller_identity",
]
