"""
OS event-log integration.

Backends expose ``source_exists``, ``create_event_source``,
``log_name_from_source_name`` and ``write_entry``; the reconciler
registers the application's source before first use.
"""

from __future__ import annotations

import sys

from .base import EventLogBackend, EventLogEntryType, UnavailableEventLog
from .reconciler import ADMIN_PRIVILEGES_MESSAGE, EventSourceReconciler, SourceState


def default_backend() -> EventLogBackend:
    """Backend for the current platform, or an unavailable stand-in."""
    try:
        if sys.platform == "win32":
            from .windows import WindowsEventLog

            return WindowsEventLog()

        from .posix import SyslogEventLog

        return SyslogEventLog()
    except ImportError as exc:
        return UnavailableEventLog(str(exc))


__all__ = [
    "ADMIN_PRIVILEGES_MESSAGE",
    "EventLogBackend",
    "EventLogEntryType",
    "EventSourceReconciler",
    "SourceState",
    "UnavailableEventLog",
    "default_backend",
]
