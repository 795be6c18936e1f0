"""
Event-log backend abstraction.

The reconciler and the event-log sink depend only on these four
operations, mirroring the OS event-log API.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from logprovider.exceptions import EventLogUnavailableError


class EventLogEntryType(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"

    @classmethod
    def from_level(cls, level: str) -> "EventLogEntryType":
        """Map a structlog level name onto an entry type."""
        name = level.lower()
        if name in {"error", "critical", "exception"}:
            return cls.ERROR
        if name in {"warning", "warn"}:
            return cls.WARNING
        return cls.INFORMATION


class EventLogBackend(ABC):
    """Abstract OS event-log subsystem."""

    available: bool = True

    @abstractmethod
    def source_exists(self, source_name: str) -> bool:
        """Whether ``source_name`` is registered in any log."""
        ...

    @abstractmethod
    def create_event_source(self, source_name: str, log_name: str) -> None:
        """Register ``source_name`` and bind it to ``log_name``."""
        ...

    @abstractmethod
    def log_name_from_source_name(self, source_name: str) -> str:
        """Log the source is bound to, or ``""`` when unregistered."""
        ...

    @abstractmethod
    def write_entry(self, source_name: str, message: str, entry_type: EventLogEntryType) -> None:
        """Write one entry under ``source_name``."""
        ...


class UnavailableEventLog(EventLogBackend):
    """Stand-in used when no event-log subsystem can be loaded.

    Every operation raises, so reconciliation reports the reason once and
    the event-log sink stays silent.
    """

    available = False

    def __init__(self, reason: str):
        self.reason = reason

    def _fail(self) -> EventLogUnavailableError:
        return EventLogUnavailableError(self.reason)

    def source_exists(self, source_name: str) -> bool:
        raise self._fail()

    def create_event_source(self, source_name: str, log_name: str) -> None:
        raise self._fail()

    def log_name_from_source_name(self, source_name: str) -> str:
        raise self._fail()

    def write_entry(self, source_name: str, message: str, entry_type: EventLogEntryType) -> None:
        raise self._fail()
