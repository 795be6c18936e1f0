from __future__ import annotations

import io
import typing as t

import pytest

from logprovider.eventlog import EventLogBackend, EventLogEntryType
from logprovider.logging import LoggerFactory, reset_logger_factory


class RecordingEventLog(EventLogBackend):
    """In-memory event log that records every call."""

    def __init__(self, sources: dict[str, str] | None = None, *, deny: bool = False):
        self.sources = dict(sources or {})
        self.created: list[tuple[str, str]] = []
        self.entries: list[tuple[str, str, EventLogEntryType]] = []
        self.deny = deny

    def _check(self) -> None:
        if self.deny:
            raise PermissionError("access denied")

    def source_exists(self, source_name: str) -> bool:
        self._check()
        return bool(self.log_name_from_source_name(source_name))

    def create_event_source(self, source_name: str, log_name: str) -> None:
        self._check()
        self.sources[source_name] = log_name
        self.created.append((source_name, log_name))

    def log_name_from_source_name(self, source_name: str) -> str:
        for source, log_name in self.sources.items():
            if source.lower() == source_name.lower():
                return log_name
        return ""

    def write_entry(self, source_name: str, message: str, entry_type: EventLogEntryType) -> None:
        self.entries.append((source_name, message, entry_type))


@pytest.fixture(autouse=True)
def isolated_logging(tmp_path, monkeypatch) -> t.Iterator[None]:
    """Fresh process-wide factory and a private default data folder per test."""
    monkeypatch.setenv("LP_DATA_DIR", str(tmp_path / "data"))
    reset_logger_factory()
    yield
    reset_logger_factory()


@pytest.fixture
def event_log() -> RecordingEventLog:
    return RecordingEventLog()


@pytest.fixture
def console() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def factory(event_log, console) -> LoggerFactory:
    return LoggerFactory(stream=console, backend=event_log)

