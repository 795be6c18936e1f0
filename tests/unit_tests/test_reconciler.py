"""
Event-source reconciliation unit tests.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from logprovider.eventlog import (
    ADMIN_PRIVILEGES_MESSAGE,
    EventLogBackend,
    EventLogEntryType,
    EventSourceReconciler,
    SourceState,
    UnavailableEventLog,
)
from logprovider.file_sink import FileSink

from conftest import RecordingEventLog


def _advisories(folder, log_name: str = "Application") -> str:
    path = folder / f"{log_name}Log.txt"
    return path.read_bytes().decode("utf-8") if path.exists() else ""


@pytest.fixture
def reconciler_for(tmp_path):
    def build(backend: EventLogBackend) -> EventSourceReconciler:
        return EventSourceReconciler(backend, FileSink(), machine_identifier="HOST")

    return build


class TestUnregisteredSource:
    def test_source_is_created_with_test_entry(self, tmp_path, reconciler_for) -> None:
        backend = RecordingEventLog()

        state = reconciler_for(backend).ensure_source("App", "Application", True, tmp_path)

        assert state is SourceState.CREATED
        assert backend.created == [("App", "Application")]
        assert backend.entries == [("App", "Event source created successfully.", EventLogEntryType.INFORMATION)]
        assert "HOST\t[TEST] Source 'App' created and linked to log 'Application'." in _advisories(tmp_path)

    def test_no_test_entry_when_disabled(self, tmp_path, reconciler_for) -> None:
        backend = RecordingEventLog()

        state = reconciler_for(backend).ensure_source("App", "Application", False, tmp_path)

        assert state is SourceState.CREATED
        assert backend.entries == []
        advisory = _advisories(tmp_path)
        assert "Source 'App' created and linked to log 'Application'." in advisory
        assert "[TEST]" not in advisory


class TestRegisteredSource:
    def test_matching_source_is_idempotent(self, tmp_path, reconciler_for) -> None:
        backend = RecordingEventLog({"App": "Application"})
        reconciler = reconciler_for(backend)

        first = reconciler.ensure_source("App", "Application", True, tmp_path)
        second = reconciler.ensure_source("App", "Application", True, tmp_path)

        assert first is second is SourceState.MATCHING
        assert backend.created == []
        assert backend.sources == {"App": "Application"}
        assert _advisories(tmp_path).count("is already correctly registered in log 'Application'.") == 2

    def test_log_name_comparison_ignores_case(self, tmp_path, reconciler_for) -> None:
        backend = RecordingEventLog({"App": "application"})

        assert reconciler_for(backend).ensure_source("App", "Application", False, tmp_path) is SourceState.MATCHING

    def test_mismatched_source_is_reported_not_modified(self, tmp_path, reconciler_for) -> None:
        backend = RecordingEventLog({"App": "System"})

        state = reconciler_for(backend).ensure_source("App", "Application", False, tmp_path)

        assert state is SourceState.MISMATCHED
        assert backend.sources == {"App": "System"}
        assert backend.created == []
        advisory = _advisories(tmp_path)
        assert "Source 'App' exists in log 'System', not 'Application'." in advisory
        assert "Delete the existing source or use a different name." in advisory


class TestFailures:
    def test_permission_denied_writes_fixed_advisory(self, tmp_path, reconciler_for) -> None:
        backend = RecordingEventLog(deny=True)

        state = reconciler_for(backend).ensure_source("App", "Application", True, tmp_path)

        assert state is SourceState.PERMISSION_DENIED
        advisory = _advisories(tmp_path)
        assert ADMIN_PRIVILEGES_MESSAGE in advisory
        assert "[TEST]" not in advisory

    def test_unexpected_error_is_reported(self, tmp_path, reconciler_for) -> None:
        backend = MagicMock(spec=EventLogBackend)
        backend.source_exists.side_effect = RuntimeError("registry offline")

        state = reconciler_for(backend).ensure_source("App", "Application", True, tmp_path)

        assert state is SourceState.FAILED
        assert "[TEST] Unexpected error: registry offline" in _advisories(tmp_path)

    def test_unavailable_backend_fails_softly(self, tmp_path, reconciler_for) -> None:
        state = reconciler_for(UnavailableEventLog("no event log")).ensure_source("App", "Application", False, tmp_path)

        assert state is SourceState.FAILED
        assert "Unexpected error: Event log unavailable: no event log" in _advisories(tmp_path)

    def test_advisory_write_failure_never_raises(self, tmp_path, reconciler_for) -> None:
        missing = tmp_path / "missing"

        state = reconciler_for(RecordingEventLog()).ensure_source("App", "Application", True, missing)

        assert state is SourceState.CREATED
        assert not missing.exists()


class TestRaisingFileSink:
    @pytest.fixture
    def broken_sink(self) -> MagicMock:
        sink = MagicMock(spec=FileSink)
        sink.write_entry.side_effect = OSError("disk full")
        return sink

    def test_created_despite_advisory_failure(self, tmp_path, broken_sink) -> None:
        backend = RecordingEventLog()

        state = EventSourceReconciler(backend, broken_sink, "HOST").ensure_source("App", "Application", True, tmp_path)

        assert state is SourceState.CREATED
        assert backend.created == [("App", "Application")]
        assert broken_sink.write_entry.call_count == 1

    def test_failure_advisory_error_does_not_escape(self, tmp_path, broken_sink) -> None:
        backend = MagicMock(spec=EventLogBackend)
        backend.source_exists.side_effect = RuntimeError("registry offline")

        state = EventSourceReconciler(backend, broken_sink, "HOST").ensure_source("App", "Application", True, tmp_path)

        assert state is SourceState.FAILED

    def test_permission_advisory_error_does_not_escape(self, tmp_path, broken_sink) -> None:
        reconciler = EventSourceReconciler(RecordingEventLog(deny=True), broken_sink, "HOST")

        assert reconciler.ensure_source("App", "Application", False, tmp_path) is SourceState.PERMISSION_DENIED


class TestFallbackFolder:
    def test_empty_folder_uses_default_data_dir(self, tmp_path, reconciler_for) -> None:
        reconciler_for(RecordingEventLog()).ensure_source("App", "Application", False, "")

        default_folder = (tmp_path / "data").resolve()
        assert (default_folder / "ApplicationLog.txt").exists()


@pytest.mark.parametrize(
    "state,usable",
    [
        (SourceState.CREATED, True),
        (SourceState.MATCHING, True),
        (SourceState.MISMATCHED, False),
        (SourceState.PERMISSION_DENIED, False),
        (SourceState.FAILED, False),
    ],
)
def test_usable_states(state, usable) -> None:
    assert state.usable is usable
