"""
Event-source reconciliation.

Makes sure an event-log source exists and is bound to the expected log
before the first entry is written. Outcomes are reported to the file sink,
since the structured logger may not be ready yet, and never raised.
"""

from __future__ import annotations

import logging
import socket
from enum import Enum
from pathlib import Path
from typing import Optional

from logprovider.exceptions import SourceMismatchError
from logprovider.file_sink import FileSink, LogFileRecord
from logprovider.paths import default_log_folder, ensure_folder

from .base import EventLogBackend, EventLogEntryType

_logger = logging.getLogger(__name__)

ADMIN_PRIVILEGES_MESSAGE = (
    "Administrator privileges are required to create or modify Event Log sources.\n"
    "Please run the application as Administrator and try again."
)
TEST_ENTRY_MESSAGE = "Event source created successfully."


class SourceState(str, Enum):
    """Terminal state of one reconciliation."""

    CREATED = "created"
    MATCHING = "matching"
    MISMATCHED = "mismatched"
    PERMISSION_DENIED = "permission_denied"
    FAILED = "failed"

    @property
    def usable(self) -> bool:
        """Whether entries may be written under the source afterwards."""
        return self in (SourceState.CREATED, SourceState.MATCHING)


def _format(message: str, is_test: bool) -> str:
    return f"[TEST] {message}" if is_test else message


class EventSourceReconciler:
    """Idempotent, privilege-aware event-source registration.

    Args:
        backend: OS event-log collaborator.
        file_sink: Where advisories are written (default: a new ``FileSink``).
        machine_identifier: Written into advisory records (default: host name).
    """

    def __init__(
        self,
        backend: EventLogBackend,
        file_sink: Optional[FileSink] = None,
        machine_identifier: Optional[str] = None,
    ):
        self._backend = backend
        self._file_sink = file_sink or FileSink()
        self._machine_identifier = machine_identifier or socket.gethostname()

    def ensure_source(
        self,
        source_name: str,
        log_name: str = "Application",
        write_test_entry: bool = True,
        fallback_folder: Path | str = "",
    ) -> SourceState:
        folder = self._resolve_folder(fallback_folder)
        try:
            if self._backend.source_exists(source_name):
                self._check_binding(source_name, log_name, folder, write_test_entry)
                return SourceState.MATCHING
            self._create(source_name, log_name, folder, write_test_entry)
            return SourceState.CREATED
        except SourceMismatchError as exc:
            _logger.warning("%s", exc)
            self._advise(_format(str(exc), write_test_entry), log_name, folder)
            return SourceState.MISMATCHED
        except PermissionError:
            self._advise(ADMIN_PRIVILEGES_MESSAGE, log_name, folder)
            return SourceState.PERMISSION_DENIED
        except Exception as exc:
            self._advise(_format(f"Unexpected error: {exc}", write_test_entry), log_name, folder)
            return SourceState.FAILED

    def _check_binding(self, source_name: str, log_name: str, folder: Path, is_test: bool) -> None:
        current = self._backend.log_name_from_source_name(source_name)
        if current.casefold() != log_name.casefold():
            raise SourceMismatchError(source_name=source_name, current_log=current, expected_log=log_name)

        message = f"Source '{source_name}' is already correctly registered in log '{log_name}'."
        _logger.info("%s", message)
        self._advise(_format(message, is_test), log_name, folder)

    def _create(self, source_name: str, log_name: str, folder: Path, write_test_entry: bool) -> None:
        self._backend.create_event_source(source_name, log_name)
        self._advise(
            _format(f"Source '{source_name}' created and linked to log '{log_name}'.", write_test_entry),
            log_name,
            folder,
        )

        if write_test_entry:
            self._backend.write_entry(source_name, TEST_ENTRY_MESSAGE, EventLogEntryType.INFORMATION)
            _logger.info(_format(f"Test log entry written to '{log_name}' with source '{source_name}'.", True))

    def _advise(self, message: str, log_name: str, folder: Path) -> None:
        record = LogFileRecord(
            message=message,
            application_name=log_name,
            folder=folder,
            machine_identifier=self._machine_identifier,
        )
        try:
            self._file_sink.write_entry(record)
        except Exception:
            _logger.debug("Advisory write to %s failed", record.log_path, exc_info=True)

    @staticmethod
    def _resolve_folder(folder: Path | str) -> Path:
        if str(folder).strip():
            return Path(folder)
        resolved = default_log_folder()
        try:
            ensure_folder(resolved)
        except OSError as exc:
            _logger.warning("Cannot create default log folder %s: %s", resolved, exc)
        return resolved
