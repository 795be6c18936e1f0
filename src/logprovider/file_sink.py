"""
Plain-text file sink with day-based rotation.

One current file per ``(application_name, folder)``:
``{folder}/{application_name}Log.txt``. The first write of a new day moves
the previous day's file to ``{yyyyMMdd}_{application_name}Log.txt``.
Failed writes are diverted to ``{application_name}ErrorLog.txt``.
"""

from __future__ import annotations

import logging
import os
import shutil
import threading
from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import Callable, Optional

_logger = logging.getLogger(__name__)

SEPARATOR = "-" * 119
NEWLINE = "\r\n"
TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"
ROTATED_DATE_FORMAT = "%Y%m%d"


# =============================================================================
# Record Model
# =============================================================================


@dataclass
class LogFileRecord:
    """A single entry destined for the text log of one application."""

    message: str
    application_name: str
    folder: Path | str
    machine_identifier: Optional[str] = None
    backup_time: Optional[datetime] = None

    @property
    def log_path(self) -> Path:
        return Path(self.folder) / f"{self.application_name}Log.txt"

    @property
    def error_log_path(self) -> Path:
        return Path(self.folder) / f"{self.application_name}ErrorLog.txt"

    def rotated_path(self, modified: date) -> Path:
        """Archive name for a log last written on ``modified``."""
        return Path(self.folder) / f"{modified.strftime(ROTATED_DATE_FORMAT)}_{self.application_name}Log.txt"

    def mark_backed_up(self, now: datetime) -> None:
        self.backup_time = datetime.combine(now.date(), time.min)


def format_record(
    message: str,
    machine_identifier: Optional[str],
    timestamp: datetime,
    error: Optional[str] = None,
) -> str:
    """Render a record: ``timestamp TAB [machine TAB] message`` plus separators."""
    parts = [timestamp.strftime(TIMESTAMP_FORMAT), "\t"]
    if machine_identifier:
        parts += [machine_identifier, "\t"]
    parts += [message, NEWLINE, SEPARATOR, NEWLINE]
    if error is not None:
        parts += [error, NEWLINE, SEPARATOR, NEWLINE]
    return "".join(parts)


# =============================================================================
# Per-file Locks
# =============================================================================

_file_locks: dict[str, threading.Lock] = {}
_file_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = os.path.normcase(os.path.abspath(path))
    with _file_locks_guard:
        lock = _file_locks.get(key)
        if lock is None:
            lock = _file_locks[key] = threading.Lock()
        return lock


# =============================================================================
# Sink
# =============================================================================


class FileSink:
    """Appends records to the per-application log file.

    ``write_entry`` never raises: failures go to the error log, and a
    failure there is dropped.

    Args:
        clock: Returns the current local time (default: ``datetime.now``).
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or datetime.now

    def write_entry(self, record: LogFileRecord) -> None:
        with _lock_for(record.log_path):
            try:
                now = self._clock()
                self._rotate_if_stale(record, now)
                self._append(record.log_path, format_record(record.message, record.machine_identifier, now))
            except Exception as exc:
                self._divert(record, exc)

    def _rotate_if_stale(self, record: LogFileRecord, now: datetime) -> bool:
        path = record.log_path
        if not path.exists():
            return False

        modified = datetime.fromtimestamp(path.stat().st_mtime).date()
        if modified >= now.date():
            return False

        target = record.rotated_path(modified)
        shutil.copy2(path, target)
        record.mark_backed_up(now)
        path.unlink()
        _logger.debug("Rotated %s to %s", path, target)
        return True

    @staticmethod
    def _append(path: Path, content: str) -> None:
        with open(path, "a", encoding="utf-8", newline="") as handle:
            handle.write(content)

    def _divert(self, record: LogFileRecord, exc: Exception) -> None:
        try:
            content = format_record(record.message, record.machine_identifier, self._clock(), error=str(exc))
            self._append(record.error_log_path, content)
            _logger.warning("Log write to %s failed, diverted to %s: %s", record.log_path, record.error_log_path, exc)
        except Exception:
            _logger.debug("Error log write to %s failed", record.error_log_path, exc_info=True)


__all__ = ["FileSink", "LogFileRecord", "SEPARATOR", "format_record"]
