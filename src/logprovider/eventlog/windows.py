"""
Windows Event Log backend (pywin32).

Sources live in the registry under
``HKLM\\SYSTEM\\CurrentControlSet\\Services\\EventLog\\<log>\\<source>``.
"""

from __future__ import annotations

import winreg

import pywintypes
import win32evtlog
import win32evtlogutil

from .base import EventLogBackend, EventLogEntryType

EVENTLOG_KEY = r"SYSTEM\CurrentControlSet\Services\EventLog"
ERROR_ACCESS_DENIED = 5

_ENTRY_TYPES = {
    EventLogEntryType.ERROR: win32evtlog.EVENTLOG_ERROR_TYPE,
    EventLogEntryType.WARNING: win32evtlog.EVENTLOG_WARNING_TYPE,
    EventLogEntryType.INFORMATION: win32evtlog.EVENTLOG_INFORMATION_TYPE,
}


def _iter_subkeys(key: winreg.HKEYType):
    index = 0
    while True:
        try:
            yield winreg.EnumKey(key, index)
        except OSError:
            return
        index += 1


class WindowsEventLog(EventLogBackend):
    """Event Log access through the registry and ``ReportEvent``."""

    def __init__(self, machine_name: str | None = None):
        self._machine_name = machine_name

    def _open_root(self) -> winreg.HKEYType:
        hive = winreg.ConnectRegistry(self._machine_name, winreg.HKEY_LOCAL_MACHINE)
        return winreg.OpenKey(hive, EVENTLOG_KEY)

    def log_name_from_source_name(self, source_name: str) -> str:
        # winreg raises PermissionError when a log key (e.g. Security) is unreadable
        with self._open_root() as root:
            for log_name in _iter_subkeys(root):
                with winreg.OpenKey(root, log_name) as log_key:
                    for candidate in _iter_subkeys(log_key):
                        if candidate.lower() == source_name.lower():
                            return log_name
        return ""

    def source_exists(self, source_name: str) -> bool:
        return bool(self.log_name_from_source_name(source_name))

    def create_event_source(self, source_name: str, log_name: str) -> None:
        try:
            win32evtlogutil.AddSourceToRegistry(source_name, eventLogType=log_name)
        except pywintypes.error as exc:
            if exc.winerror == ERROR_ACCESS_DENIED:
                raise PermissionError(exc.strerror) from exc
            raise

    def write_entry(self, source_name: str, message: str, entry_type: EventLogEntryType) -> None:
        win32evtlogutil.ReportEvent(
            source_name,
            0,
            eventType=_ENTRY_TYPES[entry_type],
            strings=[message],
        )
