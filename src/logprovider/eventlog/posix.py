"""
POSIX event-log backend on top of the syslog daemon.

syslog has no notion of registered sources, so the source → log binding
is kept in a small JSON registry next to the log files. Log names map to
syslog facilities.
"""

from __future__ import annotations

import logging
import syslog
import threading
from pathlib import Path
from typing import Optional

import orjson

from logprovider.paths import default_log_folder

from .base import EventLogBackend, EventLogEntryType

_logger = logging.getLogger(__name__)

REGISTRY_FILENAME = "eventlog_sources.json"

_FACILITIES = {
    "application": syslog.LOG_USER,
    "system": syslog.LOG_DAEMON,
    "security": syslog.LOG_AUTH,
}

_PRIORITIES = {
    EventLogEntryType.ERROR: syslog.LOG_ERR,
    EventLogEntryType.WARNING: syslog.LOG_WARNING,
    EventLogEntryType.INFORMATION: syslog.LOG_INFO,
}


class SyslogEventLog(EventLogBackend):
    """Source registry in JSON, entries through ``syslog(3)``.

    Args:
        registry_path: JSON file holding ``{source: log_name}``
            (default: ``<default log folder>/eventlog_sources.json``).
    """

    def __init__(self, registry_path: Optional[Path | str] = None):
        self._registry_path = Path(registry_path) if registry_path else default_log_folder() / REGISTRY_FILENAME
        self._lock = threading.Lock()

    @property
    def registry_path(self) -> Path:
        return self._registry_path

    def _load(self) -> dict[str, str]:
        if not self._registry_path.exists():
            return {}
        data = orjson.loads(self._registry_path.read_bytes())
        return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}

    def _save(self, sources: dict[str, str]) -> None:
        self._registry_path.parent.mkdir(parents=True, exist_ok=True)
        self._registry_path.write_bytes(orjson.dumps(sources, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS))

    def log_name_from_source_name(self, source_name: str) -> str:
        wanted = source_name.lower()
        with self._lock:
            for source, log_name in self._load().items():
                if source.lower() == wanted:
                    return log_name
        return ""

    def source_exists(self, source_name: str) -> bool:
        return bool(self.log_name_from_source_name(source_name))

    def create_event_source(self, source_name: str, log_name: str) -> None:
        with self._lock:
            sources = self._load()
            if any(source.lower() == source_name.lower() for source in sources):
                raise ValueError(f"Source '{source_name}' already exists")
            sources[source_name] = log_name
            self._save(sources)
        _logger.debug("Registered syslog source %s for log %s", source_name, log_name)

    def write_entry(self, source_name: str, message: str, entry_type: EventLogEntryType) -> None:
        log_name = self.log_name_from_source_name(source_name)
        facility = _FACILITIES.get(log_name.lower(), syslog.LOG_LOCAL0)
        with self._lock:
            syslog.openlog(ident=source_name, logoption=syslog.LOG_PID, facility=facility)
            try:
                syslog.syslog(_PRIORITIES[entry_type], message)
            finally:
                syslog.closelog()
