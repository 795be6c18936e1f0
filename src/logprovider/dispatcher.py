"""
Multi-sink logging façade.

One call fans out to the structured logger (console and OS event log) and,
when enabled, the text log file. The sinks are independent: a failure in
one never stops the other, and nothing propagates to the caller.

Usage:
    from logprovider import LogDispatcher, LogLevel

    log = LogDispatcher("Orders", "Application", LogLevel.DEBUG, True, "/tmp/logs", True)
    log.log_error("payment failed for user a@b.com")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from logprovider.caller import resolve_caller_identity
from logprovider.eventlog import EventSourceReconciler, SourceState
from logprovider.file_sink import FileSink, LogFileRecord
from logprovider.levels import LogLevel
from logprovider.logging import LoggerFactory, get_logger_factory
from logprovider.options import DEFAULT_LOG_NAME, LoggerOptions
from logprovider.paths import default_log_folder, ensure_folder
from logprovider.redaction import redact

if TYPE_CHECKING:
    from logprovider.config import Settings

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogEntry:
    """One logging call, discarded once dispatched."""

    timestamp: datetime
    level: LogLevel
    caller_identity: str
    application_name: str
    raw_message: str
    redacted_message: str


class LogDispatcher:
    """Entry point used by application code.

    Construction validates the options, resolves the caller identity and
    the file folder, and reconciles the event-log source once. Only an
    invalid application name raises (``ConfigurationError``).

    The file sink has no level filter: every call reaches it when file
    logging is enabled, while the structured logger filters at
    ``minimum_level``.
    """

    def __init__(
        self,
        application_name: str,
        log_name: str = DEFAULT_LOG_NAME,
        minimum_level: LogLevel | int | str = LogLevel.TRACE,
        enable_file_logging: bool = False,
        file_folder_path: str | Path = "",
        redact_sensitive_data: bool = False,
        *,
        caller: Optional[str] = None,
        machine_identifier: Optional[str] = None,
        write_test_entry: bool = True,
        factory: Optional[LoggerFactory] = None,
        file_sink: Optional[FileSink] = None,
    ):
        options = LoggerOptions.build(
            application_name=application_name,
            log_name=log_name,
            minimum_level=minimum_level,
            enable_file_logging=enable_file_logging,
            file_folder_path=file_folder_path,
            redact_sensitive_data=redact_sensitive_data,
            caller=caller,
            machine_identifier=machine_identifier,
            write_test_entry=write_test_entry,
        )
        self._setup(options, factory, file_sink)

    @classmethod
    def from_options(
        cls,
        options: LoggerOptions,
        *,
        factory: Optional[LoggerFactory] = None,
        file_sink: Optional[FileSink] = None,
    ) -> "LogDispatcher":
        dispatcher = cls.__new__(cls)
        dispatcher._setup(options, factory, file_sink)
        return dispatcher

    @classmethod
    def from_settings(
        cls,
        settings: Optional["Settings"] = None,
        *,
        factory: Optional[LoggerFactory] = None,
        **overrides: Any,
    ) -> "LogDispatcher":
        """Build a dispatcher from ``LP_LOG_*`` settings."""
        if settings is None:
            from logprovider.config import settings as default_settings

            settings = default_settings
        options = settings.logging.to_options(**overrides)
        return cls.from_options(options, factory=factory)

    def _setup(
        self,
        options: LoggerOptions,
        factory: Optional[LoggerFactory],
        file_sink: Optional[FileSink],
    ) -> None:
        self._options = options
        self._caller_identity = resolve_caller_identity(options.caller)
        self._file_folder = self._resolve_folder(options.file_folder_path)
        self._file_sink = file_sink or FileSink()

        self._factory = factory or get_logger_factory()
        try:
            reconciler = EventSourceReconciler(self._factory.backend, self._file_sink, options.machine_identifier)
            self._source_state = reconciler.ensure_source(
                options.application_name,
                options.log_name,
                options.write_test_entry,
                self._file_folder,
            )
        except Exception:
            _logger.debug("Event source reconciliation failed", exc_info=True)
            self._source_state = SourceState.FAILED

        self._logger = self._factory.create_logger(
            self._caller_identity,
            minimum_level=options.minimum_level,
            source=options.application_name if self._source_state.usable else None,
            log_name=options.log_name,
        )

    @staticmethod
    def _resolve_folder(folder_path: str) -> Path:
        if folder_path.strip():
            return Path(folder_path)
        folder = default_log_folder()
        try:
            ensure_folder(folder)
        except OSError as exc:
            _logger.warning("Cannot create default log folder %s: %s", folder, exc)
        return folder

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def options(self) -> LoggerOptions:
        return self._options

    @property
    def caller_identity(self) -> str:
        return self._caller_identity

    @property
    def file_folder(self) -> Path:
        return self._file_folder

    @property
    def log_file_path(self) -> Path:
        return self._file_folder / f"{self._options.application_name}Log.txt"

    @property
    def source_state(self) -> SourceState:
        return self._source_state

    # =========================================================================
    # Logging API
    # =========================================================================

    def log_trace(self, message: str, action_name: Optional[str] = None) -> None:
        self._log(LogLevel.TRACE, message, action_name)

    def log_debug(self, message: str, action_name: Optional[str] = None) -> None:
        self._log(LogLevel.DEBUG, message, action_name)

    def log_info(self, message: str, action_name: Optional[str] = None) -> None:
        self._log(LogLevel.INFORMATION, message, action_name)

    def log_warning(self, message: str, action_name: Optional[str] = None) -> None:
        self._log(LogLevel.WARNING, message, action_name)

    def log_error(self, message: str, action_name: Optional[str] = None) -> None:
        self._log(LogLevel.ERROR, message, action_name)

    def log_critical(self, message: str, action_name: Optional[str] = None) -> None:
        self._log(LogLevel.CRITICAL, message, action_name)

    def format_message(self, message: str, action_name: Optional[str] = None) -> str:
        """Structured-logger text: ``caller: message`` or ``caller - action: message``."""
        if action_name:
            return f"{self._caller_identity} - {action_name}: {message}"
        return f"{self._caller_identity}: {message}"

    def _log(self, level: LogLevel, message: str, action_name: Optional[str]) -> None:
        try:
            entry = self._build_entry(level, message)
        except Exception:
            _logger.debug("Could not build log entry", exc_info=True)
            return
        if self._options.enable_file_logging:
            self._write_file(entry)
        self._forward(entry, action_name)

    def _build_entry(self, level: LogLevel, message: str) -> LogEntry:
        raw = "" if message is None else str(message)
        return LogEntry(
            timestamp=datetime.now().replace(microsecond=0),
            level=level,
            caller_identity=self._caller_identity,
            application_name=self._options.application_name,
            raw_message=raw,
            redacted_message=redact(raw) if self._options.redact_sensitive_data else raw,
        )

    def _write_file(self, entry: LogEntry) -> None:
        try:
            record = LogFileRecord(
                message=f"[{entry.level.label}] {entry.redacted_message}",
                application_name=entry.application_name,
                folder=self._file_folder,
                machine_identifier=self._options.machine_identifier,
            )
            self._file_sink.write_entry(record)
        except Exception:
            _logger.debug("File sink write failed", exc_info=True)

    def _forward(self, entry: LogEntry, action_name: Optional[str]) -> None:
        try:
            method = getattr(self._logger, entry.level.method_name)
            text = self.format_message(entry.redacted_message, action_name)
            if entry.level is LogLevel.TRACE:
                method(text, _trace=True)
            else:
                method(text)
        except Exception:
            _logger.debug("Structured logger write failed", exc_info=True)


__all__ = ["LogDispatcher", "LogEntry"]
