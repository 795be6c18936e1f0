"""
Unified exception hierarchy for logprovider.

Only configuration problems ever reach the host application; every other
error is recovered inside the sink that raised it.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class LogProviderError(Exception):
    """Base class for all logprovider errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ConfigurationError(LogProviderError):
    """Raised at construction time when an explicitly validated option is invalid."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)


class SourceMismatchError(LogProviderError):
    """An event-log source is already bound to a different log."""

    def __init__(self, *, source_name: str, current_log: str, expected_log: str) -> None:
        message = (
            f"Source '{source_name}' exists in log '{current_log}', not '{expected_log}'. "
            "Delete the existing source or use a different name."
        )
        details = {
            "source_name": source_name,
            "current_log": current_log,
            "expected_log": expected_log,
        }
        super().__init__(message, code="SOURCE_MISMATCH", details=details)


class EventLogUnavailableError(LogProviderError):
    """The OS event-log subsystem cannot be used on this host."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Event log unavailable: {reason}", code="EVENT_LOG_UNAVAILABLE")
