"""
Immutable dispatcher options.

A dispatcher's options never change after construction; build a new
dispatcher to reconfigure.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from logprovider.exceptions import ConfigurationError
from logprovider.levels import LogLevel

DEFAULT_LOG_NAME = "Application"


class LoggerOptions(BaseModel):
    """Sink configuration of one ``LogDispatcher``.

    ``file_folder_path`` may be empty, meaning the per-user default folder.
    ``caller`` overrides stack-based caller resolution.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    application_name: str
    log_name: str = DEFAULT_LOG_NAME
    minimum_level: LogLevel = LogLevel.TRACE
    enable_file_logging: bool = False
    file_folder_path: str = ""
    redact_sensitive_data: bool = False
    caller: Optional[str] = None
    machine_identifier: Optional[str] = None
    write_test_entry: bool = True

    @field_validator("application_name")
    @classmethod
    def _require_application_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("application_name must not be empty")
        return value

    @field_validator("log_name", mode="before")
    @classmethod
    def _default_log_name(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_LOG_NAME
        return value

    @field_validator("minimum_level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> LogLevel:
        return LogLevel.parse(value)

    @field_validator("file_folder_path", mode="before")
    @classmethod
    def _normalize_folder(cls, value: Any) -> Any:
        return "" if value is None else str(value)

    @classmethod
    def build(cls, **values: Any) -> "LoggerOptions":
        """Validate ``values``, raising ``ConfigurationError`` on failure."""
        try:
            return cls(**values)
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or None
            raise ConfigurationError(f"Invalid logger options: {first.get('msg')}", field=field) from exc


__all__ = ["DEFAULT_LOG_NAME", "LoggerOptions"]
