"""
Logging Configuration.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from logprovider.levels import LogLevel
from logprovider.logging.sinks import LogFormat


class LoggingSettings(BaseSettings):
    """Dispatcher configuration read from ``LP_LOG_*`` variables."""

    model_config = SettingsConfigDict(
        env_prefix="LP_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    application_name: str = Field(default="LoggingProvider", description="Event source and log file name")
    log_name: str = Field(default="Application", description="Event log the source is bound to")
    minimum_level: LogLevel = Field(default=LogLevel.TRACE, description="Ordinal 0-5 or level name")
    enable_file_logging: bool = Field(default=False, description="Write entries to the text log")
    file_folder_path: str = Field(default="", description="Folder for text logs; empty uses the per-user default")
    redact_sensitive_data: bool = Field(default=False, description="Mask emails, passwords and keys")
    machine_identifier: Optional[str] = Field(default=None, description="Written into each text log record")
    console_format: LogFormat = Field(default=LogFormat.CONSOLE, description="Console output format")

    @field_validator("minimum_level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> LogLevel:
        return LogLevel.parse(value)

    def to_options(self, **overrides: Any):
        """Build immutable dispatcher options from these settings."""
        from logprovider.options import LoggerOptions

        values = self.model_dump(exclude={"console_format"})
        values.update(overrides)
        return LoggerOptions.build(**values)
