"""
logprovider Configuration Module.

Nested Settings Pattern: each sub-module is an independent concern with its
own environment variable prefix.

Multi-Environment Support:
    Set `LP_ENV` (development, testing, staging, production) to choose the
    .env files, loaded in this order (later overrides earlier):
    1. .env
    2. .env.local
    3. .env.{environment}
    4. .env.{environment}.local

Usage:
    from logprovider.config import settings

    settings.logging.application_name
    settings.logging.to_options()
"""

from functools import cached_property
import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import LoggingSettings


def _get_env_files() -> tuple[str, ...]:
    """Determine which .env files to load based on LP_ENV."""
    env = os.getenv("LP_ENV", "development")
    return (
        ".env",
        ".env.local",
        f".env.{env}",
        f".env.{env}.local",
    )


class Settings(BaseSettings):
    """Composite settings aggregating the configuration domains."""

    model_config = SettingsConfigDict(
        env_file=_get_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def logging(self) -> LoggingSettings:
        return LoggingSettings(_env_file=_get_env_files())


# Singleton instance
settings = Settings()

__all__ = [
    "LoggingSettings",
    "Settings",
    "settings",
]
