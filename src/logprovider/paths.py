"""
Default locations for log files and the event-source registry.

Policy:
- Windows: ``%LOCALAPPDATA%/CustomLoggingProvider``
- elsewhere: ``$XDG_DATA_HOME/CustomLoggingProvider`` (``~/.local/share`` when unset)
- ``LP_DATA_DIR`` overrides both.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Callable, Final


DEFAULT_FOLDER_NAME: Final[str] = "CustomLoggingProvider"
_ENV_DATA_DIR: Final[str] = "LP_DATA_DIR"


def resolve_overridable_path(
    *,
    explicit_path: Path | str | None,
    env: Mapping[str, str] | None,
    env_var: str | None,
    default_factory: Callable[[], Path],
) -> Path:
    """Resolve a path honoring explicit and environment overrides."""

    if explicit_path is not None and str(explicit_path).strip():
        return Path(explicit_path).expanduser().resolve()

    mapping = env if env is not None else os.environ
    if env_var:
        candidate = (mapping.get(env_var) or "").strip()
        if candidate:
            return Path(candidate).expanduser().resolve()

    return default_factory().expanduser().resolve()


def local_app_data_dir(env: Mapping[str, str] | None = None) -> Path:
    """Per-user local application-data directory for this platform."""

    mapping = env if env is not None else os.environ
    if sys.platform == "win32":
        base = mapping.get("LOCALAPPDATA") or ""
        return Path(base) if base.strip() else Path.home() / "AppData" / "Local"
    base = mapping.get("XDG_DATA_HOME") or ""
    return Path(base) if base.strip() else Path.home() / ".local" / "share"


def default_log_folder(env: Mapping[str, str] | None = None) -> Path:
    """Get the safe default folder for log files."""

    return resolve_overridable_path(
        explicit_path=None,
        env=env,
        env_var=_ENV_DATA_DIR,
        default_factory=lambda: local_app_data_dir(env) / DEFAULT_FOLDER_NAME,
    )


def ensure_folder(path: Path | str) -> Path:
    """Create ``path`` (and parents) if missing and return it."""

    folder = Path(path)
    folder.mkdir(parents=True, exist_ok=True)
    return folder


__all__ = [
    "DEFAULT_FOLDER_NAME",
    "default_log_folder",
    "ensure_folder",
    "local_app_data_dir",
    "resolve_overridable_path",
]
