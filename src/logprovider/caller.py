"""
Caller identity resolution.

An explicit identity always wins. Otherwise the stack is walked to the
first frame outside this package; inspection is best-effort and falls back
to ``UnknownCaller``.
"""

from __future__ import annotations

import inspect
from types import FrameType
from typing import Optional

UNKNOWN_CALLER = "UnknownCaller"

_INTERNAL_PACKAGE = "logprovider"
_MAX_DEPTH = 30


def _is_internal(module: str) -> bool:
    return module == _INTERNAL_PACKAGE or module.startswith(_INTERNAL_PACKAGE + ".")


def _describe(frame: FrameType) -> str:
    module = frame.f_globals.get("__name__", "") or "__main__"
    owner = frame.f_locals.get("self")
    if owner is not None:
        owner_type = type(owner)
        return f"{owner_type.__module__}.{owner_type.__qualname__}"
    owner = frame.f_locals.get("cls")
    if isinstance(owner, type):
        return f"{owner.__module__}.{owner.__qualname__}"
    if frame.f_code.co_name == "<module>":
        return module
    return f"{module}.{frame.f_code.co_name}"


def resolve_caller_identity(explicit: Optional[str] = None) -> str:
    """Fully-qualified name of the component that called into logprovider."""
    if explicit and explicit.strip():
        return explicit.strip()

    frame = inspect.currentframe()
    try:
        depth = 0
        while frame is not None and depth < _MAX_DEPTH:
            module = frame.f_globals.get("__name__", "")
            if not _is_internal(module):
                return _describe(frame)
            frame = frame.f_back
            depth += 1
    except Exception:
        return UNKNOWN_CALLER
    finally:
        del frame
    return UNKNOWN_CALLER


__all__ = ["UNKNOWN_CALLER", "resolve_caller_identity"]
