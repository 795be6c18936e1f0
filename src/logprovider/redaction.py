"""
Sensitive data redaction.

Rules run in a fixed order: emails first, then ``password=`` pairs, then
long alphanumeric tokens, so a long email local part is still marked as
an email.
"""

from __future__ import annotations

import re
from typing import Optional

EMAIL_MARKER = "[REDACTED_EMAIL]"
PASSWORD_MARKER = "[REDACTED]"
KEY_MARKER = "[REDACTED_KEY]"

_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_PASSWORD_RE = re.compile(r"(password\s*=\s*)[^&\s]+", re.IGNORECASE)
_API_KEY_RE = re.compile(r"\b[A-Za-z0-9]{20,}\b")


def redact(text: Optional[str]) -> Optional[str]:
    """Mask emails, passwords and API-key-like tokens in ``text``.

    Empty or ``None`` input is returned unchanged.
    """
    if not text:
        return text

    output = _EMAIL_RE.sub(EMAIL_MARKER, text)
    output = _PASSWORD_RE.sub(lambda m: m.group(1) + PASSWORD_MARKER, output)
    output = _API_KEY_RE.sub(KEY_MARKER, output)
    return output


__all__ = ["EMAIL_MARKER", "KEY_MARKER", "PASSWORD_MARKER", "redact"]
