"""Redaction of sensitive values before they reach the logs."""

from __future__ import annotations

import re

_MAX_REDACT_DEPTH = 10

# Substring match, case-insensitive.
SENSITIVE_KEY_MARKERS = ("password", "secret", "token", "authorization", "cookie")

# Control characters (newlines, tabs, ...) would let a caller forge log lines.
_CONTROL_CHAR_RE = re.compile(r"[\x00-\x08\x0a-\x1f\x7f]")


def redact_sensitive_fields(value: object, *, mask: str = "***", depth: int = 0) -> object:
    """Recursively replace values whose keys look sensitive."""
    if depth >= _MAX_REDACT_DEPTH:
        return mask
    if isinstance(value, dict):
        return {
            key: (
                mask
                if any(marker in str(key).lower() for marker in SENSITIVE_KEY_MARKERS)
                else redact_sensitive_fields(val, mask=mask, depth=depth + 1)
            )
            for key, val in value.items()
        }
    if isinstance(value, list):
        return [redact_sensitive_fields(item, mask=mask, depth=depth + 1) for item in value]
    return value


def sanitize_log_value(value: str) -> str:
    return _CONTROL_CHAR_RE.sub("_", value)
