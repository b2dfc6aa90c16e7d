"""Helpers for safe debug logging.

Device tokens identify a physical device and custom data may carry user
attributes.  This module redacts those fields before they reach DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "token",
        "devicetoken",
        "data",
        "authorization",
        "cookie",
    }
)


def redact_token(token: str, *, keep: int = 6) -> str:
    """Shorten a device token to its first characters for logging."""
    if not token:
        return "<empty>"
    if len(token) <= keep:
        return "<redacted>"
    return f"{token[:keep]}…<{len(token)} chars>"


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower() in _SENSITIVE_VALUE_KEYS and isinstance(v, str):
                redacted[key] = redact_token(v)
            elif key.lower() in _SENSITIVE_VALUE_KEYS and not isinstance(v, Mapping):
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
