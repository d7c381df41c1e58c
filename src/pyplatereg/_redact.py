"""Helpers for safe debug logging.

Registry payloads carry personal contact details (email, phone) and the
requests carry bearer tokens. This module redacts those fields before
emitting DEBUG logs.
"""

from __future__ import annotations

from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "token",
        "authtoken",
        "accesstoken",
        "authorization",
        "cookie",
        # Contact details of registered drivers
        "email",
        "phone",
    }
)

REDACTED = "<redacted>"


def _is_sensitive(key: str) -> bool:
    # authToken, auth_token and AUTH-TOKEN all match "authtoken".
    return key.replace("_", "").replace("-", "").lower() in _SENSITIVE_VALUE_KEYS


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a redacted copy of a decoded JSON value suitable for debug logs.

    Sensitive object keys are masked at any depth and long strings are
    cut to *max_string* characters. Numbers, booleans and ``None`` pass
    through unchanged.
    """
    if isinstance(value, dict):
        return {
            str(key): REDACTED if _is_sensitive(str(key)) else redact_for_log(item, max_string=max_string)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string) for item in value]
    if isinstance(value, str) and len(value) > max_string:
        return f"{value[:max_string]}…<truncated>"
    return value
