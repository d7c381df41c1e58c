"""Shared helpers for the endpoint modules.

This module centralizes the repeated patterns:
- mapping an application-level failure body to :class:`RegistryApiError`
- unwrapping list/object payloads that may arrive inside a ``data`` key

It is internal to pyplatereg and may change at any time.
"""

from __future__ import annotations

from typing import Any

from pyplatereg.exceptions import RegistryApiError


def raise_for_body(endpoint: str, body: Any) -> None:
    """Raise when a 2xx body explicitly reports ``"success": false``."""
    if not isinstance(body, dict):
        return
    if body.get("success", True) is not False:
        return
    code = str(body.get("code", ""))
    message = str(body.get("error") or body.get("message") or "")
    raise RegistryApiError(
        f"{endpoint} failed: code={code} message={message}",
        code=code,
        endpoint=endpoint,
    )


def unwrap_data(body: Any) -> Any:
    """Return ``body["data"]`` for enveloped responses, else *body* itself."""
    if isinstance(body, dict) and "data" in body and set(body) <= {"data", "success", "code", "message"}:
        return body["data"]
    return body
