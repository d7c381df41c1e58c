"""Client configuration for pyplatereg."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyplatereg._constants import BASE_URL
from pyplatereg.exceptions import RegistryConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class RegistryConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Base URL of the lot management backend.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.
    api_trace_enabled : bool
        Log redacted request/response payloads at DEBUG level.
    """

    base_url: str = BASE_URL
    request_timeout: float = 10.0
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if not self.base_url.strip():
            raise RegistryConfigError("base_url must be non-empty")
        if self.request_timeout <= 0:
            raise RegistryConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_env(cls, **overrides: Any) -> RegistryConfig:
        """Create configuration from environment variables.

        Reads ``PLATEREG_BASE_URL``, ``PLATEREG_REQUEST_TIMEOUT`` and
        ``PLATEREG_API_TRACE_ENABLED``. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        RegistryConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        base_url = env.get("PLATEREG_BASE_URL")
        if base_url is not None:
            config_kwargs["base_url"] = base_url

        timeout_env = env.get("PLATEREG_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise RegistryConfigError(f"PLATEREG_REQUEST_TIMEOUT is not a number: {timeout_env!r}") from exc

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("PLATEREG_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
