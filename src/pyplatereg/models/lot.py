"""Lot configuration model."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator, model_validator

from pyplatereg.models._base import RegistryBaseModel, Text


class LotConfig(RegistryBaseModel):
    """Settings of a parking lot as returned by ``/get-lot``.

    Only the registry flag is interpreted; every other lot setting is
    kept untouched in :attr:`raw`.
    """

    lot_id: Text = ""
    """Lot identifier."""
    registry_on: bool = False
    """Whether the plate registry is enabled on the server."""

    raw: dict[str, Any] = Field(default_factory=dict)
    """Full API response dict for access to additional fields."""

    @model_validator(mode="before")
    @classmethod
    def _ensure_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        merged.setdefault("raw", values)
        return merged

    @field_validator("registry_on", mode="before")
    @classmethod
    def _coerce_registry_on(cls, value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)
