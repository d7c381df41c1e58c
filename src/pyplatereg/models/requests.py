"""Pydantic request models for the persistence endpoints.

These models provide a consistent "validate → normalize → execute" flow.
They are used internally by :class:`pyplatereg.client.RegistryClient`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pyplatereg.models._base import RegistryBaseModel


class LotRequest(BaseModel):
    """Request containing a lot id."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    lot_id: str

    @field_validator("lot_id")
    @classmethod
    def _lot_id_non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("lot_id must be non-empty")
        return value


class LotFlagUpdate(RegistryBaseModel):
    """The ``updatedData`` part of an ``/update-lot`` request."""

    registry_on: bool


class UpdateLotRequest(RegistryBaseModel):
    """Body of ``/update-lot``: ``{"lotId": ..., "updatedData": {...}}``."""

    lot_id: str = Field(min_length=1)
    updated_data: LotFlagUpdate
