"""Data models for registry payloads."""

from pyplatereg.models._base import RegistryBaseModel, Text, coerce_text, is_blank
from pyplatereg.models.lot import LotConfig
from pyplatereg.models.requests import LotFlagUpdate, LotRequest, UpdateLotRequest
from pyplatereg.models.row import RegistryEntry, RegistryRow

__all__ = [
    "LotConfig",
    "LotFlagUpdate",
    "LotRequest",
    "RegistryBaseModel",
    "RegistryEntry",
    "RegistryRow",
    "Text",
    "UpdateLotRequest",
    "coerce_text",
    "is_blank",
]
