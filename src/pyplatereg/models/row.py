"""Registry entry and editor row models."""

from __future__ import annotations

from pydantic import field_validator

from pyplatereg._constants import ROW_FIELDS
from pyplatereg.models._base import RegistryBaseModel, Text, is_blank


class RegistryEntry(RegistryBaseModel):
    """An exempt vehicle as persisted by the backend.

    Maps the objects exchanged with ``/get-vehicle-registry`` and
    ``/update-vehicle-registry``.
    """

    lot_id: Text = ""
    """Lot the entry belongs to."""
    vehicle_id: Text
    """Durable key, unique within a lot."""
    plate: Text = ""
    """License plate."""
    name: Text = ""
    """Driver name."""
    email: Text = ""
    """Driver email address."""
    phone: Text = ""
    """Driver phone number (free text)."""

    @field_validator("vehicle_id")
    @classmethod
    def _vehicle_id_non_empty(cls, value: str) -> str:
        vehicle_id = value.strip()
        if not vehicle_id:
            raise ValueError("vehicle_id must be non-empty")
        return vehicle_id

    @property
    def is_empty(self) -> bool:
        """Whether all four editable fields are blank."""
        return all(is_blank(getattr(self, field)) for field in ROW_FIELDS)


class RegistryRow(RegistryEntry):
    """A row of the registry editor: an entry plus its UI flags."""

    is_placeholder: bool = False
    """``True`` only for the single "add new entry" slot."""
    is_editing: bool = False
    """Whether the row is rendered as inputs."""

    def to_entry(self) -> RegistryEntry:
        """Strip the editor flags, keeping the persisted shape."""
        return RegistryEntry(
            lot_id=self.lot_id,
            vehicle_id=self.vehicle_id,
            plate=self.plate,
            name=self.name,
            email=self.email,
            phone=self.phone,
        )

    @classmethod
    def from_entry(cls, entry: RegistryEntry) -> RegistryRow:
        return cls(**entry.model_dump())
