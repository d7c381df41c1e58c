"""Operator session scope for registry calls."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class Session(BaseModel):
    """Identity supplied by the host's authentication layer.

    The registry editor treats a session as immutable for the duration of
    an editing session; switching lots produces a new instance.

    Parameters
    ----------
    customer_id : str
        Customer owning the active lot.
    lot_id : str
        Active parking lot.
    auth_token : str or None
        Bearer token forwarded to the backend, if the host has one.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    customer_id: str
    lot_id: str
    auth_token: str | None = None

    @field_validator("customer_id", "lot_id")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("identifier must be non-empty")
        return value

    def for_lot(self, lot_id: str) -> Session:
        """Return a session scoped to another lot of the same customer."""
        if lot_id == self.lot_id:
            return self
        return Session(customer_id=self.customer_id, lot_id=lot_id, auth_token=self.auth_token)
