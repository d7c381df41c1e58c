"""Custom exception hierarchy for pyplatereg."""

from __future__ import annotations


class RegistryError(Exception):
    """Base exception for all pyplatereg errors."""


class RegistryConfigError(RegistryError):
    """Invalid or missing configuration."""


class RegistryTransportError(RegistryError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class RegistryApiError(RegistryError):
    """Server answered 2xx but reported the operation as failed."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class RegistryValidationError(RegistryError):
    """A registry row failed the pre-commit shape checks.

    Raised before any network call is made; nothing is mutated.
    """

    def __init__(
        self,
        message: str,
        *,
        vehicle_id: str,
        plate: str,
        field: str,
    ) -> None:
        self.vehicle_id = vehicle_id
        self.plate = plate
        self.field = field
        super().__init__(message)


class RegistryStateError(RegistryError):
    """An operation was requested in a state that does not allow it."""


class RowNotFoundError(RegistryStateError):
    """No row with the given vehicle id exists in the store."""


class GateBusyError(RegistryStateError):
    """A confirmation prompt is already open."""


class CommitInProgressError(RegistryStateError):
    """A save is already in flight; concurrent replace-all writes are refused."""


class NothingToSaveError(RegistryStateError):
    """Save was requested without any unsaved change."""
