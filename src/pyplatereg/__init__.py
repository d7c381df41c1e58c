"""pyplatereg - Async plate-exemption registry editor for parking lots."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyplatereg")
except PackageNotFoundError:
    __version__ = "0+local"
from pyplatereg.client import RegistryBackend, RegistryClient
from pyplatereg.config import RegistryConfig
from pyplatereg.editor import (
    ConfirmationRequest,
    PromptCopy,
    PromptKind,
    RegistryEditor,
    RegistryToggleState,
    SortColumn,
    SortDirection,
    SortState,
    project_rows,
)
from pyplatereg.exceptions import (
    CommitInProgressError,
    GateBusyError,
    NothingToSaveError,
    RegistryApiError,
    RegistryConfigError,
    RegistryError,
    RegistryStateError,
    RegistryTransportError,
    RegistryValidationError,
    RowNotFoundError,
)
from pyplatereg.models import LotConfig, RegistryEntry, RegistryRow
from pyplatereg.session import Session

__all__ = [
    "__version__",
    "CommitInProgressError",
    "ConfirmationRequest",
    "GateBusyError",
    "LotConfig",
    "NothingToSaveError",
    "PromptCopy",
    "PromptKind",
    "RegistryApiError",
    "RegistryBackend",
    "RegistryClient",
    "RegistryConfig",
    "RegistryConfigError",
    "RegistryEditor",
    "RegistryEntry",
    "RegistryError",
    "RegistryRow",
    "RegistryStateError",
    "RegistryToggleState",
    "RegistryTransportError",
    "RegistryValidationError",
    "RowNotFoundError",
    "Session",
    "SortColumn",
    "SortDirection",
    "SortState",
    "project_rows",
]
