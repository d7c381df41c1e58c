"""Registry editor layer.

This package is the single owner of the editing session's rows, toggle
state, dirty flag and open confirmation prompt. Hosts drive it through
:class:`RegistryEditor`; the persistence calls go through a
:class:`pyplatereg.client.RegistryBackend`.
"""

from pyplatereg.editor.controller import RegistryEditor
from pyplatereg.editor.gate import ConfirmationRequest, PromptCopy, PromptKind
from pyplatereg.editor.toggle import RegistryToggleState
from pyplatereg.editor.view import SortColumn, SortDirection, SortState, project_rows

__all__ = [
    "ConfirmationRequest",
    "PromptCopy",
    "PromptKind",
    "RegistryEditor",
    "RegistryToggleState",
    "SortColumn",
    "SortDirection",
    "SortState",
    "project_rows",
]
