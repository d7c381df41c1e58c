"""One-at-a-time confirmation prompts for risky registry actions.

A prompt binds the action to run on confirmation, so the host only has
to render :attr:`ConfirmationGate.active` and call :meth:`confirm` or
:meth:`cancel`.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
from collections.abc import Callable, Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from pyplatereg.exceptions import GateBusyError, RegistryStateError

_logger = logging.getLogger(__name__)

#: A bound prompt action; may return an awaitable, which is awaited.
Action = Callable[[], Any]


class PromptKind(StrEnum):
    DISABLE_REGISTRY = "disableRegistry"
    UNSAVED_CHANGES = "unsavedChanges"
    REMOVE_VEHICLE = "removeVehicle"
    CONFIRM_SAVE = "confirmSave"


@dataclasses.dataclass(frozen=True, slots=True)
class PromptCopy:
    """Text the host shows in the prompt."""

    title: str
    description: str
    confirm_text: str
    cancel_text: str


PROMPT_COPY: Mapping[PromptKind, PromptCopy] = MappingProxyType(
    {
        PromptKind.DISABLE_REGISTRY: PromptCopy(
            title="Disable Registry?",
            description=(
                "This will immediately remove free-parking privileges for all plates in your registry. "
                "They will be billed normally."
            ),
            confirm_text="Disable",
            cancel_text="Cancel",
        ),
        PromptKind.UNSAVED_CHANGES: PromptCopy(
            title="You have unsaved changes!",
            description=(
                "Changes will not be applied unless you save before leaving. "
                "Discard them and disable the registry?"
            ),
            confirm_text="Discard & Disable",
            cancel_text="Keep Editing",
        ),
        PromptKind.REMOVE_VEHICLE: PromptCopy(
            title="Remove Registry Entry",
            description=(
                "Removing this entry means the vehicle will no longer be exempt from billing. "
                "You cannot undo this action unless you add them again."
            ),
            confirm_text="Remove",
            cancel_text="Cancel",
        ),
        PromptKind.CONFIRM_SAVE: PromptCopy(
            title="Confirm Changes",
            description="You're about to update the plate registry on the server.",
            confirm_text="Save Registry",
            cancel_text="Return",
        ),
    }
)

#: Unsaved-changes copy used when the user tries to leave the page.
#: Confirm keeps the user here; the secondary button leaves anyway.
LEAVE_COPY = PromptCopy(
    title="You have unsaved changes!",
    description="Changes will not be applied unless you save before leaving.",
    confirm_text="Go Back",
    cancel_text="Leave Anyway",
)


@dataclasses.dataclass(frozen=True, slots=True)
class ConfirmationRequest:
    """An open prompt and everything needed to act on the user's answer."""

    kind: PromptKind
    on_confirm: Action
    copy: PromptCopy
    on_dismiss: Action | None = None
    context: Mapping[str, Any] = dataclasses.field(default_factory=dict)


async def run_action(action: Action) -> Any:
    """Call *action*, awaiting its result when it is awaitable."""
    result = action()
    if inspect.isawaitable(result):
        result = await result
    return result


class ConfirmationGate:
    """Holds at most one :class:`ConfirmationRequest`."""

    def __init__(self) -> None:
        self._active: ConfirmationRequest | None = None

    @property
    def active(self) -> ConfirmationRequest | None:
        return self._active

    @property
    def is_open(self) -> bool:
        return self._active is not None

    def open(
        self,
        kind: PromptKind,
        on_confirm: Action,
        *,
        on_dismiss: Action | None = None,
        context: Mapping[str, Any] | None = None,
        copy: PromptCopy | None = None,
    ) -> ConfirmationRequest:
        """Open a prompt; raises :class:`GateBusyError` if one is already open."""
        if self._active is not None:
            raise GateBusyError(f"a {self._active.kind.value} prompt is already open")
        if on_dismiss is not None and kind is not PromptKind.UNSAVED_CHANGES:
            raise ValueError(f"{kind.value} prompts do not take a dismiss action")
        request = ConfirmationRequest(
            kind=kind,
            on_confirm=on_confirm,
            copy=copy or PROMPT_COPY[kind],
            on_dismiss=on_dismiss,
            context=MappingProxyType(dict(context or {})),
        )
        self._active = request
        _logger.debug("Prompt opened kind=%s", kind.value)
        return request

    async def confirm(self) -> Any:
        """Close the prompt and run its bound action."""
        request = self._take()
        _logger.debug("Prompt confirmed kind=%s", request.kind.value)
        return await run_action(request.on_confirm)

    async def cancel(self) -> Any:
        """Close the prompt; only a bound dismiss action runs."""
        request = self._take()
        _logger.debug("Prompt cancelled kind=%s", request.kind.value)
        if request.on_dismiss is None:
            return None
        return await run_action(request.on_dismiss)

    def close(self) -> None:
        """Drop any open prompt without running anything."""
        self._active = None

    def _take(self) -> ConfirmationRequest:
        request = self._active
        if request is None:
            raise RegistryStateError("no confirmation prompt is open")
        self._active = None
        return request
