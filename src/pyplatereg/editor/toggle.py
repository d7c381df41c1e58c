"""Registry enable/disable state machine.

The slider, the last committed server value and the "switched on but not
saved yet" marker are one enum rather than three booleans, so the
combination ``pending and not local_on`` cannot be represented.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from pyplatereg.exceptions import RegistryStateError

_logger = logging.getLogger(__name__)


class RegistryToggleState(StrEnum):
    OFF = "off"
    ON_UNCOMMITTED = "on_uncommitted"
    ON_COMMITTED = "on_committed"

    @property
    def server_on(self) -> bool:
        """Last value known to be committed on the server."""
        return self is RegistryToggleState.ON_COMMITTED

    @property
    def local_on(self) -> bool:
        """Value reflected by the slider."""
        return self is not RegistryToggleState.OFF

    @property
    def turned_on_pending(self) -> bool:
        """Switched from off to on in this session, not committed yet."""
        return self is RegistryToggleState.ON_UNCOMMITTED


# Allowed (from, to) pairs keyed by transition name.
_TRANSITIONS: dict[str, frozenset[tuple[RegistryToggleState, RegistryToggleState]]] = {
    "enable": frozenset({(RegistryToggleState.OFF, RegistryToggleState.ON_UNCOMMITTED)}),
    "commit_enable": frozenset({(RegistryToggleState.ON_UNCOMMITTED, RegistryToggleState.ON_COMMITTED)}),
    "disable": frozenset(
        {
            (RegistryToggleState.ON_UNCOMMITTED, RegistryToggleState.OFF),
            (RegistryToggleState.ON_COMMITTED, RegistryToggleState.OFF),
        }
    ),
}


class ToggleStateMachine:
    """Owns the registry's enabled/disabled status for one lot."""

    def __init__(self, state: RegistryToggleState = RegistryToggleState.OFF) -> None:
        self._state = state

    @property
    def state(self) -> RegistryToggleState:
        return self._state

    def load(self, registry_on: bool) -> RegistryToggleState:
        """Reset to the committed server value of a freshly loaded lot."""
        self._state = RegistryToggleState.ON_COMMITTED if registry_on else RegistryToggleState.OFF
        return self._state

    def enable(self) -> RegistryToggleState:
        """User switched the slider on; the change stays pending until saved."""
        return self._transition("enable", RegistryToggleState.ON_UNCOMMITTED)

    def commit_enable(self) -> RegistryToggleState:
        """The pending enable was persisted by a successful save."""
        return self._transition("commit_enable", RegistryToggleState.ON_COMMITTED)

    def disable(self) -> RegistryToggleState:
        """The registry was switched off (and persisted, if it was on server-side)."""
        return self._transition("disable", RegistryToggleState.OFF)

    def _transition(self, name: str, target: RegistryToggleState) -> RegistryToggleState:
        if (self._state, target) not in _TRANSITIONS[name]:
            raise RegistryStateError(f"cannot {name} registry in state {self._state.value}")
        _logger.debug("Registry toggle %s: %s -> %s", name, self._state.value, target.value)
        self._state = target
        return target
