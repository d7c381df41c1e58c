"""Validation and persistence of the edited registry."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from pyplatereg.editor.dirty import DirtyTracker
from pyplatereg.editor.store import RowStore
from pyplatereg.editor.toggle import ToggleStateMachine
from pyplatereg.editor.validation import validate_entries
from pyplatereg.exceptions import CommitInProgressError, RegistryError

if TYPE_CHECKING:
    from pyplatereg.client import RegistryBackend

_logger = logging.getLogger(__name__)


class CommitPipeline:
    """Validates the store and writes it through the backend.

    Server writes are serialized: a second :meth:`commit`, or any other
    write entered through :meth:`exclusive`, is rejected rather than
    queued while one is in flight.
    """

    def __init__(
        self,
        backend: RegistryBackend,
        store: RowStore,
        toggle: ToggleStateMachine,
        dirty: DirtyTracker,
    ) -> None:
        self._backend = backend
        self._store = store
        self._toggle = toggle
        self._dirty = dirty
        self._lock = asyncio.Lock()

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    @contextlib.asynccontextmanager
    async def exclusive(self, action: str) -> AsyncIterator[None]:
        """Hold the write lock for *action*; refuse if another write holds it."""
        if self._lock.locked():
            raise CommitInProgressError(f"cannot {action} while a registry write is in progress")
        async with self._lock:
            yield

    async def commit(self, lot_id: str) -> None:
        """Validate, replace the registry, then persist a pending enable.

        Raises
        ------
        CommitInProgressError
            Another registry write has not finished.
        RegistryValidationError
            A row failed the shape checks; nothing was sent.
        RegistryTransportError, RegistryApiError
            A request failed; the dirty flag is left set so the user can retry.
        """
        async with self.exclusive("save"):
            entries = self._store.entries()
            validate_entries(entries)
            revision = self._dirty.revision

            await self._backend.commit_registry_rows(entries)
            _logger.debug("Committed %d registry rows for lot=%s", len(entries), lot_id)

            if self._toggle.state.turned_on_pending:
                try:
                    await self._backend.commit_lot_flag(lot_id, registry_on=True)
                except RegistryError:
                    # No compensation: the rows are already replaced server-side.
                    _logger.warning(
                        "Registry rows saved for lot=%s but enabling the registry failed; "
                        "rows and flag are out of step until the next save",
                        lot_id,
                    )
                    raise
                self._toggle.commit_enable()

            if self._dirty.revision == revision:
                self._store.rebase(entries)
                self._dirty.clear()
            else:
                self._store.rebase(entries, keep_rows=True)
                _logger.debug("Registry edited during save for lot=%s; changes stay pending", lot_id)
