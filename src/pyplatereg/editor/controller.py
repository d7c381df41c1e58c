"""Registry editor: the entry point a host UI drives."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any

from pyplatereg.client import RegistryBackend
from pyplatereg.editor.commit import CommitPipeline
from pyplatereg.editor.dirty import DirtyTracker
from pyplatereg.editor.gate import LEAVE_COPY, Action, ConfirmationGate, ConfirmationRequest, PromptKind, run_action
from pyplatereg.editor.store import RowStore, new_placeholder_id
from pyplatereg.editor.toggle import RegistryToggleState, ToggleStateMachine
from pyplatereg.editor.view import SortColumn, SortState, project_rows
from pyplatereg.exceptions import (
    CommitInProgressError,
    NothingToSaveError,
    RegistryError,
    RegistryStateError,
)
from pyplatereg.models.lot import LotConfig
from pyplatereg.models.row import RegistryRow
from pyplatereg.session import Session

_logger = logging.getLogger(__name__)


class RegistryEditor:
    """Plate registry editing session for one lot at a time.

    Usage::

        async with RegistryClient(config, session) as client:
            editor = RegistryEditor(client, session)
            await editor.load()
            placeholder = editor.view()[0]
            editor.set_field(placeholder.vehicle_id, "plate", "ABC123")
            editor.request_save()
            await editor.confirm()

    Synchronous methods mutate local state only. Network calls happen in
    :meth:`load` and inside the actions run by :meth:`confirm` or
    :meth:`cancel`; their errors propagate to the caller.
    """

    def __init__(
        self,
        backend: RegistryBackend,
        session: Session,
        *,
        id_factory: Callable[[], str] = new_placeholder_id,
    ) -> None:
        self._backend = backend
        self._session = session
        self._dirty = DirtyTracker()
        self._store = RowStore(self._dirty, id_factory=id_factory)
        self._toggle = ToggleStateMachine()
        self._gate = ConfirmationGate()
        self._pipeline = CommitPipeline(backend, self._store, self._toggle, self._dirty)
        self._lot: LotConfig | None = None
        self._search = ""
        self._sort = SortState()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def session(self) -> Session:
        return self._session

    @property
    def lot(self) -> LotConfig | None:
        return self._lot

    @property
    def rows(self) -> tuple[RegistryRow, ...]:
        return self._store.rows

    @property
    def toggle_state(self) -> RegistryToggleState:
        return self._toggle.state

    @property
    def registry_on(self) -> bool:
        return self._toggle.state.local_on

    @property
    def is_dirty(self) -> bool:
        return self._dirty.is_dirty

    @property
    def can_save(self) -> bool:
        return self._dirty.is_dirty and not self._pipeline.in_flight

    @property
    def is_saving(self) -> bool:
        return self._pipeline.in_flight

    @property
    def prompt(self) -> ConfirmationRequest | None:
        return self._gate.active

    @property
    def search(self) -> str:
        return self._search

    @property
    def sort(self) -> SortState:
        return self._sort

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self, lot_id: str | None = None) -> None:
        """Fetch the lot's flag and rows, replacing all local state.

        Defaults to the session's lot. Nothing changes locally if either
        request fails.
        """
        if self._pipeline.in_flight:
            raise CommitInProgressError("cannot reload while a registry write is in progress")
        session = self._session.for_lot(lot_id) if lot_id else self._session
        lot = await self._backend.get_lot_config(session.lot_id)
        entries = await self._backend.get_registry_rows(session.lot_id)

        self._session = session
        self._lot = lot
        self._gate.close()
        self._toggle.load(lot.registry_on)
        self._store.load(session.lot_id, entries)
        _logger.debug("Registry editor loaded lot=%s state=%s", session.lot_id, self._toggle.state.value)

    def _require_loaded(self) -> str:
        lot_id = self._store.lot_id
        if lot_id is None:
            raise RegistryStateError("registry editor is not loaded; call load() first")
        return lot_id

    # ------------------------------------------------------------------
    # Row editing
    # ------------------------------------------------------------------

    def set_field(self, row_id: str, field: str, value: str) -> RegistryRow:
        """Update one field; the "add" row only accepts input while the registry is on."""
        self._require_loaded()
        if self._store.get(row_id).is_placeholder and not self._toggle.state.local_on:
            raise RegistryStateError("new entries cannot be added while the registry is off")
        return self._store.set_field(row_id, field, value)

    def toggle_edit(self, row_id: str) -> RegistryRow | None:
        self._require_loaded()
        return self._store.toggle_edit(row_id)

    def dismiss_incomplete(self) -> list[str]:
        """Signal that focus left every row control."""
        self._require_loaded()
        return self._store.dismiss_incomplete()

    def request_remove(self, row_id: str) -> ConfirmationRequest:
        """Ask before removing a row; the row goes on :meth:`confirm`."""
        self._require_loaded()
        row = self._store.get(row_id)
        if row.is_placeholder:
            raise RegistryStateError("the placeholder row cannot be removed")
        return self._gate.open(
            PromptKind.REMOVE_VEHICLE,
            functools.partial(self._store.remove, row_id),
            context={"vehicle_id": row.vehicle_id, "plate": row.plate},
        )

    # ------------------------------------------------------------------
    # Search and sort
    # ------------------------------------------------------------------

    def set_search(self, text: str) -> None:
        self._search = text

    def sort_by(self, column: SortColumn | str) -> SortState:
        self._sort = self._sort.toggled(column)
        return self._sort

    def view(self) -> list[RegistryRow]:
        """Rows to display, filtered and ordered."""
        return project_rows(
            self._store.rows,
            search=self._search,
            sort=self._sort,
            registry_enabled=self._toggle.state.local_on,
        )

    # ------------------------------------------------------------------
    # Registry toggle
    # ------------------------------------------------------------------

    def toggle_registry(self) -> ConfirmationRequest | None:
        """Slider flipped by the user.

        Switching on takes effect locally right away and waits for a save.
        Switching off opens a prompt and returns it: the plain disable prompt,
        or the unsaved-changes prompt when edits would be lost.
        """
        self._require_loaded()
        if self._pipeline.in_flight:
            raise CommitInProgressError("cannot change the registry while a registry write is in progress")

        if not self._toggle.state.local_on:
            self._toggle.enable()
            self._dirty.mark()
            return None

        kind = PromptKind.UNSAVED_CHANGES if self._dirty.is_dirty else PromptKind.DISABLE_REGISTRY
        return self._gate.open(kind, self._disable_registry)

    async def _disable_registry(self) -> None:
        lot_id = self._require_loaded()
        async with self._pipeline.exclusive("disable the registry"):
            if self._toggle.state.server_on:
                try:
                    await self._backend.commit_lot_flag(lot_id, registry_on=False)
                except RegistryError:
                    _logger.warning("Disabling the registry failed for lot=%s; keeping it on", lot_id)
                    raise
            self._toggle.disable()
            self._store.reset()
        _logger.debug("Registry disabled for lot=%s", lot_id)

    # ------------------------------------------------------------------
    # Saving, discarding, leaving
    # ------------------------------------------------------------------

    def request_save(self) -> ConfirmationRequest:
        """Ask before writing the registry; the save runs on :meth:`confirm`."""
        lot_id = self._require_loaded()
        if self._pipeline.in_flight:
            raise CommitInProgressError("a registry write is already in progress")
        if not self._dirty.is_dirty:
            raise NothingToSaveError("there are no unsaved changes")
        return self._gate.open(
            PromptKind.CONFIRM_SAVE,
            functools.partial(self._pipeline.commit, lot_id),
        )

    def discard(self) -> None:
        """Drop every unsaved change, including a pending enable."""
        self._require_loaded()
        if self._pipeline.in_flight:
            raise CommitInProgressError("cannot discard while a registry write is in progress")
        if self._toggle.state.turned_on_pending:
            self._toggle.disable()
        self._store.reset()

    async def request_leave(self, proceed: Action) -> ConfirmationRequest | None:
        """Guard navigation away from the registry.

        Without unsaved changes *proceed* runs at once and ``None`` is
        returned. Otherwise an unsaved-changes prompt opens: confirming it
        keeps the user here, cancelling it runs *proceed* and drops the edits.
        """
        self._require_loaded()
        if not self._dirty.is_dirty:
            await run_action(proceed)
            return None

        async def _leave_anyway() -> Any:
            self.discard()
            return await run_action(proceed)

        return self._gate.open(
            PromptKind.UNSAVED_CHANGES,
            lambda: None,
            on_dismiss=_leave_anyway,
            copy=LEAVE_COPY,
            context={"navigation": True},
        )

    # ------------------------------------------------------------------
    # Prompt answers
    # ------------------------------------------------------------------

    async def confirm(self) -> Any:
        return await self._gate.confirm()

    async def cancel(self) -> Any:
        return await self._gate.cancel()
