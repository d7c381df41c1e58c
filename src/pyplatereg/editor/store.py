"""In-memory row collection of the registry editor.

This is the only component allowed to create, change or drop rows. Rows
are frozen models; every mutation swaps in a copy.

Invariants kept after every public call (once loaded):

* exactly one placeholder row exists;
* at most one non-placeholder row is in edit mode;
* a non-placeholder row never leaves edit mode with all fields blank.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable, Iterable, Sequence

from pyplatereg._constants import PLACEHOLDER_PREFIX, ROW_FIELDS
from pyplatereg.editor.dirty import DirtyTracker
from pyplatereg.exceptions import RegistryStateError, RowNotFoundError
from pyplatereg.models._base import is_blank
from pyplatereg.models.row import RegistryEntry, RegistryRow

_logger = logging.getLogger(__name__)


def new_placeholder_id() -> str:
    return f"{PLACEHOLDER_PREFIX}{secrets.token_hex(4).upper()}"


def _by_plate(entries: Iterable[RegistryEntry]) -> list[RegistryEntry]:
    return sorted(entries, key=lambda entry: entry.plate.casefold())


class RowStore:
    """Mutable registry rows of the active lot, plus the "add new" slot.

    The entries the lot was loaded with (or last committed) are kept as a
    baseline so that an explicit discard can restore them.
    """

    def __init__(
        self,
        dirty: DirtyTracker,
        *,
        id_factory: Callable[[], str] = new_placeholder_id,
    ) -> None:
        self._dirty = dirty
        self._id_factory = id_factory
        self._lot_id: str | None = None
        self._rows: list[RegistryRow] = []
        self._baseline: list[RegistryEntry] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def lot_id(self) -> str | None:
        return self._lot_id

    @property
    def is_loaded(self) -> bool:
        return self._lot_id is not None

    @property
    def rows(self) -> tuple[RegistryRow, ...]:
        """All rows in store order, placeholder included."""
        return tuple(self._rows)

    @property
    def placeholder(self) -> RegistryRow | None:
        return next((row for row in self._rows if row.is_placeholder), None)

    @property
    def editing_row(self) -> RegistryRow | None:
        return next((row for row in self._rows if row.is_editing and not row.is_placeholder), None)

    def get(self, row_id: str) -> RegistryRow:
        return self._rows[self._index(row_id)]

    def entries(self) -> list[RegistryEntry]:
        """Non-placeholder rows in their persisted shape."""
        return [row.to_entry() for row in self._rows if not row.is_placeholder]

    def baseline(self) -> list[RegistryEntry]:
        return list(self._baseline)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self, lot_id: str, entries: Iterable[RegistryEntry]) -> None:
        """Replace every row with *entries* of *lot_id* and clear the dirty flag."""
        self._lot_id = lot_id
        self._baseline = _by_plate(entries)
        self._rebuild()
        self._dirty.clear()
        _logger.debug("Row store loaded lot=%s rows=%d", lot_id, len(self._baseline))

    def reset(self) -> None:
        """Discard local edits, going back to the baseline."""
        self._require_loaded()
        self._rebuild()
        self._dirty.clear()

    def rebase(self, committed: Sequence[RegistryEntry], *, keep_rows: bool = False) -> None:
        """Adopt *committed* as the new baseline after a successful save.

        With ``keep_rows`` the current rows survive untouched (the user kept
        editing during the save); otherwise they are rebuilt from the
        baseline, leaving edit mode everywhere.
        """
        self._require_loaded()
        self._baseline = _by_plate(committed)
        if not keep_rows:
            self._rebuild()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_field(self, row_id: str, field: str, value: str) -> RegistryRow:
        """Update one text field; the first non-blank input promotes the placeholder."""
        if field not in ROW_FIELDS:
            raise ValueError(f"field must be one of {ROW_FIELDS}, got {field!r}")
        self._require_loaded()
        index = self._index(row_id)
        row = self._rows[index]

        update: dict[str, object] = {field: value}
        promote = row.is_placeholder and not is_blank(value)
        if promote:
            update["is_placeholder"] = False
            update["is_editing"] = True
        updated = row.model_copy(update=update)
        self._rows[index] = updated

        if promote:
            self._leave_edit(keep=row_id)
            self._rows.append(self._new_placeholder())
            _logger.debug("Placeholder %s promoted", row_id)

        self._dirty.mark()
        return updated

    def toggle_edit(self, row_id: str) -> RegistryRow | None:
        """Flip edit mode of a row.

        Returns the row after the change, or ``None`` when leaving edit mode
        deleted it for being blank.
        """
        self._require_loaded()
        row = self.get(row_id)
        if row.is_placeholder:
            # The "add" slot is always editable.
            return row

        if row.is_editing:
            self._leave_edit(only=row_id)
            return next((r for r in self._rows if r.vehicle_id == row_id), None)

        self._leave_edit(keep=row_id)
        index = self._index(row_id)
        self._rows[index] = self._rows[index].model_copy(update={"is_editing": True})
        return self._rows[index]

    def remove(self, row_id: str) -> RegistryEntry:
        """Delete a real row. Callers confirm with the user first."""
        self._require_loaded()
        index = self._index(row_id)
        row = self._rows[index]
        if row.is_placeholder:
            raise RegistryStateError("the placeholder row cannot be removed")
        del self._rows[index]
        self._dirty.mark()
        _logger.debug("Row %s removed", row_id)
        return row.to_entry()

    def dismiss_incomplete(self) -> list[str]:
        """Focus left every row control: exit edit mode, drop blank rows.

        Returns the ids of the dropped rows.
        """
        self._require_loaded()
        return self._leave_edit()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_loaded(self) -> None:
        if self._lot_id is None:
            raise RegistryStateError("row store is not loaded")

    def _index(self, row_id: str) -> int:
        for index, row in enumerate(self._rows):
            if row.vehicle_id == row_id:
                return index
        raise RowNotFoundError(f"no registry row with id {row_id!r}")

    def _rebuild(self) -> None:
        self._rows = [RegistryRow.from_entry(entry) for entry in self._baseline]
        self._rows.append(self._new_placeholder())

    def _new_placeholder(self) -> RegistryRow:
        taken = {row.vehicle_id for row in self._rows}
        row_id = self._id_factory()
        while row_id in taken:
            row_id = self._id_factory()
        return RegistryRow(
            lot_id=self._lot_id or "",
            vehicle_id=row_id,
            is_placeholder=True,
        )

    def _leave_edit(self, *, keep: str | None = None, only: str | None = None) -> list[str]:
        """Take rows out of edit mode and drop the ones left blank.

        ``keep`` exempts one row; ``only`` restricts the pass to one row.
        """
        dropped: list[str] = []
        rows: list[RegistryRow] = []
        for row in self._rows:
            exempt = row.vehicle_id == keep or (only is not None and row.vehicle_id != only)
            if row.is_placeholder or exempt:
                rows.append(row)
                continue
            if row.is_empty:
                dropped.append(row.vehicle_id)
                continue
            rows.append(row.model_copy(update={"is_editing": False}) if row.is_editing else row)
        self._rows = rows
        if dropped:
            _logger.debug("Dropped blank rows %s", dropped)
        return dropped
