"""Display projection of registry rows: search, sort, pinned "add" row.

Nothing in here mutates the store; :func:`project_rows` is a pure
function of its inputs.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from enum import StrEnum

from pyplatereg._constants import ROW_FIELDS
from pyplatereg.models.row import RegistryRow


class SortColumn(StrEnum):
    PLATE = "plate"
    NAME = "name"
    EMAIL = "email"
    PHONE = "phone"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


@dataclasses.dataclass(frozen=True, slots=True)
class SortState:
    """Active sort column and direction of the registry table."""

    column: SortColumn = SortColumn.PLATE
    direction: SortDirection = SortDirection.ASC

    def toggled(self, column: SortColumn | str) -> SortState:
        """Header click: same column flips direction, another column sorts ascending."""
        selected = SortColumn(column)
        if selected is self.column:
            return SortState(selected, self.direction.flipped())
        return SortState(selected, SortDirection.ASC)


def search_text(row: RegistryRow) -> str:
    """Casefolded text a search query is matched against."""
    return " ".join(getattr(row, field) for field in ROW_FIELDS).casefold()


def project_rows(
    rows: Iterable[RegistryRow],
    *,
    search: str = "",
    sort: SortState = SortState(),
    registry_enabled: bool = True,
) -> list[RegistryRow]:
    """Return the rows to display, in display order.

    1. Placeholders are hidden while the registry is disabled.
    2. Rows whose fields do not contain *search* (case-insensitive) are dropped.
    3. Real rows are sorted by ``sort`` (stable, case-insensitive);
       placeholders follow, ordered by id.
    4. The first placeholder is then pinned to the top.
    """
    working = [row for row in rows if registry_enabled or not row.is_placeholder]

    needle = search.casefold()
    if needle:
        working = [row for row in working if needle in search_text(row)]

    column = sort.column.value
    real = sorted(
        (row for row in working if not row.is_placeholder),
        key=lambda row: getattr(row, column).casefold(),
        reverse=sort.direction is SortDirection.DESC,
    )
    placeholders = sorted(
        (row for row in working if row.is_placeholder),
        key=lambda row: row.vehicle_id,
    )
    return placeholders[:1] + real + placeholders[1:]
