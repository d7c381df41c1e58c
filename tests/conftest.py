from __future__ import annotations

import itertools
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import pytest

from pyplatereg.editor.dirty import DirtyTracker
from pyplatereg.editor.store import RowStore
from pyplatereg.exceptions import RegistryError
from pyplatereg.models.lot import LotConfig
from pyplatereg.models.row import RegistryEntry
from pyplatereg.session import Session

LOT_ID = "LOT-1"


def make_entry(vehicle_id: str, plate: str, **fields: str) -> RegistryEntry:
    values = {
        "name": f"Driver {plate}",
        "email": f"{plate.lower()}@example.com",
        "phone": "555-010-0000",
    }
    values.update(fields)
    return RegistryEntry(lot_id=LOT_ID, vehicle_id=vehicle_id, plate=plate, **values)


@dataclass
class FakeBackend:
    registry_on: bool = False
    entries: list[RegistryEntry] = field(default_factory=list)
    calls: list[tuple[str, Any]] = field(default_factory=list)
    rows_error: RegistryError | None = None
    flag_error: RegistryError | None = None
    load_error: RegistryError | None = None

    def _record_call(self, name: str, payload: Any) -> None:
        self.calls.append((name, payload))

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def get_lot_config(self, lot_id: str) -> LotConfig:
        self._record_call("get_lot_config", lot_id)
        if self.load_error is not None:
            raise self.load_error
        return LotConfig(lot_id=lot_id, registry_on=self.registry_on)

    async def get_registry_rows(self, lot_id: str) -> list[RegistryEntry]:
        self._record_call("get_registry_rows", lot_id)
        return [entry for entry in self.entries if entry.lot_id == lot_id]

    async def commit_registry_rows(self, entries: Sequence[RegistryEntry]) -> None:
        self._record_call("commit_registry_rows", list(entries))
        if self.rows_error is not None:
            raise self.rows_error
        self.entries = list(entries)

    async def commit_lot_flag(self, lot_id: str, *, registry_on: bool) -> None:
        self._record_call("commit_lot_flag", {"lotId": lot_id, "registryOn": registry_on})
        if self.flag_error is not None:
            raise self.flag_error
        self.registry_on = registry_on


@pytest.fixture
def id_factory() -> Callable[[], str]:
    counter = itertools.count(1)
    return lambda: f"PL_{next(counter)}"


@pytest.fixture
def session() -> Session:
    return Session(customer_id="CUST-1", lot_id=LOT_ID)


@pytest.fixture
def entries() -> list[RegistryEntry]:
    return [
        make_entry("V2", "bcd200"),
        make_entry("V1", "ABC100"),
        make_entry("V3", "CDE300"),
    ]


@pytest.fixture
def backend(entries: list[RegistryEntry]) -> FakeBackend:
    return FakeBackend(registry_on=True, entries=list(entries))


@pytest.fixture
def dirty() -> DirtyTracker:
    return DirtyTracker()


@pytest.fixture
def store(dirty: DirtyTracker, entries: list[RegistryEntry], id_factory: Callable[[], str]) -> RowStore:
    row_store = RowStore(dirty, id_factory=id_factory)
    row_store.load(LOT_ID, entries)
    return row_store
