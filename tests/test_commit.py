from __future__ import annotations

import asyncio
from collections.abc import Sequence

import pytest

from pyplatereg.editor.commit import CommitPipeline
from pyplatereg.editor.dirty import DirtyTracker
from pyplatereg.editor.store import RowStore
from pyplatereg.editor.toggle import RegistryToggleState, ToggleStateMachine
from pyplatereg.exceptions import (
    CommitInProgressError,
    RegistryTransportError,
    RegistryValidationError,
)
from pyplatereg.models.row import RegistryEntry

from conftest import LOT_ID, FakeBackend


def _pipeline(
    backend: FakeBackend,
    store: RowStore,
    dirty: DirtyTracker,
    state: RegistryToggleState = RegistryToggleState.ON_COMMITTED,
) -> tuple[CommitPipeline, ToggleStateMachine]:
    toggle = ToggleStateMachine(state)
    return CommitPipeline(backend, store, toggle, dirty), toggle


@pytest.mark.asyncio
async def test_invalid_email_aborts_before_network(backend: FakeBackend, store: RowStore, dirty: DirtyTracker) -> None:
    pipeline, _ = _pipeline(backend, store, dirty)
    store.set_field("V2", "email", "not-an-email")

    with pytest.raises(RegistryValidationError) as exc_info:
        await pipeline.commit(LOT_ID)

    assert exc_info.value.vehicle_id == "V2"
    assert exc_info.value.field == "email"
    assert backend.calls == []
    assert dirty.is_dirty
    assert store.get("V2").email == "not-an-email"


@pytest.mark.asyncio
async def test_valid_save_replaces_all_rows_once(backend: FakeBackend, store: RowStore, dirty: DirtyTracker) -> None:
    pipeline, toggle = _pipeline(backend, store, dirty)
    store.set_field("V1", "name", "Renamed")
    store.remove("V3")

    await pipeline.commit(LOT_ID)

    assert backend.call_names() == ["commit_registry_rows"]
    sent = backend.calls[0][1]
    assert [entry.vehicle_id for entry in sent] == ["V1", "V2"]
    assert all(isinstance(entry, RegistryEntry) for entry in sent)
    assert not dirty.is_dirty
    assert toggle.state is RegistryToggleState.ON_COMMITTED


@pytest.mark.asyncio
async def test_placeholder_is_never_sent(backend: FakeBackend, store: RowStore, dirty: DirtyTracker) -> None:
    pipeline, _ = _pipeline(backend, store, dirty)
    store.set_field("V1", "name", "Renamed")

    await pipeline.commit(LOT_ID)

    sent: Sequence[RegistryEntry] = backend.calls[0][1]
    assert all(not entry.vehicle_id.startswith("PL_") for entry in sent)


@pytest.mark.asyncio
async def test_pending_enable_is_committed_after_rows(backend: FakeBackend, store: RowStore, dirty: DirtyTracker) -> None:
    backend.registry_on = False
    pipeline, toggle = _pipeline(backend, store, dirty, RegistryToggleState.OFF)
    toggle.enable()
    dirty.mark()

    await pipeline.commit(LOT_ID)

    assert backend.call_names() == ["commit_registry_rows", "commit_lot_flag"]
    assert backend.calls[1][1] == {"lotId": LOT_ID, "registryOn": True}
    assert toggle.state is RegistryToggleState.ON_COMMITTED
    assert not dirty.is_dirty


@pytest.mark.asyncio
async def test_rows_failure_keeps_dirty_and_skips_flag(backend: FakeBackend, store: RowStore, dirty: DirtyTracker) -> None:
    backend.rows_error = RegistryTransportError("HTTP 500", status_code=500, endpoint="/update-vehicle-registry")
    pipeline, toggle = _pipeline(backend, store, dirty, RegistryToggleState.OFF)
    toggle.enable()
    dirty.mark()

    with pytest.raises(RegistryTransportError):
        await pipeline.commit(LOT_ID)

    assert backend.call_names() == ["commit_registry_rows"]
    assert dirty.is_dirty
    assert toggle.state is RegistryToggleState.ON_UNCOMMITTED
    assert not pipeline.in_flight


@pytest.mark.asyncio
async def test_flag_failure_keeps_dirty_and_pending(
    backend: FakeBackend,
    store: RowStore,
    dirty: DirtyTracker,
    caplog: pytest.LogCaptureFixture,
) -> None:
    backend.flag_error = RegistryTransportError("HTTP 503", status_code=503, endpoint="/update-lot")
    pipeline, toggle = _pipeline(backend, store, dirty, RegistryToggleState.OFF)
    toggle.enable()
    dirty.mark()

    with caplog.at_level("WARNING", logger="pyplatereg.editor.commit"):
        with pytest.raises(RegistryTransportError):
            await pipeline.commit(LOT_ID)

    assert backend.call_names() == ["commit_registry_rows", "commit_lot_flag"]
    assert dirty.is_dirty
    assert toggle.state.turned_on_pending
    assert "out of step" in caplog.text


@pytest.mark.asyncio
async def test_second_commit_rejected_while_in_flight(store: RowStore, dirty: DirtyTracker) -> None:
    release = asyncio.Event()

    class SlowBackend(FakeBackend):
        async def commit_registry_rows(self, entries: Sequence[RegistryEntry]) -> None:
            await release.wait()
            await super().commit_registry_rows(entries)

    backend = SlowBackend()
    pipeline, _ = _pipeline(backend, store, dirty)
    store.set_field("V1", "name", "Renamed")

    first = asyncio.create_task(pipeline.commit(LOT_ID))
    await asyncio.sleep(0)
    assert pipeline.in_flight

    with pytest.raises(CommitInProgressError):
        await pipeline.commit(LOT_ID)

    release.set()
    await first
    assert backend.call_names() == ["commit_registry_rows"]
    assert not dirty.is_dirty


@pytest.mark.asyncio
async def test_edits_during_save_stay_dirty(store: RowStore, dirty: DirtyTracker) -> None:
    release = asyncio.Event()

    class SlowBackend(FakeBackend):
        async def commit_registry_rows(self, entries: Sequence[RegistryEntry]) -> None:
            await release.wait()
            await super().commit_registry_rows(entries)

    backend = SlowBackend()
    pipeline, _ = _pipeline(backend, store, dirty)
    store.set_field("V1", "name", "First")

    task = asyncio.create_task(pipeline.commit(LOT_ID))
    await asyncio.sleep(0)
    store.set_field("V2", "name", "Second")
    release.set()
    await task

    assert dirty.is_dirty
    assert store.get("V2").name == "Second"
    assert [entry.name for entry in store.baseline() if entry.vehicle_id == "V1"] == ["First"]


@pytest.mark.asyncio
async def test_commit_refused_while_another_write_holds_the_lock(
    backend: FakeBackend, store: RowStore, dirty: DirtyTracker
) -> None:
    pipeline, _ = _pipeline(backend, store, dirty)
    store.set_field("V1", "name", "Renamed")

    async with pipeline.exclusive("disable the registry"):
        assert pipeline.in_flight
        with pytest.raises(CommitInProgressError, match="save"):
            await pipeline.commit(LOT_ID)

    assert backend.calls == []
    assert not pipeline.in_flight
    assert dirty.is_dirty
