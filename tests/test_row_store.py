from __future__ import annotations

import pytest

from pyplatereg.editor.dirty import DirtyTracker
from pyplatereg.editor.store import RowStore
from pyplatereg.exceptions import RegistryStateError, RowNotFoundError

from conftest import LOT_ID, make_entry


def _placeholders(store: RowStore) -> list[str]:
    return [row.vehicle_id for row in store.rows if row.is_placeholder]


def _editing(store: RowStore) -> list[str]:
    return [row.vehicle_id for row in store.rows if row.is_editing and not row.is_placeholder]


def test_load_sorts_by_plate_case_insensitive_and_appends_placeholder(store: RowStore, dirty: DirtyTracker) -> None:
    assert [row.plate for row in store.rows] == ["ABC100", "bcd200", "CDE300", ""]
    assert _placeholders(store) == ["PL_1"]
    assert store.placeholder is not None
    assert store.placeholder.lot_id == LOT_ID
    assert not dirty.is_dirty


def test_load_clears_dirty_state(store: RowStore, dirty: DirtyTracker) -> None:
    store.set_field("V1", "name", "Someone")
    assert dirty.is_dirty
    store.load(LOT_ID, [make_entry("V9", "ZZZ999")])
    assert not dirty.is_dirty
    assert [row.vehicle_id for row in store.rows] == ["V9", "PL_2"]


def test_operations_require_load(dirty: DirtyTracker) -> None:
    store = RowStore(dirty)
    with pytest.raises(RegistryStateError):
        store.dismiss_incomplete()


def test_set_field_marks_dirty(store: RowStore, dirty: DirtyTracker) -> None:
    row = store.set_field("V2", "email", "new@example.com")
    assert row.email == "new@example.com"
    assert store.get("V2").email == "new@example.com"
    assert dirty.is_dirty


def test_set_field_rejects_unknown_field_and_row(store: RowStore) -> None:
    with pytest.raises(ValueError, match="field must be one of"):
        store.set_field("V1", "vehicle_id", "X")
    with pytest.raises(RowNotFoundError):
        store.set_field("missing", "plate", "X")


def test_blank_input_does_not_promote_placeholder(store: RowStore, dirty: DirtyTracker) -> None:
    row = store.set_field("PL_1", "plate", "   ")
    assert row.is_placeholder
    assert _placeholders(store) == ["PL_1"]
    assert dirty.is_dirty


def test_promotion_keeps_id_and_adds_fresh_placeholder(store: RowStore) -> None:
    promoted = store.set_field("PL_1", "plate", "NEW1")

    assert promoted.vehicle_id == "PL_1"
    assert not promoted.is_placeholder
    assert promoted.is_editing
    assert _placeholders(store) == ["PL_2"]
    assert _editing(store) == ["PL_1"]


def test_exactly_one_placeholder_across_many_placeholder_edits(store: RowStore) -> None:
    for index in range(5):
        placeholder = store.placeholder
        assert placeholder is not None
        store.set_field(placeholder.vehicle_id, "name", "")
        store.set_field(placeholder.vehicle_id, "plate", f"P{index}")
        store.set_field(placeholder.vehicle_id, "phone", "5550100123")
        assert len(_placeholders(store)) == 1
        assert len(_editing(store)) <= 1


def test_promotion_takes_other_row_out_of_edit(store: RowStore) -> None:
    store.toggle_edit("V1")
    assert _editing(store) == ["V1"]

    store.set_field("PL_1", "plate", "NEW1")
    assert _editing(store) == ["PL_1"]
    assert not store.get("V1").is_editing


def test_toggle_edit_enters_and_leaves_edit_mode(store: RowStore) -> None:
    row = store.toggle_edit("V2")
    assert row is not None and row.is_editing

    store.toggle_edit("V3")
    assert _editing(store) == ["V3"]

    row = store.toggle_edit("V3")
    assert row is not None and not row.is_editing
    assert _editing(store) == []


def test_toggle_edit_deletes_row_left_blank(store: RowStore) -> None:
    store.toggle_edit("V1")
    for field in ("plate", "name", "email", "phone"):
        store.set_field("V1", field, "")

    assert store.toggle_edit("V1") is None
    with pytest.raises(RowNotFoundError):
        store.get("V1")


def test_toggle_edit_on_placeholder_is_noop(store: RowStore) -> None:
    store.toggle_edit("V1")
    row = store.toggle_edit("PL_1")
    assert row is not None and row.is_placeholder
    assert not row.is_editing
    assert _editing(store) == ["V1"]


def test_remove_deletes_row_and_marks_dirty(store: RowStore, dirty: DirtyTracker) -> None:
    removed = store.remove("V3")
    assert removed.plate == "CDE300"
    assert [row.vehicle_id for row in store.rows] == ["V1", "V2", "PL_1"]
    assert dirty.is_dirty


def test_remove_placeholder_is_rejected(store: RowStore, dirty: DirtyTracker) -> None:
    with pytest.raises(RegistryStateError):
        store.remove("PL_1")
    assert not dirty.is_dirty


def test_dismiss_incomplete_drops_blank_rows_only(store: RowStore) -> None:
    store.set_field("PL_1", "plate", "X")
    store.set_field("PL_1", "plate", "")
    assert _editing(store) == ["PL_1"]
    before = {row.vehicle_id: row for row in store.rows if row.vehicle_id != "PL_1"}

    dropped = store.dismiss_incomplete()

    assert dropped == ["PL_1"]
    assert _editing(store) == []
    assert _placeholders(store) == ["PL_2"]
    for row in store.rows:
        original = before[row.vehicle_id]
        assert (row.plate, row.name, row.email, row.phone) == (
            original.plate,
            original.name,
            original.email,
            original.phone,
        )


def test_reset_restores_baseline(store: RowStore, dirty: DirtyTracker) -> None:
    store.remove("V1")
    store.set_field("V2", "plate", "CHANGED")
    store.reset()

    assert [row.plate for row in store.rows if not row.is_placeholder] == ["ABC100", "bcd200", "CDE300"]
    assert not dirty.is_dirty


def test_rebase_adopts_committed_entries(store: RowStore) -> None:
    store.set_field("PL_1", "plate", "AAA000")
    committed = store.entries()
    store.rebase(committed)

    assert [row.plate for row in store.rows] == ["AAA000", "ABC100", "bcd200", "CDE300", ""]
    assert _editing(store) == []
    assert store.baseline() == sorted(committed, key=lambda entry: entry.plate.casefold())


def test_rebase_keep_rows_leaves_current_rows(store: RowStore) -> None:
    store.toggle_edit("V1")
    store.rebase(store.entries(), keep_rows=True)
    assert _editing(store) == ["V1"]


def test_placeholder_id_never_collides_with_existing_rows(dirty: DirtyTracker) -> None:
    ids = iter(["V1", "V1", "PL_fresh"])
    store = RowStore(dirty, id_factory=lambda: next(ids))
    store.load(LOT_ID, [make_entry("V1", "ABC100")])
    assert _placeholders(store) == ["PL_fresh"]
