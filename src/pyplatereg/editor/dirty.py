"""Unsaved-change flag shared by the editor components."""

from __future__ import annotations


class DirtyTracker:
    """Single boolean recording that local edits are not yet committed.

    ``revision`` increases on every :meth:`mark`, which lets a commit tell
    whether the user kept editing while its requests were in flight.
    """

    __slots__ = ("_dirty", "_revision")

    def __init__(self) -> None:
        self._dirty = False
        self._revision = 0

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    @property
    def revision(self) -> int:
        return self._revision

    def mark(self) -> None:
        self._dirty = True
        self._revision += 1

    def clear(self) -> None:
        self._dirty = False

    def __bool__(self) -> bool:
        return self._dirty

    def __repr__(self) -> str:
        return f"DirtyTracker(dirty={self._dirty}, revision={self._revision})"
