"""Pointer-drag reordering of the tab strip."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..session_store import TabSessionStore


@dataclass(frozen=True)
class TabSlot:
    """Horizontal extent of one rendered tab."""

    tab_id: str
    left: float
    width: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def mid(self) -> float:
        return self.left + self.width / 2


class DragReorderController:
    """Turns a drag gesture into live ``TabSessionStore.reorder`` calls.

    Each move swaps the dragged tab with the neighbour under the pointer once
    the pointer crosses that neighbour's midpoint in the direction of travel.
    Positions are committed to the store as they happen, so releasing the
    pointer only clears the drag state.
    """

    def __init__(self, store: TabSessionStore) -> None:
        self._store = store
        self._tab_id: str | None = None
        self._start_x = 0.0
        self._offset = 0.0

    @property
    def is_dragging(self) -> bool:
        return self._tab_id is not None

    @property
    def tab_id(self) -> str | None:
        return self._tab_id

    @property
    def offset(self) -> float:
        """Visual offset of the dragged tab from its current slot."""
        return self._offset

    def start(self, tab_id: str, x: float) -> bool:
        if self._tab_id is not None or self._store.get(tab_id) is None:
            return False
        self._tab_id = tab_id
        self._start_x = x
        self._offset = 0.0
        return True

    def move(self, x: float, layout: Sequence[TabSlot]) -> float:
        """Track the pointer at *x* over the current tab *layout*; returns the offset."""
        if self._tab_id is None:
            return 0.0
        dragged = self._store.get(self._tab_id)
        if dragged is None:
            # Closed mid-drag by the host
            self.end()
            return 0.0

        self._offset = x - self._start_x
        order = self._store.order
        drag_idx = order.index(self._tab_id)

        for slot in layout:
            if slot.tab_id == self._tab_id or not (slot.left < x < slot.right):
                continue
            hover = self._store.get(slot.tab_id)
            if hover is None or hover.is_pinned != dragged.is_pinned:
                continue
            hover_idx = order.index(slot.tab_id)
            crossed_left = x < slot.mid and drag_idx > hover_idx
            crossed_right = x >= slot.mid and drag_idx < hover_idx
            if (crossed_left or crossed_right) and self._store.reorder(
                self._tab_id, hover_idx
            ):
                self._start_x = x
                self._offset = 0.0
            break

        return self._offset

    def end(self) -> None:
        self._tab_id = None
        self._start_x = 0.0
        self._offset = 0.0
