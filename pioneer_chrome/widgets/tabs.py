"""Tab strip widgets."""

from __future__ import annotations

from textual import events
from textual.containers import Horizontal
from textual.widgets import Static

from ..features.drag_reorder import TabSlot
from ..session_store import Tab
from ..urls import truncate_title


def tab_label(tab: Tab) -> str:
    """Pinned tabs show only their icon; the rest show icon and title."""
    icon = "◌" if tab.is_loading else (tab.favicon or "●")
    if tab.is_pinned:
        return f" {icon} "
    return f" {icon} {truncate_title(tab.title)} "


class TabButton(Static):
    """A tab label in the tab bar."""

    def __init__(self, label: str, tab_id: str, **kwargs) -> None:
        super().__init__(label, **kwargs)
        self.tab_id = tab_id


class TabCloseButton(Static):
    """The close mark after an unpinned tab."""

    def __init__(self, tab_id: str, **kwargs) -> None:
        super().__init__("× ", **kwargs)
        self.tab_id = tab_id


class TabBar(Horizontal):
    """Horizontal tab bar rendered from the session order.

    Clicks are routed here by the widget under the pointer: a click on a tab
    switches to it, a double click toggles its pin, and the close mark closes
    it.  Mouse drags are forwarded to the app's DragReorderController; the bar
    redraws from the store like any other change.
    """

    def update_tabs(self, tabs: list[Tab], active_id: str | None) -> None:
        """Rebuild the tab bar buttons."""
        self.remove_children()
        for tab in tabs:
            state = "tab-active" if tab.id == active_id else "tab-inactive"
            cls = f"tab-btn {state}"
            if tab.is_pinned:
                cls += " tab-pinned"
            self.mount(TabButton(tab_label(tab), tab_id=tab.id, classes=cls))
            if not tab.is_pinned:
                self.mount(TabCloseButton(tab.id, classes=f"tab-close {state}"))
        if not tabs:
            self.add_class("no-tabs")
        else:
            self.remove_class("no-tabs")

    def layout_slots(self) -> list[TabSlot]:
        return [
            TabSlot(btn.tab_id, btn.region.x, btn.region.width)
            for btn in self.query(TabButton)
        ]

    def _widget_at(self, event: events.MouseEvent):
        # The bar may hold the mouse capture, so look up the target directly
        widget, _ = self.screen.get_widget_at(event.screen_x, event.screen_y)
        return widget

    def on_click(self, event: events.Click) -> None:
        widget = self._widget_at(event)
        if isinstance(widget, TabCloseButton):
            event.stop()
            self.app.request_close(widget.tab_id)
        elif isinstance(widget, TabButton):
            event.stop()
            if event.chain >= 2:
                self.app.request_toggle_pin(widget.tab_id)
            else:
                self.app.request_switch(widget.tab_id)

    def on_mouse_down(self, event: events.MouseDown) -> None:
        widget = self._widget_at(event)
        if isinstance(widget, TabButton) and self.app.drag.start(
            widget.tab_id, event.screen_x
        ):
            self.capture_mouse()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if self.app.drag.is_dragging:
            self.app.drag.move(event.screen_x, self.layout_slots())

    def on_mouse_up(self, event: events.MouseUp) -> None:
        if self.app.drag.is_dragging:
            self.app.drag.end()
            self.release_mouse()
