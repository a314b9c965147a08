"""Modal screens for the browser chrome."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from ..persistence import BookmarkStore
from ..urls import truncate_title

BOOKMARK_URL_WIDTH = 40


class BookmarksScreen(ModalScreen[str]):
    """Bookmark list: Enter opens, Delete removes, R restores the defaults.

    Dismisses with the chosen URL, or ``""`` when cancelled.  Removing and
    resetting write through to the store immediately.
    """

    BINDINGS = [
        Binding("escape", "cancel", show=False),
        Binding("delete", "remove_highlighted", "Remove", show=False),
        Binding("r", "reset", "Reset", show=False),
    ]

    def __init__(self, bookmarks: BookmarkStore) -> None:
        super().__init__()
        self._bookmarks = bookmarks

    def compose(self) -> ComposeResult:
        with Vertical(id="bookmarks-modal"):
            yield Static(
                "Bookmarks  [dim](Enter opens, Del removes, R resets)[/]",
                id="bookmarks-title",
            )
            yield OptionList(id="bookmarks-list")

    def on_mount(self) -> None:
        self._update_list()
        self.query_one("#bookmarks-list", OptionList).focus()

    def _update_list(self, highlight: int = 0) -> None:
        option_list = self.query_one("#bookmarks-list", OptionList)
        option_list.clear_options()
        bookmarks = self._bookmarks.all()
        if not bookmarks:
            option_list.add_option(Option("No bookmarks yet", disabled=True))
            return
        for bookmark in bookmarks:
            prompt = Text.assemble(
                bookmark.title,
                "  ",
                (truncate_title(bookmark.url, BOOKMARK_URL_WIDTH), "dim"),
            )
            option_list.add_option(Option(prompt, id=bookmark.url))
        option_list.highlighted = min(highlight, len(bookmarks) - 1)

    def _highlighted_url(self) -> str | None:
        option_list = self.query_one("#bookmarks-list", OptionList)
        if option_list.highlighted is None:
            return None
        return option_list.get_option_at_index(option_list.highlighted).id

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        # Option id stores the full URL
        if event.option.id is not None:
            self.dismiss(event.option.id)

    def action_remove_highlighted(self) -> None:
        url = self._highlighted_url()
        if url is None:
            return
        index = self.query_one("#bookmarks-list", OptionList).highlighted or 0
        self._bookmarks.remove(url)
        self._update_list(index)

    def action_reset(self) -> None:
        self._bookmarks.reset()
        self._update_list()

    def action_cancel(self) -> None:
        self.dismiss("")
