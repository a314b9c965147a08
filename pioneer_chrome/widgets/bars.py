"""Address bar and suggestion bar widgets."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Input, Static

from ..features.suggestions import Suggestion
from ..urls import truncate_title


class AddressBar(Horizontal):
    """URL input with a bookmark star."""

    def compose(self) -> ComposeResult:
        yield Input(placeholder="Search or enter address", id="url-bar")
        yield Static("☆", id="bookmark-btn")

    def set_bookmarked(self, bookmarked: bool) -> None:
        star = self.query_one("#bookmark-btn", Static)
        star.update("★" if bookmarked else "☆")
        star.set_class(bookmarked, "bookmarked")

    def on_click(self, event) -> None:
        if getattr(event.widget, "id", None) == "bookmark-btn":
            self.app.action_toggle_bookmark()


class SuggestionBar(Static):
    """Drop-down list of ranked suggestions under the address bar.

    One row per suggestion: source glyph, title, and dimmed URL.  The
    highlighted row is what Tab accepts; repeated Tab moves the highlight.
    """

    SOURCE_GLYPHS = {"bookmark": "★", "history": "↺"}
    TITLE_WIDTH = 30
    URL_WIDTH = 48

    def __init__(self) -> None:
        super().__init__("", id="suggestion-bar")
        self._suggestions: list[Suggestion] = []
        self._index: int = 0

    @property
    def has_suggestions(self) -> bool:
        return bool(self._suggestions)

    @property
    def suggestions(self) -> list[Suggestion]:
        return list(self._suggestions)

    @property
    def highlighted(self) -> int | None:
        return self._index if self._suggestions else None

    def set_suggestions(self, suggestions: list[Suggestion]) -> None:
        self._suggestions = list(suggestions)
        self._index = 0
        self._render_list()

    def accept_current(self) -> Suggestion | None:
        if not self._suggestions:
            return None
        return self._suggestions[self._index]

    def cycle_next(self) -> Suggestion | None:
        """Move the highlight down one row, wrapping, and return it."""
        if not self._suggestions:
            return None
        self._index = (self._index + 1) % len(self._suggestions)
        self._render_list()
        return self._suggestions[self._index]

    def dismiss(self) -> None:
        self._suggestions = []
        self._index = 0
        self._render_list()

    def row_text(self, index: int) -> Text:
        """Plain rendering of one row, without highlight styling."""
        item = self._suggestions[index]
        return Text.assemble(
            ("› " if index == self._index else "  "),
            self.SOURCE_GLYPHS.get(item.source, "·"),
            " ",
            truncate_title(item.title, self.TITLE_WIDTH).ljust(self.TITLE_WIDTH),
            "  ",
            (truncate_title(item.url, self.URL_WIDTH), "dim"),
        )

    def _render_list(self) -> None:
        self.display = bool(self._suggestions)
        if not self._suggestions:
            self.update("")
            return
        rows = []
        for index in range(len(self._suggestions)):
            row = self.row_text(index)
            if index == self._index:
                row.stylize("reverse")
            rows.append(row)
        self.update(Text("\n").join(rows))
