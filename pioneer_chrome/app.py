"""Terminal browser chrome for Pioneer.

The app builds the session objects once, subscribes to the store's change
hook, and redraws from store snapshots.  Every tab mutation goes through
:class:`~pioneer_chrome.session_store.TabSessionStore`.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import TypeVar

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.widgets import Input, Static

from .features import (
    DragReorderController,
    NavigationProgressController,
    ProgressState,
    SuggestionRanker,
)
from .host import MemoryHostBridge
from .log import logger
from .persistence import BookmarkStore, HistoryLog, KeyValueStore
from .preferences import Preferences, load_preferences
from .protocol import HostBridge, HostBridgeError
from .session_store import TabSessionStore
from .theme import PIONEER_THEME
from .urls import normalize_url
from .widgets import (
    AddressBar,
    BookmarksScreen,
    LoadingIndicator,
    SuggestionBar,
    TabBar,
    WelcomeScreen,
)

T = TypeVar("T")


class PioneerApp(App):
    """Pioneer - a tabbed browser shell driven by a HostBridge."""

    CSS_PATH = "styles.tcss"
    TITLE = "Pioneer"

    BINDINGS = [
        Binding("ctrl+t", "new_tab", "New tab", show=True, priority=True),
        Binding("ctrl+w", "close_tab", "Close", show=True, priority=True),
        Binding("ctrl+d", "duplicate_tab", "Duplicate", show=False, priority=True),
        Binding("f2", "toggle_pin", "Pin", show=True),
        Binding("ctrl+b", "toggle_bookmark", "Bookmark", show=True),
        Binding("ctrl+o", "show_bookmarks", "Bookmarks", show=True),
        Binding("ctrl+l", "focus_address", "Address", show=False),
        Binding("ctrl+r", "reload", "Reload", show=False),
        Binding("alt+left", "go_back", "Back", show=False),
        Binding("alt+right", "go_forward", "Forward", show=False),
        Binding("alt+home", "go_home", "Home", show=False),
        Binding("ctrl+pagedown", "next_tab", "Next tab", show=False),
        Binding("ctrl+pageup", "previous_tab", "Previous tab", show=False),
        Binding("tab", "accept_suggestion", "Accept", show=False, priority=True),
        Binding("ctrl+q", "quit", "Quit", show=True),
        *[
            Binding(f"alt+{n}", f"switch_index({n - 1})", f"Tab {n}", show=False)
            for n in range(1, 10)
        ],
    ]

    def __init__(
        self,
        *,
        prefs: Preferences | None = None,
        host: HostBridge | None = None,
        storage: KeyValueStore | None = None,
        initial_urls: list[str] | None = None,
    ) -> None:
        super().__init__()
        self._initial_urls = list(initial_urls or [])
        self._prefs = prefs or load_preferences()
        storage = storage or KeyValueStore(self._prefs.data_dir)

        self.bookmarks = BookmarkStore(storage)
        self.history = HistoryLog(storage, max_entries=self._prefs.max_history_entries)
        self.progress = NavigationProgressController(
            self.set_timer,
            fallback_seconds=self._prefs.progress.fallback_seconds,
            complete_seconds=self._prefs.progress.complete_seconds,
            on_change=self._on_progress_change,
        )
        if host is None:
            host = MemoryHostBridge()
            host.listener = self._on_host_message
        self.host = host
        self.store = TabSessionStore(
            host,
            progress=self.progress,
            history=self.history,
            home_url=self._prefs.browsing.home_url,
            search_url=self._prefs.browsing.search_url,
        )
        self.ranker = SuggestionRanker(self.bookmarks, self.history)
        self.drag = DragReorderController(self.store)
        self._unsubscribe = None
        self._suggestion_accepted = False

    # ── Layout ──────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        yield TabBar(id="tab-bar")
        yield AddressBar(id="address-bar")
        yield SuggestionBar()
        yield LoadingIndicator("", id="progress")
        yield WelcomeScreen("", id="welcome-screen")
        yield Static("", id="page-view")

    async def on_mount(self) -> None:
        self.register_theme(PIONEER_THEME)
        self.theme = "pioneer"
        self._unsubscribe = self.store.subscribe(self._refresh_chrome)
        self._refresh_chrome()
        self._on_progress_change(self.progress.state)
        self.query_one(SuggestionBar).dismiss()
        self.query_one("#url-bar", Input).focus()
        for text in self._initial_urls:
            await self.navigate_new_tab(text)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
        self.progress.cancel()

    # ── Rendering ───────────────────────────────────────────────

    def _refresh_chrome(self) -> None:
        """Redraw everything that depends on session state."""
        tabs = self.store.ordered_tabs()
        active = self.store.active_tab
        self.query_one(TabBar).update_tabs(tabs, self.store.active_tab_id)

        url_bar = self.query_one("#url-bar", Input)
        if self.focused is not url_bar:
            url_bar.value = active.url if active else ""
        self.query_one(AddressBar).set_bookmarked(
            active is not None and self.bookmarks.is_bookmarked(active.url)
        )

        welcome = self.query_one(WelcomeScreen)
        page = self.query_one("#page-view", Static)
        if active is None:
            welcome.show_links(self.bookmarks.quick_links())
            welcome.display = True
            page.display = False
        else:
            welcome.display = False
            page.display = True
            state = "loading…" if active.is_loading else "ready"
            page.update(f"[bold]{active.title}[/bold]\n[dim]{active.url}  ({state})[/dim]")

    def _on_progress_change(self, state: ProgressState) -> None:
        try:
            indicator = self.query_one(LoadingIndicator)
        except NoMatches:
            return
        indicator.show_state(state)

    def _on_host_message(self, name: str, payload: dict) -> None:
        self.store.handle_message(name, payload)

    async def _guard(self, operation: Awaitable[T]) -> T | None:
        """Await a store operation, reporting host failures instead of crashing."""
        try:
            return await operation
        except HostBridgeError as exc:
            logger.debug("host operation failed", exc_info=True)
            self.notify(str(exc), title="Host error", severity="error")
            return None

    def request_switch(self, tab_id: str) -> None:
        """Called by tab buttons; the store call runs as a worker."""
        self.run_worker(self._guard(self.store.switch_to(tab_id)), exclusive=False)

    def request_close(self, tab_id: str) -> None:
        """Called by a tab's close mark."""
        self.run_worker(self._guard(self.store.close_tab(tab_id)), exclusive=False)

    def request_toggle_pin(self, tab_id: str) -> None:
        """Called on a tab double click."""
        self.store.toggle_pin(tab_id)

    # ── Address bar ─────────────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "url-bar" or self.focused is not event.input:
            return
        bar = self.query_one(SuggestionBar)
        if self._suggestion_accepted:
            current = bar.accept_current()
            if current is not None and current.url == event.value:
                return
        self._suggestion_accepted = False
        bar.set_suggestions(self.ranker.rank(event.value))

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "url-bar":
            return
        self._suggestion_accepted = False
        self.query_one(SuggestionBar).dismiss()
        await self.navigate(event.value)

    async def navigate(self, text: str) -> None:
        try:
            await self._guard(self.store.navigate(text))
        except ValueError:
            return
        self.set_focus(None)
        self._refresh_chrome()

    async def navigate_new_tab(self, text: str) -> None:
        try:
            url = normalize_url(text, self.store.search_url)
        except ValueError:
            return
        await self._guard(self.store.create_tab(url))

    def action_accept_suggestion(self) -> None:
        bar = self.query_one(SuggestionBar)
        if not bar.has_suggestions:
            self.screen.focus_next()
            return
        # First Tab accepts, repeated Tab cycles
        if self._suggestion_accepted:
            suggestion = bar.cycle_next()
        else:
            suggestion = bar.accept_current()
        url_bar = self.query_one("#url-bar", Input)
        url_bar.value = suggestion.url
        url_bar.cursor_position = len(suggestion.url)
        self._suggestion_accepted = True

    def action_focus_address(self) -> None:
        url_bar = self.query_one("#url-bar", Input)
        url_bar.focus()
        url_bar.select_all()

    # ── Tab actions ─────────────────────────────────────────────

    async def action_new_tab(self) -> None:
        await self._guard(self.store.create_tab())

    async def action_close_tab(self) -> None:
        if self.store.active_tab_id is not None:
            await self._guard(self.store.close_tab(self.store.active_tab_id))

    async def action_duplicate_tab(self) -> None:
        if self.store.active_tab_id is not None:
            await self._guard(self.store.duplicate_tab(self.store.active_tab_id))

    def action_toggle_pin(self) -> None:
        if self.store.active_tab_id is not None:
            self.store.toggle_pin(self.store.active_tab_id)

    async def action_next_tab(self) -> None:
        await self._guard(self.store.switch_to_next())

    async def action_previous_tab(self) -> None:
        await self._guard(self.store.switch_to_previous())

    async def action_switch_index(self, index: int) -> None:
        await self._guard(self.store.switch_to_index(index))

    async def action_go_back(self) -> None:
        await self._guard(self.store.go_back())

    async def action_go_forward(self) -> None:
        await self._guard(self.store.go_forward())

    async def action_reload(self) -> None:
        await self._guard(self.store.reload())

    async def action_go_home(self) -> None:
        await self._guard(self.store.go_home())

    # ── Bookmarks ───────────────────────────────────────────────

    def action_toggle_bookmark(self) -> None:
        active = self.store.active_tab
        if active is None or not active.url:
            return
        self.bookmarks.toggle(active.url, active.title)
        self._refresh_chrome()

    def action_show_bookmarks(self) -> None:
        self.push_screen(BookmarksScreen(self.bookmarks), self._on_bookmark_chosen)

    def _on_bookmark_chosen(self, url: str | None) -> None:
        # The list may have been edited even when nothing was chosen
        self._refresh_chrome()
        if url:
            self.run_worker(self.navigate(url), exclusive=False)
