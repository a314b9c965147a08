"""Tab session management.

:class:`TabSessionStore` is the single owner of the open tabs, their
left-to-right order, pin state, and the active selection.  It talks to the
host through the async :class:`~pioneer_chrome.protocol.HostBridge` and folds
the host's notifications back in through :meth:`TabSessionStore.update_from_host`
and :meth:`TabSessionStore.handle_tab_closed`.

Invariants kept after every mutation:

* ``order`` is a permutation of the tab ids, with every pinned tab in a
  contiguous prefix.
* ``active_tab_id`` is ``None`` exactly when there are no tabs, and otherwise
  names an open tab.

Host calls are awaited *before* local state changes, and the tab is looked
up again afterwards, so a failed request leaves nothing half-applied and a
tab closed while a request was in flight is simply skipped.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from .constants import HOME_URL, PLACEHOLDER_TITLE, SEARCH_URL
from .log import logger
from .protocol import (
    ActivateTabRequest,
    CloseTabRequest,
    CreateTabRequest,
    HostBridge,
    HostBridgeError,
    HostMessage,
    NavigateRequest,
    ProtocolError,
    TabClosed,
    TabPayload,
    TabRequest,
    TabUpdated,
    parse_host_message,
)
from .urls import normalize_url

if TYPE_CHECKING:
    from .features.progress import NavigationProgressController
    from .persistence import HistoryLog


@dataclass
class Tab:
    """One open tab as the UI sees it."""

    id: str
    url: str = ""
    title: str = PLACEHOLDER_TITLE
    can_go_back: bool = False
    can_go_forward: bool = False
    is_loading: bool = False
    favicon: str | None = None
    is_pinned: bool = False

    @classmethod
    def from_payload(cls, payload: TabPayload) -> Tab:
        return cls(
            id=payload.id,
            url=payload.url,
            title=payload.title or PLACEHOLDER_TITLE,
            can_go_back=payload.can_go_back,
            can_go_forward=payload.can_go_forward,
            is_loading=payload.is_loading,
            favicon=payload.favicon,
        )


class TabSessionStore:
    """Owns the tab set, session order, pin state, and active selection.

    Parameters
    ----------
    host:
        The HostBridge that creates, shows, navigates, and destroys surfaces.
    progress:
        Optional loading indicator, driven by the active tab's loading state.
    history:
        Optional history log; completed page loads are recorded in it.
    """

    def __init__(
        self,
        host: HostBridge,
        *,
        progress: NavigationProgressController | None = None,
        history: HistoryLog | None = None,
        home_url: str = HOME_URL,
        search_url: str = SEARCH_URL,
    ) -> None:
        self._host = host
        self._progress = progress
        self._history = history
        self.home_url = home_url
        self.search_url = search_url

        self._tabs: dict[str, Tab] = {}
        self._order: list[str] = []
        self._active_id: str | None = None
        self._closed_ids: set[str] = set()
        self._listeners: list[Callable[[], object]] = []
        self._background: set[asyncio.Task[Any]] = set()

        if progress is not None:
            progress.on_timeout = self._on_progress_timeout

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._tabs)

    @property
    def tabs(self) -> dict[str, Tab]:
        """Snapshot of the tab set (copies; mutating them has no effect)."""
        return {tid: replace(tab) for tid, tab in self._tabs.items()}

    @property
    def order(self) -> list[str]:
        return list(self._order)

    @property
    def active_tab_id(self) -> str | None:
        return self._active_id

    @property
    def active_tab(self) -> Tab | None:
        return self.get(self._active_id) if self._active_id else None

    @property
    def pinned_count(self) -> int:
        # Pinned tabs are a prefix, so counting the leading run is enough
        count = 0
        for tid in self._order:
            if not self._tabs[tid].is_pinned:
                break
            count += 1
        return count

    def get(self, tab_id: str) -> Tab | None:
        tab = self._tabs.get(tab_id)
        return replace(tab) if tab is not None else None

    def ordered_tabs(self) -> list[Tab]:
        """Tabs in session order (copies), for rendering."""
        return [replace(self._tabs[tid]) for tid in self._order]

    def invariant_violations(self) -> list[str]:
        """Describe every broken invariant (empty when the state is consistent)."""
        problems: list[str] = []
        if sorted(self._order) != sorted(self._tabs):
            problems.append("session order is not a permutation of the tab ids")
        seen_unpinned = False
        for tid in self._order:
            tab = self._tabs.get(tid)
            if tab is None:
                continue
            if not tab.is_pinned:
                seen_unpinned = True
            elif seen_unpinned:
                problems.append(f"pinned tab {tid} follows an unpinned tab")
        if not self._tabs and self._active_id is not None:
            problems.append("active tab set while there are no tabs")
        if self._tabs and self._active_id not in self._tabs:
            problems.append(f"active tab {self._active_id!r} is not open")
        return problems

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, callback: Callable[[], object]) -> Callable[[], None]:
        """Call *callback* after every state change.  Returns an unsubscribe function."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                logger.debug("session change listener failed", exc_info=True)

    # ------------------------------------------------------------------
    # Tab lifecycle
    # ------------------------------------------------------------------

    async def create_tab(self, url: str | None = None) -> Tab:
        """Ask the host for a new tab, append it, and make it active.

        Raises ``HostBridgeError`` (with no state change) if the host refuses.
        """
        try:
            payload = await self._host.create_tab(CreateTabRequest(url=url))
        except HostBridgeError:
            logger.warning("host failed to create tab for %r", url, exc_info=True)
            raise

        if payload.id in self._tabs:
            # tabUpdated for this id beat the createTab reply
            tab = self._tabs[payload.id]
        else:
            tab = Tab.from_payload(payload)
            self._tabs[tab.id] = tab
            self._order.append(tab.id)
        self._active_id = tab.id
        self._sync_progress()
        self._notify()
        await self._show_surface(tab.id)
        return replace(tab)

    async def close_tab(self, tab_id: str) -> bool:
        """Close an unpinned tab.  Returns False for unknown or pinned tabs.

        Raises ``HostBridgeError`` (with no state change) if the host refuses.
        """
        tab = self._tabs.get(tab_id)
        if tab is None:
            logger.debug("close_tab: unknown tab %s", tab_id)
            return False
        if tab.is_pinned:
            logger.debug("close_tab: tab %s is pinned, unpin it first", tab_id)
            return False

        try:
            await self._host.close_tab(CloseTabRequest(id=tab_id))
        except HostBridgeError:
            logger.warning("host failed to close tab %s", tab_id, exc_info=True)
            raise

        replacement = self._remove(tab_id)
        if replacement is not None:
            await self._show_surface(replacement)
        return True

    def handle_tab_closed(self, tab_id: str) -> bool:
        """Drop a tab the host already destroyed.  Unknown ids are ignored."""
        if tab_id not in self._tabs:
            self._closed_ids.add(tab_id)
            return False
        replacement = self._remove(tab_id)
        if replacement is not None:
            self._spawn(self._show_surface(replacement))
        return True

    def _remove(self, tab_id: str) -> str | None:
        """Remove *tab_id* locally.  Returns the newly activated tab id, if any."""
        if tab_id not in self._tabs:
            return None
        index = self._order.index(tab_id)
        del self._order[index]
        del self._tabs[tab_id]
        self._closed_ids.add(tab_id)

        replacement = None
        if self._active_id == tab_id:
            if self._order:
                replacement = self._order[min(index, len(self._order) - 1)]
            self._active_id = replacement
            self._sync_progress()
        self._notify()
        return replacement

    async def duplicate_tab(self, tab_id: str) -> Tab | None:
        tab = self._tabs.get(tab_id)
        if tab is None:
            return None
        return await self.create_tab(tab.url or None)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    async def switch_to(self, tab_id: str) -> bool:
        """Make *tab_id* the active tab and have the host show only its surface."""
        if tab_id not in self._tabs:
            logger.debug("switch_to: unknown tab %s", tab_id)
            return False
        try:
            await self._host.activate_tab(ActivateTabRequest(tab_id=tab_id))
        except HostBridgeError:
            logger.warning("host failed to activate tab %s", tab_id, exc_info=True)
            raise
        if tab_id not in self._tabs:
            # Closed while the host was switching
            return False
        if self._active_id != tab_id:
            self._active_id = tab_id
            self._sync_progress()
            self._notify()
        return True

    async def switch_to_index(self, index: int) -> bool:
        if not 0 <= index < len(self._order):
            return False
        return await self.switch_to(self._order[index])

    async def switch_to_next(self) -> bool:
        return await self._switch_relative(1)

    async def switch_to_previous(self) -> bool:
        return await self._switch_relative(-1)

    async def _switch_relative(self, step: int) -> bool:
        if self._active_id is None or len(self._order) < 2:
            return False
        index = self._order.index(self._active_id)
        return await self.switch_to(self._order[(index + step) % len(self._order)])

    async def _show_surface(self, tab_id: str) -> None:
        """Tell the host which surface is visible after a local selection change.

        The selection is already committed; a failure here only leaves the
        host showing a stale surface until the next switch.
        """
        try:
            await self._host.activate_tab(ActivateTabRequest(tab_id=tab_id))
        except HostBridgeError:
            logger.warning("host failed to show tab %s", tab_id, exc_info=True)

    def _spawn(self, coro: Any) -> None:
        try:
            task = asyncio.get_running_loop().create_task(coro)
        except RuntimeError:
            coro.close()
            logger.debug("no running loop, host surface not updated")
            return
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def toggle_pin(self, tab_id: str) -> bool:
        """Pin or unpin *tab_id*, moving it to the pinned/unpinned boundary.

        Taking the tab out leaves a valid order whose pinned prefix has
        ``boundary`` entries.  Re-inserting at ``boundary`` puts a pinned tab
        at the end of that prefix, or an unpinned tab at the start of the rest;
        every other tab keeps its relative position.
        """
        tab = self._tabs.get(tab_id)
        if tab is None:
            logger.debug("toggle_pin: unknown tab %s", tab_id)
            return False
        self._order.remove(tab_id)
        boundary = self.pinned_count
        tab.is_pinned = not tab.is_pinned
        self._order.insert(boundary, tab_id)
        self._notify()
        return True

    def reorder(self, tab_id: str, target_index: int) -> bool:
        """Move *tab_id* to *target_index* inside its own pin partition.

        Returns False (order untouched) for unknown tabs, out-of-range
        indexes, or a target on the other side of the pin boundary.
        """
        tab = self._tabs.get(tab_id)
        if tab is None or not 0 <= target_index < len(self._order):
            return False
        pinned = self.pinned_count
        if tab.is_pinned:
            allowed = target_index < pinned
        else:
            allowed = target_index >= pinned
        if not allowed:
            return False
        current = self._order.index(tab_id)
        if current == target_index:
            return False
        del self._order[current]
        self._order.insert(target_index, tab_id)
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    async def navigate(self, text: str) -> Tab:
        """Load address-bar input in the active tab (or a new tab if none).

        Raises ``ValueError`` on empty input and ``HostBridgeError`` if the
        host refuses.
        """
        url = normalize_url(text, self.search_url)
        tab_id = self._active_id
        if tab_id is None:
            return await self.create_tab(url)
        try:
            await self._host.navigate_to(NavigateRequest(tab_id=tab_id, url=url))
        except HostBridgeError:
            logger.warning("host failed to navigate %s to %s", tab_id, url, exc_info=True)
            raise
        tab = self._tabs.get(tab_id)
        if tab is None:
            raise HostBridgeError(f"tab {tab_id} closed during navigation")
        self._begin_loading(tab, url)
        return replace(tab)

    async def go_home(self) -> Tab:
        return await self.navigate(self.home_url)

    async def go_back(self) -> bool:
        tab = self.active_tab
        if tab is None or not tab.can_go_back:
            return False
        return await self._step(tab.id, "go back", self._host.go_back)

    async def go_forward(self) -> bool:
        tab = self.active_tab
        if tab is None or not tab.can_go_forward:
            return False
        return await self._step(tab.id, "go forward", self._host.go_forward)

    async def reload(self) -> bool:
        tab = self.active_tab
        if tab is None:
            return False
        return await self._step(tab.id, "reload", self._host.reload)

    async def _step(
        self,
        tab_id: str,
        what: str,
        send: Callable[[TabRequest], Awaitable[None]],
    ) -> bool:
        """Send a back/forward/reload request, then mark the tab loading.

        The new URL is only known once the host reports it, so the tab keeps
        its current URL until then.
        """
        try:
            await send(TabRequest(tab_id=tab_id))
        except HostBridgeError:
            logger.warning("host failed to %s in tab %s", what, tab_id, exc_info=True)
            raise
        tab = self._tabs.get(tab_id)
        if tab is None:
            return False
        self._begin_loading(tab, tab.url)
        return True

    def _begin_loading(self, tab: Tab, url: str) -> None:
        tab.url = url
        tab.is_loading = True
        if tab.id == self._active_id:
            self._sync_progress()
        self._notify()

    # ------------------------------------------------------------------
    # Host reconciliation
    # ------------------------------------------------------------------

    def update_from_host(self, payload: TabPayload) -> bool:
        """Merge a host-reported tab state.  Returns True if anything changed.

        Idempotent: the same payload applied twice changes nothing the second
        time.  An unknown id is adopted as a new unpinned tab at the end of the
        order, unless the tab was already closed here (a late notification).
        """
        tab = self._tabs.get(payload.id)
        if tab is None:
            if payload.id in self._closed_ids:
                logger.debug("ignoring update for closed tab %s", payload.id)
                return False
            tab = Tab.from_payload(payload)
            self._tabs[tab.id] = tab
            self._order.append(tab.id)
            if self._active_id is None:
                self._active_id = tab.id
                self._spawn(self._show_surface(tab.id))
            was_loading = False
            url_changed = changed = True
        else:
            was_loading = tab.is_loading
            url_changed = payload.url != tab.url
            before = (
                tab.title, tab.url, tab.is_loading, tab.can_go_back,
                tab.can_go_forward, tab.favicon,
            )
            tab.title = payload.title or PLACEHOLDER_TITLE
            tab.url = payload.url
            tab.is_loading = payload.is_loading
            tab.can_go_back = payload.can_go_back
            tab.can_go_forward = payload.can_go_forward
            if payload.favicon:
                tab.favicon = payload.favicon
            changed = before != (
                tab.title, tab.url, tab.is_loading, tab.can_go_back,
                tab.can_go_forward, tab.favicon,
            )

        if not changed:
            return False

        if was_loading != tab.is_loading and tab.id == self._active_id:
            self._sync_progress()
        # Only a finished load is a visit; favicon or title refreshes are not
        if (
            self._history is not None
            and not tab.is_loading
            and (was_loading or url_changed)
        ):
            self._history.record(tab.title, tab.url)
        self._notify()
        return True

    def handle_message(self, name: str, payload: Any) -> HostMessage | None:
        """Entry point for raw inbound host messages.

        Malformed messages are logged and dropped.
        """
        try:
            message = parse_host_message(name, payload)
        except ProtocolError:
            logger.warning("dropping malformed %s message: %r", name, payload, exc_info=True)
            return None
        if isinstance(message, TabUpdated):
            self.update_from_host(message.tab)
        elif isinstance(message, TabClosed):
            self.handle_tab_closed(message.id)
        return message

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def _sync_progress(self) -> None:
        if self._progress is None:
            return
        active = self._tabs.get(self._active_id) if self._active_id else None
        if active is not None and active.is_loading:
            self._progress.start()
        else:
            self._progress.finish()

    def _on_progress_timeout(self) -> None:
        """The host never reported the active page as loaded; treat it as idle."""
        tab = self._tabs.get(self._active_id) if self._active_id else None
        if tab is not None and tab.is_loading:
            tab.is_loading = False
            self._notify()
