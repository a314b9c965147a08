"""In-process HostBridge.

Stands in for the privileged host when no real browser engine is attached
(the terminal app and the test-suite).  It assigns tab ids, keeps one
surface per tab with its own back/forward stack, and pushes ``tabUpdated`` /
``tabClosed`` notifications asynchronously on the running event loop, the
same way the real host does after replying to a request.
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

from .constants import PLACEHOLDER_TITLE
from .log import logger
from .protocol import (
    ActivateTabRequest,
    CloseTabRequest,
    CreateTabRequest,
    HostBridgeError,
    NavigateRequest,
    TabPayload,
    TabRequest,
)

BLANK_URL = "about:blank"

MessageListener = Callable[[str, dict[str, Any]], object]


@dataclass
class Surface:
    """One browsing surface owned by the host."""

    tab_id: str
    back: list[str] = field(default_factory=list)
    forward: list[str] = field(default_factory=list)
    url: str = BLANK_URL
    hidden: bool = True
    passthrough: bool = True

    @property
    def title(self) -> str:
        if self.url == BLANK_URL:
            return PLACEHOLDER_TITLE
        return urlparse(self.url).netloc or self.url

    def payload(self, *, is_loading: bool) -> TabPayload:
        return TabPayload(
            id=self.tab_id,
            url=self.url,
            title=PLACEHOLDER_TITLE if is_loading else self.title,
            can_go_back=bool(self.back),
            can_go_forward=bool(self.forward),
            is_loading=is_loading,
        )


class MemoryHostBridge:
    """HostBridge that keeps every surface in memory.

    ``failing`` holds wire request names (``"createTab"``, ``"closeTab"``, ...)
    that should raise :class:`HostBridgeError`; ``calls`` records every
    request as ``(name, wire_payload)``.
    """

    def __init__(self, listener: MessageListener | None = None) -> None:
        self.listener = listener
        self.surfaces: dict[str, Surface] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.failing: set[str] = set()
        self._ids = itertools.count(1)

    # -- plumbing ----------------------------------------------------------------

    def _begin(self, name: str, wire: dict[str, Any]) -> None:
        self.calls.append((name, wire))
        if name in self.failing:
            raise HostBridgeError(f"{name} rejected by host")

    def _surface(self, tab_id: str) -> Surface:
        try:
            return self.surfaces[tab_id]
        except KeyError:
            raise HostBridgeError(f"no surface for tab {tab_id!r}") from None

    def _emit(self, name: str, payload: dict[str, Any]) -> None:
        if self.listener is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("no running loop, dropping %s notification", name)
            return
        loop.call_soon(self.listener, name, payload)

    def _finish_load(self, surface: Surface) -> None:
        self._emit("tabUpdated", surface.payload(is_loading=False).to_wire())

    def _load(self, surface: Surface, url: str) -> None:
        if surface.url != url:
            surface.back.append(surface.url)
            surface.forward.clear()
        surface.url = url
        self._finish_load(surface)

    # -- HostBridge ----------------------------------------------------------------

    async def create_tab(self, request: CreateTabRequest) -> TabPayload:
        self._begin("createTab", request.to_wire())
        surface = Surface(tab_id=f"tab-{next(self._ids)}", url=request.url or BLANK_URL)
        self.surfaces[surface.tab_id] = surface
        loading = surface.url != BLANK_URL
        if loading:
            self._finish_load(surface)
        return surface.payload(is_loading=loading)

    async def activate_tab(self, request: ActivateTabRequest) -> None:
        self._begin("activateTab", request.to_wire())
        target = self._surface(request.tab_id)
        for surface in self.surfaces.values():
            surface.hidden = True
            surface.passthrough = True
        target.hidden = False
        target.passthrough = False

    async def navigate_to(self, request: NavigateRequest) -> None:
        self._begin("navigateTo", request.to_wire())
        self._load(self._surface(request.tab_id), request.url)

    async def close_tab(self, request: CloseTabRequest) -> None:
        self._begin("closeTab", request.to_wire())
        self._surface(request.id)
        del self.surfaces[request.id]

    async def go_back(self, request: TabRequest) -> None:
        self._begin("goBack", request.to_wire())
        surface = self._surface(request.tab_id)
        if not surface.back:
            return
        surface.forward.append(surface.url)
        surface.url = surface.back.pop()
        self._finish_load(surface)

    async def go_forward(self, request: TabRequest) -> None:
        self._begin("goForward", request.to_wire())
        surface = self._surface(request.tab_id)
        if not surface.forward:
            return
        surface.back.append(surface.url)
        surface.url = surface.forward.pop()
        self._finish_load(surface)

    async def reload(self, request: TabRequest) -> None:
        self._begin("reload", request.to_wire())
        self._finish_load(self._surface(request.tab_id))

    # -- host-initiated events -------------------------------------------------

    def close_from_host(self, tab_id: str) -> None:
        """Tear down a surface on the host side (e.g. the page called window.close)."""
        if self.surfaces.pop(tab_id, None) is not None:
            self._emit("tabClosed", {"id": tab_id})

    @property
    def visible_surfaces(self) -> list[str]:
        return [s.tab_id for s in self.surfaces.values() if not s.hidden]
