"""Tests for pioneer_chrome.host.MemoryHostBridge."""

from __future__ import annotations

import asyncio

import pytest

from pioneer_chrome.host import BLANK_URL, MemoryHostBridge, Surface
from pioneer_chrome.protocol import (
    ActivateTabRequest,
    CloseTabRequest,
    CreateTabRequest,
    HostBridgeError,
    NavigateRequest,
    TabRequest,
)


@pytest.fixture
def received() -> list[tuple[str, dict]]:
    return []


@pytest.fixture
def bridge(received) -> MemoryHostBridge:
    return MemoryHostBridge(lambda name, payload: received.append((name, payload)))


class TestMemoryHostBridge:
    @pytest.mark.asyncio
    async def test_create_assigns_sequential_ids(self, bridge):
        first = await bridge.create_tab(CreateTabRequest())
        second = await bridge.create_tab(CreateTabRequest())
        assert (first.id, second.id) == ("tab-1", "tab-2")
        assert first.url == BLANK_URL
        assert first.is_loading is False

    @pytest.mark.asyncio
    async def test_create_with_url_reports_load_later(self, bridge, received):
        payload = await bridge.create_tab(CreateTabRequest(url="https://a.com"))
        assert payload.is_loading is True
        assert received == []
        await asyncio.sleep(0)
        ((name, wire),) = received
        assert name == "tabUpdated"
        assert wire["isLoading"] is False
        assert wire["title"] == "a.com"

    @pytest.mark.asyncio
    async def test_activate_shows_only_target(self, bridge):
        a = await bridge.create_tab(CreateTabRequest())
        b = await bridge.create_tab(CreateTabRequest())
        await bridge.activate_tab(ActivateTabRequest(a.id))
        await bridge.activate_tab(ActivateTabRequest(b.id))
        assert bridge.visible_surfaces == [b.id]
        assert bridge.surfaces[a.id].passthrough is True

    @pytest.mark.asyncio
    async def test_navigation_history(self, bridge):
        tab = await bridge.create_tab(CreateTabRequest())
        await bridge.navigate_to(NavigateRequest(tab.id, "https://a.com"))
        await bridge.navigate_to(NavigateRequest(tab.id, "https://b.com"))
        surface = bridge.surfaces[tab.id]
        assert surface.back == [BLANK_URL, "https://a.com"]

        await bridge.go_back(TabRequest(tab.id))
        assert surface.url == "https://a.com"
        assert surface.forward == ["https://b.com"]

        await bridge.navigate_to(NavigateRequest(tab.id, "https://c.com"))
        assert surface.forward == []

    @pytest.mark.asyncio
    async def test_close_unknown_raises(self, bridge):
        with pytest.raises(HostBridgeError):
            await bridge.close_tab(CloseTabRequest("tab-9"))

    @pytest.mark.asyncio
    async def test_failing_requests(self, bridge):
        bridge.failing.add("createTab")
        with pytest.raises(HostBridgeError):
            await bridge.create_tab(CreateTabRequest())
        assert bridge.calls == [("createTab", {})]
        assert bridge.surfaces == {}

    @pytest.mark.asyncio
    async def test_close_from_host_notifies(self, bridge, received):
        tab = await bridge.create_tab(CreateTabRequest())
        bridge.close_from_host(tab.id)
        bridge.close_from_host(tab.id)
        await asyncio.sleep(0)
        assert received == [("tabClosed", {"id": tab.id})]

    def test_notifications_need_a_running_loop(self, bridge, received):
        bridge.surfaces["tab-1"] = Surface("tab-1")
        bridge.close_from_host("tab-1")
        assert "tab-1" not in bridge.surfaces
        assert received == []
