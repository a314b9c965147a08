"""Tests for pioneer_chrome.protocol -- wire schemas and message parsing."""

from __future__ import annotations

import pytest

from pioneer_chrome.protocol import (
    ActivateTabRequest,
    CloseTabRequest,
    CreateTabRequest,
    NavigateRequest,
    ProtocolError,
    TabClosed,
    TabPayload,
    TabRequest,
    TabUpdated,
    parse_host_message,
)


class TestRequests:
    def test_wire_names(self):
        assert CreateTabRequest().to_wire() == {}
        assert CreateTabRequest(url="https://a.com").to_wire() == {"url": "https://a.com"}
        assert ActivateTabRequest("tab-1").to_wire() == {"tabId": "tab-1"}
        assert NavigateRequest("tab-1", "https://a.com").to_wire() == {
            "tabId": "tab-1",
            "url": "https://a.com",
        }
        assert CloseTabRequest("tab-1").to_wire() == {"id": "tab-1"}
        assert TabRequest("tab-1").to_wire() == {"tabId": "tab-1"}


class TestTabPayload:
    def test_from_wire_full(self):
        payload = TabPayload.from_wire(
            {
                "id": "tab-1",
                "url": "https://a.com",
                "title": "A",
                "canGoBack": True,
                "canGoForward": False,
                "isLoading": True,
                "favicon": "https://a.com/favicon.ico",
            }
        )
        assert payload == TabPayload(
            id="tab-1",
            url="https://a.com",
            title="A",
            can_go_back=True,
            can_go_forward=False,
            is_loading=True,
            favicon="https://a.com/favicon.ico",
        )

    def test_from_wire_defaults(self):
        payload = TabPayload.from_wire({"id": "tab-1"})
        assert payload.url == ""
        assert payload.title == "New Tab"
        assert payload.is_loading is False
        assert payload.favicon is None

    def test_empty_title_gets_placeholder(self):
        assert TabPayload.from_wire({"id": "t", "title": ""}).title == "New Tab"

    def test_wire_round_trip(self):
        payload = TabPayload(id="t", url="https://a.com", title="A", favicon="f.ico")
        assert TabPayload.from_wire(payload.to_wire()) == payload

    @pytest.mark.parametrize(
        "data",
        [
            None,
            [],
            {},
            {"id": ""},
            {"id": 3},
            {"id": "t", "url": 5},
            {"id": "t", "isLoading": "yes"},
            {"id": "t", "favicon": 1},
        ],
    )
    def test_malformed_rejected(self, data):
        with pytest.raises(ProtocolError):
            TabPayload.from_wire(data)


class TestParseHostMessage:
    def test_tab_updated(self):
        message = parse_host_message("tabUpdated", {"id": "tab-2", "url": "https://b.com"})
        assert isinstance(message, TabUpdated)
        assert message.tab.id == "tab-2"

    def test_tab_closed(self):
        assert parse_host_message("tabClosed", {"id": "tab-2"}) == TabClosed("tab-2")

    @pytest.mark.parametrize(
        "name, payload",
        [
            ("tabClosed", {}),
            ("tabClosed", "tab-2"),
            ("tabExploded", {"id": "tab-2"}),
        ],
    )
    def test_rejects_bad_messages(self, name, payload):
        with pytest.raises(ProtocolError):
            parse_host_message(name, payload)

    def test_protocol_error_is_value_error(self):
        assert issubclass(ProtocolError, ValueError)
