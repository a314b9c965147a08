"""Typed schema for the HostBridge boundary.

Every request the UI sends and every message the host pushes has its own
dataclass.  Inbound payloads are validated by :func:`parse_host_message`
before they reach the session store; the wire uses camelCase field names.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Union

from .constants import PLACEHOLDER_TITLE


class HostBridgeError(Exception):
    """A request to the host process failed or was rejected."""


class ProtocolError(ValueError):
    """An inbound host message did not match its schema."""


# -- requests ----------------------------------------------------------------


@dataclass(frozen=True)
class CreateTabRequest:
    url: str | None = None

    def to_wire(self) -> dict[str, Any]:
        return {"url": self.url} if self.url is not None else {}


@dataclass(frozen=True)
class ActivateTabRequest:
    tab_id: str

    def to_wire(self) -> dict[str, Any]:
        return {"tabId": self.tab_id}


@dataclass(frozen=True)
class NavigateRequest:
    tab_id: str
    url: str

    def to_wire(self) -> dict[str, Any]:
        return {"tabId": self.tab_id, "url": self.url}


@dataclass(frozen=True)
class CloseTabRequest:
    id: str

    def to_wire(self) -> dict[str, Any]:
        return {"id": self.id}


@dataclass(frozen=True)
class TabRequest:
    """Back / forward / reload on one tab."""

    tab_id: str

    def to_wire(self) -> dict[str, Any]:
        return {"tabId": self.tab_id}


# -- payloads & messages -----------------------------------------------------


def _require_str(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ProtocolError(f"field {key!r} must be a non-empty string")
    return value


def _optional_bool(data: dict, key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ProtocolError(f"field {key!r} must be a boolean")
    return value


@dataclass(frozen=True)
class TabPayload:
    """Tab state as reported by the host (``createTab`` reply, ``tabUpdated``)."""

    id: str
    url: str = ""
    title: str = PLACEHOLDER_TITLE
    can_go_back: bool = False
    can_go_forward: bool = False
    is_loading: bool = False
    favicon: str | None = None

    @classmethod
    def from_wire(cls, data: Any) -> TabPayload:
        if not isinstance(data, dict):
            raise ProtocolError("tab payload must be an object")
        url = data.get("url", "")
        if not isinstance(url, str):
            raise ProtocolError("field 'url' must be a string")
        title = data.get("title") or PLACEHOLDER_TITLE
        if not isinstance(title, str):
            raise ProtocolError("field 'title' must be a string")
        favicon = data.get("favicon")
        if favicon is not None and not isinstance(favicon, str):
            raise ProtocolError("field 'favicon' must be a string")
        return cls(
            id=_require_str(data, "id"),
            url=url,
            title=title,
            can_go_back=_optional_bool(data, "canGoBack"),
            can_go_forward=_optional_bool(data, "canGoForward"),
            is_loading=_optional_bool(data, "isLoading"),
            favicon=favicon or None,
        )

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "canGoBack": self.can_go_back,
            "canGoForward": self.can_go_forward,
            "isLoading": self.is_loading,
        }
        if self.favicon:
            wire["favicon"] = self.favicon
        return wire


@dataclass(frozen=True)
class TabUpdated:
    tab: TabPayload


@dataclass(frozen=True)
class TabClosed:
    id: str


HostMessage = Union[TabUpdated, TabClosed]


def parse_host_message(name: str, payload: Any) -> HostMessage:
    """Validate a raw inbound message.  Raises ``ProtocolError`` if malformed."""
    if name == "tabUpdated":
        return TabUpdated(TabPayload.from_wire(payload))
    if name == "tabClosed":
        if not isinstance(payload, dict):
            raise ProtocolError("tabClosed payload must be an object")
        return TabClosed(_require_str(payload, "id"))
    raise ProtocolError(f"unknown host message {name!r}")


# -- the host itself ---------------------------------------------------------


class HostBridge(Protocol):
    """The privileged process owning real navigation and per-tab surfaces.

    Implementations raise :class:`HostBridgeError` on failure.
    """

    async def create_tab(self, request: CreateTabRequest) -> TabPayload: ...

    async def activate_tab(self, request: ActivateTabRequest) -> None: ...

    async def navigate_to(self, request: NavigateRequest) -> None: ...

    async def close_tab(self, request: CloseTabRequest) -> None: ...

    async def go_back(self, request: TabRequest) -> None: ...

    async def go_forward(self, request: TabRequest) -> None: ...

    async def reload(self, request: TabRequest) -> None: ...
