"""Shared test fixtures for the pioneer-chrome test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from pioneer_chrome.features.progress import NavigationProgressController
from pioneer_chrome.host import MemoryHostBridge
from pioneer_chrome.persistence import KeyValueStore
from pioneer_chrome.session_store import TabSessionStore


# -- Timers ---------------------------------------------------------------------


class FakeTimer:
    def __init__(self, due: float, callback: Callable[[], object]) -> None:
        self.due = due
        self.callback = callback
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True


class FakeTimers:
    """Deterministic ``set_timer`` replacement driven by :meth:`advance`."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: list[FakeTimer] = []

    def __call__(self, delay: float, callback: Callable[[], object]) -> FakeTimer:
        timer = FakeTimer(self.now + delay, callback)
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self._timers if not t.stopped]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = sorted(
                (t for t in self.pending if t.due <= target), key=lambda t: t.due
            )
            if not due:
                break
            timer = due[0]
            timer.stopped = True
            self.now = timer.due
            timer.callback()
        self.now = target


@pytest.fixture
def timers() -> FakeTimers:
    return FakeTimers()


# -- Storage & host ---------------------------------------------------------------


@pytest.fixture
def storage(tmp_path: Path) -> KeyValueStore:
    """Storage rooted in a temporary directory."""
    return KeyValueStore(tmp_path / "data")


@pytest.fixture
def host() -> MemoryHostBridge:
    """In-memory host with notifications switched off."""
    return MemoryHostBridge()


@pytest.fixture
def store(host: MemoryHostBridge) -> TabSessionStore:
    return TabSessionStore(host)


@pytest.fixture
def progress(timers: FakeTimers) -> NavigationProgressController:
    return NavigationProgressController(
        timers, fallback_seconds=10.0, complete_seconds=0.3
    )


@pytest.fixture
def live_store(host: MemoryHostBridge, progress: NavigationProgressController):
    """Store wired to host notifications and a progress controller."""
    s = TabSessionStore(host, progress=progress)
    host.listener = s.handle_message
    return s
