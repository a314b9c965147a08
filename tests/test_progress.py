"""Tests for pioneer_chrome.features.progress."""

from __future__ import annotations

import asyncio

import pytest

from pioneer_chrome.features.progress import (
    NavigationProgressController,
    ProgressState,
)


@pytest.fixture
def changes() -> list[ProgressState]:
    return []


@pytest.fixture
def controller(timers, changes) -> NavigationProgressController:
    return NavigationProgressController(
        timers,
        fallback_seconds=10.0,
        complete_seconds=0.3,
        on_change=changes.append,
    )


class TestTransitions:
    def test_starts_hidden(self, controller):
        assert controller.state is ProgressState.HIDDEN
        assert controller.percent == 0

    def test_start_shows_indeterminate(self, controller, changes, timers):
        controller.start()
        assert controller.state is ProgressState.INDETERMINATE
        assert changes == [ProgressState.INDETERMINATE]
        assert len(timers.pending) == 1

    def test_second_start_only_rearms_fallback(self, controller, changes, timers):
        controller.start()
        timers.advance(6)
        controller.start()
        assert changes == [ProgressState.INDETERMINATE]
        assert len(timers.pending) == 1
        timers.advance(6)
        assert controller.state is ProgressState.INDETERMINATE

    def test_finish_completes_then_hides(self, controller, changes, timers):
        controller.start()
        assert controller.finish() is True
        assert controller.state is ProgressState.COMPLETING
        assert controller.percent == 100
        timers.advance(0.3)
        assert controller.state is ProgressState.HIDDEN
        assert changes == [
            ProgressState.INDETERMINATE,
            ProgressState.COMPLETING,
            ProgressState.HIDDEN,
        ]

    def test_finish_when_hidden_is_noop(self, controller, changes):
        assert controller.finish() is False
        assert changes == []

    def test_finish_while_completing_is_noop(self, controller, timers):
        controller.start()
        controller.finish()
        assert controller.finish() is False
        assert len(timers.pending) == 1

    def test_restart_while_completing(self, controller, timers):
        controller.start()
        controller.finish()
        controller.start()
        timers.advance(0.3)
        assert controller.state is ProgressState.INDETERMINATE

    def test_cancel_hides_and_drops_timers(self, controller, timers):
        controller.start()
        controller.cancel()
        assert controller.state is ProgressState.HIDDEN
        assert timers.pending == []


class TestFallback:
    def test_fallback_forces_completion(self, controller, timers):
        timeouts = []
        controller.on_timeout = lambda: timeouts.append(1)
        controller.start()
        timers.advance(10)
        assert controller.state is ProgressState.COMPLETING
        assert timeouts == [1]
        timers.advance(0.3)
        assert controller.state is ProgressState.HIDDEN

    def test_no_timeout_after_normal_finish(self, controller, timers):
        timeouts = []
        controller.on_timeout = lambda: timeouts.append(1)
        controller.start()
        controller.finish()
        timers.advance(20)
        assert controller.state is ProgressState.HIDDEN
        assert timeouts == []


class TestLoopTimer:
    @pytest.mark.asyncio
    async def test_default_timer_runs_on_event_loop(self):
        controller = NavigationProgressController(
            fallback_seconds=0.01, complete_seconds=0.01
        )
        controller.start()
        await asyncio.sleep(0.2)
        assert controller.state is ProgressState.HIDDEN
