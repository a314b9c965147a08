"""Navigation progress bar state machine.

Hidden -> Indeterminate -> Completing -> Hidden.  Timers are injected as a
``set_timer(delay, callback)`` callable returning a handle with ``.stop()``
(``App.set_timer`` in Textual), which keeps this module free of any UI or
event-loop dependency.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from enum import Enum
from typing import Any

from ..constants import PROGRESS_COMPLETE_SECONDS, PROGRESS_FALLBACK_SECONDS
from ..log import logger

# Type alias for the handle returned by ``set_timer``.
TimerHandle = Any
SetTimer = Callable[[float, Callable[[], object]], TimerHandle]


class ProgressState(Enum):
    HIDDEN = "hidden"
    INDETERMINATE = "indeterminate"
    COMPLETING = "completing"


class LoopTimer:
    """``set_timer`` backed by ``loop.call_later`` for use outside Textual."""

    def __init__(self, delay: float, callback: Callable[[], object]) -> None:
        self._handle = asyncio.get_running_loop().call_later(delay, callback)

    def stop(self) -> None:
        self._handle.cancel()


class NavigationProgressController:
    """Loading indicator for the active tab.

    Parameters
    ----------
    set_timer:
        Starts a one-shot timer; must return a handle with ``.stop()``.
    on_change:
        Called with the new :class:`ProgressState` after every visible transition.
    on_timeout:
        Called when the fallback timer forced completion because the host
        never reported the page as loaded.
    """

    def __init__(
        self,
        set_timer: SetTimer = LoopTimer,
        *,
        fallback_seconds: float = PROGRESS_FALLBACK_SECONDS,
        complete_seconds: float = PROGRESS_COMPLETE_SECONDS,
        on_change: Callable[[ProgressState], object] | None = None,
        on_timeout: Callable[[], object] | None = None,
    ) -> None:
        self._set_timer = set_timer
        self.fallback_seconds = fallback_seconds
        self.complete_seconds = complete_seconds
        self.on_change = on_change
        self.on_timeout = on_timeout
        self._state = ProgressState.HIDDEN
        self._fallback: TimerHandle | None = None
        self._complete: TimerHandle | None = None

    @property
    def state(self) -> ProgressState:
        return self._state

    @property
    def percent(self) -> float:
        return 100.0 if self._state is ProgressState.COMPLETING else 0.0

    # -- transitions -------------------------------------------------------------

    def start(self) -> None:
        """Show the indeterminate bar, or re-arm the fallback if already showing."""
        self._stop_fallback()
        self._fallback = self._set_timer(self.fallback_seconds, self._on_fallback)
        if self._state is ProgressState.INDETERMINATE:
            return
        self._stop_complete()
        self._transition(ProgressState.INDETERMINATE)

    def finish(self) -> bool:
        """Fill to 100% and hide shortly after.  No-op unless indeterminate."""
        if self._state is not ProgressState.INDETERMINATE:
            return False
        self._stop_fallback()
        self._transition(ProgressState.COMPLETING)
        self._complete = self._set_timer(self.complete_seconds, self._on_complete)
        return True

    def cancel(self) -> None:
        """Hide immediately, dropping any pending timers."""
        self._stop_fallback()
        self._stop_complete()
        if self._state is not ProgressState.HIDDEN:
            self._transition(ProgressState.HIDDEN)

    # -- timers ------------------------------------------------------------------

    def _on_fallback(self) -> None:
        self._fallback = None
        logger.debug("navigation did not complete within %ss", self.fallback_seconds)
        if self.finish() and self.on_timeout is not None:
            self.on_timeout()

    def _on_complete(self) -> None:
        self._complete = None
        self._transition(ProgressState.HIDDEN)

    def _stop_fallback(self) -> None:
        if self._fallback is not None:
            self._fallback.stop()
            self._fallback = None

    def _stop_complete(self) -> None:
        if self._complete is not None:
            self._complete.stop()
            self._complete = None

    def _transition(self, state: ProgressState) -> None:
        self._state = state
        if self.on_change is not None:
            self.on_change(state)
