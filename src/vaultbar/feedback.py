"""Ephemeral feedback: a timed override of the mode-derived placeholder."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Protocol

from vaultbar.models import DEFAULT_FEEDBACK_DURATION_MS, Feedback

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def stop(self) -> None: ...


SetTimer = Callable[[float, Callable[[], None]], TimerHandle]


class _LoopTimer:
    """Adapts ``loop.call_later`` to the ``stop()`` shape of Textual timers."""

    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def stop(self) -> None:
        self._handle.cancel()


def loop_set_timer(delay: float, callback: Callable[[], None]) -> TimerHandle:
    """Schedule ``callback`` on the running event loop."""
    return _LoopTimer(asyncio.get_running_loop().call_later(delay, callback))


class FeedbackChannel:
    """Owns the single live feedback override and its reversion timer.

    A new ``show()`` replaces the pending timer atomically. Each timer
    carries the generation it was armed for, so a superseded timer that
    fires anyway changes nothing.
    """

    def __init__(
        self,
        *,
        on_change: Callable[[], None],
        set_timer: SetTimer | None = None,
        clock: Callable[[], float] = time.monotonic,
        default_duration_ms: int = DEFAULT_FEEDBACK_DURATION_MS,
        clear_input: Callable[[], None] | None = None,
        refocus: Callable[[], None] | None = None,
    ) -> None:
        self._on_change = on_change
        self._set_timer = set_timer or loop_set_timer
        self._clock = clock
        self._default_duration_ms = default_duration_ms
        self._clear_input = clear_input
        self._refocus = refocus
        self._current: Feedback | None = None
        self._timer: TimerHandle | None = None
        self._generation = 0

    @property
    def current(self) -> Feedback | None:
        return self._current

    def current_text(self) -> str | None:
        """Return the live override text, or None when the placeholder should show."""
        if self._current is None or self._clock() >= self._current.expires_at:
            return None
        return self._current.text

    def show(
        self,
        message: str,
        duration_ms: int | None = None,
        *,
        clear_input: bool = False,
        refocus: bool = False,
    ) -> None:
        """Install ``message`` for ``duration_ms`` (default from config). Last write wins."""
        duration = self._default_duration_ms if duration_ms is None else duration_ms
        self._generation += 1
        generation = self._generation
        self._current = Feedback(text=message, expires_at=self._clock() + duration / 1000)

        old_timer = self._timer
        self._timer = None
        if old_timer is not None:
            old_timer.stop()
        self._timer = self._set_timer(duration / 1000, lambda: self._expire(generation))

        if clear_input and self._clear_input is not None:
            self._clear_input()
        self._on_change()
        if refocus and self._refocus is not None:
            self._refocus()

    def _expire(self, generation: int) -> None:
        if generation != self._generation:
            logger.debug("Ignoring superseded feedback timer %d", generation)
            return
        self._timer = None
        self._current = None
        self._on_change()

    def clear(self) -> None:
        """Drop any override immediately and disarm its timer."""
        self._generation += 1
        old_timer = self._timer
        self._timer = None
        if old_timer is not None:
            old_timer.stop()
        if self._current is not None:
            self._current = None
            self._on_change()


__all__ = [
    "FeedbackChannel",
    "SetTimer",
    "TimerHandle",
    "loop_set_timer",
]
