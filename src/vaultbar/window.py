"""Idempotent window-chrome requests."""

from __future__ import annotations

import logging

from vaultbar.models import ChromeState
from vaultbar.services.interfaces import WindowChrome

logger = logging.getLogger(__name__)


class ChromeController:
    """Tracks the last requested chrome state and suppresses repeat requests.

    A failed resize is logged and restores the previous ``state``, so the
    next request for the same size is retried.
    """

    def __init__(self, chrome: WindowChrome, state: ChromeState = ChromeState.COLLAPSED) -> None:
        self._chrome = chrome
        self._state = state

    @property
    def state(self) -> ChromeState:
        return self._state

    async def request(self, state: ChromeState) -> bool:
        """Move to ``state``. Returns True only when an external call was made and succeeded."""
        if state == self._state:
            return False
        previous = self._state
        # Recorded before awaiting so an overlapping opposite request is not suppressed
        self._state = state
        logger.debug("Chrome %s -> %s", previous.value, state.value)
        try:
            if state == ChromeState.EXPANDED:
                await self._chrome.set_expanded()
            else:
                await self._chrome.set_collapsed()
        except Exception as e:
            logger.warning("Window resize to %s failed: %s", state.value, e, exc_info=True)
            if self._state == state:
                self._state = previous
            return False
        return True

    async def request_collapsed(self) -> bool:
        return await self.request(ChromeState.COLLAPSED)

    async def request_expanded(self) -> bool:
        return await self.request(ChromeState.EXPANDED)

    async def hide(self) -> None:
        """Hide the window. Failures are logged; the session stays usable."""
        try:
            await self._chrome.hide()
        except Exception as e:
            logger.warning("Window hide failed: %s", e, exc_info=True)


__all__ = ["ChromeController"]
