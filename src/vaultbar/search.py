"""Search orchestration: per-keystroke store queries with stale-response discard."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from vaultbar.action_messages import SEARCH_FAILED
from vaultbar.feedback import FeedbackChannel
from vaultbar.models import ChromeState, CredentialSummary
from vaultbar.navigation import ListNavigator
from vaultbar.services.interfaces import CredentialStore
from vaultbar.window import ChromeController

logger = logging.getLogger(__name__)


class SearchOrchestrator:
    """Issues store searches and applies only the newest response.

    Every ``schedule()`` call takes a new request token synchronously. A
    response (or failure) whose token is no longer the latest is dropped,
    so out-of-order completions can never overwrite newer results.
    """

    def __init__(
        self,
        store: CredentialStore,
        results: ListNavigator[CredentialSummary],
        chrome: ChromeController,
        feedback: FeedbackChannel,
        *,
        on_results: Callable[[], None],
        debounce_ms: int = 0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._store = store
        self._results = results
        self._chrome = chrome
        self._feedback = feedback
        self._on_results = on_results
        self._debounce_ms = debounce_ms
        self._sleep = sleep
        self._request_token = 0

    @property
    def request_token(self) -> int:
        return self._request_token

    def invalidate(self) -> int:
        """Make every in-flight request stale."""
        self._request_token += 1
        return self._request_token

    def schedule(self, raw_text: str) -> Awaitable[None]:
        """Start a search for ``raw_text``; await the result to run it.

        Empty text clears the results right away and only the collapse
        request is left for the returned awaitable.
        """
        token = self.invalidate()
        query = raw_text.strip()
        if not query:
            self._results.clear()
            self._on_results()
            return self._chrome.request_collapsed()
        return self._run(token, query)

    async def refresh(self, raw_text: str) -> None:
        await self.schedule(raw_text)

    def _is_stale(self, token: int) -> bool:
        return token != self._request_token

    async def _run(self, token: int, query: str) -> None:
        if self._debounce_ms:
            await self._sleep(self._debounce_ms / 1000)
            if self._is_stale(token):
                logger.debug("Search %d superseded during debounce", token)
                return

        try:
            results = await self._store.search(query)
        except Exception as e:
            if self._is_stale(token):
                logger.debug("Ignoring failure of stale search %d", token)
                return
            logger.warning("Search failed: %s", e, exc_info=True)
            self._results.clear()
            self._on_results()
            await self._chrome.request_collapsed()
            self._feedback.show(SEARCH_FAILED, refocus=True)
            return

        if self._is_stale(token):
            logger.debug(
                "Discarding stale search response %d (latest %d)", token, self._request_token
            )
            return

        self._results.replace_items(results)
        self._on_results()
        await self._chrome.request(ChromeState.EXPANDED if results else ChromeState.COLLAPSED)


__all__ = ["SearchOrchestrator"]
