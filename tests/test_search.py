"""Tests for SearchOrchestrator: ordering, failures and debounce."""

from __future__ import annotations

import asyncio

import pytest

from vaultbar.action_messages import SEARCH_FAILED
from vaultbar.errors import StoreError
from vaultbar.feedback import FeedbackChannel
from vaultbar.models import ChromeState
from vaultbar.navigation import NO_SELECTION, ListNavigator
from vaultbar.search import SearchOrchestrator
from vaultbar.window import ChromeController


@pytest.fixture
def harness(fake_store, fake_chrome, fake_timers):
    """Build an orchestrator over the fakes; ``renders`` counts on_results calls."""

    def _make(**kwargs):
        results = ListNavigator()
        chrome = ChromeController(fake_chrome)
        focus: list[int] = []
        feedback = FeedbackChannel(
            on_change=lambda: None,
            set_timer=fake_timers.set_timer,
            clock=fake_timers.clock,
            refocus=lambda: focus.append(1),
        )
        renders: list[int] = []
        orchestrator = SearchOrchestrator(
            fake_store,
            results,
            chrome,
            feedback,
            on_results=lambda: renders.append(1),
            **kwargs,
        )
        return orchestrator, results, chrome, feedback, renders, focus

    return _make


class TestSearchOrchestrator:
    @pytest.mark.asyncio
    async def test_results_expand_chrome(self, harness, fake_store, fake_chrome, make_summary):
        orchestrator, results, chrome, _, renders, _ = harness()
        fake_store.results["git"] = [make_summary(id=1), make_summary(id=2, username="bob")]

        await orchestrator.schedule("  git ")

        assert fake_store.calls_to("search") == [("search", "git")]
        assert [item.id for item in results.items] == [1, 2]
        assert chrome.state == ChromeState.EXPANDED
        assert fake_chrome.calls == ["expanded"]
        assert renders == [1]

    @pytest.mark.asyncio
    async def test_no_results_stays_collapsed(self, harness, fake_chrome):
        orchestrator, results, chrome, _, _, _ = harness()
        await orchestrator.schedule("zzz")
        assert len(results) == 0
        assert chrome.state == ChromeState.COLLAPSED
        assert fake_chrome.calls == []

    @pytest.mark.asyncio
    async def test_empty_query_clears_without_store_call(
        self, harness, fake_store, fake_chrome, make_summary
    ):
        orchestrator, results, chrome, _, _, _ = harness()
        fake_store.results["git"] = [make_summary()]
        await orchestrator.schedule("git")

        await orchestrator.schedule("   ")

        assert fake_store.calls_to("search") == [("search", "git")]
        assert len(results) == 0
        assert chrome.state == ChromeState.COLLAPSED
        assert fake_chrome.calls == ["expanded", "collapsed"]

    @pytest.mark.asyncio
    async def test_older_response_arriving_last_is_discarded(
        self, harness, fake_store, make_summary
    ):
        orchestrator, results, _, _, _, _ = harness()
        fake_store.results["a"] = [make_summary(id=1, service_name="alpha")]
        fake_store.results["ab"] = [make_summary(id=2, service_name="abacus")]
        fake_store.gates["a"] = asyncio.Event()
        fake_store.gates["ab"] = asyncio.Event()

        first = asyncio.ensure_future(orchestrator.schedule("a"))
        second = asyncio.ensure_future(orchestrator.schedule("ab"))
        await asyncio.sleep(0)

        fake_store.gates["ab"].set()
        await second
        fake_store.gates["a"].set()
        await first

        assert [item.id for item in results.items] == [2]

    @pytest.mark.asyncio
    async def test_clearing_field_discards_in_flight_response(
        self, harness, fake_store, make_summary
    ):
        orchestrator, results, chrome, _, _, _ = harness()
        fake_store.results["git"] = [make_summary()]
        fake_store.gates["git"] = asyncio.Event()

        pending = asyncio.ensure_future(orchestrator.schedule("git"))
        await asyncio.sleep(0)
        await orchestrator.schedule("")
        fake_store.gates["git"].set()
        await pending

        assert len(results) == 0
        assert chrome.state == ChromeState.COLLAPSED

    @pytest.mark.asyncio
    async def test_failure_clears_and_shows_feedback(
        self, harness, fake_store, fake_chrome, make_summary
    ):
        orchestrator, results, chrome, feedback, _, focus = harness()
        fake_store.results["git"] = [make_summary()]
        await orchestrator.schedule("git")

        fake_store.failures["search"] = StoreError("boom")
        await orchestrator.schedule("gith")

        assert len(results) == 0
        assert chrome.state == ChromeState.COLLAPSED
        assert feedback.current_text() == SEARCH_FAILED
        assert focus == [1]

    @pytest.mark.asyncio
    async def test_stale_failure_is_ignored(self, harness, fake_store, make_summary):
        orchestrator, results, _, feedback, _, _ = harness()
        fake_store.gates["x"] = asyncio.Event()
        fake_store.failures["search"] = StoreError("boom")

        stale = asyncio.ensure_future(orchestrator.schedule("x"))
        await asyncio.sleep(0)
        orchestrator.invalidate()
        fake_store.gates["x"].set()
        await stale

        assert feedback.current_text() is None

    @pytest.mark.asyncio
    async def test_cursor_survives_refresh_when_in_range(self, harness, fake_store, make_summary):
        orchestrator, results, _, _, _, _ = harness()
        fake_store.results["a"] = [make_summary(id=1), make_summary(id=2), make_summary(id=3)]
        await orchestrator.schedule("a")
        results.select_item(1)

        fake_store.results["a"] = [make_summary(id=1), make_summary(id=3)]
        await orchestrator.refresh("a")
        assert results.index == 1

        fake_store.results["a"] = [make_summary(id=1)]
        await orchestrator.refresh("a")
        assert results.index == NO_SELECTION

    @pytest.mark.asyncio
    async def test_debounce_skips_superseded_queries(self, harness, fake_store):
        sleeps: list[float] = []

        async def fake_sleep(delay: float) -> None:
            sleeps.append(delay)
            await asyncio.sleep(0)

        orchestrator, _, _, _, _, _ = harness(debounce_ms=150, sleep=fake_sleep)
        first = asyncio.ensure_future(orchestrator.schedule("g"))
        second = asyncio.ensure_future(orchestrator.schedule("gi"))
        await asyncio.gather(first, second)

        assert sleeps == [0.15, 0.15]
        assert fake_store.calls_to("search") == [("search", "gi")]

    def test_schedule_takes_token_synchronously(self, harness):
        orchestrator, _, _, _, _, _ = harness()
        before = orchestrator.request_token
        coroutine = orchestrator.schedule("abc")
        assert orchestrator.request_token == before + 1
        coroutine.close()
