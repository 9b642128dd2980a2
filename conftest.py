"""Shared test fixtures for vaultbar tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from vaultbar.errors import StoreError
from vaultbar.models import CredentialSummary, UserConfig

# ── Test doubles ─────────────────────────────────────────────────────────────


class FakeStore:
    """Credential store double that records calls.

    ``results`` maps a query to its summaries (missing queries return []).
    ``gates`` maps a query to an Event the search waits on, which lets a
    test resolve overlapping searches in any order. ``write_gates`` does the
    same for ``create_credential`` and ``update_secret`` by method name.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.results: dict[str, list[CredentialSummary]] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.write_gates: dict[str, asyncio.Event] = {}
        self.failures: dict[str, Exception] = {}
        self.secrets: dict[int, str] = {}
        self.generated_secret = "gen-Secret-123"
        self.command_result: int | str = "ok"
        self.next_id = 100

    def _maybe_fail(self, method: str) -> None:
        error = self.failures.get(method)
        if error is not None:
            raise error

    async def _wait_gate(self, method: str) -> None:
        gate = self.write_gates.get(method)
        if gate is not None:
            await gate.wait()

    async def search(self, query: str) -> list[CredentialSummary]:
        self.calls.append(("search", query))
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        self._maybe_fail("search")
        return list(self.results.get(query, []))

    async def create_credential(
        self, service_name: str, username: str, secret: str, notes: str = ""
    ) -> int:
        self.calls.append(("create_credential", service_name, username, secret, notes))
        await self._wait_gate("create_credential")
        self._maybe_fail("create_credential")
        self.next_id += 1
        self.secrets[self.next_id] = secret
        return self.next_id

    async def generate_and_store(self, service_name: str, username: str, notes: str = "") -> str:
        self.calls.append(("generate_and_store", service_name, username, notes))
        self._maybe_fail("generate_and_store")
        return self.generated_secret

    async def update_secret(self, credential_id: int, new_secret: str) -> None:
        self.calls.append(("update_secret", credential_id, new_secret))
        await self._wait_gate("update_secret")
        self._maybe_fail("update_secret")
        self.secrets[credential_id] = new_secret

    async def delete_credential(self, credential_id: int) -> None:
        self.calls.append(("delete_credential", credential_id))
        self._maybe_fail("delete_credential")

    async def reveal_secret(self, credential_id: int) -> str:
        self.calls.append(("reveal_secret", credential_id))
        self._maybe_fail("reveal_secret")
        return self.secrets.get(credential_id, f"secret-{credential_id}")

    async def run_text_command(self, raw: str) -> int | str:
        self.calls.append(("run_text_command", raw))
        self._maybe_fail("run_text_command")
        return self.command_result

    async def lock(self) -> None:
        self.calls.append(("lock",))
        self._maybe_fail("lock")

    def calls_to(self, method: str) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == method]


class FakeChrome:
    """Window chrome double; ``calls`` holds 'collapsed', 'expanded' and 'hide'."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.fail_resize = False

    async def set_collapsed(self) -> None:
        if self.fail_resize:
            raise StoreError("resize failed")
        self.calls.append("collapsed")

    async def set_expanded(self) -> None:
        if self.fail_resize:
            raise StoreError("resize failed")
        self.calls.append("expanded")

    async def hide(self) -> None:
        self.calls.append("hide")


class FakeClipboard:
    def __init__(self) -> None:
        self.copied: list[str] = []
        self.fail = False
        self.gate: asyncio.Event | None = None

    async def copy(self, text: str) -> None:
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise StoreError("clipboard unavailable")
        self.copied.append(text)


class _FakeTimer:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True


class FakeTimers:
    """Manual clock plus timers that fire only when the test advances time."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[_FakeTimer] = []

    def clock(self) -> float:
        return self.now

    def set_timer(self, delay: float, callback: Callable[[], None]) -> _FakeTimer:
        timer = _FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self.timers if not t.stopped and t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.timers.remove(timer)
            self.now = timer.due
            timer.callback()
        self.now = target

    @property
    def pending(self) -> list[_FakeTimer]:
        return [t for t in self.timers if not t.stopped]


# ── Factories ────────────────────────────────────────────────────────────────


@pytest.fixture
def make_summary():
    """Factory fixture for creating CredentialSummary instances with sensible defaults."""

    def _make(
        id: int = 1,
        service_name: str = "github",
        username: str = "alice",
        notes: str = "",
        created_at: str = "2024-01-15 10:00:00",
        updated_at: str = "2024-01-15 10:00:00",
    ) -> CredentialSummary:
        return CredentialSummary(
            id=id,
            service_name=service_name,
            username=username,
            notes=notes,
            created_at=created_at,
            updated_at=updated_at,
        )

    return _make


@pytest.fixture
def sample_config():
    """Factory fixture for creating UserConfig with optional overrides."""

    def _make(**kwargs: Any) -> UserConfig:
        return UserConfig(**kwargs)

    return _make


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fake_chrome() -> FakeChrome:
    return FakeChrome()


@pytest.fixture
def fake_clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def fake_timers() -> FakeTimers:
    return FakeTimers()


@pytest.fixture
def make_controller(fake_store, fake_chrome, fake_clipboard, fake_timers):
    """Factory for an InputController wired to the fakes.

    The returned controller records focus calls in ``focus_calls`` and
    lock callbacks in ``locked_calls``.
    """
    from vaultbar.controller import InputController

    def _make(config: UserConfig | None = None, **kwargs: Any) -> InputController:
        focus_calls: list[int] = []
        locked_calls: list[int] = []
        controller = InputController(
            fake_store,
            fake_chrome,
            fake_clipboard,
            config=config,
            set_timer=fake_timers.set_timer,
            clock=fake_timers.clock,
            focus_input=lambda: focus_calls.append(1),
            on_locked=lambda: locked_calls.append(1),
            **kwargs,
        )
        controller.focus_calls = focus_calls  # type: ignore[attr-defined]
        controller.locked_calls = locked_calls  # type: ignore[attr-defined]
        return controller

    return _make
