"""Input controller: owns the session state and composes the sub-components.

The controller is the only writer of session state. The view pushes text
changes and keys in, and is told to re-render through ``on_render``.
Mode is never stored; it is derived from the field text and whether a
secret flow is active.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from vaultbar.action_messages import (
    VAULT_LOCKED,
    build_command_feedback,
    build_deleted_feedback,
    build_failure_feedback,
    build_import_feedback,
    build_unrecognized_feedback,
)
from vaultbar.commands import (
    AddBegin,
    AddGenerate,
    ExportCommand,
    HelpCommand,
    ImportCommand,
    InvalidCommand,
    ParsedCommand,
    ResetCommand,
    SearchCommand,
    UnrecognizedCommand,
    parse_command,
)
from vaultbar.dispatcher import KeyboardDispatcher
from vaultbar.feedback import FeedbackChannel, SetTimer
from vaultbar.help_ui import build_help_catalog
from vaultbar.models import (
    ChromeState,
    CredentialSummary,
    HelpEntry,
    Mode,
    SecretStage,
    UserConfig,
)
from vaultbar.modes import build_placeholder, is_help_text, resolve_mode
from vaultbar.navigation import NO_SELECTION, ListNavigator
from vaultbar.search import SearchOrchestrator
from vaultbar.secret_entry import SecretEntryFlow
from vaultbar.services.interfaces import Clipboard, CredentialStore, WindowChrome
from vaultbar.window import ChromeController

logger = logging.getLogger(__name__)


def _noop() -> None:
    return None


class InputController:
    """One interactive session over a single launcher field."""

    def __init__(
        self,
        store: CredentialStore,
        chrome: WindowChrome,
        clipboard: Clipboard,
        *,
        config: UserConfig | None = None,
        set_timer: SetTimer | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_render: Callable[[], None] = _noop,
        focus_input: Callable[[], None] = _noop,
        on_locked: Callable[[], None] = _noop,
    ) -> None:
        self._config = config or UserConfig()
        self._store = store
        self._clipboard = clipboard
        self._on_render = on_render
        self._focus_input = focus_input
        self._on_locked = on_locked
        self._raw_text = ""
        self._showing_help = False
        self._locked = False
        self._background_tasks: set[asyncio.Task[Any]] = set()

        self.chrome = ChromeController(chrome)
        self.feedback = FeedbackChannel(
            on_change=self.render,
            set_timer=set_timer,
            clock=clock,
            default_duration_ms=self._config.feedback_duration_ms,
            clear_input=self._clear_text,
            refocus=self.focus_input,
        )
        self.results: ListNavigator[CredentialSummary] = ListNavigator(
            is_open=lambda: self.mode == Mode.SEARCH,
            on_select=self._on_result_chosen,
        )
        self.help: ListNavigator[HelpEntry] = ListNavigator(is_open=lambda: self._showing_help)
        self.search = SearchOrchestrator(
            store,
            self.results,
            self.chrome,
            self.feedback,
            on_results=self.render,
            debounce_ms=self._config.search_debounce_ms,
            sleep=sleep,
        )
        self.secret = SecretEntryFlow(
            store,
            clipboard,
            self.chrome,
            self.feedback,
            confirm_secret=self._config.confirm_secret,
            on_change=self.render,
            on_committed=self._reset_session,
            clear_input=self._clear_text,
            focus_input=self.focus_input,
        )
        self.dispatcher = KeyboardDispatcher(self)
        self._command_handlers: dict[type, Callable[[Any], Awaitable[None]]] = {
            SearchCommand: self._run_search_submit,
            AddBegin: self._run_add_begin,
            AddGenerate: self._run_add_generate,
            ImportCommand: self._run_import,
            ExportCommand: self._run_export,
            HelpCommand: self._run_help,
            ResetCommand: self._run_reset,
            UnrecognizedCommand: self._run_unrecognized,
            InvalidCommand: self._run_invalid,
        }

    # ── Derived state ───────────────────────────────────────────────────

    @property
    def config(self) -> UserConfig:
        return self._config

    @property
    def raw_text(self) -> str:
        return self._raw_text

    @property
    def mode(self) -> Mode:
        return resolve_mode(self._raw_text, self.secret.is_active)

    @property
    def showing_help(self) -> bool:
        return self._showing_help

    @property
    def active_list(self) -> ListNavigator[Any]:
        """The list the cursor keys act on: the help catalog or the results."""
        if self._showing_help:
            return self.help
        return self.results

    @property
    def selection(self) -> int:
        return self.active_list.index

    @property
    def chrome_state(self) -> ChromeState:
        return self.chrome.state

    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def placeholder(self) -> str:
        """Feedback override if live, else the placeholder for the current state."""
        override = self.feedback.current_text()
        if override is not None:
            return override
        stage = self.secret.stage
        if stage == SecretStage.INACTIVE:
            stage = SecretStage.COLLECTING
        return build_placeholder(self._raw_text, self.secret.context, stage)

    # ── View hooks ──────────────────────────────────────────────────────

    def render(self) -> None:
        self._on_render()

    def focus_input(self) -> None:
        self._focus_input()

    def on_window_shown(self) -> None:
        """The host revealed the window; put focus back on the field."""
        self.focus_input()

    # ── Background tasks ────────────────────────────────────────────────

    def _track(self, awaitable: Awaitable[Any]) -> asyncio.Task[Any]:
        """Run an awaitable as a task and keep a reference until it finishes."""
        task = asyncio.ensure_future(awaitable)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        task.add_done_callback(self._on_task_done)
        return task

    @staticmethod
    def _on_task_done(task: asyncio.Task[Any]) -> None:
        """Log unhandled exceptions from background tasks."""
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unhandled exception in background task: %s", exc, exc_info=exc)

    async def drain(self) -> None:
        """Wait until every background task has finished."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)

    # ── Text changes ────────────────────────────────────────────────────

    def handle_text_changed(self, text: str) -> None:
        """Apply new field text and re-derive everything that depends on it."""
        previous_mode = self.mode
        self._raw_text = text
        if self.mode != previous_mode:
            logger.debug("Mode %s -> %s", previous_mode.value, self.mode.value)
        if self.secret.is_active:
            # Typed characters belong to the secret, never to search or commands
            self.render()
            return

        self._sync_help(text)
        if self.mode == Mode.SEARCH:
            self._track(self.search.schedule(text))
        else:
            self.search.invalidate()
            if len(self.results):
                self.results.clear()
            target = ChromeState.EXPANDED if self._showing_help else ChromeState.COLLAPSED
            self._track(self.chrome.request(target))
        self.render()

    def set_text(self, text: str) -> None:
        """Replace the field text from inside the controller (view follows on render)."""
        self.handle_text_changed(text)
        self.focus_input()

    def _clear_text(self) -> None:
        if self._raw_text:
            self.handle_text_changed("")

    def _sync_help(self, text: str) -> None:
        wants_help = is_help_text(text)
        if wants_help == self._showing_help:
            return
        self._showing_help = wants_help
        if wants_help:
            self.help.replace_items(build_help_catalog(), keep_selection=False)
        else:
            self.help.clear()

    def _reset_session(self) -> None:
        """Clear text, lists and selection and collapse; the secret flow is untouched."""
        self.search.invalidate()
        self._raw_text = ""
        self._showing_help = False
        self.help.clear()
        self.results.clear()
        self._track(self.chrome.request_collapsed())
        self.render()

    # ── Keys ────────────────────────────────────────────────────────────

    async def handle_key(self, key: str) -> bool:
        if self._locked:
            return False
        return await self.dispatcher.dispatch(key)

    def would_handle_key(self, key: str) -> bool:
        return not self._locked and self.dispatcher.match(key) is not None

    async def escape(self) -> None:
        if self.secret.is_active:
            self.secret.escape()
            return
        if self._raw_text.strip() or self._showing_help or len(self.results):
            self._reset_session()
            self.focus_input()
            return
        await self.chrome.hide()

    async def enter(self) -> None:
        if self.secret.is_active:
            await self.secret.submit(self._raw_text)
            return
        if self._showing_help:
            entry = self.help.current
            if entry is not None:
                if entry.insert_text is not None:
                    self.set_text(entry.insert_text)
                return
        elif self.mode == Mode.SEARCH and self.results.select_current() is not None:
            return
        await self.handle_submit()

    async def select_next(self) -> None:
        self.active_list.select_next()
        self.render()

    async def select_previous(self) -> None:
        navigator = self.active_list
        if navigator.index == 0 and self._config.up_from_first == "field":
            navigator.reset()
            self.focus_input()
        else:
            navigator.select_previous()
        self.render()

    async def activate_item(self, index: int) -> None:
        """Pointer selection: move the cursor to ``index`` and press Enter."""
        if self.secret.is_active:
            return
        if self.active_list.select_item(index) == NO_SELECTION:
            return
        self.render()
        await self.enter()

    async def delete_selected(self) -> None:
        item = self.results.current
        if item is None:
            return
        try:
            await self._store.delete_credential(item.id)
        except Exception as e:
            logger.warning("Delete of credential %d failed: %s", item.id, e)
            self.feedback.show(build_failure_feedback("delete credential", e), refocus=True)
            return
        self.results.reset()
        self.feedback.show(build_deleted_feedback(item.service_name), refocus=True)
        await self.search.refresh(self._raw_text)

    async def edit_selected(self) -> None:
        item = self.results.current
        if item is None:
            return
        self.search.invalidate()
        self.results.clear()
        self._track(self.chrome.request_collapsed())
        self.secret.begin(item.service_name, item.username, item.notes, editing_id=item.id)

    async def toggle_reveal(self) -> None:
        self.secret.toggle_reveal()

    async def lock(self) -> None:
        """Lock the store and tear the session down. The session is dead afterwards."""
        try:
            await self._store.lock()
        except Exception as e:
            logger.warning("Store lock failed: %s", e, exc_info=True)
        self.secret.cancel()
        self.feedback.clear()
        self.search.invalidate()
        self._raw_text = ""
        self._showing_help = False
        self.help.clear()
        self.results.clear()
        self._locked = True
        for task in list(self._background_tasks):
            if task is not asyncio.current_task():
                task.cancel()
        logger.info(VAULT_LOCKED)
        self.render()
        self._on_locked()

    def _on_result_chosen(self, item: CredentialSummary) -> None:
        self._track(self._copy_credential(item))

    async def _copy_credential(self, item: CredentialSummary) -> None:
        try:
            secret = await self._store.reveal_secret(item.id)
            await self._clipboard.copy(secret)
        except Exception as e:
            logger.warning("Copy of credential %d failed: %s", item.id, e)
            self.feedback.show(build_failure_feedback("copy secret", e), refocus=True)
            return
        logger.debug("Copied secret for credential %d", item.id)
        self._reset_session()
        await self.chrome.hide()

    # ── Commands ────────────────────────────────────────────────────────

    async def handle_submit(self) -> None:
        """Parse the field and run the matching command handler."""
        if not self._raw_text.strip():
            return
        command: ParsedCommand = parse_command(self._raw_text)
        handler = self._command_handlers[type(command)]
        await handler(command)

    async def _run_search_submit(self, command: SearchCommand) -> None:
        # Nothing selected: Enter just keeps the focus on the field
        self.focus_input()

    async def _run_add_begin(self, command: AddBegin) -> None:
        self.search.invalidate()
        self.secret.begin(command.service_name, command.username, command.notes)

    async def _run_add_generate(self, command: AddGenerate) -> None:
        self.search.invalidate()
        await self.secret.commit_generated(command.service_name, command.username, command.notes)

    async def _run_store_command(self, raw: str, action: str) -> int | str | None:
        try:
            return await self._store.run_text_command(raw)
        except Exception as e:
            logger.warning("Command %s failed: %s", action, e)
            self.feedback.show(build_failure_feedback(action, e), clear_input=True, refocus=True)
            return None

    async def _run_import(self, command: ImportCommand) -> None:
        result = await self._run_store_command(f":import {command.path}", "import credentials")
        if result is not None:
            self.feedback.show(build_import_feedback(result), clear_input=True, refocus=True)

    async def _run_export(self, command: ExportCommand) -> None:
        result = await self._run_store_command(":export", "export credentials")
        if result is not None:
            message = build_command_feedback(result, "Export completed successfully")
            self.feedback.show(message, clear_input=True, refocus=True)

    async def _run_help(self, command: HelpCommand) -> None:
        self._sync_help(self._raw_text)
        self.render()
        self.focus_input()

    async def _run_reset(self, command: ResetCommand) -> None:
        result = await self._run_store_command(":reset!", "reset the store")
        if result is not None:
            message = build_command_feedback(result, "Store reset")
            self.feedback.show(message, clear_input=True, refocus=True)

    async def _run_unrecognized(self, command: UnrecognizedCommand) -> None:
        self.feedback.show(build_unrecognized_feedback(command.raw), clear_input=True, refocus=True)

    async def _run_invalid(self, command: InvalidCommand) -> None:
        self.feedback.show(command.usage, clear_input=True, refocus=True)


__all__ = ["InputController"]
