"""Textual front end: one input field over one result list."""

from __future__ import annotations

import logging
from typing import Any

from textual import on
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.widgets import Input, OptionList
from textual.widgets.option_list import Option

from vaultbar.controller import InputController
from vaultbar.models import CredentialSummary, HelpEntry, Mode, UserConfig
from vaultbar.services.clipboard import SystemClipboard
from vaultbar.services.interfaces import Clipboard, CredentialStore
from vaultbar.ui_constants import APP_BINDINGS, APP_CSS, COLLAPSED_SIZE, EXPANDED_SIZE
from vaultbar.widgets.listing import render_credential_option, render_help_option

logger = logging.getLogger(__name__)

LOCKED_EXIT_CODE = 3


class TerminalChrome:
    """Window chrome for a terminal: the list pane stands in for window height.

    Collapsed hides the list, expanded shows it, and hiding the window
    ends the app.
    """

    def __init__(self, app: VaultbarApp) -> None:
        self._app = app

    def _set_list_visible(self, visible: bool) -> None:
        results = self._app.query_one("#results", OptionList)
        results.display = visible

    async def set_collapsed(self) -> None:
        logger.debug("Collapsing to %dx%d", *COLLAPSED_SIZE)
        self._set_list_visible(False)

    async def set_expanded(self) -> None:
        logger.debug("Expanding to %dx%d", *EXPANDED_SIZE)
        self._set_list_visible(True)

    async def hide(self) -> None:
        self._app.exit(return_code=0)


class VaultbarApp(App):
    """Launcher-style credential search, command shell and secret prompt."""

    TITLE = "vaultbar"

    CSS = APP_CSS

    BINDINGS = APP_BINDINGS

    def __init__(
        self,
        store: CredentialStore,
        config: UserConfig | None = None,
        *,
        clipboard: Clipboard | None = None,
    ) -> None:
        super().__init__()
        self._config = config or UserConfig()
        self._store = store
        self._clipboard = clipboard or SystemClipboard(mirror=self.copy_to_clipboard)
        self.chrome = TerminalChrome(self)
        self.controller = InputController(
            store,
            self.chrome,
            self._clipboard,
            config=self._config,
            set_timer=self.set_timer,
            on_render=self._render_session,
            focus_input=self._focus_field,
            on_locked=self._on_locked,
        )
        self._rendered_items: list[CredentialSummary | HelpEntry] = []

    def compose(self) -> ComposeResult:
        with Vertical(id="launcher"):
            yield Input(placeholder=self.controller.placeholder, id="field")
            yield OptionList(id="results")

    def on_mount(self) -> None:
        results = self.query_one("#results", OptionList)
        results.can_focus = False
        results.display = False
        self.controller.on_window_shown()
        self._render_session()

    async def on_unmount(self) -> None:
        aclose = getattr(self._store, "aclose", None)
        if aclose is not None:
            await aclose()

    # ── Controller hooks ────────────────────────────────────────────────

    def _widgets_ready(self) -> bool:
        try:
            self.query_one("#field", Input)
        except NoMatches:
            return False
        return True

    def _focus_field(self) -> None:
        if not self._widgets_ready():
            return
        self.query_one("#field", Input).focus()

    def _on_locked(self) -> None:
        self.exit(return_code=LOCKED_EXIT_CODE, message="Vault locked")

    def _render_session(self) -> None:
        """Push controller state into the widgets."""
        if not self._widgets_ready():
            return
        controller = self.controller
        field = self.query_one("#field", Input)
        if field.value != controller.raw_text:
            with field.prevent(Input.Changed):
                field.value = controller.raw_text
        in_secret = controller.mode == Mode.SECRET_ENTRY
        field.password = in_secret and not controller.secret.context.reveal_secret
        field.set_class(in_secret, "secret-entry")
        field.placeholder = controller.placeholder
        self._render_list()

    def _render_list(self) -> None:
        controller = self.controller
        items: list[Any] = (
            controller.help.items if controller.showing_help else controller.results.items
        )
        results = self.query_one("#results", OptionList)
        if items != self._rendered_items:
            self._rendered_items = list(items)
            results.clear_options()
            results.add_options([Option(self._render_option(item)) for item in items])
        selection = controller.selection
        results.highlighted = selection if selection != -1 else None

    @staticmethod
    def _render_option(item: CredentialSummary | HelpEntry) -> str:
        if isinstance(item, HelpEntry):
            return render_help_option(item)
        return render_credential_option(item)

    # ── Events and actions ──────────────────────────────────────────────

    @on(Input.Changed, "#field")
    def on_field_changed(self, event: Input.Changed) -> None:
        if event.value != self.controller.raw_text:
            self.controller.handle_text_changed(event.value)

    @on(OptionList.OptionSelected, "#results")
    async def on_result_selected(self, event: OptionList.OptionSelected) -> None:
        await self.controller.activate_item(event.option_index)

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        if action == "dispatch" and parameters:
            return self.controller.would_handle_key(str(parameters[0]))
        return True

    async def action_dispatch(self, key: str) -> None:
        await self.controller.handle_key(key)


__all__ = [
    "LOCKED_EXIT_CODE",
    "TerminalChrome",
    "VaultbarApp",
]
