"""Secret-entry sub-flow: collect (and optionally confirm) a secret, then commit.

Stages::

    INACTIVE -> COLLECTING [-> CONFIRMING] -> COMMITTING -> INACTIVE

With ``confirm_secret`` off the flow is single-step: Enter on the typed
value commits. With it on, the first value is held and must be typed again;
Escape in CONFIRMING steps back to COLLECTING instead of leaving.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from vaultbar.action_messages import EMPTY_SECRET, SECRETS_DO_NOT_MATCH, build_failure_feedback
from vaultbar.feedback import FeedbackChannel
from vaultbar.models import SecretEntryContext, SecretStage
from vaultbar.services.interfaces import Clipboard, CredentialStore
from vaultbar.window import ChromeController

logger = logging.getLogger(__name__)

COPY_FAILED = "Saved, but failed to copy secret"


class SecretEntryFlow:
    """State machine for create, generate and update secret flows.

    The flow never owns the field text. ``clear_input`` and ``focus_input``
    are hooks into whoever does; ``on_change`` fires after every stage
    change; ``on_committed`` runs once the store has accepted the secret and
    must drop the typed text before the clipboard copy is awaited.
    """

    def __init__(
        self,
        store: CredentialStore,
        clipboard: Clipboard,
        chrome: ChromeController,
        feedback: FeedbackChannel,
        *,
        confirm_secret: bool = False,
        on_change: Callable[[], None] = lambda: None,
        on_committed: Callable[[], None] = lambda: None,
        clear_input: Callable[[], None] = lambda: None,
        focus_input: Callable[[], None] = lambda: None,
    ) -> None:
        self._store = store
        self._clipboard = clipboard
        self._chrome = chrome
        self._feedback = feedback
        self._confirm_secret = confirm_secret
        self._on_change = on_change
        self._on_committed = on_committed
        self._clear_input = clear_input
        self._focus_input = focus_input
        self.context = SecretEntryContext()
        self._stage = SecretStage.INACTIVE
        self._pending = ""

    @property
    def stage(self) -> SecretStage:
        return self._stage

    @property
    def is_active(self) -> bool:
        return self.context.is_active

    @property
    def confirm_secret(self) -> bool:
        return self._confirm_secret

    def _set_stage(self, stage: SecretStage) -> None:
        if stage != self._stage:
            logger.debug("Secret entry %s -> %s", self._stage.value, stage.value)
        self._stage = stage

    def begin(
        self,
        service_name: str,
        username: str,
        notes: str = "",
        editing_id: int | None = None,
    ) -> None:
        """Enter COLLECTING for a create flow, or an update flow when ``editing_id`` is set."""
        self.context = SecretEntryContext(
            is_active=True,
            service_name=service_name,
            username=username,
            notes=notes,
            editing_id=editing_id,
        )
        self._pending = ""
        self._set_stage(SecretStage.COLLECTING)
        self._clear_input()
        self._on_change()
        self._focus_input()

    def cancel(self) -> None:
        """Leave the flow and drop every transient field."""
        self.context = SecretEntryContext()
        self._pending = ""
        self._set_stage(SecretStage.INACTIVE)

    def escape(self) -> None:
        """Step back from CONFIRMING, otherwise exit the flow. Ignored while committing."""
        if self._stage == SecretStage.COMMITTING:
            return
        if self._stage == SecretStage.CONFIRMING:
            self._set_stage(SecretStage.COLLECTING)
            self._pending = ""
            self._clear_input()
        else:
            self.cancel()
            self._clear_input()
        self._on_change()
        self._focus_input()

    def toggle_reveal(self) -> bool:
        if not self.context.is_active:
            return False
        self.context.reveal_secret = not self.context.reveal_secret
        self._on_change()
        return self.context.reveal_secret

    async def submit(self, value: str) -> bool:
        """Handle Enter on ``value``. Returns True when the secret was committed."""
        if self._stage in (SecretStage.INACTIVE, SecretStage.COMMITTING):
            return False
        if not value:
            self._feedback.show(EMPTY_SECRET, refocus=True)
            return False

        if self._confirm_secret and self._stage == SecretStage.COLLECTING:
            self._pending = value
            self._set_stage(SecretStage.CONFIRMING)
            self._clear_input()
            self._on_change()
            self._focus_input()
            return False

        if self._confirm_secret and value != self._pending:
            self._pending = ""
            self._set_stage(SecretStage.COLLECTING)
            self._feedback.show(SECRETS_DO_NOT_MATCH, clear_input=True, refocus=True)
            return False

        return await self._commit(value, revert_to=self._stage)

    async def _commit(self, value: str, *, revert_to: SecretStage) -> bool:
        self._set_stage(SecretStage.COMMITTING)
        self._on_change()
        context = self.context
        action = "update secret" if context.is_update else "add credential"
        try:
            if context.editing_id is not None:
                await self._store.update_secret(context.editing_id, value)
            else:
                await self._store.create_credential(
                    context.service_name, context.username, value, context.notes
                )
        except Exception as e:
            if self.context is not context:
                logger.debug("Secret entry was torn down during a failed commit")
                return False
            logger.warning("Could not %s for %s: %s", action, context.service_name, e)
            self._set_stage(revert_to)
            self._feedback.show(build_failure_feedback(action, e), clear_input=True, refocus=True)
            return False
        return await self._finish(context, value)

    async def commit_generated(self, service_name: str, username: str, notes: str = "") -> bool:
        """Create a credential whose secret the store generates; no typed stage."""
        self.context = SecretEntryContext(
            is_active=True, service_name=service_name, username=username, notes=notes
        )
        self._set_stage(SecretStage.COMMITTING)
        context = self.context
        self._clear_input()
        self._on_change()
        try:
            secret = await self._store.generate_and_store(service_name, username, notes)
        except Exception as e:
            if self.context is not context:
                return False
            logger.warning("Could not generate a secret for %s: %s", service_name, e)
            self.cancel()
            self._feedback.show(
                build_failure_feedback("add credential", e), clear_input=True, refocus=True
            )
            return False
        return await self._finish(context, secret)

    async def _finish(self, context: SecretEntryContext, secret: str) -> bool:
        service_name = context.service_name
        if self.context is not context:
            logger.debug("Secret entry for %s was torn down before the copy", service_name)
            return False
        self.cancel()
        self._on_committed()
        try:
            await self._clipboard.copy(secret)
        except Exception as e:
            logger.warning("Clipboard copy failed after saving %s: %s", service_name, e)
            self._feedback.show(COPY_FAILED, clear_input=True, refocus=True)
            return True
        logger.debug("Secret for %s copied", service_name)
        await self._chrome.hide()
        return True


__all__ = ["COPY_FAILED", "SecretEntryFlow"]
