"""Top-level keyboard routing for the input session."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from vaultbar.keymap import (
    ACTION_DELETE,
    ACTION_EDIT,
    ACTION_ENTER,
    ACTION_ESCAPE,
    ACTION_LOCK,
    ACTION_ORDER,
    ACTION_SELECT_NEXT,
    ACTION_SELECT_PREVIOUS,
    ACTION_TOGGLE_REVEAL,
    DEFAULT_ACTION_KEYS,
    GUARD_ITEM_SELECTED,
    GUARD_LIST_NAVIGABLE,
    GUARD_SECRET_ENTRY,
    ActionKeyDef,
    action_key_for,
)

if TYPE_CHECKING:
    from vaultbar.controller import InputController

logger = logging.getLogger(__name__)


class KeyboardDispatcher:
    """Routes a key to at most one controller action.

    Rules are checked in ``ACTION_ORDER``; the first rule whose key matches
    decides the outcome. A rule whose guard fails is a no-op and the key
    is reported as unhandled so the field can process it normally.
    """

    def __init__(
        self,
        controller: InputController,
        keymap: tuple[ActionKeyDef, ...] = DEFAULT_ACTION_KEYS,
    ) -> None:
        self._controller = controller
        self._keymap = keymap
        self._guards: dict[str, Callable[[], bool]] = {
            GUARD_LIST_NAVIGABLE: self._list_navigable,
            GUARD_ITEM_SELECTED: self._item_selected,
            GUARD_SECRET_ENTRY: lambda: controller.secret.is_active,
        }
        self._handlers: dict[str, Callable[[], Awaitable[None]]] = {
            ACTION_ESCAPE: controller.escape,
            ACTION_ENTER: controller.enter,
            ACTION_SELECT_NEXT: controller.select_next,
            ACTION_SELECT_PREVIOUS: controller.select_previous,
            ACTION_DELETE: controller.delete_selected,
            ACTION_EDIT: controller.edit_selected,
            ACTION_TOGGLE_REVEAL: controller.toggle_reveal,
            ACTION_LOCK: controller.lock,
        }
        self._rules: tuple[ActionKeyDef, ...] = tuple(
            sorted(keymap, key=lambda definition: ACTION_ORDER.index(definition.action))
        )

    def _list_navigable(self) -> bool:
        controller = self._controller
        return not controller.secret.is_active and len(controller.active_list) > 0

    def _item_selected(self) -> bool:
        controller = self._controller
        return (
            not controller.secret.is_active
            and not controller.showing_help
            and controller.results.index != -1
        )

    def match(self, key: str) -> ActionKeyDef | None:
        """Return the rule that would run for ``key``, or None."""
        rule = action_key_for(key, self._rules)
        if rule is None:
            return None
        if rule.guard is not None and not self._guards[rule.guard]():
            return None
        return rule

    async def dispatch(self, key: str) -> bool:
        """Run the action bound to ``key``. Returns False when nothing ran."""
        rule = self.match(key)
        if rule is None:
            return False
        logger.debug("Key %s -> %s", key, rule.action)
        await self._handlers[rule.action]()
        return True


__all__ = ["KeyboardDispatcher"]
