"""Keyboard shortcut table (UI-agnostic).

The dispatcher, the Textual bindings and the help catalog are all built
from ``DEFAULT_ACTION_KEYS``, so they cannot disagree about a key.
Key names follow Textual's conventions (``ctrl+d``, ``down``).
"""

from __future__ import annotations

from dataclasses import dataclass

KEY_DISPLAY_OVERRIDES: dict[str, str] = {
    "escape": "Esc",
    "enter": "Enter",
    "up": "Up",
    "down": "Down",
}

# Action names, in dispatcher precedence order
ACTION_ESCAPE = "escape"
ACTION_ENTER = "enter"
ACTION_SELECT_NEXT = "select_next"
ACTION_SELECT_PREVIOUS = "select_previous"
ACTION_DELETE = "delete_selected"
ACTION_EDIT = "edit_selected"
ACTION_TOGGLE_REVEAL = "toggle_reveal"
ACTION_LOCK = "lock"

ACTION_ORDER: tuple[str, ...] = (
    ACTION_ESCAPE,
    ACTION_ENTER,
    ACTION_SELECT_NEXT,
    ACTION_SELECT_PREVIOUS,
    ACTION_DELETE,
    ACTION_EDIT,
    ACTION_TOGGLE_REVEAL,
    ACTION_LOCK,
)

# Guard names, resolved by the dispatcher against live session state
GUARD_LIST_NAVIGABLE = "list_navigable"
GUARD_ITEM_SELECTED = "item_selected"
GUARD_SECRET_ENTRY = "secret_entry"


@dataclass(frozen=True, slots=True)
class ActionKeyDef:
    """Definition of one key bound to a controller action."""

    key: str
    action: str
    label: str
    guard: str | None = None
    primary: bool = True  # Primary key for display vs secondary aliases


DEFAULT_ACTION_KEYS: tuple[ActionKeyDef, ...] = (
    ActionKeyDef("escape", ACTION_ESCAPE, "Clear, step back or hide"),
    ActionKeyDef("enter", ACTION_ENTER, "Submit or copy the selected secret"),
    ActionKeyDef("down", ACTION_SELECT_NEXT, "Next result", GUARD_LIST_NAVIGABLE),
    ActionKeyDef("ctrl+n", ACTION_SELECT_NEXT, "Next result", GUARD_LIST_NAVIGABLE, False),
    ActionKeyDef("ctrl+j", ACTION_SELECT_NEXT, "Next result", GUARD_LIST_NAVIGABLE, False),
    ActionKeyDef("up", ACTION_SELECT_PREVIOUS, "Previous result", GUARD_LIST_NAVIGABLE),
    ActionKeyDef("ctrl+p", ACTION_SELECT_PREVIOUS, "Previous result", GUARD_LIST_NAVIGABLE, False),
    ActionKeyDef("ctrl+k", ACTION_SELECT_PREVIOUS, "Previous result", GUARD_LIST_NAVIGABLE, False),
    ActionKeyDef("ctrl+d", ACTION_DELETE, "Delete the selected credential", GUARD_ITEM_SELECTED),
    ActionKeyDef(
        "ctrl+e", ACTION_EDIT, "Change the selected credential's secret", GUARD_ITEM_SELECTED
    ),
    ActionKeyDef(
        "ctrl+r", ACTION_TOGGLE_REVEAL, "Show or mask the typed secret", GUARD_SECRET_ENTRY
    ),
    ActionKeyDef("ctrl+l", ACTION_LOCK, "Lock the vault"),
)


def format_key(key: str) -> str:
    """Format a key name for display in help rows."""
    if key in KEY_DISPLAY_OVERRIDES:
        return KEY_DISPLAY_OVERRIDES[key]
    if key.startswith("ctrl+"):
        return f"Ctrl+{key.split('+', 1)[1].upper()}"
    return key


def action_key_for(
    key: str, keymap: tuple[ActionKeyDef, ...] = DEFAULT_ACTION_KEYS
) -> ActionKeyDef | None:
    for definition in keymap:
        if definition.key == key:
            return definition
    return None


def primary_action_keys(
    keymap: tuple[ActionKeyDef, ...] = DEFAULT_ACTION_KEYS,
) -> list[ActionKeyDef]:
    return [definition for definition in keymap if definition.primary]


__all__ = [
    "ACTION_DELETE",
    "ACTION_EDIT",
    "ACTION_ENTER",
    "ACTION_ESCAPE",
    "ACTION_LOCK",
    "ACTION_ORDER",
    "ACTION_SELECT_NEXT",
    "ACTION_SELECT_PREVIOUS",
    "ACTION_TOGGLE_REVEAL",
    "DEFAULT_ACTION_KEYS",
    "GUARD_ITEM_SELECTED",
    "GUARD_LIST_NAVIGABLE",
    "GUARD_SECRET_ENTRY",
    "ActionKeyDef",
    "action_key_for",
    "format_key",
    "primary_action_keys",
]
