"""Help catalog builders derived from the command grammar and the keymap."""

from __future__ import annotations

from vaultbar.commands import COMMAND_USAGES
from vaultbar.keymap import DEFAULT_ACTION_KEYS, ActionKeyDef, format_key, primary_action_keys
from vaultbar.models import HelpEntry

# (command name, summary, detail, text inserted on Enter)
HELP_COMMANDS: list[tuple[str, str, str, str]] = [
    (
        "add",
        "Add a credential",
        "Prompts for the secret, then copies it and hides the window",
        ":add ",
    ),
    (
        "addgen",
        "Add with a generated secret",
        "The store generates a secure secret and it is copied right away",
        ":addgen ",
    ),
    (
        "import",
        "Import credentials from CSV",
        "Columns: service, username, password, notes. The path must be absolute",
        ":import ",
    ),
    (
        "export",
        "Export all credentials",
        "Writes every credential, secrets included, to a CSV file",
        ":export",
    ),
    (
        "reset!",
        "Remove every credential",
        "Clears the store; cannot be undone",
        ":reset!",
    ),
]

# Shortcut rows shown in the catalog, in display order
HELP_SHORTCUT_ACTIONS: list[str] = [
    "lock",
    "delete_selected",
    "edit_selected",
    "toggle_reveal",
]

HELP_DESCRIPTION_OVERRIDES: dict[str, str] = {
    "lock": "Lock the vault and close the session",
    "delete_selected": "Delete the highlighted credential",
    "edit_selected": "Type a new secret for the highlighted credential",
    "toggle_reveal": "Show or mask the secret while typing it",
}


def _primary_binding(keymap: tuple[ActionKeyDef, ...], action: str) -> ActionKeyDef | None:
    for definition in primary_action_keys(keymap):
        if definition.action == action:
            return definition
    return None


def build_help_catalog(
    keymap: tuple[ActionKeyDef, ...] = DEFAULT_ACTION_KEYS,
) -> list[HelpEntry]:
    """Build the ``:help`` list: commands first, then shortcuts."""
    entries = [
        HelpEntry(
            title=COMMAND_USAGES[name],
            summary=summary,
            detail=detail,
            insert_text=insert_text,
        )
        for name, summary, detail, insert_text in HELP_COMMANDS
    ]
    for action in HELP_SHORTCUT_ACTIONS:
        definition = _primary_binding(keymap, action)
        if definition is None:
            continue
        entries.append(
            HelpEntry(
                title=format_key(definition.key),
                summary=definition.label,
                detail=HELP_DESCRIPTION_OVERRIDES.get(action, ""),
            )
        )
    return entries


__all__ = ["HELP_COMMANDS", "build_help_catalog"]
