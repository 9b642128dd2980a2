"""Mode resolution and mode-derived placeholder text."""

from __future__ import annotations

from vaultbar.commands import (
    COMMAND_USAGES,
    HelpCommand,
    is_command_text,
    parse_command,
    split_command,
)
from vaultbar.models import Mode, SecretEntryContext, SecretStage

SEARCH_PLACEHOLDER = "Search or :help"
HELP_PLACEHOLDER = "Select a command from the help list below"


def resolve_mode(raw_text: str, secret_entry_active: bool) -> Mode:
    """Classify the field. Priority: SECRET_ENTRY > COMMAND > SEARCH."""
    if secret_entry_active:
        return Mode.SECRET_ENTRY
    if is_command_text(raw_text):
        return Mode.COMMAND
    return Mode.SEARCH


def is_help_text(raw_text: str) -> bool:
    """True when the field parses as ``:help`` (any case, trailing words ignored)."""
    return isinstance(parse_command(raw_text), HelpCommand)


def secret_placeholder(context: SecretEntryContext, stage: SecretStage) -> str:
    if stage == SecretStage.CONFIRMING:
        return f"Confirm secret for {context.service_name}..."
    if context.is_update:
        return f"Enter new secret for {context.service_name}..."
    return f"Enter secret for {context.service_name}..."


def build_placeholder(
    raw_text: str,
    context: SecretEntryContext,
    stage: SecretStage = SecretStage.COLLECTING,
) -> str:
    """Placeholder for the current state, recomputed on every render."""
    mode = resolve_mode(raw_text, context.is_active)
    if mode == Mode.SECRET_ENTRY:
        return secret_placeholder(context, stage)
    if mode == Mode.COMMAND:
        name, _ = split_command(raw_text.strip())
        if name == "help":
            return HELP_PLACEHOLDER
        usage = COMMAND_USAGES.get(name)
        if usage is not None:
            return usage
    return SEARCH_PLACEHOLDER


__all__ = [
    "HELP_PLACEHOLDER",
    "SEARCH_PLACEHOLDER",
    "build_placeholder",
    "is_help_text",
    "resolve_mode",
    "secret_placeholder",
]
