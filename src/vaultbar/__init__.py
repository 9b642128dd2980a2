"""vaultbar: launcher-style credential search, command shell and secret prompt."""

from vaultbar.commands import ParsedCommand, parse_command
from vaultbar.controller import InputController
from vaultbar.errors import AuthError, NotFoundError, StoreError, ValidationError, VaultbarError
from vaultbar.models import (
    ChromeState,
    CredentialSummary,
    HelpEntry,
    Mode,
    SecretEntryContext,
    SecretStage,
    UserConfig,
)
from vaultbar.modes import resolve_mode
from vaultbar.navigation import ListNavigator

__all__ = [
    "AuthError",
    "ChromeState",
    "CredentialSummary",
    "HelpEntry",
    "InputController",
    "ListNavigator",
    "Mode",
    "NotFoundError",
    "ParsedCommand",
    "SecretEntryContext",
    "SecretStage",
    "StoreError",
    "UserConfig",
    "ValidationError",
    "VaultbarError",
    "parse_command",
    "resolve_mode",
]
