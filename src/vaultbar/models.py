"""Data models and constants for the vaultbar input controller."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Application identity, single source of truth for platformdirs config paths
CONFIG_APP_NAME = "vaultbar"
APP_VERSION = "0.1.0"

# Leading character that switches the field from search to command interpretation
COMMAND_SIGIL = ":"

# Feedback channel limits (milliseconds)
DEFAULT_FEEDBACK_DURATION_MS = 2000
MIN_FEEDBACK_DURATION_MS = 250
MAX_FEEDBACK_DURATION_MS = 30_000

# Search debounce limits (milliseconds, 0 disables debouncing)
MAX_SEARCH_DEBOUNCE_MS = 2000

# HTTP store timeout limits (seconds)
DEFAULT_STORE_TIMEOUT_SECONDS = 10
MAX_STORE_TIMEOUT_SECONDS = 120

# Arrow-Up policies when the first list item is selected
UP_FROM_FIRST_POLICIES = ("field", "wrap")


class Mode(Enum):
    """Interaction mode of the single input field."""

    SEARCH = "search"
    COMMAND = "command"
    SECRET_ENTRY = "secret_entry"


class ChromeState(Enum):
    """Last requested host window size."""

    COLLAPSED = "collapsed"
    EXPANDED = "expanded"


class SecretStage(Enum):
    """Stages of the secret-entry sub-flow."""

    INACTIVE = "inactive"
    COLLECTING = "collecting"
    CONFIRMING = "confirming"
    COMMITTING = "committing"


@dataclass(frozen=True, slots=True)
class CredentialSummary:
    """Non-secret metadata about a stored credential."""

    id: int
    service_name: str
    username: str
    notes: str = ""
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True, slots=True)
class HelpEntry:
    """One row of the built-in help catalog."""

    title: str
    summary: str
    detail: str = ""
    insert_text: str | None = None  # None for shortcut rows


@dataclass(slots=True)
class SecretEntryContext:
    """Transient state of a create/update secret flow."""

    is_active: bool = False
    service_name: str = ""
    username: str = ""
    notes: str = ""
    reveal_secret: bool = False
    editing_id: int | None = None  # None = create flow

    @property
    def is_update(self) -> bool:
        return self.editing_id is not None


@dataclass(frozen=True, slots=True)
class Feedback:
    """Transient placeholder override."""

    text: str
    expires_at: float


@dataclass(slots=True)
class UserConfig:
    """User preferences for the input controller and its collaborators."""

    confirm_secret: bool = False
    feedback_duration_ms: int = DEFAULT_FEEDBACK_DURATION_MS
    search_debounce_ms: int = 0
    up_from_first: str = "field"  # "field" | "wrap"
    store_url: str = ""  # Empty = bundled in-memory store
    store_timeout_seconds: int = DEFAULT_STORE_TIMEOUT_SECONDS
    export_dir: str = ""  # Empty = ~/vaultbar-exports/
    version: int = 1


__all__ = [
    "APP_VERSION",
    "COMMAND_SIGIL",
    "CONFIG_APP_NAME",
    "DEFAULT_FEEDBACK_DURATION_MS",
    "DEFAULT_STORE_TIMEOUT_SECONDS",
    "MAX_FEEDBACK_DURATION_MS",
    "MAX_SEARCH_DEBOUNCE_MS",
    "MAX_STORE_TIMEOUT_SECONDS",
    "MIN_FEEDBACK_DURATION_MS",
    "UP_FROM_FIRST_POLICIES",
    "ChromeState",
    "CredentialSummary",
    "Feedback",
    "HelpEntry",
    "Mode",
    "SecretEntryContext",
    "SecretStage",
    "UserConfig",
]
