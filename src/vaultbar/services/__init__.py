"""Credential store, clipboard and generator adapters."""

from vaultbar.services.clipboard import SystemClipboard, get_clipboard_command_plan
from vaultbar.services.generator import generate_secret
from vaultbar.services.http_store import HttpCredentialStore
from vaultbar.services.memory_store import InMemoryCredentialStore

__all__ = [
    "HttpCredentialStore",
    "InMemoryCredentialStore",
    "SystemClipboard",
    "generate_secret",
    "get_clipboard_command_plan",
]
