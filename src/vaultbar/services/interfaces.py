"""Service interfaces and the store factory used by the CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from vaultbar.models import CredentialSummary, UserConfig
from vaultbar.services.http_store import HttpCredentialStore
from vaultbar.services.memory_store import InMemoryCredentialStore


@runtime_checkable
class CredentialStore(Protocol):
    """Interface for the external credential store."""

    async def search(self, query: str) -> list[CredentialSummary]:
        """Return summaries matching ``query``; an empty query lists everything."""
        ...

    async def create_credential(
        self, service_name: str, username: str, secret: str, notes: str = ""
    ) -> int:
        """Store a new credential and return its id."""
        ...

    async def generate_and_store(self, service_name: str, username: str, notes: str = "") -> str:
        """Store a credential with a store-generated secret and return the secret."""
        ...

    async def update_secret(self, credential_id: int, new_secret: str) -> None:
        """Replace the secret of an existing credential."""
        ...

    async def delete_credential(self, credential_id: int) -> None:
        """Remove a credential."""
        ...

    async def reveal_secret(self, credential_id: int) -> str:
        """Return the plaintext secret of a credential."""
        ...

    async def run_text_command(self, raw: str) -> int | str:
        """Run a raw text command the controller does not intercept."""
        ...

    async def lock(self) -> None:
        """Lock the vault."""
        ...


@runtime_checkable
class WindowChrome(Protocol):
    """Interface for the host window's sizing and visibility."""

    async def set_collapsed(self) -> None:
        ...

    async def set_expanded(self) -> None:
        ...

    async def hide(self) -> None:
        ...


@runtime_checkable
class Clipboard(Protocol):
    """Interface for the system clipboard."""

    async def copy(self, text: str) -> None:
        ...


def build_store(config: UserConfig) -> CredentialStore:
    """Pick the HTTP store when a URL is configured, else the bundled store."""
    if config.store_url:
        return HttpCredentialStore(
            config.store_url, timeout_seconds=config.store_timeout_seconds
        )
    export_dir = Path(config.export_dir).expanduser() if config.export_dir else None
    return InMemoryCredentialStore(export_dir=export_dir)


__all__ = [
    "Clipboard",
    "CredentialStore",
    "WindowChrome",
    "build_store",
]
