"""Bundled in-process credential store.

Holds credentials in memory for the lifetime of the process. Used when no
remote store URL is configured, and as the reference store in tests.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path

from rapidfuzz import fuzz

from vaultbar.commands import (
    ExportCommand,
    ImportCommand,
    InvalidCommand,
    ResetCommand,
    parse_command,
)
from vaultbar.errors import AuthError, NotFoundError, StoreError, ValidationError
from vaultbar.models import CredentialSummary
from vaultbar.services.csv_io import (
    CsvCredential,
    build_credentials_csv,
    default_export_dir,
    read_credentials_csv,
    write_export_file,
)
from vaultbar.services.generator import generate_secret

logger = logging.getLogger(__name__)

FUZZY_SCORE_CUTOFF = 60  # Minimum score (0-100) to include in results
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(slots=True)
class _StoredCredential:
    summary: CredentialSummary
    secret: str


class InMemoryCredentialStore:
    """Credential store backed by a dict, ranked with rapidfuzz."""

    def __init__(
        self,
        *,
        export_dir: Path | None = None,
        secret_factory: Callable[[], str] = generate_secret,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._entries: dict[int, _StoredCredential] = {}
        self._next_id = 1
        self._locked = False
        self._export_dir = export_dir
        self._secret_factory = secret_factory
        self._now = now

    @property
    def is_locked(self) -> bool:
        return self._locked

    def __len__(self) -> int:
        return len(self._entries)

    def _require_unlocked(self) -> None:
        if self._locked:
            raise AuthError("The vault is locked")

    def _get(self, credential_id: int) -> _StoredCredential:
        entry = self._entries.get(credential_id)
        if entry is None:
            raise NotFoundError(f"No credential with id {credential_id}")
        return entry

    def _timestamp(self) -> str:
        return self._now().strftime(TIMESTAMP_FORMAT)

    def _insert(self, service_name: str, username: str, secret: str, notes: str) -> int:
        service_name = service_name.strip()
        username = username.strip()
        if not service_name or not username:
            raise ValidationError("Service and username are required")
        if not secret:
            raise ValidationError("Secret must not be empty")
        credential_id = self._next_id
        self._next_id += 1
        stamp = self._timestamp()
        summary = CredentialSummary(
            id=credential_id,
            service_name=service_name,
            username=username,
            notes=notes,
            created_at=stamp,
            updated_at=stamp,
        )
        self._entries[credential_id] = _StoredCredential(summary=summary, secret=secret)
        logger.debug("Created credential %d for %s", credential_id, service_name)
        return credential_id

    # ── Credential store protocol ───────────────────────────────────────

    async def search(self, query: str) -> list[CredentialSummary]:
        self._require_unlocked()
        summaries = [entry.summary for entry in self._entries.values()]
        query_lower = query.strip().lower()
        if not query_lower:
            return sorted(summaries, key=lambda s: (s.service_name.lower(), s.username.lower()))

        scored: list[tuple[CredentialSummary, float]] = []
        for summary in summaries:
            text = f"{summary.service_name} {summary.username} {summary.notes}".lower()
            if query_lower in text:
                score = 100.0
            else:
                score = fuzz.WRatio(query_lower, text)
            if score >= FUZZY_SCORE_CUTOFF:
                scored.append((summary, score))
        scored.sort(key=lambda pair: (-pair[1], pair[0].service_name.lower(), pair[0].id))
        return [summary for summary, _ in scored]

    async def create_credential(
        self, service_name: str, username: str, secret: str, notes: str = ""
    ) -> int:
        self._require_unlocked()
        return self._insert(service_name, username, secret, notes)

    async def generate_and_store(self, service_name: str, username: str, notes: str = "") -> str:
        self._require_unlocked()
        secret = self._secret_factory()
        self._insert(service_name, username, secret, notes)
        return secret

    async def update_secret(self, credential_id: int, new_secret: str) -> None:
        self._require_unlocked()
        if not new_secret:
            raise ValidationError("Secret must not be empty")
        entry = self._get(credential_id)
        entry.secret = new_secret
        entry.summary = replace(entry.summary, updated_at=self._timestamp())
        logger.debug("Updated secret for credential %d", credential_id)

    async def delete_credential(self, credential_id: int) -> None:
        self._require_unlocked()
        self._get(credential_id)
        del self._entries[credential_id]
        logger.debug("Deleted credential %d", credential_id)

    async def reveal_secret(self, credential_id: int) -> str:
        self._require_unlocked()
        return self._get(credential_id).secret

    async def run_text_command(self, raw: str) -> int | str:
        """Run ``:import``, ``:export`` or ``:reset!``.

        Returns the imported row count for imports and a message otherwise.
        """
        self._require_unlocked()
        command = parse_command(raw)
        if isinstance(command, ImportCommand):
            return self._import_csv(Path(command.path))
        if isinstance(command, ExportCommand):
            path = self._export_csv()
            return f"Exported {len(self._entries)} credential(s) to {path}"
        if isinstance(command, ResetCommand):
            count = len(self._entries)
            self._entries.clear()
            logger.info("Reset store, removed %d credential(s)", count)
            return f"Removed {count} credential(s)"
        if isinstance(command, InvalidCommand):
            raise ValidationError(command.usage)
        raise ValidationError(f"Unsupported command: {raw.strip()}")

    async def lock(self) -> None:
        self._locked = True
        logger.info("Vault locked")

    # ── Import / export ─────────────────────────────────────────────────

    def import_rows(self, rows: list[CsvCredential]) -> int:
        """Insert rows, skipping any that fail validation. Returns the count inserted."""
        imported = 0
        for row in rows:
            try:
                self._insert(row.service_name, row.username, row.secret, row.notes)
            except ValidationError as e:
                logger.debug("Skipping import row for %s: %s", row.service_name, e)
                continue
            imported += 1
        return imported

    def _import_csv(self, path: Path) -> int:
        try:
            rows = read_credentials_csv(path)
        except (OSError, UnicodeDecodeError) as e:
            raise StoreError(f"Could not read {path}") from e
        imported = self.import_rows(rows)
        logger.info("Imported %d credential(s) from %s", imported, path)
        return imported

    def _export_csv(self) -> Path:
        rows = [
            CsvCredential(
                entry.summary.service_name,
                entry.summary.username,
                entry.secret,
                entry.summary.notes,
            )
            for entry in sorted(self._entries.values(), key=lambda e: e.summary.id)
        ]
        export_dir = self._export_dir or default_export_dir()
        try:
            path = write_export_file(content=build_credentials_csv(rows), export_dir=export_dir)
        except OSError as e:
            raise StoreError(f"Could not write export to {export_dir}") from e
        logger.info("Exported %d credential(s) to %s", len(rows), path)
        return path


__all__ = [
    "FUZZY_SCORE_CUTOFF",
    "InMemoryCredentialStore",
]
