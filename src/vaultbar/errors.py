"""Error taxonomy shared by the controller and the store adapters."""

from __future__ import annotations


class VaultbarError(Exception):
    """Base class for every failure the controller knows how to present."""


class ValidationError(VaultbarError):
    """Malformed request arguments; resolved locally and shown with a usage hint."""

    def __init__(self, message: str, usage: str | None = None) -> None:
        super().__init__(message)
        self.usage = usage or message


class StoreError(VaultbarError):
    """An external store call failed."""


class NotFoundError(StoreError):
    """The targeted credential no longer exists."""


class AuthError(VaultbarError):
    """The store rejected the call because the vault is locked or the secret is wrong."""


__all__ = [
    "AuthError",
    "NotFoundError",
    "StoreError",
    "ValidationError",
    "VaultbarError",
]
