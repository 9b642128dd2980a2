"""Vulture whitelist for Textual framework false positives.

Textual uses string-based dispatch for action_* methods (via BINDINGS),
lifecycle hooks, event handlers (@on decorators), and compose() methods.
Vulture can't trace these, so we declare them here.
"""

# ── VaultbarApp (App) ─────────────────────────────────────────────────
from vaultbar.app import VaultbarApp

VaultbarApp.TITLE
VaultbarApp.CSS
VaultbarApp.BINDINGS
VaultbarApp.compose
VaultbarApp.on_mount
VaultbarApp.on_unmount
VaultbarApp.on_field_changed
VaultbarApp.on_result_selected
VaultbarApp.check_action
VaultbarApp.action_dispatch

# ── Store adapters (called through the CredentialStore protocol) ─────
from vaultbar.services.http_store import HttpCredentialStore

HttpCredentialStore.aclose
