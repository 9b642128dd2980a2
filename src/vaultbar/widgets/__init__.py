"""Widget helpers for the launcher UI."""

from vaultbar.widgets.listing import (
    NOTES_PREVIEW_MAX_LEN,
    render_credential_option,
    render_help_option,
)

__all__ = [
    "NOTES_PREVIEW_MAX_LEN",
    "render_credential_option",
    "render_help_option",
]
