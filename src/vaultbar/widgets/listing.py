"""List rendering helpers for credential and help rows."""

from __future__ import annotations

from rich.markup import escape as escape_markup

from vaultbar.models import CredentialSummary, HelpEntry

NOTES_PREVIEW_MAX_LEN = 60  # Max notes length shown inline in a result row


def escape_rich_text(text: str) -> str:
    """Escape text for safe Rich markup rendering."""
    return escape_markup(text) if text else ""


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1].rstrip() + "…"


def render_credential_option(summary: CredentialSummary) -> str:
    """Render a credential summary as Rich markup for OptionList display.

    Store-provided text is escaped, so a service called ``[red]`` shows literally.
    """
    service = escape_rich_text(summary.service_name)
    line = f"[bold]{service}[/]  {escape_rich_text(summary.username)}"
    if summary.notes:
        notes = escape_rich_text(_truncate(summary.notes, NOTES_PREVIEW_MAX_LEN))
        line = f"{line}  [dim]{notes}[/]"
    return line


def render_help_option(entry: HelpEntry) -> str:
    """Render a help catalog row: title, summary and a dim detail line."""
    lines = [f"[bold]{escape_rich_text(entry.title)}[/]  {escape_rich_text(entry.summary)}"]
    if entry.detail:
        lines.append(f"[dim]{escape_rich_text(entry.detail)}[/]")
    return "\n".join(lines)


__all__ = [
    "NOTES_PREVIEW_MAX_LEN",
    "escape_rich_text",
    "render_credential_option",
    "render_help_option",
]
