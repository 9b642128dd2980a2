"""UI-facing copy builders for feedback placeholders and CLI errors.

Feedback replaces the field placeholder, so those builders return one
short line. The multi-line actionable builders are for stderr output.
"""

from __future__ import annotations

from vaultbar.errors import AuthError, NotFoundError, ValidationError

SEARCH_FAILED = "Search failed"
SECRETS_DO_NOT_MATCH = "Secrets do not match"
EMPTY_SECRET = "Secret must not be empty"
VAULT_LOCKED = "Vault locked"


def _ensure_sentence(text: str) -> str:
    """Return text with terminal sentence punctuation."""
    cleaned = text.strip()
    if not cleaned:
        return ""
    if cleaned.endswith((".", "!", "?")):
        return cleaned
    return f"{cleaned}."


def build_actionable_error(
    action: str,
    *,
    next_step: str,
    why: str | None = None,
) -> str:
    """Build a 2-3 line actionable error message."""
    lines = [f"Could not {action.strip()}."]
    if why:
        lines.append(f"Why: {_ensure_sentence(why)}")
    lines.append(build_next_step_hint(next_step))
    return "\n".join(lines)


def build_next_step_hint(next_step: str) -> str:
    """Build a canonical next-step guidance line."""
    return f"Next step: {_ensure_sentence(next_step)}"


def build_failure_feedback(action: str, error: BaseException) -> str:
    """One-line feedback for a failed store call.

    Only validation usage strings are shown verbatim; every other failure
    maps to a generic line so raw store text never reaches the field.
    """
    if isinstance(error, ValidationError):
        return error.usage
    if isinstance(error, AuthError):
        return "Vault locked or secret rejected"
    if isinstance(error, NotFoundError):
        return "Credential no longer exists"
    return f"Failed to {action}"


def build_unrecognized_feedback(raw: str) -> str:
    name = raw.split(None, 1)[0] if raw.strip() else raw
    return f"Unknown command: {name}"


def build_deleted_feedback(service_name: str) -> str:
    return f"Deleted {service_name}"


def build_import_feedback(result: int | str) -> str:
    """Feedback for ``:import``; the store returns a row count or a message."""
    if isinstance(result, int):
        return f"Imported {result} credential{'s' if result != 1 else ''}"
    return result


def build_command_feedback(result: int | str, fallback: str) -> str:
    if isinstance(result, str) and result.strip():
        return result
    return fallback


__all__ = [
    "EMPTY_SECRET",
    "SEARCH_FAILED",
    "SECRETS_DO_NOT_MATCH",
    "VAULT_LOCKED",
    "build_actionable_error",
    "build_command_feedback",
    "build_deleted_feedback",
    "build_failure_feedback",
    "build_import_feedback",
    "build_next_step_hint",
    "build_unrecognized_feedback",
]
