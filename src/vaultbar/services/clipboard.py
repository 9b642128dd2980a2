"""System clipboard adapter built on platform clipboard commands."""

from __future__ import annotations

import asyncio
import logging
import platform
import subprocess
from collections.abc import Callable

from vaultbar.errors import StoreError

logger = logging.getLogger(__name__)

SUBPROCESS_TIMEOUT = 5


def get_clipboard_command_plan(system: str) -> tuple[list[list[str]], str] | None:
    """Return clipboard command candidates and input encoding for a platform."""
    if system == "Darwin":
        return ([["pbcopy"]], "utf-8")
    if system == "Linux":
        return ([["xclip", "-selection", "clipboard"], ["xsel", "--clipboard", "--input"]], "utf-8")
    if system == "Windows":
        return ([["clip"]], "utf-16")
    return None


def copy_to_system_clipboard(text: str, *, system: str | None = None) -> None:
    """Copy text with the first working platform command.

    Raises StoreError when the platform is unsupported or every command fails.
    The payload is never logged.
    """
    system = system or platform.system()
    plan = get_clipboard_command_plan(system)
    if plan is None:
        raise StoreError(f"Clipboard unsupported on platform {system}")
    commands, encoding = plan
    payload = text.encode(encoding)
    last_error: Exception | None = None
    for command in commands:
        try:
            subprocess.run(  # nosec B603
                command,
                input=payload,
                check=True,
                shell=False,
                timeout=SUBPROCESS_TIMEOUT,
            )
            return
        except (
            subprocess.CalledProcessError,
            FileNotFoundError,
            subprocess.TimeoutExpired,
            OSError,
        ) as e:
            logger.debug("Clipboard command %s failed: %s", command[0], e)
            last_error = e
    raise StoreError("Clipboard copy failed") from last_error


class SystemClipboard:
    """Async clipboard that runs the platform command off the UI thread.

    ``mirror`` receives the value as well when set (the Textual app passes
    ``App.copy_to_clipboard`` so terminals with OSC-52 support get it too).
    """

    def __init__(self, mirror: Callable[[str], None] | None = None) -> None:
        self._mirror = mirror

    async def copy(self, text: str) -> None:
        mirrored = False
        if self._mirror is not None:
            try:
                self._mirror(text)
                mirrored = True
            except Exception as e:
                logger.warning("Terminal clipboard mirror failed: %s", e)
        try:
            await asyncio.to_thread(copy_to_system_clipboard, text)
        except StoreError:
            if not mirrored:
                raise
            logger.warning("System clipboard unavailable; value copied via terminal only")


__all__ = [
    "SUBPROCESS_TIMEOUT",
    "SystemClipboard",
    "copy_to_system_clipboard",
    "get_clipboard_command_plan",
]
