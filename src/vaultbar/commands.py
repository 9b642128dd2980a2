"""Command grammar parsing for the launcher field.

Grammar::

    <text>                       -> SearchCommand(query=<trimmed text>)
    :add <service>;<user>[;<notes>]
    :addgen <service>;<user>[;<notes>]
    :import <absolute path>
    :export
    :help
    :reset!

The command name is everything between the sigil and the first whitespace
and is matched case-insensitively. Arguments keep their case; each
``;``-separated field is trimmed at its edges only. ``parse_command`` is
total: malformed arguments yield an ``InvalidCommand`` carrying the usage
string, unknown names yield ``UnrecognizedCommand``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from vaultbar.models import COMMAND_SIGIL

ADD_USAGE = "usage: :add service;username;notes"
ADDGEN_USAGE = "usage: :addgen service;username;notes"
IMPORT_USAGE = "usage: :import /absolute/path/to/file.csv"

# Command name -> usage string shown in the help catalog
COMMAND_USAGES: dict[str, str] = {
    "add": ":add service;username;notes",
    "addgen": ":addgen service;username;notes",
    "import": ":import /absolute/path/to/file.csv",
    "export": ":export",
    "help": ":help",
    "reset!": ":reset!",
}

_WINDOWS_DRIVE_RE = re.compile(r"^[A-Za-z]:[\\/]")


@dataclass(frozen=True, slots=True)
class SearchCommand:
    query: str


@dataclass(frozen=True, slots=True)
class AddBegin:
    service_name: str
    username: str
    notes: str = ""


@dataclass(frozen=True, slots=True)
class AddGenerate:
    service_name: str
    username: str
    notes: str = ""


@dataclass(frozen=True, slots=True)
class ImportCommand:
    path: str


@dataclass(frozen=True, slots=True)
class ExportCommand:
    pass


@dataclass(frozen=True, slots=True)
class HelpCommand:
    pass


@dataclass(frozen=True, slots=True)
class ResetCommand:
    pass


@dataclass(frozen=True, slots=True)
class UnrecognizedCommand:
    raw: str


@dataclass(frozen=True, slots=True)
class InvalidCommand:
    """A known command whose arguments failed validation."""

    raw: str
    usage: str


ParsedCommand = (
    SearchCommand
    | AddBegin
    | AddGenerate
    | ImportCommand
    | ExportCommand
    | HelpCommand
    | ResetCommand
    | UnrecognizedCommand
    | InvalidCommand
)

PARSED_COMMAND_TYPES: tuple[type, ...] = (
    SearchCommand,
    AddBegin,
    AddGenerate,
    ImportCommand,
    ExportCommand,
    HelpCommand,
    ResetCommand,
    UnrecognizedCommand,
    InvalidCommand,
)


def is_command_text(raw_text: str) -> bool:
    """Return True when the trimmed text starts with the command sigil."""
    return raw_text.strip().startswith(COMMAND_SIGIL)


def is_absolute_path(path: str) -> bool:
    """Accept POSIX absolute paths and drive-letter Windows paths."""
    if not path:
        return False
    return path.startswith("/") or bool(_WINDOWS_DRIVE_RE.match(path))


def split_command(trimmed: str) -> tuple[str, str]:
    """Split ``:name rest`` into (lowercased name, raw argument text)."""
    content = trimmed[len(COMMAND_SIGIL) :]
    parts = content.split(None, 1)
    if not parts or content[:1].isspace():
        return "", content.strip()
    name = parts[0].lower()
    args = parts[1] if len(parts) > 1 else ""
    return name, args


def _parse_credential_fields(args: str) -> tuple[str, str, str] | None:
    """Parse ``service;username[;notes]``; None when a required field is empty."""
    fields = [part.strip() for part in args.split(";", 2)]
    if len(fields) < 2:
        return None
    service_name, username = fields[0], fields[1]
    if not service_name or not username:
        return None
    notes = fields[2] if len(fields) > 2 else ""
    return service_name, username, notes


def _parse_add(trimmed: str, args: str) -> ParsedCommand:
    parsed = _parse_credential_fields(args)
    if parsed is None:
        return InvalidCommand(raw=trimmed, usage=ADD_USAGE)
    return AddBegin(*parsed)


def _parse_addgen(trimmed: str, args: str) -> ParsedCommand:
    parsed = _parse_credential_fields(args)
    if parsed is None:
        return InvalidCommand(raw=trimmed, usage=ADDGEN_USAGE)
    return AddGenerate(*parsed)


def _parse_import(trimmed: str, args: str) -> ParsedCommand:
    path = args.strip()
    if not is_absolute_path(path):
        return InvalidCommand(raw=trimmed, usage=IMPORT_USAGE)
    return ImportCommand(path=path)


def parse_command(raw_text: str) -> ParsedCommand:
    """Parse raw field text into a typed request. Pure and total."""
    trimmed = raw_text.strip()
    if not trimmed.startswith(COMMAND_SIGIL):
        return SearchCommand(query=trimmed)

    name, args = split_command(trimmed)
    if name == "add":
        return _parse_add(trimmed, args)
    if name == "addgen":
        return _parse_addgen(trimmed, args)
    if name == "import":
        return _parse_import(trimmed, args)
    if name == "export":
        return ExportCommand()
    if name == "help":
        return HelpCommand()
    if name == "reset!":
        return ResetCommand()
    return UnrecognizedCommand(raw=trimmed)


__all__ = [
    "ADDGEN_USAGE",
    "ADD_USAGE",
    "COMMAND_USAGES",
    "IMPORT_USAGE",
    "PARSED_COMMAND_TYPES",
    "AddBegin",
    "AddGenerate",
    "ExportCommand",
    "HelpCommand",
    "ImportCommand",
    "InvalidCommand",
    "ParsedCommand",
    "ResetCommand",
    "SearchCommand",
    "UnrecognizedCommand",
    "is_absolute_path",
    "is_command_text",
    "parse_command",
    "split_command",
]
