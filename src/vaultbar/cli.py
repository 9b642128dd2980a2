"""CLI/bootstrap helpers for the vaultbar application."""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from vaultbar.action_messages import build_actionable_error
from vaultbar.config import get_config_path, load_config, save_config
from vaultbar.models import APP_VERSION, CONFIG_APP_NAME, UserConfig
from vaultbar.services.csv_io import read_credentials_csv
from vaultbar.services.interfaces import CredentialStore, build_store
from vaultbar.services.memory_store import InMemoryCredentialStore

logger = logging.getLogger(__name__)

DEBUG_LOG_NAME = "debug.log"
DEBUG_LOG_MAX_BYTES = 5 * 1024 * 1024
DEBUG_LOG_BACKUPS = 3
DEBUG_LOG_FORMAT = "%(asctime)s.%(msecs)03d [%(process)d] %(levelname)-7s %(name)s: %(message)s"

# color mode -> (variable to set, variable to clear)
_COLOR_ENV: dict[str, tuple[str | None, str]] = {
    "never": ("NO_COLOR", "FORCE_COLOR"),
    "always": ("FORCE_COLOR", "NO_COLOR"),
    "auto": (None, "FORCE_COLOR"),
}


def _resolve_import_file(import_path: Path) -> Path | int:
    """Validate an explicit CSV path. Returns the resolved path or an exit code."""
    csv_file = import_path.expanduser().resolve()
    if not csv_file.exists():
        print(f"Error: {csv_file} not found", file=sys.stderr)
        return 1
    if csv_file.is_dir():
        print(f"Error: {csv_file} is a directory, not a file", file=sys.stderr)
        return 1
    if not os.access(csv_file, os.R_OK):
        print(f"Error: {csv_file} is not readable (permission denied)", file=sys.stderr)
        return 1
    return csv_file


def _seed_store(store: CredentialStore, import_path: Path) -> int:
    """Import a CSV into the bundled store before the UI starts. Returns an exit code."""
    if not isinstance(store, InMemoryCredentialStore):
        print(
            build_actionable_error(
                "import the CSV file",
                why="--import only seeds the bundled in-memory store",
                next_step="drop --store-url, or run :import inside the app",
            ),
            file=sys.stderr,
        )
        return 1
    resolved = _resolve_import_file(import_path)
    if isinstance(resolved, int):
        return resolved
    try:
        rows = read_credentials_csv(resolved)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Failed to read {resolved}: {e}", file=sys.stderr)
        return 1
    imported = store.import_rows(rows)
    logger.info("Seeded %d credential(s) from %s", imported, resolved)
    return 0


def _configure_logging(debug: bool) -> None:
    """Silence logging for the TUI, or send DEBUG records to a rotating file."""
    if not debug:
        logging.disable(logging.CRITICAL)
        return

    log_file = Path(user_config_dir(CONFIG_APP_NAME)) / DEBUG_LOG_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=DEBUG_LOG_MAX_BYTES,
        backupCount=DEBUG_LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(DEBUG_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG)
    logger.info("vaultbar %s debug log at %s", APP_VERSION, log_file)


def _configure_color_mode(color_mode: str) -> None:
    """Export NO_COLOR or FORCE_COLOR for Textual; unknown modes act as ``auto``."""
    set_var, clear_var = _COLOR_ENV.get(color_mode, _COLOR_ENV["auto"])
    os.environ.pop(clear_var, None)
    if set_var is not None:
        os.environ[set_var] = "1"


def _persist_config(config: UserConfig, save_config_fn: Callable[[UserConfig], bool]) -> None:
    if save_config_fn(config):
        logger.info("Saved settings to %s", get_config_path())
        return
    print(
        f"Warning: could not save settings to {get_config_path()}; continuing without saving",
        file=sys.stderr,
    )


def _validate_interactive_tty() -> bool:
    """Return True when stdin/stdout are interactive terminals."""
    return bool(sys.stdin.isatty() and sys.stdout.isatty())


def _apply_overrides(config: UserConfig, args: argparse.Namespace) -> UserConfig:
    if args.store_url:
        config.store_url = args.store_url
    if args.confirm_secret:
        config.confirm_secret = True
    return config


def main(
    argv: list[str] | None = None,
    *,
    load_config_fn: Callable[[], UserConfig] = load_config,
    build_store_fn: Callable[[UserConfig], CredentialStore] = build_store,
    configure_logging_fn: Callable[[bool], None] = _configure_logging,
    configure_color_mode_fn: Callable[[str], None] = _configure_color_mode,
    validate_interactive_tty_fn: Callable[[], bool] = _validate_interactive_tty,
    save_config_fn: Callable[[UserConfig], bool] = save_config,
    app_factory: Callable[..., Any] | None = None,
) -> int:
    """Main entry point. Returns exit code."""
    parser = argparse.ArgumentParser(
        description="Search, add and copy credentials from a single launcher field"
    )
    parser.add_argument(
        "--store-url",
        type=str,
        default=None,
        help="Base URL of a remote credential store (default: bundled in-memory store)",
    )
    parser.add_argument(
        "--import",
        dest="import_path",
        type=Path,
        default=None,
        help="Seed the in-memory store from a CSV (service,username,password,notes)",
    )
    parser.add_argument(
        "--confirm-secret",
        action="store_true",
        help="Ask for every new secret twice",
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Write --store-url and --confirm-secret to the config file for later runs",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to file (~/.config/vaultbar/debug.log)",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output mode for terminal UI (default: auto)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable terminal colors (equivalent to --color never)",
    )
    args = parser.parse_args(argv)

    color_mode = "never" if args.no_color else args.color
    configure_color_mode_fn(color_mode)
    configure_logging_fn(args.debug)
    logger.debug("vaultbar starting, cwd=%s", Path.cwd())

    config = _apply_overrides(load_config_fn(), args)
    if args.save_config:
        _persist_config(config, save_config_fn)
    store = build_store_fn(config)

    if args.import_path is not None:
        exit_code = _seed_store(store, args.import_path)
        if exit_code:
            return exit_code

    if not validate_interactive_tty_fn():
        print(
            "Error: vaultbar requires an interactive TTY.",
            file=sys.stderr,
        )
        print("Next steps:", file=sys.stderr)
        print("  - Run vaultbar directly in a terminal session", file=sys.stderr)
        print("  - Use --help for command documentation", file=sys.stderr)
        return 2

    if app_factory is None:
        from vaultbar.app import VaultbarApp as _VaultbarApp

        app_factory = _VaultbarApp

    app = app_factory(store, config=config)
    app.run()
    return app.return_code or 0


__all__ = [
    "_configure_color_mode",
    "_configure_logging",
    "_persist_config",
    "_resolve_import_file",
    "_seed_store",
    "_validate_interactive_tty",
    "main",
]
