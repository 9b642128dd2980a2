"""Configuration persistence: load and save user preferences."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from vaultbar.models import (
    CONFIG_APP_NAME,
    DEFAULT_FEEDBACK_DURATION_MS,
    DEFAULT_STORE_TIMEOUT_SECONDS,
    MAX_FEEDBACK_DURATION_MS,
    MAX_SEARCH_DEBOUNCE_MS,
    MAX_STORE_TIMEOUT_SECONDS,
    MIN_FEEDBACK_DURATION_MS,
    UP_FROM_FIRST_POLICIES,
    UserConfig,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Configuration Persistence
# ============================================================================
#
# Validation contract: _dict_to_config() guarantees valid output for any input:
#
#   Field                  Rule                            Handler
#   ─────────────────────  ──────────────────────────────  ──────────────────
#   feedback_duration_ms   250 ≤ x ≤ 30000                 _coerce_int
#   search_debounce_ms     0 ≤ x ≤ 2000                    _coerce_int
#   store_timeout_seconds  1 ≤ x ≤ 120                     _coerce_int
#   up_from_first          in UP_FROM_FIRST_POLICIES       _parse_up_policy
#   scalar fields          type-checked via _safe_get()    _dict_to_config
#
CONFIG_FILENAME = "config.json"


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Uses platformdirs for cross-platform config directory:
    - Linux: ~/.config/vaultbar/config.json
    - macOS: ~/Library/Application Support/vaultbar/config.json
    - Windows: %APPDATA%/vaultbar/config.json
    """
    config_dir = Path(user_config_dir(CONFIG_APP_NAME))
    return config_dir / CONFIG_FILENAME


def _config_to_dict(config: UserConfig) -> dict[str, Any]:
    """Serialize UserConfig to a JSON-compatible dictionary."""
    return {
        "version": config.version,
        "confirm_secret": config.confirm_secret,
        "feedback_duration_ms": config.feedback_duration_ms,
        "search_debounce_ms": config.search_debounce_ms,
        "up_from_first": config.up_from_first,
        "store_url": config.store_url,
        "store_timeout_seconds": config.store_timeout_seconds,
        "export_dir": config.export_dir,
    }


def _safe_get(data: dict, key: str, default: Any, expected_type: type) -> Any:
    """Safely get a value from dict with type validation.

    Returns the default if key is missing or value has wrong type.
    """
    value = data.get(key, default)
    if not isinstance(value, expected_type):
        return default
    return value


def _coerce_int(value: Any, default: int, low: int, high: int) -> int:
    """Validate an integer setting and clamp it into ``[low, high]``."""
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return max(low, min(value, high))


def _parse_up_policy(value: Any) -> str:
    if value in UP_FROM_FIRST_POLICIES:
        return value
    if value is not None:
        logger.warning("Unknown up_from_first policy %r, using 'field'", value)
    return "field"


def _dict_to_config(data: dict[str, Any]) -> UserConfig:
    """Deserialize a dictionary to UserConfig with type validation."""
    if not isinstance(data, dict):
        raise TypeError(f"expected a JSON object, got {type(data).__name__}")
    return UserConfig(
        confirm_secret=_safe_get(data, "confirm_secret", False, bool),
        feedback_duration_ms=_coerce_int(
            data.get("feedback_duration_ms"),
            DEFAULT_FEEDBACK_DURATION_MS,
            MIN_FEEDBACK_DURATION_MS,
            MAX_FEEDBACK_DURATION_MS,
        ),
        search_debounce_ms=_coerce_int(
            data.get("search_debounce_ms"), 0, 0, MAX_SEARCH_DEBOUNCE_MS
        ),
        up_from_first=_parse_up_policy(data.get("up_from_first")),
        store_url=_safe_get(data, "store_url", "", str),
        store_timeout_seconds=_coerce_int(
            data.get("store_timeout_seconds"),
            DEFAULT_STORE_TIMEOUT_SECONDS,
            1,
            MAX_STORE_TIMEOUT_SECONDS,
        ),
        export_dir=_safe_get(data, "export_dir", "", str),
        version=_safe_get(data, "version", 1, int),
    )


def load_config() -> UserConfig:
    """Load configuration from disk.

    Returns default config if file doesn't exist or is corrupted.
    Logs specific errors to help diagnose config issues.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return UserConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        return _dict_to_config(data)
    except json.JSONDecodeError as e:
        logger.warning("Config file has invalid JSON, using defaults: %s", e)
        return UserConfig()
    except (KeyError, TypeError) as e:
        logger.warning("Config file has invalid structure, using defaults: %s", e)
        return UserConfig()
    except OSError as e:
        logger.warning("Could not read config file, using defaults: %s", e)
        return UserConfig()


def save_config(config: UserConfig) -> bool:
    """Save configuration to disk atomically.

    Uses write-to-tempfile + os.replace() so an interrupted write never
    leaves a truncated config file behind.

    Creates the config directory if it doesn't exist.
    Returns True on success, False on failure.
    """
    config_path = get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        json_str = json.dumps(_config_to_dict(config), indent=2, ensure_ascii=False)
        fd, tmp_path = tempfile.mkstemp(dir=config_path.parent, suffix=".tmp", prefix=".config-")
        closed = False
        try:
            os.write(fd, json_str.encode("utf-8"))
            os.close(fd)
            closed = True
            os.replace(tmp_path, config_path)
        except BaseException:
            if not closed:
                os.close(fd)
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
        return True
    except OSError as e:
        logger.error("Failed to save config: %s", e)
        return False


__all__ = [
    "CONFIG_FILENAME",
    "get_config_path",
    "load_config",
    "save_config",
]
