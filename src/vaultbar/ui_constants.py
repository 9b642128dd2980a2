"""Internal UI constants for the VaultbarApp."""

from __future__ import annotations

from textual.binding import Binding, BindingType

from vaultbar.keymap import DEFAULT_ACTION_KEYS, ActionKeyDef

APP_CSS = """
Screen {
    background: $surface;
    align: center top;
}

#launcher {
    width: 100%;
    max-width: 100;
    height: auto;
    border: tall $primary;
    background: $panel;
}

#launcher:focus-within {
    border: tall $accent;
}

#field {
    border: none;
    height: 1;
    padding: 0 1;
    background: $panel;
}

#field.secret-entry {
    color: $warning;
}

#results {
    height: auto;
    max-height: 16;
    border: none;
    background: $panel;
}
"""

# Collapsed shows only the field; expanded also shows the list
COLLAPSED_SIZE = (600, 50)
EXPANDED_SIZE = (600, 292)


def build_app_bindings(keymap: tuple[ActionKeyDef, ...] = DEFAULT_ACTION_KEYS) -> list[BindingType]:
    """One priority binding per key, all routed through ``action_dispatch``."""
    return [
        Binding(
            definition.key,
            f"dispatch('{definition.key}')",
            definition.label,
            show=False,
            priority=True,
        )
        for definition in keymap
    ]


APP_BINDINGS: list[BindingType] = build_app_bindings()

__all__ = [
    "APP_BINDINGS",
    "APP_CSS",
    "COLLAPSED_SIZE",
    "EXPANDED_SIZE",
    "build_app_bindings",
]
