"""Tests for mode resolution, placeholders and the list navigation engine."""

from __future__ import annotations

from vaultbar.models import Mode, SecretEntryContext, SecretStage
from vaultbar.modes import (
    HELP_PLACEHOLDER,
    SEARCH_PLACEHOLDER,
    build_placeholder,
    is_help_text,
    resolve_mode,
)
from vaultbar.navigation import NO_SELECTION, ListNavigator

# ── Mode resolver ────────────────────────────────────────────────────────────


class TestResolveMode:
    def test_secret_entry_wins_over_command_text(self):
        assert resolve_mode(":add a;b", True) == Mode.SECRET_ENTRY

    def test_command_when_sigil(self):
        assert resolve_mode("  :help", False) == Mode.COMMAND

    def test_search_otherwise(self):
        assert resolve_mode("github", False) == Mode.SEARCH
        assert resolve_mode("", False) == Mode.SEARCH

    def test_colon_inside_text_is_search(self):
        assert resolve_mode("a:b", False) == Mode.SEARCH


class TestPlaceholder:
    def test_search(self):
        assert build_placeholder("", SecretEntryContext()) == SEARCH_PLACEHOLDER

    def test_command_usage(self):
        assert build_placeholder(":add", SecretEntryContext()) == ":add service;username;notes"
        assert build_placeholder(":addgen x", SecretEntryContext()) == (
            ":addgen service;username;notes"
        )

    def test_help(self):
        assert build_placeholder(":help", SecretEntryContext()) == HELP_PLACEHOLDER

    def test_unknown_command_falls_back_to_search(self):
        assert build_placeholder(":zzz", SecretEntryContext()) == SEARCH_PLACEHOLDER

    def test_secret_create_update_confirm(self):
        create = SecretEntryContext(is_active=True, service_name="acme")
        update = SecretEntryContext(is_active=True, service_name="acme", editing_id=3)
        assert build_placeholder("", create) == "Enter secret for acme..."
        assert build_placeholder("", update) == "Enter new secret for acme..."
        assert build_placeholder("", create, SecretStage.CONFIRMING) == "Confirm secret for acme..."

    def test_is_help_text(self):
        assert is_help_text(" :Help ")
        assert is_help_text(":help me")
        assert not is_help_text("help")


# ── Navigation ───────────────────────────────────────────────────────────────


class TestListNavigator:
    def test_next_from_unselected_lands_on_zero(self):
        nav = ListNavigator(["a", "b", "c"])
        assert nav.select_next() == 0

    def test_next_wraps(self):
        nav = ListNavigator(["a", "b"])
        assert [nav.select_next() for _ in range(3)] == [0, 1, 0]

    def test_previous_from_zero_wraps_to_last(self):
        nav = ListNavigator(["a", "b", "c"])
        nav.select_item(0)
        assert nav.select_previous() == 2

    def test_previous_from_unselected_goes_to_last(self):
        nav = ListNavigator(["a", "b", "c"])
        assert nav.select_previous() == 2

    def test_noop_when_empty(self):
        nav: ListNavigator[str] = ListNavigator()
        assert nav.select_next() == NO_SELECTION
        assert nav.select_previous() == NO_SELECTION

    def test_noop_when_closed(self):
        nav = ListNavigator(["a"], is_open=lambda: False)
        assert nav.select_next() == NO_SELECTION

    def test_select_item_ignores_out_of_bounds(self):
        nav = ListNavigator(["a", "b"])
        nav.select_item(1)
        assert nav.select_item(5) == 1
        assert nav.select_item(-7) == 1

    def test_select_current_invokes_callback(self):
        picked: list[str] = []
        nav = ListNavigator(["a", "b"], on_select=picked.append)
        assert nav.select_current() is None
        nav.select_item(1)
        nav.select_current()
        assert picked == ["b"]

    def test_replace_keeps_in_range_selection(self):
        nav = ListNavigator(["a", "b", "c"])
        nav.select_item(1)
        nav.replace_items(["x", "y"])
        assert nav.index == 1
        assert nav.current == "y"

    def test_replace_resets_out_of_range_selection(self):
        nav = ListNavigator(["a", "b", "c"])
        nav.select_item(2)
        nav.replace_items(["x"])
        assert nav.index == NO_SELECTION

    def test_replace_with_empty_resets(self):
        nav = ListNavigator(["a"])
        nav.select_item(0)
        nav.replace_items([])
        assert nav.index == NO_SELECTION

    def test_replace_without_keep_resets(self):
        nav = ListNavigator(["a", "b"])
        nav.select_item(0)
        nav.replace_items(["a", "b"], keep_selection=False)
        assert nav.index == NO_SELECTION

    def test_clear(self):
        nav = ListNavigator(["a"])
        nav.select_next()
        nav.clear()
        assert len(nav) == 0
        assert nav.index == NO_SELECTION
