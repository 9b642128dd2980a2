"""Property-based tests using Hypothesis.

Verifies invariants of the command parser, mode resolver, list navigation
and config validation. Each test runs 50 examples in CI, 200 in dev.

Run:
    pytest tests/test_properties.py -v
    pytest tests/test_properties.py -v --hypothesis-seed=0  # reproducible
"""

from __future__ import annotations

import hypothesis.strategies as st
from hypothesis import given, settings

from vaultbar.commands import (
    PARSED_COMMAND_TYPES,
    AddBegin,
    AddGenerate,
    ImportCommand,
    SearchCommand,
    parse_command,
)
from vaultbar.config import _config_to_dict, _dict_to_config
from vaultbar.models import (
    MAX_FEEDBACK_DURATION_MS,
    MAX_SEARCH_DEBOUNCE_MS,
    MIN_FEEDBACK_DURATION_MS,
    UP_FROM_FIRST_POLICIES,
    Mode,
    UserConfig,
)
from vaultbar.modes import resolve_mode
from vaultbar.navigation import NO_SELECTION, ListNavigator
from vaultbar.services.csv_io import CsvCredential, build_credentials_csv, parse_credentials_csv

# ── Hypothesis profiles ─────────────────────────────────────────────
settings.register_profile("ci", max_examples=50, deadline=None)
settings.register_profile("dev", max_examples=200, deadline=None)
settings.load_profile("ci")

# ── Custom strategies ────────────────────────────────────────────────

_field_text = st.text(
    alphabet=st.characters(exclude_characters=";\r\n", exclude_categories=("Cs",)),
    min_size=1,
    max_size=20,
).filter(lambda s: s.strip() == s and s != "")

_csv_cell = st.text(
    alphabet=st.characters(exclude_characters="\r\n\x00", exclude_categories=("Cs",)),
    min_size=1,
    max_size=15,
).filter(lambda s: s.strip() == s and s != "")


# ── Parser ───────────────────────────────────────────────────────────


class TestParserProperties:
    @given(st.text(max_size=60))
    def test_parse_is_total_and_deterministic(self, text):
        parsed = parse_command(text)
        assert isinstance(parsed, PARSED_COMMAND_TYPES)
        assert parse_command(text) == parsed

    @given(st.text(max_size=60).filter(lambda s: not s.strip().startswith(":")))
    def test_non_command_text_is_trimmed_search(self, text):
        assert parse_command(text) == SearchCommand(query=text.strip())

    @given(_field_text, _field_text, st.sampled_from(["add", "ADD", "Add"]))
    def test_add_fields_round_trip(self, service, user, name):
        assert parse_command(f":{name} {service};{user}") == AddBegin(service, user, "")

    @given(_field_text, _field_text, _field_text)
    def test_addgen_keeps_notes(self, service, user, notes):
        assert parse_command(f":addgen {service};{user};{notes}") == AddGenerate(
            service, user, notes
        )

    @given(st.text(min_size=1, max_size=30).filter(lambda s: s.strip() == s))
    def test_posix_absolute_import(self, tail):
        assert parse_command(f":import /{tail}") == ImportCommand(path=f"/{tail}")

    @given(st.text(max_size=40), st.booleans())
    def test_mode_priority(self, text, secret_active):
        mode = resolve_mode(text, secret_active)
        if secret_active:
            assert mode == Mode.SECRET_ENTRY
        elif text.strip().startswith(":"):
            assert mode == Mode.COMMAND
        else:
            assert mode == Mode.SEARCH


# ── Navigation ───────────────────────────────────────────────────────


class TestNavigationProperties:
    @given(
        st.lists(st.integers(), max_size=12),
        st.lists(st.sampled_from(["next", "prev", "set", "replace"]), max_size=30),
        st.integers(min_value=-3, max_value=15),
        st.lists(st.integers(), max_size=12),
    )
    def test_cursor_always_valid(self, items, ops, target, replacement):
        nav = ListNavigator(items)
        for op in ops:
            if op == "next":
                nav.select_next()
            elif op == "prev":
                nav.select_previous()
            elif op == "set":
                nav.select_item(target)
            else:
                nav.replace_items(replacement)
            assert nav.index == NO_SELECTION or 0 <= nav.index < len(nav)

    @given(st.integers(min_value=1, max_value=20))
    def test_n_nexts_from_unselected_wrap_to_last(self, size):
        nav = ListNavigator(list(range(size)))
        for _ in range(size):
            nav.select_next()
        assert nav.index == size - 1
        nav.select_next()
        assert nav.index == 0

    @given(st.integers(min_value=1, max_value=20))
    def test_previous_from_first_lands_on_last(self, size):
        nav = ListNavigator(list(range(size)))
        nav.select_item(0)
        assert nav.select_previous() == size - 1


# ── Config ───────────────────────────────────────────────────────────


class TestConfigProperties:
    @given(
        st.dictionaries(
            st.sampled_from(
                [
                    "confirm_secret",
                    "feedback_duration_ms",
                    "search_debounce_ms",
                    "up_from_first",
                    "store_url",
                    "store_timeout_seconds",
                    "export_dir",
                    "version",
                    "unknown",
                ]
            ),
            st.one_of(st.none(), st.booleans(), st.integers(), st.text(max_size=10)),
        )
    )
    def test_any_dict_yields_valid_config(self, data):
        config = _dict_to_config(data)
        assert MIN_FEEDBACK_DURATION_MS <= config.feedback_duration_ms <= MAX_FEEDBACK_DURATION_MS
        assert 0 <= config.search_debounce_ms <= MAX_SEARCH_DEBOUNCE_MS
        assert config.up_from_first in UP_FROM_FIRST_POLICIES
        assert isinstance(config.confirm_secret, bool)
        assert isinstance(config.store_url, str)

    @given(
        st.booleans(),
        st.integers(min_value=MIN_FEEDBACK_DURATION_MS, max_value=MAX_FEEDBACK_DURATION_MS),
        st.sampled_from(UP_FROM_FIRST_POLICIES),
    )
    def test_serialization_round_trip(self, confirm, duration, policy):
        config = UserConfig(
            confirm_secret=confirm, feedback_duration_ms=duration, up_from_first=policy
        )
        assert _dict_to_config(_config_to_dict(config)) == config


# ── CSV ──────────────────────────────────────────────────────────────


class TestCsvProperties:
    @given(st.lists(st.tuples(_csv_cell, _csv_cell, _csv_cell, _csv_cell), max_size=8))
    def test_export_parses_back(self, rows):
        credentials = [CsvCredential(*row) for row in rows]
        assert parse_credentials_csv(build_credentials_csv(credentials)) == credentials
