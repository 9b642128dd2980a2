"""Tests for config load/save and validation."""

from __future__ import annotations

import json

import pytest

from vaultbar.config import _dict_to_config, get_config_path, load_config, save_config
from vaultbar.models import UserConfig


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "vaultbar" / "config.json"
    monkeypatch.setattr("vaultbar.config.get_config_path", lambda: path)
    return path


def test_config_path_uses_platformdirs(monkeypatch, tmp_path):
    monkeypatch.setattr("vaultbar.config.user_config_dir", lambda name: str(tmp_path / name))
    assert get_config_path() == tmp_path / "vaultbar" / "config.json"


def test_missing_file_returns_defaults(config_file):
    assert load_config() == UserConfig()


def test_save_then_load(config_file):
    config = UserConfig(
        confirm_secret=True,
        feedback_duration_ms=1500,
        search_debounce_ms=120,
        up_from_first="wrap",
        store_url="http://127.0.0.1:8765",
        export_dir="/tmp/out",
    )
    assert save_config(config) is True
    assert load_config() == config
    assert list(config_file.parent.glob(".config-*.tmp")) == []


def test_invalid_json_returns_defaults(config_file, caplog):
    config_file.parent.mkdir(parents=True)
    config_file.write_text("{not json", encoding="utf-8")
    assert load_config() == UserConfig()
    assert "invalid JSON" in caplog.text


@pytest.mark.parametrize("payload", [[], "text", 3, None])
def test_non_object_root_returns_defaults(config_file, payload):
    config_file.parent.mkdir(parents=True)
    config_file.write_text(json.dumps(payload), encoding="utf-8")
    assert load_config() == UserConfig()


def test_save_failure_returns_false(tmp_path, monkeypatch):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    monkeypatch.setattr("vaultbar.config.get_config_path", lambda: blocker / "config.json")
    assert save_config(UserConfig()) is False


class TestDictToConfig:
    def test_wrong_types_fall_back(self):
        config = _dict_to_config(
            {"confirm_secret": "yes", "store_url": 5, "export_dir": ["x"], "version": "2"}
        )
        assert config.confirm_secret is False
        assert config.store_url == ""
        assert config.export_dir == ""
        assert config.version == 1

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(10, 250), (99_999, 30_000), (True, 2000), ("900", 2000), (900, 900)],
    )
    def test_feedback_duration_clamped(self, value, expected):
        assert _dict_to_config({"feedback_duration_ms": value}).feedback_duration_ms == expected

    def test_debounce_and_timeout_clamped(self):
        config = _dict_to_config({"search_debounce_ms": -5, "store_timeout_seconds": 0})
        assert config.search_debounce_ms == 0
        assert config.store_timeout_seconds == 1

    def test_unknown_up_policy_warns(self, caplog):
        assert _dict_to_config({"up_from_first": "sideways"}).up_from_first == "field"
        assert "sideways" in caplog.text

    def test_non_dict_raises(self):
        with pytest.raises(TypeError):
            _dict_to_config([])  # type: ignore[arg-type]
