"""Tests for config module."""

import json
from unittest.mock import patch

import pytest

from flashmaster.config import (
    Config,
    DECK_COLORS,
    DECK_EMOJIS,
    format_config_display,
    load_config,
    save_config,
    set_config_value,
)


def _patch_config(tmp_path):
    config_file = tmp_path / "config.json"
    return (
        patch("flashmaster.config.DATA_DIR", tmp_path),
        patch("flashmaster.config.CONFIG_FILE", config_file),
    ), config_file


class TestConfig:
    """Tests for the Config dataclass."""

    def test_default_values(self):
        config = Config()
        assert config.default_emoji == "📚"
        assert config.default_color == "#6c5ce7"
        assert config.confirm_deletes is True
        assert config.emojis == DECK_EMOJIS
        assert config.colors == DECK_COLORS

    def test_palette_lists_not_shared(self):
        config = Config()
        config2 = Config()
        config.emojis.append("🦊")
        assert "🦊" not in config2.emojis

    def test_palette_sizes(self):
        assert len(DECK_EMOJIS) == 16
        assert len(DECK_COLORS) == 8


class TestLoadSave:
    def test_load_creates_defaults(self, tmp_path):
        (p1, p2), config_file = _patch_config(tmp_path)
        with p1, p2:
            config = load_config()
        assert config == Config()
        assert config_file.exists()

    def test_save_and_load(self, tmp_path):
        (p1, p2), _ = _patch_config(tmp_path)
        with p1, p2:
            save_config(Config(default_emoji="🧠", confirm_deletes=False))
            loaded = load_config()
        assert loaded.default_emoji == "🧠"
        assert loaded.confirm_deletes is False

    def test_unknown_keys_ignored(self, tmp_path):
        (p1, p2), config_file = _patch_config(tmp_path)
        config_file.write_text(json.dumps({"default_color": "#00b894", "legacy": 1}))
        with p1, p2:
            loaded = load_config()
        assert loaded.default_color == "#00b894"

    def test_corrupt_config_backed_up(self, tmp_path):
        (p1, p2), config_file = _patch_config(tmp_path)
        config_file.write_text("{not json")
        with p1, p2:
            loaded = load_config()
        assert loaded == Config()
        backup = tmp_path / "config.json.bak"
        assert backup.read_text() == "{not json"

    def test_non_object_config_uses_defaults(self, tmp_path):
        (p1, p2), config_file = _patch_config(tmp_path)
        config_file.write_text("[1, 2]")
        with p1, p2:
            loaded = load_config()
        assert loaded == Config()


class TestSetConfigValue:
    def test_set_emoji(self, tmp_path):
        (p1, p2), _ = _patch_config(tmp_path)
        with p1, p2:
            config = Config()
            set_config_value(config, "default_emoji", "🚀")
            assert load_config().default_emoji == "🚀"

    def test_set_confirm_deletes(self, tmp_path):
        (p1, p2), _ = _patch_config(tmp_path)
        with p1, p2:
            config = Config()
            set_config_value(config, "confirm_deletes", "no")
        assert config.confirm_deletes is False

    def test_unknown_key(self):
        with pytest.raises(KeyError):
            set_config_value(Config(), "main_model", "x")


class TestFormatConfigDisplay:
    def test_contains_settings(self):
        text = format_config_display(Config())
        assert "default_emoji" in text
        assert "#6c5ce7" in text
        assert "confirm_deletes: yes" in text
