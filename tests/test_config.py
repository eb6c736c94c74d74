"""
Tests for configuration loading — ultrabunt.yml discovery, parsing
and validation into the Settings model.
"""

from pathlib import Path

import pytest

from ultrabunt.core.config.loader import (
    CONFIG_ENV,
    ConfigError,
    find_config_file,
    load_settings,
    user_config_path,
)
from ultrabunt.core.models.settings import DEFAULT_MIRRORS, Settings


class TestSettingsModel:
    """Defaults and validation of the Settings model."""

    def test_defaults(self):
        s = Settings()
        assert s.php_version == "8.3"
        assert s.www_path == Path("/var/www")
        assert s.mirrors == DEFAULT_MIRRORS
        assert s.extra_buntages == {}

    def test_mirror_list_not_shared(self):
        a, b = Settings(), Settings()
        a.mirrors.append("http://example.org/ubuntu/")
        assert b.mirrors == DEFAULT_MIRRORS

    def test_float_version_stringified(self):
        assert Settings(php_version=8.1).php_version == "8.1"

    def test_paths_expand_user(self):
        assert Settings(state_dir="~/state").state_path == Path.home() / "state"

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError):
            Settings(command_timeout=0)


class TestFindConfigFile:
    """Search order for ultrabunt.yml."""

    def test_none_found(self, tmp_path):
        assert find_config_file(tmp_path) is None

    def test_env_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV, str(tmp_path / "elsewhere.yml"))
        assert find_config_file(tmp_path) == tmp_path / "elsewhere.yml"

    def test_walks_up(self, tmp_path):
        (tmp_path / "ultrabunt.yml").write_text("php_version: '8.2'\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == tmp_path / "ultrabunt.yml"

    def test_user_config(self, tmp_path):
        user = user_config_path()
        user.parent.mkdir(parents=True)
        user.write_text("{}\n")
        empty = tmp_path / "empty"
        empty.mkdir()
        assert find_config_file(empty) == user


class TestLoadSettings:
    """Parsing and validation errors."""

    def test_no_file_gives_defaults(self):
        assert load_settings() == Settings()

    def test_flat_file(self, tmp_path):
        path = tmp_path / "ultrabunt.yml"
        path.write_text("php_version: 8.1\nmirrors:\n  - http://mirror.example/ubuntu/\n")
        s = load_settings(path)
        assert s.php_version == "8.1"
        assert s.mirrors == ["http://mirror.example/ubuntu/"]

    def test_wrapped_file(self, tmp_path):
        path = tmp_path / "ultrabunt.yml"
        path.write_text("ultrabunt:\n  www_root: /srv/www\n")
        assert load_settings(path).www_root == "/srv/www"

    def test_extra_buntages(self, tmp_path):
        path = tmp_path / "ultrabunt.yml"
        path.write_text(
            "extra_buntages:\n"
            "  btop-snap:\n"
            "    package: btop\n"
            "    method: snap\n"
            "    category: monitoring\n"
        )
        extra = load_settings(path).extra_buntages["btop-snap"]
        assert extra.method == "snap"
        assert extra.category == "monitoring"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "ultrabunt.yml"
        path.write_text("")
        assert load_settings(path) == Settings()

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_settings(tmp_path / "missing.yml")

    def test_env_points_to_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV, str(tmp_path / "missing.yml"))
        with pytest.raises(ConfigError, match=CONFIG_ENV):
            load_settings()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "ultrabunt.yml"
        path.write_text("mirrors: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "ultrabunt.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_settings(path)

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "ultrabunt.yml"
        path.write_text("command_timeout: -5\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_settings(path)
