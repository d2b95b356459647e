"""Tests for configuration loading and editing."""

from pathlib import Path
from unittest.mock import patch

import pytest

import quickref.config as config_module
from quickref.config import (
    BUILTIN_DEFAULTS,
    get_defaults,
    init_config,
    load_config,
    set_config_value,
)


@pytest.fixture
def config_file(tmp_path: Path):
    """Point the config module at a temporary file and reset its cache."""
    path = tmp_path / "config.toml"
    with (
        patch.object(config_module, "CONFIG_FILE", path),
        patch("quickref.config.ensure_config_dir", return_value=tmp_path),
    ):
        config_module._cached_config = None
        yield path
    config_module._cached_config = None


class TestConfig:
    def test_missing_file_gives_builtin_defaults(self, config_file: Path):
        config = load_config(force_reload=True)

        assert config == {}
        assert get_defaults(config) == BUILTIN_DEFAULTS

    def test_init_writes_template(self, config_file: Path):
        assert init_config() is True
        assert init_config() is False

        defaults = get_defaults(load_config(force_reload=True))
        assert defaults["roots"] == ["Assets", "Packages", "ProjectSettings"]
        assert defaults["max_results"] == 500

    def test_set_integer_field(self, config_file: Path):
        set_config_value("defaults.max_results", "200")

        assert load_config(force_reload=True)["defaults"]["max_results"] == 200

    def test_set_list_field(self, config_file: Path):
        set_config_value("defaults.extensions", "prefab, unity,asset")

        config = load_config(force_reload=True)
        assert config["defaults"]["extensions"] == ["prefab", "unity", "asset"]

    def test_set_rejects_bad_integer(self, config_file: Path):
        with pytest.raises(ValueError):
            set_config_value("defaults.max_workers", "many")
        with pytest.raises(ValueError):
            set_config_value("defaults.max_workers", "0")

    def test_file_values_override_defaults(self, config_file: Path):
        config_file.write_text('[defaults]\nproject_dir = "/games/demo"\n')

        defaults = get_defaults(load_config(force_reload=True))

        assert defaults["project_dir"] == "/games/demo"
        assert defaults["max_workers"] == BUILTIN_DEFAULTS["max_workers"]
