"""Tests for configuration loading and precedence."""

import os

import pytest

from args import parse_args
from cli_config import find_config_path, load_config, resolve_settings
from errors import ConfigError


@pytest.fixture
def config_file(tmp_path):
    def _write(text):
        path = tmp_path / "config.yml"
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write


class TestLoadConfig:
    """YAML loading."""

    def test_none_path(self):
        assert load_config(None) == {}

    def test_valid(self, config_file):
        path = config_file("toolchain: nightly-x86_64-unknown-linux-gnu\ndays: 10\n")
        assert load_config(path) == {"toolchain": "nightly-x86_64-unknown-linux-gnu", "days": 10}

    def test_empty_file(self, config_file):
        assert load_config(config_file("")) == {}

    def test_invalid_yaml(self, config_file):
        with pytest.raises(ConfigError):
            load_config(config_file("days: [1, 2\n"))

    def test_not_a_mapping(self, config_file):
        with pytest.raises(ConfigError):
            load_config(config_file("- a\n- b\n"))


class TestFindConfigPath:
    """Explicit paths must exist; defaults are optional."""

    def test_explicit_missing(self, tmp_path):
        with pytest.raises(ConfigError):
            find_config_path(str(tmp_path / "nope.yml"), {})

    def test_env_path(self, config_file):
        path = config_file("days: 3\n")
        assert find_config_path(None, {"RUSTUP_PICK_CONFIG": path}) == path

    def test_no_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert find_config_path(None, {}) is None

    def test_default_location(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        cfg_dir = tmp_path / ".config" / "rustup-pick"
        cfg_dir.mkdir(parents=True)
        (cfg_dir / "config.yml").write_text("days: 4\n")
        assert find_config_path(None, {}) == str(cfg_dir / "config.yml")


class TestResolveSettings:
    """CLI > config > environment > defaults."""

    def test_defaults(self):
        settings = resolve_settings(parse_args([]), {}, env={})
        assert settings.channel is None
        assert settings.days == 30
        assert settings.offset == 0
        assert settings.rustup_bin == "rustup"
        assert settings.rustup_dir == os.path.expanduser("~/.rustup")
        assert settings.dist_server == "https://static.rust-lang.org"
        assert settings.timeout == 30.0
        assert settings.skip_installed is False

    def test_environment(self):
        env = {"RUSTUP_DIST_SERVER": "https://mirror.example", "RUSTUP_HOME": "/srv/rustup"}
        settings = resolve_settings(parse_args([]), {}, env=env)
        assert settings.dist_server == "https://mirror.example"
        assert settings.rustup_dir == "/srv/rustup"

    def test_config_over_environment(self):
        config = {"dist_server": "https://cfg.example", "rustup_dir": "/cfg/rustup"}
        env = {"RUSTUP_DIST_SERVER": "https://env.example", "RUSTUP_HOME": "/env/rustup"}
        settings = resolve_settings(parse_args([]), config, env=env)
        assert settings.dist_server == "https://cfg.example"
        assert settings.rustup_dir == "/cfg/rustup"

    def test_cli_over_config(self):
        config = {
            "toolchain": "beta-aarch64-apple-darwin",
            "components": ["rustc"],
            "days": 9,
            "offset": 1,
            "skip_installed": False,
            "timeout": 12,
        }
        args = parse_args([
            "-t", "nightly-x86_64-unknown-linux-gnu", "-c", "cargo", "-d", "3", "-o", "0",
            "-s", "--timeout", "4",
        ])
        settings = resolve_settings(args, config, env={})
        assert (settings.channel, settings.target) == ("nightly", "x86_64-unknown-linux-gnu")
        assert settings.components == ["cargo"]
        assert settings.days == 3
        assert settings.offset == 0
        assert settings.skip_installed is True
        assert settings.timeout == 4.0

    def test_config_values_used(self):
        config = {
            "toolchain": "beta-aarch64-apple-darwin",
            "components": "rustc, cargo",
            "exclude": ["rust-src"],
            "days": 9,
            "skip_installed": True,
            "rustup_bin": "/opt/rustup",
        }
        settings = resolve_settings(parse_args([]), config, env={})
        assert (settings.channel, settings.target) == ("beta", "aarch64-apple-darwin")
        assert settings.components == ["rustc", "cargo"]
        assert settings.exclude == ["rust-src"]
        assert settings.days == 9
        assert settings.skip_installed is True
        assert settings.rustup_bin == "/opt/rustup"

    @pytest.mark.parametrize("config", [
        {"days": -1},
        {"days": "ten"},
        {"offset": True},
        {"components": [1, 2]},
        {"toolchain": "nightly"},
        {"toolchain": "nightly-2024-01-01-x86_64-unknown-linux-gnu"},
        {"timeout": 0},
        {"skip_installed": "yes"},
        {"rustup_bin": ""},
    ])
    def test_invalid_config_values(self, config):
        with pytest.raises(ConfigError):
            resolve_settings(parse_args([]), config, env={})

    def test_invalid_cli_timeout(self):
        with pytest.raises(ConfigError):
            resolve_settings(parse_args(["--timeout", "0"]), {}, env={})
