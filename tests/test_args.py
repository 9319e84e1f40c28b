"""Tests for command-line argument parsing."""

import pytest

from args import parse_args, split_components


class TestParseArgs:
    """Defaults and option parsing."""

    def test_defaults(self):
        ns = parse_args([])
        assert ns.action == "find"
        assert ns.DAYS is None
        assert ns.OFFSET is None
        assert ns.TOOLCHAIN is None
        assert ns.COMPONENTS == []
        assert ns.EXCLUDE == []
        assert ns.SKIP_INSTALLED is None
        assert ns.KEEP_PREVIOUS is False
        assert ns.VERBOSE is False
        assert ns.QUIET is False

    def test_subcommands(self):
        assert parse_args(["install"]).action == "install"
        assert parse_args(["find"]).action == "find"
        ns = parse_args(["replace", "-k"])
        assert ns.action == "replace"
        assert ns.KEEP_PREVIOUS is True

    def test_window_options(self):
        ns = parse_args(["-d", "7", "-o", "2", "find"])
        assert ns.DAYS == 7
        assert ns.OFFSET == 2

    def test_zero_days_allowed(self):
        assert parse_args(["--days", "0"]).DAYS == 0

    @pytest.mark.parametrize("value", ["-1", "abc"])
    def test_invalid_days(self, value):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--days", value])
        assert exc_info.value.code == 2

    def test_toolchain(self):
        ns = parse_args(["-t", "nightly-x86_64-pc-windows-gnu"])
        assert ns.TOOLCHAIN.channel == "nightly"
        assert ns.TOOLCHAIN.target == "x86_64-pc-windows-gnu"

    def test_dated_toolchain_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["-t", "nightly-2024-01-01-x86_64-pc-windows-gnu"])

    def test_malformed_toolchain_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["-t", "nightly"])

    def test_components_repeatable_and_comma_separated(self):
        ns = parse_args(["-c", "rustc,cargo", "-c", "clippy", "-c", "cargo", "-x", "rust-src"])
        assert ns.COMPONENTS == ["rustc", "cargo", "clippy"]
        assert ns.EXCLUDE == ["rust-src"]

    def test_flags(self):
        ns = parse_args(["-v", "-s", "--loglevel", "warning", "--timeout", "5", "install"])
        assert ns.VERBOSE is True
        assert ns.SKIP_INSTALLED is True
        assert ns.LOG_LEVEL == "WARNING"
        assert ns.TIMEOUT == 5.0

    def test_paths(self):
        ns = parse_args(["-b", "/usr/bin/rustup", "-r", "/tmp/rustup", "--config", "cfg.yml"])
        assert ns.RUSTUP_BIN == "/usr/bin/rustup"
        assert ns.RUSTUP_DIR == "/tmp/rustup"
        assert ns.CONFIG == "cfg.yml"

    def test_unknown_subcommand(self):
        with pytest.raises(SystemExit):
            parse_args(["upgrade"])


def test_split_components_ignores_blanks():
    assert split_components([" rustc , ", ",cargo"]) == ["rustc", "cargo"]
    assert split_components(None) == []
