"""Tests for channel manifest parsing."""

import textwrap

import pytest

from distribution.parser import parse_manifest
from errors import ManifestParseError

LINUX = "x86_64-unknown-linux-gnu"

SAMPLE = textwrap.dedent("""\
    manifest-version = "2"
    date = "2024-03-09"

    [pkg.rust]
    version = "1.78.0-nightly (abcdef123 2024-03-08)"

    [pkg.rust.target.x86_64-unknown-linux-gnu]
    available = true

    [pkg.cargo.target.x86_64-unknown-linux-gnu]
    available = true
    url = "https://static.rust-lang.org/dist/2024-03-09/cargo-nightly-x86_64-unknown-linux-gnu.tar.gz"

    [pkg.clippy-preview.target.x86_64-unknown-linux-gnu]
    available = false

    [pkg.rust-std.target.x86_64-unknown-linux-gnu]
    available = true

    [pkg.rust-std.target.wasm32-unknown-unknown]
    available = true

    [pkg.rust-src.target."*"]
    available = true

    [renames.clippy]
    to = "clippy-preview"

    [renames.rls]
    to = "rls-preview"

    [profiles]
    minimal = ["rustc", "cargo", "rust-std"]
    default = ["rustc", "cargo", "rust-std", "rust-docs", "rustfmt-preview", "clippy-preview"]
""").encode("utf-8")


class TestParseManifest:
    """Structure extraction from well-formed manifests."""

    def test_metadata(self):
        manifest = parse_manifest(SAMPLE)
        assert manifest.date == "2024-03-09"
        assert manifest.version.startswith("1.78.0-nightly")

    def test_unavailable_targets_dropped(self):
        manifest = parse_manifest(SAMPLE)
        assert manifest.targets[LINUX] == frozenset({"rust", "cargo", "rust-std"})
        assert "clippy-preview" not in manifest.components_for(LINUX)

    def test_wildcard_packages_apply_to_every_target(self):
        manifest = parse_manifest(SAMPLE)
        assert "rust-src" in manifest.components_for(LINUX)
        assert "rust-src" in manifest.components_for("aarch64-apple-darwin")

    def test_cross_target_components_are_suffixed(self):
        manifest = parse_manifest(SAMPLE)
        available = manifest.components_for(LINUX)
        assert "rust-std-wasm32-unknown-unknown" in available
        assert "rust-std-" + LINUX not in available

    def test_renames_only_when_new_name_present(self):
        manifest = parse_manifest(SAMPLE)
        assert manifest.renames == {"clippy": "clippy-preview", "rls": "rls-preview"}
        available = manifest.components_for(LINUX)
        assert "clippy" not in available
        assert "rls" not in available

    def test_profiles(self):
        manifest = parse_manifest(SAMPLE)
        assert manifest.default_components[-1] == "clippy-preview"
        assert manifest.profiles["minimal"] == ["rustc", "cargo", "rust-std"]

    def test_missing_is_sorted(self):
        manifest = parse_manifest(SAMPLE)
        assert manifest.missing(LINUX, {"rustc", "cargo", "clippy"}) == ["clippy", "rustc"]

    def test_minimal_manifest(self):
        manifest = parse_manifest(b'manifest-version = "2"\n[pkg]\n')
        assert manifest.targets == {}
        assert manifest.date is None
        assert manifest.version is None
        assert manifest.default_components == []


class TestParseManifestErrors:
    """Malformed documents raise ManifestParseError."""

    @pytest.mark.parametrize("content", [
        b"not = [valid",
        b"\xff\xfe\x00garbage",
        b'manifest-version = "1"\n[pkg]\n',
        b'date = "2024-01-01"\n',
        b'manifest-version = "2"\npkg = "nope"\n',
        b'manifest-version = "2"\n[pkg]\ncargo = 1\n',
        b'manifest-version = "2"\n[pkg.cargo]\ntarget = "x"\n',
        b'manifest-version = "2"\n[pkg.cargo.target]\nx86_64 = 3\n',
        b'manifest-version = "2"\n[pkg.cargo.target.x86_64]\navailable = "yes"\n',
        b'manifest-version = "2"\nrenames = 4\n[pkg]\n',
        b'manifest-version = "2"\nprofiles = "default"\n[pkg]\n',
    ])
    def test_rejected(self, content):
        with pytest.raises(ManifestParseError):
            parse_manifest(content)
