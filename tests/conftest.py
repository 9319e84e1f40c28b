"""Shared test doubles: an in-memory manifest source and toolchain manager."""

import datetime

import pytest

from distribution.models import Manifest
from errors import ManifestNotPublished, NoDefaultToolchainError, ToolchainCommandError
from toolchain.base import ToolchainManager

TODAY = datetime.date(2024, 3, 10)
WINDOWS_GNU = "x86_64-pc-windows-gnu"
LINUX_GNU = "x86_64-unknown-linux-gnu"


def make_manifest(target, packages, **kwargs):
    """Build a Manifest where ``packages`` are available for ``target``."""
    return Manifest(
        date=kwargs.pop("date", None),
        version=kwargs.pop("version", None),
        targets={target: frozenset(packages)},
        **kwargs,
    )


class FakeManifestClient:
    """Manifest source keyed by date; unknown dates are not published.

    Values may be a Manifest or an exception instance to raise.
    """

    def __init__(self, by_date=None):
        self.by_date = dict(by_date or {})
        self.calls = []

    def fetch(self, channel, date):
        self.calls.append((channel, date))
        entry = self.by_date.get(date)
        if entry is None:
            raise ManifestNotPublished(f"No {channel} snapshot published on {date}")
        if isinstance(entry, Exception):
            raise entry
        return entry


class FakeToolchainManager(ToolchainManager):
    """In-memory toolchain manager recording every call."""

    def __init__(self, installed=(), default=None, components=None, fail=()):
        self.installed = set(installed)
        self.default = default
        self.components = dict(components or {})
        self.fail = set(fail)
        self.calls = []

    def _check(self, op, toolchain):
        self.calls.append((op, toolchain))
        if op in self.fail:
            raise ToolchainCommandError(
                f"{op} {toolchain} failed", command=["rustup", op, toolchain],
                returncode=1, output=f"error: {op} failed",
            )

    def install(self, toolchain, components=()):
        self._check("install", toolchain)
        self.installed.add(toolchain)
        self.components[toolchain] = set(components)

    def uninstall(self, toolchain):
        self._check("uninstall", toolchain)
        self.installed.discard(toolchain)

    def list_installed(self):
        self.calls.append(("list_installed", None))
        return set(self.installed)

    def list_components(self, toolchain, target):
        self._check("list_components", toolchain)
        return set(self.components.get(toolchain, set()))

    def default_toolchain(self):
        self._check("default_toolchain", None)
        if self.default is None:
            raise NoDefaultToolchainError("Could not find default toolchain.")
        return self.default

    def backup(self, toolchain):
        self._check("backup", toolchain)
        self.installed.discard(toolchain)
        self.installed.add(f"{toolchain}-old")
        return f"{toolchain}-old"

    def link(self, alias, toolchain):
        self._check("link", alias)
        self.installed.discard(toolchain)
        self.installed.add(alias)

    def ops(self, *names):
        """Recorded calls restricted to the given operation names."""
        return [c for c in self.calls if c[0] in names]


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def fixed_clock():
    return lambda: TODAY
