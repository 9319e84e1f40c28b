"""Exception taxonomy shared by the resolver, the toolchain manager and the CLI.

Per-date misses (``ManifestNotPublished``) are recovered by the resolver;
everything else stops the current command and is mapped to an exit code by
the entry point.
"""

from __future__ import annotations

from typing import Optional, Sequence


class PickError(Exception):
    """Base class for all errors raised by rustup-pick."""


class ConfigError(PickError):
    """Configuration file could not be read or holds invalid values."""


# ---------- Manifest source ----------


class ManifestError(PickError):
    """A channel manifest could not be obtained."""

    def __init__(self, message: str, *, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class ManifestNotPublished(ManifestError):
    """No snapshot was published for the requested channel and date."""


class ManifestTransportError(ManifestError):
    """Network or IO failure while retrieving a manifest."""


class ManifestParseError(ManifestError):
    """The retrieved document is not a valid channel manifest."""


# ---------- External toolchain manager ----------


class ToolchainCommandError(PickError):
    """A call to the external toolchain manager failed."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: Optional[int] = None,
        output: str = "",
    ):
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.output = output


class NoDefaultToolchainError(ToolchainCommandError):
    """The toolchain manager reports no default toolchain."""


# ---------- Orchestration steps ----------


class ResolutionFailed(PickError):
    """No date in the resolution window carried every required component."""

    def __init__(self, message: str, outcome):
        super().__init__(message)
        self.outcome = outcome


class OrchestrationError(PickError):
    """A step of install/replace failed; earlier steps are left in place."""

    step = "orchestration"

    def __init__(self, message: str, *, toolchain: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.toolchain = toolchain
        self.cause = cause

    @property
    def output(self) -> str:
        """Captured output of the failing external command, if any."""
        return getattr(self.cause, "output", "") or ""


class InstallError(OrchestrationError):
    """Installing the resolved toolchain failed."""

    step = "install"


class BackupError(OrchestrationError):
    """Moving the previous toolchain aside failed."""

    step = "backup"


class UninstallError(OrchestrationError):
    """Uninstalling the previous toolchain failed."""

    step = "uninstall"


class AliasError(OrchestrationError):
    """Pointing the dateless name at the new toolchain failed.

    ``alias_missing`` is True when the previous toolchain was already removed,
    which leaves no toolchain under the dateless name. ``kept_as`` names the
    backup of the previous toolchain when it was moved aside instead.
    """

    step = "link"

    def __init__(
        self,
        message: str,
        *,
        toolchain: str,
        alias: str,
        alias_missing: bool,
        kept_as: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, toolchain=toolchain, cause=cause)
        self.alias = alias
        self.alias_missing = alias_missing
        self.kept_as = kept_as
