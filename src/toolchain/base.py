"""Abstract interface of the external toolchain manager."""

from abc import ABC, abstractmethod
from typing import Iterable, Set


class ToolchainManager(ABC):
    """Capabilities the orchestrator needs from the toolchain manager.

    Every method is a blocking call; failures raise
    ``errors.ToolchainCommandError``.
    """

    @abstractmethod
    def install(self, toolchain: str, components: Iterable[str] = ()) -> None:
        """Install ``toolchain`` together with ``components``."""
        raise NotImplementedError

    @abstractmethod
    def uninstall(self, toolchain: str) -> None:
        """Remove an installed toolchain."""
        raise NotImplementedError

    @abstractmethod
    def list_installed(self) -> Set[str]:
        """Identifiers of all installed toolchains."""
        raise NotImplementedError

    @abstractmethod
    def list_components(self, toolchain: str, target: str) -> Set[str]:
        """Components installed under ``toolchain``, host suffix stripped."""
        raise NotImplementedError

    @abstractmethod
    def default_toolchain(self) -> str:
        """Identifier of the default toolchain."""
        raise NotImplementedError

    @abstractmethod
    def backup(self, toolchain: str) -> str:
        """Move ``toolchain`` aside and return the name it is kept under."""
        raise NotImplementedError

    @abstractmethod
    def link(self, alias: str, toolchain: str) -> None:
        """Make ``alias`` name the installed ``toolchain``."""
        raise NotImplementedError
