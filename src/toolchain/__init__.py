"""External toolchain manager capability and its rustup implementation."""

from .base import ToolchainManager
from .rustup import RustupManager

__all__ = [
    "ToolchainManager",
    "RustupManager",
]
