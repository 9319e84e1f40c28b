"""Toolchain manager backed by the ``rustup`` binary and its home directory.

Queries and (un)installation go through ``rustup`` subcommands. Moving a
toolchain aside and relinking the dateless name are directory moves inside
the rustup home (``toolchains/`` and ``update-hashes/``), since rustup has
no command to rename an installed distribution toolchain.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
from typing import Iterable, List, Set, Tuple

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from errors import NoDefaultToolchainError, ToolchainCommandError
from .base import ToolchainManager

logger = logging.getLogger(__name__)

# Trailing status tags such as " (default)" or " (active, default)".
_TAGS = re.compile(r"\s+\(([^()]*)\)\s*$")
_COMPONENT_TAGS = ("installed", "default")


def _split_tags(line: str) -> Tuple[str, List[str]]:
    """Return (name, tags) for a rustup listing line."""
    line = line.strip()
    m = _TAGS.search(line)
    if not m:
        return line, []
    tags = [t.strip() for t in m.group(1).split(",") if t.strip()]
    return line[:m.start()].strip(), tags


class RustupManager(ToolchainManager):
    """Drive ``rustup`` through subprocess calls.

    Args:
        rustup_bin: Path or name of the rustup binary.
        rustup_dir: Rustup home directory; exported to rustup as RUSTUP_HOME.
    """

    def __init__(self, rustup_bin: str = Constants.RUSTUP_BIN, rustup_dir: str = Constants.RUSTUP_DIR):
        self.rustup_bin = rustup_bin
        self.rustup_dir = os.path.expanduser(rustup_dir)

    # ---------- subprocess ----------

    def _run(self, *args: str) -> str:
        cmd = [self.rustup_bin, *args]
        env = os.environ.copy()
        env[Constants.ENV_RUSTUP_HOME] = self.rustup_dir
        if is_debug_enabled(logger):
            logger.debug(
                "Running: %s",
                " ".join(cmd),
                extra=extra_context(event="tool_call", component="rustup", command=cmd),
            )
        try:
            result = subprocess.run(  # noqa: S603
                cmd, env=env, capture_output=True, text=True, errors="replace", check=False
            )
        except OSError as exc:
            raise ToolchainCommandError(
                f"Failed to spawn rustup process: {exc}", command=cmd
            ) from exc

        if result.returncode != 0:
            output = (result.stderr or "") + (result.stdout or "")
            raise ToolchainCommandError(
                f"Failed to execute \"{' '.join(cmd)}\" (exit {result.returncode})",
                command=cmd,
                returncode=result.returncode,
                output=output.strip(),
            )
        return result.stdout or ""

    # ---------- queries ----------

    def _toolchain_lines(self) -> List[Tuple[str, List[str]]]:
        entries = []
        for line in self._run("toolchain", "list").splitlines():
            name, tags = _split_tags(line)
            if not name or any(ch.isspace() for ch in name):
                # Blank lines and messages such as "no installed toolchains".
                continue
            entries.append((name, tags))
        return entries

    def list_installed(self) -> Set[str]:
        return {name for name, _ in self._toolchain_lines()}

    def default_toolchain(self) -> str:
        for name, tags in self._toolchain_lines():
            if "default" in tags:
                return name
        raise NoDefaultToolchainError(
            "Could not find default toolchain.",
            command=[self.rustup_bin, "toolchain", "list"],
        )

    def list_components(self, toolchain: str, target: str) -> Set[str]:
        suffix = f"-{target}"
        components = set()
        output = self._run("component", "list", "--toolchain", toolchain)
        for line in output.splitlines():
            name, tags = _split_tags(line)
            if not name or not any(tag in _COMPONENT_TAGS for tag in tags):
                continue
            if name.endswith(suffix):
                name = name[:-len(suffix)]
            components.add(name)
        return components

    # ---------- changes ----------

    def install(self, toolchain: str, components: Iterable[str] = ()) -> None:
        args = ["toolchain", "install", toolchain, "--no-self-update"]
        for component in sorted(set(components)):
            if component.startswith(Constants.CROSS_STD_PREFIX):
                args += ["--target", component[len(Constants.CROSS_STD_PREFIX):]]
            else:
                args += ["--component", component]
        self._run(*args)

    def uninstall(self, toolchain: str) -> None:
        self._run("toolchain", "uninstall", toolchain)

    def _paths(self, toolchain: str) -> Tuple[str, str]:
        return (
            os.path.join(self.rustup_dir, Constants.TOOLCHAINS_DIR, toolchain),
            os.path.join(self.rustup_dir, Constants.UPDATE_HASHES_DIR, toolchain),
        )

    def _move(self, source: str, destination: str) -> None:
        """Move a toolchain directory and its update hash onto another name."""
        src_dir, src_hash = self._paths(source)
        dst_dir, dst_hash = self._paths(destination)

        if not os.path.isdir(src_dir):
            raise ToolchainCommandError(f"Toolchain directory {src_dir} does not exist.")
        if os.path.lexists(dst_dir):
            raise ToolchainCommandError(f"Toolchain directory {dst_dir} already exists.")
        try:
            os.rename(src_dir, dst_dir)
        except OSError as exc:
            raise ToolchainCommandError(
                f"Could not move toolchain {source} to {destination}: {exc}"
            ) from exc

        if os.path.lexists(src_hash):
            try:
                os.replace(src_hash, dst_hash)
            except OSError as exc:
                raise ToolchainCommandError(
                    f"Could not move update hash of {source} to {destination}: {exc}. "
                    f"The toolchain directory was already moved to {dst_dir}; "
                    f"move {src_hash} to {dst_hash} by hand."
                ) from exc
        logger.debug(
            "Moved %s to %s",
            source,
            destination,
            extra=extra_context(event="toolchain_moved", component="rustup",
                                source=source, destination=destination),
        )

    def backup(self, toolchain: str) -> str:
        kept_as = f"{toolchain}{Constants.BACKUP_SUFFIX}"
        self._move(toolchain, kept_as)
        return kept_as

    def link(self, alias: str, toolchain: str) -> None:
        self._move(toolchain, alias)
