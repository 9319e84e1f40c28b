"""Find, install and replace modes.

Each mode is a short sequence over the resolver and the toolchain manager:

* find: resolve the newest dated toolchain carrying the required components;
* install: find, then install it (optionally skipping an existing install);
* replace: install, then put the dated toolchain under the dateless name,
  removing (or moving aside) the previous one first.

Steps that already completed are never rolled back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Sequence

from constants import Constants
from common.logging_utils import extra_context
from errors import (
    AliasError,
    BackupError,
    InstallError,
    NoDefaultToolchainError,
    ResolutionFailed,
    ToolchainCommandError,
    UninstallError,
)
from resolution.models import ResolutionOutcome
from resolution.naming import format_components, parse_toolchain, toolchain_name
from resolution.resolver import Resolver
from toolchain.base import ToolchainManager

logger = logging.getLogger(__name__)


@dataclass
class PickRequest:
    """Already-validated inputs of one command invocation."""
    channel: Optional[str] = None
    target: Optional[str] = None
    components: Sequence[str] = ()
    exclude: Sequence[str] = ()
    days: int = Constants.DEFAULT_DAYS
    offset: int = Constants.DEFAULT_OFFSET
    skip_installed: bool = False
    keep_previous: bool = False


@dataclass
class PickPlan:
    """Channel, target and required components after derivation."""
    channel: str
    target: str
    required: FrozenSet[str]

    @property
    def dateless(self) -> str:
        return toolchain_name(self.channel, None, self.target)


@dataclass
class FindResult:
    toolchain: str
    plan: PickPlan
    outcome: ResolutionOutcome


@dataclass
class InstallResult(FindResult):
    installed: bool = False


@dataclass
class ReplaceResult(InstallResult):
    previous: Optional[str] = None
    removed_previous: bool = False
    kept_as: Optional[str] = None
    steps: List[str] = field(default_factory=list)


class Orchestrator:
    """Compose resolution with the external toolchain manager.

    Args:
        manager: Toolchain manager capability.
        resolver: Date resolver.
    """

    def __init__(self, manager: ToolchainManager, resolver: Resolver):
        self.manager = manager
        self.resolver = resolver

    def prepare(self, request: PickRequest) -> PickPlan:
        """Fill in channel, target and required components.

        Channel and target come from the default toolchain when not given.
        Required components are the explicit list or, failing that, every
        component installed under the default toolchain (when no toolchain was
        given) or under the dateless toolchain.
        """
        channel, target = request.channel, request.target
        installed_source = None
        if not channel or not target:
            default = self.manager.default_toolchain()
            try:
                spec = parse_toolchain(default)
            except ValueError as exc:
                raise NoDefaultToolchainError(
                    f"Default toolchain {default!r} is not a <channel>-<target> toolchain."
                ) from exc
            channel = channel or spec.channel
            target = target or spec.target
            if (channel, target) == (spec.channel, spec.target):
                # Components are read from the default itself, dated or not.
                installed_source = spec.name

        logger.debug("Channel: %s.", channel, extra=extra_context(event="channel", channel=channel))
        logger.debug("Target: %s.", target, extra=extra_context(event="target", target=target))

        if request.components:
            required = set(request.components)
        else:
            source = installed_source or toolchain_name(channel, None, target)
            logger.debug("Reading installed components of %s.", source)
            required = self.manager.list_components(source, target)
        required -= set(request.exclude)

        if not required:
            logger.warning("No required components; any published snapshot will match.")
        logger.debug(
            "Required components: %s.",
            format_components(required),
            extra=extra_context(event="required_components", components=sorted(required)),
        )
        return PickPlan(channel=channel, target=target, required=frozenset(required))

    def find(self, request: PickRequest) -> FindResult:
        """Resolve the newest dated toolchain carrying the required components.

        Raises:
            ResolutionFailed: No date of the window qualified.
        """
        plan = self.prepare(request)
        outcome = self.resolver.resolve(
            plan.channel, plan.target, plan.required, request.offset, request.days
        )
        if not outcome.found:
            if not outcome.attempts:
                message = "Empty search window: no dates were checked."
            elif outcome.components_missing:
                message = f"Could not find a match in the last {request.days} days."
            else:
                message = f"No {plan.channel} snapshot was published in the last {request.days} days."
            raise ResolutionFailed(message, outcome)

        toolchain = toolchain_name(plan.channel, outcome.date, plan.target)
        logger.debug(
            "Resolved %s",
            toolchain,
            extra=extra_context(event="resolved", toolchain=toolchain),
        )
        return FindResult(toolchain=toolchain, plan=plan, outcome=outcome)

    def install(self, request: PickRequest) -> InstallResult:
        """Find, then install the resolved toolchain.

        Raises:
            ResolutionFailed: Nothing to install.
            InstallError: The installer failed; its output is kept verbatim.
        """
        found = self.find(request)
        toolchain = found.toolchain
        logger.info("Found valid toolchain: %s.", toolchain)

        if request.skip_installed and toolchain in self.manager.list_installed():
            logger.info("Toolchain %s is already installed.", toolchain)
            return InstallResult(toolchain, found.plan, found.outcome, installed=False)

        logger.debug("Installing toolchain...")
        try:
            self.manager.install(toolchain, found.plan.required)
        except ToolchainCommandError as exc:
            raise InstallError(
                f"Could not install toolchain {toolchain}: {exc}", toolchain=toolchain, cause=exc
            ) from exc
        logger.info("Installed toolchain %s.", toolchain)
        return InstallResult(toolchain, found.plan, found.outcome, installed=True)

    def replace(self, request: PickRequest) -> ReplaceResult:
        """Install, then put the new toolchain under the dateless name.

        The previous toolchain is uninstalled (or moved aside with
        ``keep_previous``) before the new one is linked. If linking fails
        after the previous toolchain was uninstalled, no toolchain is left
        under the dateless name; the new dated toolchain stays installed.

        Raises:
            ResolutionFailed, InstallError, BackupError, UninstallError, AliasError
        """
        installed = self.install(request)
        new = installed.toolchain
        previous = installed.plan.dateless
        result = ReplaceResult(
            new, installed.plan, installed.outcome, installed=installed.installed, previous=previous
        )
        logger.debug("Replacing previous toolchain %s...", previous)

        if previous != new and previous in self.manager.list_installed():
            if request.keep_previous:
                try:
                    result.kept_as = self.manager.backup(previous)
                except ToolchainCommandError as exc:
                    raise BackupError(
                        f"Could not move previous toolchain {previous} aside: {exc}",
                        toolchain=previous,
                        cause=exc,
                    ) from exc
                result.steps.append("backup")
                logger.info("Kept previous toolchain as %s.", result.kept_as)
            else:
                logger.warning(
                    "Removing %s before relinking; it stays missing if the next step fails.",
                    previous,
                )
                try:
                    self.manager.uninstall(previous)
                except ToolchainCommandError as exc:
                    raise UninstallError(
                        f"Could not remove previous toolchain {previous}: {exc}",
                        toolchain=previous,
                        cause=exc,
                    ) from exc
                result.steps.append("uninstall")
            result.removed_previous = True

        try:
            self.manager.link(previous, new)
        except ToolchainCommandError as exc:
            gap = " No toolchain is left under that name." if result.removed_previous else ""
            raise AliasError(
                f"Could not move toolchain {new} to {previous}: {exc}.{gap}",
                toolchain=new,
                alias=previous,
                alias_missing=result.removed_previous,
                kept_as=result.kept_as,
                cause=exc,
            ) from exc
        result.steps.append("link")
        logger.info("Replaced previous toolchain %s by %s.", previous, new)
        return result
