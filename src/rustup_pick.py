"""rustup-pick - find the latest dated Rust toolchain carrying the components you need

    Returns:
        int: Exit code
"""
import logging
import os
import sys

from args import parse_args
from cli_config import find_config_path, load_config, resolve_settings
from common.logging_utils import configure_logging, resolve_level
from constants import Commands, Constants, ExitCodes
from distribution.client import ManifestClient
from errors import (
    AliasError,
    BackupError,
    ConfigError,
    InstallError,
    ManifestParseError,
    ManifestTransportError,
    NoDefaultToolchainError,
    OrchestrationError,
    ResolutionFailed,
    ToolchainCommandError,
    UninstallError,
)
from orchestrator import Orchestrator, PickRequest
from resolution.resolver import Resolver, utc_today
from toolchain.rustup import RustupManager

logger = logging.getLogger(__name__)

_STEP_EXIT_CODES = {
    InstallError: ExitCodes.INSTALL_FAILED,
    BackupError: ExitCodes.BACKUP_FAILED,
    UninstallError: ExitCodes.UNINSTALL_FAILED,
    AliasError: ExitCodes.LINK_FAILED,
}


def build_orchestrator(settings, today=utc_today):
    """Wire the manifest client, resolver and rustup manager for ``settings``."""
    client = ManifestClient(settings.dist_server, timeout=settings.timeout)
    manager = RustupManager(settings.rustup_bin, settings.rustup_dir)
    return Orchestrator(manager, Resolver(client, today))


def build_request(settings, args):
    """Translate effective settings into an orchestrator request."""
    return PickRequest(
        channel=settings.channel,
        target=settings.target,
        components=settings.components,
        exclude=settings.exclude,
        days=settings.days,
        offset=settings.offset,
        skip_installed=settings.skip_installed,
        keep_previous=bool(getattr(args, "KEEP_PREVIOUS", False)),
    )


def _echo_output(output, quiet):
    """Relay captured tool output verbatim on stderr."""
    if output and not quiet:
        sys.stderr.write(output.rstrip("\n") + "\n")


def report_resolution_failure(exc):
    """Log the summary and every examined date with its reason."""
    logger.error("%s", exc)
    for line in exc.outcome.trace():
        logger.error("  %s", line)
    if exc.outcome.attempts:
        logger.error("Widen the window with --days or move it with --offset.")


def run(args, orchestrator=None):
    """Execute the selected command and return its exit code."""
    quiet = bool(getattr(args, "QUIET", False))
    try:
        config = load_config(find_config_path(getattr(args, "CONFIG", None), os.environ))
        settings = resolve_settings(args, config)
    except ConfigError as exc:
        logger.error("%s", exc)
        return ExitCodes.CONFIG_ERROR.value

    if orchestrator is None:
        orchestrator = build_orchestrator(settings)
    request = build_request(settings, args)

    try:
        if args.action == Commands.FIND.value:
            result = orchestrator.find(request)
            # The result is the command's output, printed even in quiet mode.
            print(result.toolchain)
        elif args.action == Commands.INSTALL.value:
            orchestrator.install(request)
        elif args.action == Commands.REPLACE.value:
            orchestrator.replace(request)
        else:
            logger.error("Unknown command: %s", args.action)
            return ExitCodes.CONFIG_ERROR.value
    except ResolutionFailed as exc:
        report_resolution_failure(exc)
        return ExitCodes.NOT_FOUND.value
    except ManifestTransportError as exc:
        logger.error("Cannot get manifest: %s", exc)
        return ExitCodes.CONNECTION_ERROR.value
    except ManifestParseError as exc:
        logger.error("Malformed manifest at %s: %s", exc.url or "unknown URL", exc)
        return ExitCodes.MANIFEST_ERROR.value
    except OrchestrationError as exc:
        logger.error("Step '%s' failed: %s", exc.step, exc)
        _echo_output(exc.output, quiet)
        if isinstance(exc, AliasError) and exc.alias_missing:
            if exc.kept_as:
                toolchains = os.path.join(settings.rustup_dir, Constants.TOOLCHAINS_DIR)
                logger.error(
                    "Toolchain %s is installed but %s no longer exists; the previous "
                    "toolchain was kept as %s. Move %s back to %s to restore it.",
                    exc.toolchain, exc.alias, exc.kept_as,
                    os.path.join(toolchains, exc.kept_as),
                    os.path.join(toolchains, exc.alias),
                )
            else:
                logger.error(
                    "Toolchain %s is installed but %s no longer exists; "
                    "run 'rustup toolchain install %s' to restore it.",
                    exc.toolchain, exc.alias, exc.alias,
                )
        return _STEP_EXIT_CODES.get(type(exc), ExitCodes.TOOL_ERROR).value
    except NoDefaultToolchainError as exc:
        logger.error("%s", exc)
        return ExitCodes.NO_DEFAULT_TOOLCHAIN.value
    except ToolchainCommandError as exc:
        logger.error("%s", exc)
        _echo_output(exc.output, quiet)
        return ExitCodes.TOOL_ERROR.value
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return ExitCodes.INTERRUPTED.value
    return ExitCodes.SUCCESS.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    level = resolve_level(args.LOG_LEVEL, verbose=args.VERBOSE, quiet=args.QUIET)
    configure_logging(level, args.LOG_FILE)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
