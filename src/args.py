"""Argument parsing functionality for rustup-pick."""

import argparse

from constants import Commands, Constants
from resolution.naming import parse_toolchain


def non_negative_int(value):
    """argparse type accepting integers >= 0."""
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from exc
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value!r}")
    return number


def dateless_toolchain(value):
    """argparse type for ``<channel>-<target>`` toolchain names."""
    try:
        spec = parse_toolchain(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    if spec.date is not None:
        raise argparse.ArgumentTypeError(
            f"expected a toolchain without date, e.g. nightly-x86_64-unknown-linux-gnu (got {value!r})"
        )
    return spec


def split_components(values):
    """Flatten repeated and comma-separated component options, keeping order."""
    names = []
    for value in values or []:
        for name in value.split(","):
            name = name.strip()
            if name and name not in names:
                names.append(name)
    return names


def build_parser():
    """Build the top-level parser with its find/install/replace subcommands."""
    parser = argparse.ArgumentParser(
        prog="rustup-pick",
        description=(
            "Find (and optionally install) the latest dated Rust toolchain "
            "that provides every required component"
        ),
        add_help=True,
    )

    parser.add_argument("-v", "--verbose",
                        dest="VERBOSE",
                        help="Log more information than needed.",
                        action="store_true")
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not log anything.",
                        action="store_true")
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (overrides -v/-q)",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    parser.add_argument("-d", "--days",
                        dest="DAYS",
                        help=f"Number of days to check starting at the given offset (default: {Constants.DEFAULT_DAYS}).",
                        action="store",
                        type=non_negative_int)
    parser.add_argument("-o", "--offset",
                        dest="OFFSET",
                        help=f"Number of days before today at which to start checking (default: {Constants.DEFAULT_OFFSET}).",
                        action="store",
                        type=non_negative_int)
    parser.add_argument("-b", "--rustup-bin",
                        dest="RUSTUP_BIN",
                        help=f"Path to the rustup binary (default: {Constants.RUSTUP_BIN}).",
                        action="store",
                        type=str)
    parser.add_argument("-r", "--rustup-dir",
                        dest="RUSTUP_DIR",
                        help=f"Path to the rustup home directory (default: $RUSTUP_HOME or {Constants.RUSTUP_DIR}).",
                        action="store",
                        type=str)
    parser.add_argument("-t", "--toolchain",
                        dest="TOOLCHAIN",
                        help="Target toolchain, e.g. nightly-x86_64-unknown-linux-gnu (default: rustup's default).",
                        action="store",
                        type=dateless_toolchain)
    parser.add_argument("-c", "--components",
                        dest="COMPONENTS",
                        help=("Components that must be available for a release to be considered valid. "
                              "Repeatable, comma-separated values accepted. Default: the installed ones."),
                        action="append",
                        type=str)
    parser.add_argument("-x", "--exclude",
                        dest="EXCLUDE",
                        help="Components to leave out of the required set. Repeatable.",
                        action="append",
                        type=str)
    parser.add_argument("-s", "--skip-installed",
                        dest="SKIP_INSTALLED",
                        help="Do not reinstall the resolved toolchain if it is already installed.",
                        action="store_true",
                        default=None)
    parser.add_argument("--dist-server",
                        dest="DIST_SERVER",
                        help=f"Distribution server base URL (default: $RUSTUP_DIST_SERVER or {Constants.DIST_SERVER}).",
                        action="store",
                        type=str)
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help=f"Manifest request timeout in seconds (default: {Constants.REQUEST_TIMEOUT}).",
                        action="store",
                        type=float)
    parser.add_argument("--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)

    subparsers = parser.add_subparsers(dest="action", metavar="COMMAND")
    subparsers.add_parser(
        Commands.FIND.value,
        help="Find the latest available release that matches the required components (default).",
    )
    subparsers.add_parser(
        Commands.INSTALL.value,
        help="Find, download and install the latest matching release.",
    )
    replace = subparsers.add_parser(
        Commands.REPLACE.value,
        help="Install the latest matching release and put it in place of the dateless toolchain.",
    )
    replace.add_argument("-k", "--keep-previous",
                         dest="KEEP_PREVIOUS",
                         help="Keep the previous toolchain as '[old-name]-old' instead of uninstalling it.",
                         action="store_true")
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    ns = build_parser().parse_args(argv)
    if ns.action is None:
        ns.action = Commands.FIND.value
    if not hasattr(ns, "KEEP_PREVIOUS"):
        ns.KEEP_PREVIOUS = False
    ns.COMPONENTS = split_components(ns.COMPONENTS)
    ns.EXCLUDE = split_components(ns.EXCLUDE)
    return ns
