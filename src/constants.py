"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    TOOL_ERROR = 1
    CONNECTION_ERROR = 2
    NO_DEFAULT_TOOLCHAIN = 3
    MANIFEST_ERROR = 4
    NOT_FOUND = 5
    INSTALL_FAILED = 6
    BACKUP_FAILED = 7
    UNINSTALL_FAILED = 8
    CONFIG_ERROR = 9
    LINK_FAILED = 10
    INTERRUPTED = 130


class Commands(Enum):
    """Operating modes selectable on the command line.

    Args:
        Enum (string): Subcommand names.
    """

    FIND = "find"
    INSTALL = "install"
    REPLACE = "replace"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    DIST_SERVER = "https://static.rust-lang.org"
    MANIFEST_PATH = "dist/{date}/channel-rust-{channel}.toml"
    MANIFEST_VERSION = "2"
    # The distribution bucket answers 403 for keys that were never uploaded.
    NOT_PUBLISHED_STATUS = (403, 404)
    REQUEST_TIMEOUT = 30  # Timeout in seconds for manifest requests

    DEFAULT_DAYS = 30
    DEFAULT_OFFSET = 0
    RUSTUP_BIN = "rustup"
    RUSTUP_DIR = "~/.rustup"
    TOOLCHAINS_DIR = "toolchains"
    UPDATE_HASHES_DIR = "update-hashes"
    BACKUP_SUFFIX = "-old"
    WILDCARD_TARGET = "*"
    CROSS_STD_PREFIX = "rust-std-"

    ENV_DIST_SERVER = "RUSTUP_DIST_SERVER"
    ENV_RUSTUP_HOME = "RUSTUP_HOME"
    ENV_CONFIG = "RUSTUP_PICK_CONFIG"
    ENV_LOG_LEVEL = "RUSTUP_PICK_LOG_LEVEL"
    CONFIG_LOCATIONS = [
        "~/.config/rustup-pick/config.yml",
        "~/.config/rustup-pick/config.yaml",
    ]

    LOG_FORMAT = "%(status)s%(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
