"""Configuration file loading and precedence for runtime settings.

Precedence, highest first: command-line options, the YAML configuration
file, environment variables (RUSTUP_DIST_SERVER, RUSTUP_HOME), built-in
defaults from ``Constants``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import yaml

from constants import Constants
from errors import ConfigError
from resolution.naming import parse_toolchain

logger = logging.getLogger(__name__)

KNOWN_KEYS = {
    "toolchain",
    "components",
    "exclude",
    "days",
    "offset",
    "rustup_bin",
    "rustup_dir",
    "dist_server",
    "timeout",
    "skip_installed",
}


@dataclass
class Settings:
    """Effective settings of one invocation."""
    channel: Optional[str] = None
    target: Optional[str] = None
    components: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    days: int = Constants.DEFAULT_DAYS
    offset: int = Constants.DEFAULT_OFFSET
    rustup_bin: str = Constants.RUSTUP_BIN
    rustup_dir: str = os.path.expanduser(Constants.RUSTUP_DIR)
    dist_server: str = Constants.DIST_SERVER
    timeout: float = Constants.REQUEST_TIMEOUT
    skip_installed: bool = False


def find_config_path(explicit: Optional[str], env: Mapping[str, str]) -> Optional[str]:
    """Return the configuration file to load, or None when there is none.

    An explicit path (``--config`` or RUSTUP_PICK_CONFIG) must exist; the
    default locations are optional.
    """
    requested = explicit or env.get(Constants.ENV_CONFIG)
    if requested:
        path = os.path.expanduser(requested)
        if not os.path.isfile(path):
            raise ConfigError(f"Config file not found: {requested}")
        return path
    for candidate in Constants.CONFIG_LOCATIONS:
        path = os.path.expanduser(candidate)
        if os.path.isfile(path):
            return path
    return None


def load_config(path: Optional[str]) -> Dict[str, Any]:
    """Load a YAML configuration file.

    Returns an empty dict when ``path`` is None.

    Raises:
        ConfigError: On IO or YAML errors, or when the document is not a mapping.
    """
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
    logger.debug("Loaded config from: %s", path)
    return data


def _as_names(value: Any, key: str) -> List[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"Config key '{key}' must be a list of strings")
    return [v.strip() for v in value if v.strip()]


def _as_count(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"Config key '{key}' must be a non-negative integer")
    return value


def _as_str(value: Any, key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Config key '{key}' must be a non-empty string")
    return value.strip()


def _pick(cli_value: Any, config: Mapping[str, Any], key: str, convert, fallback: Any) -> Any:
    if cli_value is not None:
        return cli_value
    if config.get(key) is not None:
        return convert(config[key], key)
    return fallback


def resolve_settings(args, config: Mapping[str, Any], env: Optional[Mapping[str, str]] = None) -> Settings:
    """Merge parsed CLI arguments, a loaded config mapping and the environment."""
    env = os.environ if env is None else env
    settings = Settings()

    spec = getattr(args, "TOOLCHAIN", None)
    if spec is None and config.get("toolchain") is not None:
        try:
            spec = parse_toolchain(_as_str(config["toolchain"], "toolchain"))
        except ValueError as exc:
            raise ConfigError(f"Config key 'toolchain': {exc}") from exc
        if spec.date is not None:
            raise ConfigError("Config key 'toolchain' must not carry a date")
    if spec is not None:
        settings.channel, settings.target = spec.channel, spec.target

    settings.components = getattr(args, "COMPONENTS", None) or (
        _as_names(config["components"], "components") if config.get("components") else []
    )
    settings.exclude = getattr(args, "EXCLUDE", None) or (
        _as_names(config["exclude"], "exclude") if config.get("exclude") else []
    )
    settings.days = _pick(getattr(args, "DAYS", None), config, "days", _as_count, Constants.DEFAULT_DAYS)
    settings.offset = _pick(getattr(args, "OFFSET", None), config, "offset", _as_count, Constants.DEFAULT_OFFSET)
    settings.rustup_bin = _pick(getattr(args, "RUSTUP_BIN", None), config, "rustup_bin", _as_str,
                                Constants.RUSTUP_BIN)
    settings.rustup_dir = os.path.expanduser(
        _pick(getattr(args, "RUSTUP_DIR", None), config, "rustup_dir", _as_str,
              env.get(Constants.ENV_RUSTUP_HOME) or Constants.RUSTUP_DIR)
    )
    settings.dist_server = _pick(getattr(args, "DIST_SERVER", None), config, "dist_server", _as_str,
                                 env.get(Constants.ENV_DIST_SERVER) or Constants.DIST_SERVER)

    timeout = getattr(args, "TIMEOUT", None)
    if timeout is None and config.get("timeout") is not None:
        timeout = config["timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError("Config key 'timeout' must be a positive number")
    settings.timeout = float(timeout) if timeout is not None else float(Constants.REQUEST_TIMEOUT)
    if settings.timeout <= 0:
        raise ConfigError("Timeout must be a positive number of seconds")

    skip = getattr(args, "SKIP_INSTALLED", None)
    if skip is None and config.get("skip_installed") is not None:
        if not isinstance(config["skip_installed"], bool):
            raise ConfigError("Config key 'skip_installed' must be true or false")
        skip = config["skip_installed"]
    settings.skip_installed = bool(skip)
    return settings
