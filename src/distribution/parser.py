"""Channel manifest parser.

Channel manifests are TOML documents (``manifest-version = "2"``) with one
``[pkg.<name>.target.<triple>]`` table per package and target::

    [pkg.cargo.target.x86_64-unknown-linux-gnu]
    available = true
    url = "..."
"""

import logging
import tomllib
from typing import Any, Dict, FrozenSet, List

from constants import Constants
from errors import ManifestParseError
from .models import Manifest

logger = logging.getLogger(__name__)


def parse_manifest(content: bytes) -> Manifest:
    """Decode a channel manifest.

    Args:
        content: Raw document bytes as served by the distribution server.

    Returns:
        Manifest with the per-target available packages.

    Raises:
        ManifestParseError: On decoding errors, an unsupported manifest
            version or an unexpected document structure.
    """
    try:
        data = tomllib.loads(content.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise ManifestParseError(f"Manifest is not valid UTF-8: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ManifestParseError(f"Manifest is not valid TOML: {exc}") from exc

    version = data.get("manifest-version")
    if version != Constants.MANIFEST_VERSION:
        raise ManifestParseError(f"Unsupported manifest version: {version!r}")

    packages = data.get("pkg")
    if not isinstance(packages, dict):
        raise ManifestParseError("Manifest has no [pkg] table")

    return Manifest(
        date=_optional_str(data.get("date")),
        version=_rust_version(packages),
        targets=_collect_targets(packages),
        renames=_collect_renames(data.get("renames", {})),
        profiles=_collect_profiles(data.get("profiles", {})),
    )


def _optional_str(value: Any):
    return str(value) if value is not None else None


def _rust_version(packages: Dict[str, Any]):
    rust = packages.get("rust")
    if isinstance(rust, dict) and isinstance(rust.get("version"), str):
        return rust["version"]
    return None


def _collect_targets(packages: Dict[str, Any]) -> Dict[str, FrozenSet[str]]:
    by_target: Dict[str, set] = {}
    for name, pkg in packages.items():
        if not isinstance(pkg, dict):
            raise ManifestParseError(f"Package entry {name!r} is not a table")
        targets = pkg.get("target", {})
        if not isinstance(targets, dict):
            raise ManifestParseError(f"Package {name!r} has a malformed target table")
        for triple, entry in targets.items():
            if not isinstance(entry, dict):
                raise ManifestParseError(f"Target {triple!r} of package {name!r} is not a table")
            available = entry.get("available", False)
            if not isinstance(available, bool):
                raise ManifestParseError(
                    f"Target {triple!r} of package {name!r} has a non-boolean 'available'"
                )
            if available:
                by_target.setdefault(triple, set()).add(name)
    return {triple: frozenset(names) for triple, names in by_target.items()}


def _collect_renames(renames: Any) -> Dict[str, str]:
    if not isinstance(renames, dict):
        raise ManifestParseError("Manifest [renames] is not a table")
    result: Dict[str, str] = {}
    for old, entry in renames.items():
        new = entry.get("to") if isinstance(entry, dict) else None
        if isinstance(new, str):
            result[old] = new
        else:
            logger.debug("Ignoring malformed rename entry for %s", old)
    return result


def _collect_profiles(profiles: Any) -> Dict[str, List[str]]:
    if not isinstance(profiles, dict):
        raise ManifestParseError("Manifest [profiles] is not a table")
    return {
        name: [str(c) for c in components]
        for name, components in profiles.items()
        if isinstance(components, list)
    }
