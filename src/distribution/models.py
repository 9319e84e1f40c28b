"""Data model for published channel manifests."""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional

from constants import Constants


@dataclass(frozen=True)
class Manifest:
    """Parsed channel manifest for one (channel, date) pair.

    ``targets`` maps each target triple (``"*"`` for target-independent
    packages) to the package names available for it on that date.
    """

    date: Optional[str]
    version: Optional[str]
    targets: Dict[str, FrozenSet[str]]
    renames: Dict[str, str] = field(default_factory=dict)
    profiles: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def default_components(self) -> List[str]:
        """Components installed by the ``default`` profile, if the manifest lists profiles."""
        return list(self.profiles.get("default", []))

    def components_for(self, target: str) -> FrozenSet[str]:
        """Return every component name a toolchain for ``target`` could install.

        Host packages keep their bare name; packages only available for other
        targets are named ``<pkg>-<triple>`` as ``rustup component list``
        shows them. Old names of renamed packages are included when the new
        name is present.
        """
        names = set(self.targets.get(target, frozenset()))
        names |= self.targets.get(Constants.WILDCARD_TARGET, frozenset())
        for triple, packages in self.targets.items():
            if triple in (target, Constants.WILDCARD_TARGET):
                continue
            names.update(f"{pkg}-{triple}" for pkg in packages)
        for old, new in self.renames.items():
            if new in names:
                names.add(old)
        return frozenset(names)

    def missing(self, target: str, required) -> List[str]:
        """Sorted list of ``required`` names not available for ``target``."""
        available = self.components_for(target)
        return sorted(name for name in required if name not in available)
