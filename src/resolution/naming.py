"""Toolchain identifier naming.

Identifiers follow the toolchain manager's convention:

* dateless: ``<channel>-<target>`` (e.g. ``nightly-x86_64-unknown-linux-gnu``)
* dated: ``<channel>-<YYYY-MM-DD>-<target>``
"""

import datetime
import re
from dataclasses import dataclass
from typing import Iterable, Optional

_DATE_PREFIX = re.compile(r"^(\d{4})-(\d{2})-(\d{2})-")


@dataclass(frozen=True)
class ToolchainSpec:
    """Parsed form of a toolchain identifier."""
    channel: str
    date: Optional[datetime.date]
    target: str

    @property
    def name(self) -> str:
        return toolchain_name(self.channel, self.date, self.target)

    def dateless(self) -> "ToolchainSpec":
        return ToolchainSpec(self.channel, None, self.target)


def toolchain_name(channel: str, date: Optional[datetime.date], target: str) -> str:
    """Return the toolchain identifier for a channel, optional snapshot date and target."""
    if date is None:
        return f"{channel}-{target}"
    return f"{channel}-{date.isoformat()}-{target}"


def parse_toolchain(name: str) -> ToolchainSpec:
    """Split a toolchain identifier into channel, optional date and target.

    The channel ends at the first hyphen; a ``YYYY-MM-DD-`` prefix of the
    remainder is read as the snapshot date.

    Raises:
        ValueError: If the identifier has no channel or no target.
    """
    name = name.strip()
    channel, sep, rest = name.partition("-")
    if not channel or not sep or not rest:
        raise ValueError(f"Invalid toolchain format: {name!r}")

    date = None
    m = _DATE_PREFIX.match(rest)
    if m:
        try:
            date = datetime.date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError as exc:
            raise ValueError(f"Invalid date in toolchain {name!r}: {exc}") from exc
        rest = rest[m.end():]
        if not rest:
            raise ValueError(f"Invalid toolchain format: {name!r}")

    return ToolchainSpec(channel=channel, date=date, target=rest)


def format_components(names: Iterable[str]) -> str:
    """Sorted, comma-separated component list for log messages."""
    return ", ".join(sorted(names))
