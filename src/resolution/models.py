"""Data models for date resolution."""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class AttemptStatus(Enum):
    """Why a date was accepted or skipped."""
    NOT_PUBLISHED = "not_published"
    COMPONENTS_MISSING = "components_missing"
    MATCHED = "matched"


class ResolutionStatus(Enum):
    """Overall outcome of a scan."""
    FOUND = "found"
    WINDOW_EXHAUSTED = "window_exhausted"


@dataclass(frozen=True)
class DateAttempt:
    """One examined date and the reason it was accepted or skipped."""
    date: datetime.date
    status: AttemptStatus
    missing: List[str] = field(default_factory=list)

    def describe(self) -> str:
        """Human-readable reason, e.g. ``2024-01-02: missing cargo, clippy``."""
        day = self.date.isoformat()
        if self.status == AttemptStatus.NOT_PUBLISHED:
            return f"{day}: not published"
        if self.status == AttemptStatus.COMPONENTS_MISSING:
            return f"{day}: missing {', '.join(self.missing)}"
        return f"{day}: all components available"


@dataclass
class ResolutionOutcome:
    """Result of a resolution scan together with the per-date trace."""
    status: ResolutionStatus
    date: Optional[datetime.date] = None
    attempts: List[DateAttempt] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.status == ResolutionStatus.FOUND

    @property
    def nothing_published(self) -> bool:
        """True when every examined date lacked a published manifest."""
        return bool(self.attempts) and all(
            a.status == AttemptStatus.NOT_PUBLISHED for a in self.attempts
        )

    @property
    def components_missing(self) -> bool:
        """True when at least one published date lacked required components."""
        return any(a.status == AttemptStatus.COMPONENTS_MISSING for a in self.attempts)

    def trace(self) -> List[str]:
        """Per-date reasons in the order the dates were examined."""
        return [a.describe() for a in self.attempts]
