"""Backward date scan over published channel manifests."""

from __future__ import annotations

import datetime
import logging
from typing import Callable, Iterable

from common.logging_utils import extra_context
from errors import ManifestNotPublished
from .models import AttemptStatus, DateAttempt, ResolutionOutcome, ResolutionStatus

logger = logging.getLogger(__name__)

ONE_DAY = datetime.timedelta(days=1)


def utc_today() -> datetime.date:
    """Current calendar date in UTC."""
    return datetime.datetime.now(datetime.timezone.utc).date()


class Resolver:
    """Find the most recent date whose manifest carries every required component.

    Args:
        client: Object exposing ``fetch(channel, date) -> Manifest``.
        today: Clock returning the current UTC date.
    """

    def __init__(self, client, today: Callable[[], datetime.date] = utc_today):
        self.client = client
        self.today = today

    def candidate_dates(self, offset_days: int, window_days: int):
        """Yield the dates of the window, newest first."""
        if offset_days < 0:
            raise ValueError(f"Offset must not be negative (got {offset_days})")
        if window_days < 0:
            raise ValueError(f"Day window must not be negative (got {window_days})")
        start = self.today() - datetime.timedelta(days=offset_days)
        for i in range(window_days):
            yield start - i * ONE_DAY

    def resolve(
        self,
        channel: str,
        target: str,
        required_components: Iterable[str],
        offset_days: int,
        window_days: int,
    ) -> ResolutionOutcome:
        """Scan ``window_days`` dates backwards from ``today - offset_days``.

        Returns a FOUND outcome for the first (most recent) date whose
        manifest contains every required component, or a WINDOW_EXHAUSTED
        outcome with the full per-date trace. Transport and parse errors
        propagate and stop the scan.
        """
        required = frozenset(required_components)
        outcome = ResolutionOutcome(status=ResolutionStatus.WINDOW_EXHAUSTED)

        for date in self.candidate_dates(offset_days, window_days):
            day = date.isoformat()
            try:
                manifest = self.client.fetch(channel, date)
            except ManifestNotPublished:
                outcome.attempts.append(DateAttempt(date, AttemptStatus.NOT_PUBLISHED))
                logger.debug(
                    "No %s snapshot published on %s; trying previous day...",
                    channel,
                    day,
                    extra=extra_context(
                        event="date_attempt",
                        component="resolver",
                        date=day,
                        outcome=AttemptStatus.NOT_PUBLISHED.value,
                    ),
                )
                continue

            missing = manifest.missing(target, required)
            if missing:
                outcome.attempts.append(
                    DateAttempt(date, AttemptStatus.COMPONENTS_MISSING, missing)
                )
                logger.debug(
                    "Some components were missing in %s (%s); trying previous day...",
                    day,
                    ", ".join(missing),
                    extra=extra_context(
                        event="date_attempt",
                        component="resolver",
                        date=day,
                        outcome=AttemptStatus.COMPONENTS_MISSING.value,
                        missing=missing,
                    ),
                )
                continue

            outcome.attempts.append(DateAttempt(date, AttemptStatus.MATCHED))
            outcome.status = ResolutionStatus.FOUND
            outcome.date = date
            profile = manifest.default_components
            logger.debug(
                "All required components available on %s (rust %s; default profile: %s)",
                day,
                manifest.version or "unknown",
                ", ".join(profile) if profile else "none listed",
                extra=extra_context(
                    event="date_attempt",
                    component="resolver",
                    date=day,
                    outcome=AttemptStatus.MATCHED.value,
                    version=manifest.version,
                    default_profile=profile or None,
                ),
            )
            return outcome

        return outcome
