"""Client for the per-date channel manifests published on the distribution server."""

from __future__ import annotations

import datetime
import logging
from typing import Callable, Optional, Tuple

from constants import Constants
from common.http_client import fetch as http_fetch
from common.logging_utils import extra_context
from errors import ManifestNotPublished, ManifestParseError, ManifestTransportError
from .models import Manifest
from .parser import parse_manifest

logger = logging.getLogger(__name__)

Fetcher = Callable[..., Tuple[int, bytes]]


class ManifestClient:
    """Fetch and parse the manifest of one channel on one date.

    Args:
        dist_server: Base URL of the distribution server.
        fetcher: Callable with the signature of ``common.http_client.fetch``.
        timeout: Per-request timeout in seconds (None keeps the default).
    """

    def __init__(
        self,
        dist_server: str = Constants.DIST_SERVER,
        fetcher: Fetcher = http_fetch,
        timeout: Optional[float] = None,
    ):
        self.dist_server = dist_server.rstrip("/")
        self._fetch = fetcher
        self.timeout = timeout

    def manifest_url(self, channel: str, date: datetime.date) -> str:
        """Return the conventional manifest URL for ``channel`` on ``date``."""
        path = Constants.MANIFEST_PATH.format(date=date.isoformat(), channel=channel)
        return f"{self.dist_server}/{path}"

    def fetch(self, channel: str, date: datetime.date) -> Manifest:
        """Retrieve and parse one manifest.

        Raises:
            ManifestNotPublished: No snapshot exists for that date.
            ManifestTransportError: Network failure or unexpected HTTP status.
            ManifestParseError: The document could not be parsed.
        """
        url = self.manifest_url(channel, date)
        context = f"{channel} {date.isoformat()}"
        status_code, content = self._fetch(url, context=context, timeout=self.timeout)

        if status_code in Constants.NOT_PUBLISHED_STATUS:
            raise ManifestNotPublished(f"No {channel} snapshot published on {date.isoformat()}", url=url)
        if status_code != 200:
            raise ManifestTransportError(
                f"{context}: unexpected HTTP status {status_code}", url=url
            )

        try:
            manifest = parse_manifest(content)
        except ManifestParseError as exc:
            exc.url = url
            raise
        logger.debug(
            "Parsed manifest for %s (rust %s)",
            context,
            manifest.version or "unknown",
            extra=extra_context(
                event="manifest_parsed",
                component="manifest_client",
                channel=channel,
                date=date.isoformat(),
                targets=len(manifest.targets),
            ),
        )
        return manifest
