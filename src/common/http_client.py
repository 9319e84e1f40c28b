"""Shared HTTP helper used by the manifest client.

Performs exactly one GET per call and turns every ``requests`` failure into
``ManifestTransportError``. There are no retries and no caching; a
resolution run asks the distribution server for each date once.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from errors import ManifestTransportError

logger = logging.getLogger(__name__)


def fetch(
    url: str,
    *,
    context: str,
    timeout: Optional[float] = None,
) -> Tuple[int, bytes]:
    """Perform a GET request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "nightly 2024-01-02").
        timeout: Request timeout in seconds; defaults to Constants.REQUEST_TIMEOUT.

    Returns:
        Tuple of (status_code, raw body bytes).

    Raises:
        ManifestTransportError: On timeouts and connection errors.
    """
    safe_target = safe_url(url)
    effective_timeout = Constants.REQUEST_TIMEOUT if timeout is None else timeout
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request %s",
                safe_target,
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context,
                ),
            )
        try:
            res = requests.get(url, timeout=effective_timeout)
        except requests.Timeout as exc:
            raise ManifestTransportError(
                f"{context}: request timed out after {effective_timeout} seconds",
                url=safe_target,
            ) from exc
        except requests.RequestException as exc:  # includes ConnectionError
            raise ManifestTransportError(
                f"{context}: connection error: {exc}", url=safe_target
            ) from exc

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response %s for %s",
                res.status_code,
                safe_target,
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context,
                ),
            )
        return res.status_code, res.content
