"""Logging helpers shared across the project.

Console records carry a short status prefix instead of the level name:
``[+]`` for progress and results, ``[i]`` for verbose details, ``[!]`` for
warnings and ``[-]`` for errors. Structured fields are attached through
``extra_context`` so file handlers and tests can inspect them.
"""
from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

QUIET_LEVEL = logging.CRITICAL + 10

_STATUS_PREFIXES = {
    logging.DEBUG: "[i] ",
    logging.INFO: "[+] ",
    logging.WARNING: "[!] ",
    logging.ERROR: "[-] ",
    logging.CRITICAL: "[-] ",
}

_HANDLER_NAME = "rustup-pick-console"


class StatusFormatter(logging.Formatter):
    """Formatter that renders ``%(status)s`` as a level-dependent prefix."""

    def __init__(self, fmt: str = Constants.LOG_FORMAT):
        super().__init__(fmt)

    def format(self, record: logging.LogRecord) -> str:
        record.status = _STATUS_PREFIXES.get(record.levelno, "")
        return super().format(record)


def resolve_level(
    level: Optional[str] = None, *, verbose: bool = False, quiet: bool = False
) -> int:
    """Map CLI flags to a logging level.

    An explicit level name wins, then ``-q``, then ``-v``, then the
    ``RUSTUP_PICK_LOG_LEVEL`` environment variable; INFO otherwise.
    """
    if level:
        return getattr(logging, str(level).upper(), logging.INFO)
    if quiet:
        return QUIET_LEVEL
    if verbose:
        return logging.DEBUG
    env_level = os.environ.get(Constants.ENV_LOG_LEVEL)
    if env_level:
        return getattr(logging, env_level.strip().upper(), logging.INFO)
    return logging.INFO


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """Install the console handler (and optional file handler) on the root logger.

    Safe to call more than once: a previously installed console handler is
    replaced rather than duplicated.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    console = logging.StreamHandler(sys.stderr)
    console.set_name(_HANDLER_NAME)
    console.setFormatter(StatusFormatter())
    root.addHandler(console)
    root.setLevel(level)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        root.addHandler(file_handler)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records of ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records, dropping None values."""
    return {k: v for k, v in fields.items() if v is not None}


def safe_url(url: str) -> str:
    """Strip credentials, query string and fragment from a URL for logging."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, "", ""))


class Timer:
    """Context manager measuring elapsed wall time."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, *exc: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        """Elapsed milliseconds, measured up to now while still inside the block."""
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
