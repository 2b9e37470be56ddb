"""Centralized logging helpers.

Provides one place to configure the root logger plus small utilities used by
the HTTP and registry layers to emit structured DEBUG records without leaking
credentials into log output.
"""
from __future__ import annotations

import logging
import os
import re
import time
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_KEYS = ("token", "key", "secret", "password", "auth", "signature")
_REDACTED = "[REDACTED]"
_TOKEN_PATTERN = re.compile(
    r"(?i)\b(bearer\s+|token\s+)?((?:gh[pousr]|glpat|npm)_[A-Za-z0-9_\-]{8,})"
)


def configure_logging(fmt: Optional[str] = None) -> None:
    """Configure the root logger once.

    The level comes from the DEPSNAP_LOG_LEVEL environment variable
    (default INFO). Calling this again only updates the level.
    """
    level_name = os.environ.get(Constants.ENV_LOG_LEVEL, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()
    if not any(getattr(h, "_depsnap_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt or Constants.LOG_FORMAT))
        handler._depsnap_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(level)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by this logger."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra=`` mapping for structured log records.

    ``None`` values are dropped so records only carry meaningful fields.
    """
    return {k: v for k, v in fields.items() if v is not None}


def redact(text: Optional[str]) -> str:
    """Mask token-looking substrings in free text."""
    if not text:
        return ""
    return _TOKEN_PATTERN.sub(lambda m: (m.group(1) or "") + _REDACTED, str(text))


def safe_url(url: Optional[str]) -> str:
    """Return a URL safe for logs: no userinfo, sensitive query values masked."""
    if not url:
        return ""
    try:
        parts = urlsplit(url)
    except ValueError:
        return redact(url)
    netloc = parts.netloc.rsplit("@", 1)[-1]
    query = parts.query
    if query:
        pairs = []
        for key, value in parse_qsl(query, keep_blank_values=True):
            if any(s in key.lower() for s in _SENSITIVE_KEYS):
                value = _REDACTED
            pairs.append((key, value))
        query = urlencode(pairs, safe="[]")
    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


class Timer:
    """Context manager measuring wall-clock duration."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Elapsed milliseconds; still running timers report time so far."""
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000.0, 2)
