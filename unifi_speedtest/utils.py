"""Utility helpers for the UniFi speedtest client."""

from __future__ import annotations

import time
from typing import Any, Optional
from urllib.parse import urlsplit

_MINUTE_MS = 60 * 1000
_HOUR_MS = 60 * _MINUTE_MS
_DAY_MS = 24 * _HOUR_MS


def format_speed(mbps: float) -> str:
    """Format a throughput value using Mb/s or Gb/s as appropriate."""

    if mbps >= 1000:
        return f"{mbps / 1000:.1f} Gb/s"
    return f"{mbps:.1f} Mb/s"


def relative_time(timestamp_ms: int, now_ms: Optional[int] = None) -> str:
    """Return a human readable age for an epoch-millisecond timestamp."""

    if now_ms is None:
        now_ms = int(time.time() * 1000)
    diff = now_ms - timestamp_ms

    if diff < _MINUTE_MS:
        return "just now"
    if diff < _HOUR_MS:
        return f"{diff // _MINUTE_MS} minutes ago"
    if diff < _DAY_MS:
        return f"{diff // _HOUR_MS} hours ago"
    return f"{diff // _DAY_MS} days ago"


def shorten(text: Optional[str], limit: int = 1024) -> Optional[str]:
    """Trim ``text`` to ``limit`` characters for log and error previews."""

    if text is None:
        return None
    cleaned = text.strip()
    if len(cleaned) <= limit:
        return cleaned
    return f"{cleaned[:limit]}…"


def endpoint_label(url: str) -> str:
    """Return a sanitized ``host/path`` label for logging."""

    parts = urlsplit(url)
    path = parts.path or "/"
    host = parts.hostname or parts.netloc
    if host:
        return f"{host}{path}"
    return path


def coerce_float(value: Any) -> float:
    """Convert ``value`` to float, treating missing or malformed values as zero."""

    if isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def coerce_int(value: Any) -> Optional[int]:
    """Safely convert value to integer."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


__all__ = [
    "coerce_float",
    "coerce_int",
    "endpoint_label",
    "format_speed",
    "relative_time",
    "shorten",
]
