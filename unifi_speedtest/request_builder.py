"""Build speedtest archive requests for each controller family."""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from .const import (
    ARCHIVE_SPEEDTEST_PATH,
    DEFAULT_WINDOW_MS,
    HEADER_CSRF,
    PROXY_PREFIX,
    SPEEDTEST_ATTRS,
)
from .models import ControllerKind, PreparedCall

_LOGGER = logging.getLogger(__name__)


def default_window(now_ms: int) -> Tuple[int, int]:
    """Return the ``(start, end)`` range covering the last 24 hours."""

    return now_ms - DEFAULT_WINDOW_MS, now_ms


class RequestBuilder:
    """Construct the ``archive.speedtest`` report call."""

    def __init__(self, kind: ControllerKind) -> None:
        self._kind = kind

    def archive_path(self, site: str) -> str:
        path = ARCHIVE_SPEEDTEST_PATH.format(site=site)
        # UniFi OS reverse-proxies the Network application.
        if self._kind.is_unifi_os:
            return f"{PROXY_PREFIX}{path}"
        return path

    def build(
        self,
        site: str,
        start_ms: int,
        end_ms: int,
        csrf_token: Optional[str] = None,
    ) -> PreparedCall:
        # The endpoint also answers GET, but a body requires POST.
        method = "POST"
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self._kind.is_unifi_os:
            if csrf_token:
                headers[HEADER_CSRF] = csrf_token
                _LOGGER.debug("Adding CSRF token to speedtest request: %s...", csrf_token[:4])
            else:
                _LOGGER.warning("No CSRF token available for UniFi OS speedtest request")
        return PreparedCall(
            method=method,
            path=self.archive_path(site),
            json={
                "attrs": list(SPEEDTEST_ATTRS),
                "start": int(start_ms),
                "end": int(end_ms),
            },
            headers=headers,
        )


__all__ = ["RequestBuilder", "default_window"]
