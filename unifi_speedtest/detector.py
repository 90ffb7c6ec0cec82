"""Controller family detection."""
from __future__ import annotations

import logging

from .models import ControllerKind
from .transport import GatewayTransport

_LOGGER = logging.getLogger(__name__)


class ControllerTypeDetector:
    """Classify a gateway as UniFi OS or a legacy Network controller.

    UniFi OS consoles serve their web UI at ``/`` with HTTP 200; legacy
    controllers redirect or refuse the unauthenticated request. Network
    failures propagate as :class:`~unifi_speedtest.errors.NetworkUnreachableError`
    subclasses.
    """

    def __init__(self, transport: GatewayTransport) -> None:
        self._transport = transport

    def detect(self) -> ControllerKind:
        response = self._transport.request("GET", "/", read_body=False)
        response.close()
        kind = (
            ControllerKind.UNIFI_OS
            if response.status_code == 200
            else ControllerKind.LEGACY
        )
        _LOGGER.debug(
            "Detected %s controller at %s (status=%s)",
            kind.value,
            self._transport.base_url,
            response.status_code,
        )
        return kind


__all__ = ["ControllerTypeDetector"]
