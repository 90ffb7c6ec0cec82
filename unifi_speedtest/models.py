"""Data model for the UniFi speedtest client."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from .const import DEFAULT_SITE, DEFAULT_VERSION


class ControllerKind(Enum):
    """Controller family behind the configured base URL."""

    LEGACY = "legacy"
    UNIFI_OS = "unifi_os"

    @property
    def is_unifi_os(self) -> bool:
        return self is ControllerKind.UNIFI_OS


@dataclass(frozen=True, slots=True)
class Credentials:
    """Connection settings for a single gateway."""

    base_url: str
    username: str
    password: str = field(repr=False)
    site: str = DEFAULT_SITE
    version: str = DEFAULT_VERSION

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", str(self.base_url).rstrip("/"))


@dataclass(frozen=True, slots=True)
class SpeedtestResult:
    """A single speedtest sample recorded by the gateway."""

    download_mbps: float
    upload_mbps: float
    latency_ms: float
    timestamp: int  # epoch milliseconds

    @property
    def rundate(self) -> datetime:
        """Return the sample time as an aware UTC datetime."""

        return datetime.fromtimestamp(self.timestamp / 1000.0, tz=timezone.utc)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "download_mbps": self.download_mbps,
            "upload_mbps": self.upload_mbps,
            "latency_ms": self.latency_ms,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class Session:
    """Authentication state issued by a successful login."""

    auth_token: str = ""
    csrf_token: str = ""
    expires_at: float = 0.0

    def is_valid(self, now: float) -> bool:
        return bool(self.auth_token) and now < self.expires_at


@dataclass(frozen=True, slots=True)
class CachedResult:
    """Last successful speedtest sample and when it was fetched."""

    result: SpeedtestResult
    fetched_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.fetched_at < self.ttl


@dataclass(frozen=True, slots=True)
class PreparedCall:
    """HTTP call description produced by the request builder."""

    method: str
    path: str
    json: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=dict)


__all__ = [
    "CachedResult",
    "ControllerKind",
    "Credentials",
    "PreparedCall",
    "Session",
    "SpeedtestResult",
]
