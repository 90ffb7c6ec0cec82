"""Diagnostics helpers for the UniFi speedtest client."""
from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from .const import CONF_PASSWORD, CONF_USERNAME
from .errors import (
    APIError,
    AuthError,
    ConnectionRefusedByGatewayError,
    HostNotFoundError,
    NetworkUnreachableError,
    NoValidSamplesError,
    RateLimitedError,
    UnrecognizedFormatError,
)

if TYPE_CHECKING:  # pragma: no cover - for typing only
    from .unifi_client import SpeedtestClient

REDACTED = "**REDACTED**"

REDACT_KEYS: set[str] = {
    CONF_PASSWORD,
    CONF_USERNAME,
    "auth_token",
    "csrf_token",
}


def redact_data(value: Any, to_redact: set[str] = REDACT_KEYS) -> Any:
    """Recursively replace sensitive keys in ``value``."""

    if isinstance(value, dict):
        return {
            key: REDACTED if key in to_redact else redact_data(item, to_redact)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact_data(item, to_redact) for item in value]
    if isinstance(value, tuple):
        return tuple(redact_data(item, to_redact) for item in value)
    return value


def _error_category(err: Exception) -> str:
    if isinstance(err, ConnectionRefusedByGatewayError):
        return "refused"
    if isinstance(err, HostNotFoundError):
        return "host_not_found"
    if isinstance(err, NetworkUnreachableError):
        return "network"
    if isinstance(err, RateLimitedError):
        return "rate_limited"
    if isinstance(err, AuthError):
        return "auth"
    if isinstance(err, UnrecognizedFormatError):
        return "format"
    if isinstance(err, NoValidSamplesError):
        return "no_samples"
    if isinstance(err, APIError):
        return "api"
    return "unknown"


def summarize_error(err: Exception) -> dict[str, Any]:
    """Return a compact, sanitized representation of ``err``."""

    summary: dict[str, Any] = {
        "type": err.__class__.__name__,
        "category": _error_category(err),
        "message": str(err),
    }
    status = getattr(err, "status_code", None)
    if status is not None:
        summary["status"] = status
    if isinstance(err, NetworkUnreachableError) and err.reason:
        summary["reason"] = err.reason
    if isinstance(err, APIError) and err.code is not None:
        summary["code"] = err.code
    return summary


def get_diagnostics(client: "SpeedtestClient") -> dict[str, Any]:
    """Return a redacted snapshot of the client state."""

    session = client.sessions.current()
    cached = client.cache.get()
    return redact_data(
        {
            "credentials": asdict(client.credentials),
            "controller_kind": client.controller_kind.value,
            "session": {
                "valid": client.sessions.is_valid(),
                "has_csrf_token": bool(session.csrf_token),
                "expires_at": session.expires_at,
            },
            "cache": {
                "ttl": client.cache.ttl,
                "age": client.cache.age(),
                "result": cached.as_dict() if cached is not None else None,
            },
        }
    )


__all__ = ["REDACT_KEYS", "get_diagnostics", "redact_data", "summarize_error"]
