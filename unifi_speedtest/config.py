"""Configuration helpers for the UniFi speedtest client."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from .const import (
    CACHE_TTL,
    CONF_BASE_URL,
    CONF_CACHE_TTL,
    CONF_PASSWORD,
    CONF_SESSION_LIFETIME,
    CONF_SITE,
    CONF_TIMEOUT,
    CONF_USERNAME,
    CONF_VERIFY_SSL,
    CONF_VERSION,
    DEFAULT_SITE,
    DEFAULT_TIMEOUT,
    DEFAULT_VERIFY_SSL,
    DEFAULT_VERSION,
    SESSION_LIFETIME,
)
from .errors import ValidationError
from .models import Credentials
from .utils import coerce_int


@dataclass(frozen=True, slots=True)
class ClientOptions:
    """Tunables for a :class:`~unifi_speedtest.unifi_client.SpeedtestClient`."""

    timeout: int = DEFAULT_TIMEOUT
    verify_ssl: bool = DEFAULT_VERIFY_SSL
    cache_ttl: float = CACHE_TTL
    session_lifetime: float = SESSION_LIFETIME


def normalize_text_option(value: Any) -> Optional[str]:
    """Normalize a free-text option value."""
    if value in (None, ""):
        return None
    if isinstance(value, bool):
        return None
    cleaned = str(value).strip()
    return cleaned or None


def coerce_bool(value: Any, default: bool) -> bool:
    """Interpret common textual and numeric boolean spellings."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    raise ValidationError(f"Invalid boolean value: {value!r}")


def _positive_int(source: Mapping[str, Any], key: str, default: int) -> int:
    raw = source.get(key)
    if raw in (None, ""):
        return default
    number = coerce_int(raw)
    if number is None or number <= 0:
        raise ValidationError(f"{key} must be a positive integer, got {raw!r}")
    return number


def credentials_from_mapping(data: Mapping[str, Any]) -> Credentials:
    """Build :class:`Credentials` from a plain mapping of settings."""
    base_url = normalize_text_option(data.get(CONF_BASE_URL))
    if base_url is None:
        raise ValidationError("A gateway base URL is required")
    if not base_url.lower().startswith(("http://", "https://")):
        raise ValidationError(f"Base URL must start with http:// or https://: {base_url}")

    username = normalize_text_option(data.get(CONF_USERNAME))
    password = data.get(CONF_PASSWORD)
    if username is None or not isinstance(password, str) or not password:
        raise ValidationError("Provide username and password for the UniFi gateway")

    site = normalize_text_option(data.get(CONF_SITE)) or DEFAULT_SITE
    version = normalize_text_option(data.get(CONF_VERSION)) or DEFAULT_VERSION
    return Credentials(
        base_url=base_url,
        username=username,
        password=password,
        site=site,
        version=version,
    )


def options_from_mapping(data: Mapping[str, Any]) -> ClientOptions:
    """Build :class:`ClientOptions` from a plain mapping, applying defaults."""
    return ClientOptions(
        timeout=_positive_int(data, CONF_TIMEOUT, DEFAULT_TIMEOUT),
        verify_ssl=coerce_bool(data.get(CONF_VERIFY_SSL), DEFAULT_VERIFY_SSL),
        cache_ttl=_positive_int(data, CONF_CACHE_TTL, CACHE_TTL),
        session_lifetime=_positive_int(data, CONF_SESSION_LIFETIME, SESSION_LIFETIME),
    )


__all__ = [
    "ClientOptions",
    "coerce_bool",
    "credentials_from_mapping",
    "normalize_text_option",
    "options_from_mapping",
]
