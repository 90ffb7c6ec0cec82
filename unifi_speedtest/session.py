"""Login and session handling for UniFi gateways."""
from __future__ import annotations

import base64
import binascii
import json
import logging
import time
from typing import Callable, Dict

import requests

from .const import (
    COOKIE_LEGACY,
    COOKIE_UNIFI_OS,
    CSRF_FIELDS,
    LOGIN_PATH_LEGACY,
    LOGIN_PATH_UNIFI_OS,
    SESSION_LIFETIME,
)
from .errors import (
    CsrfExtractionError,
    LoginFailedError,
    NoAuthTokenError,
    RateLimitedError,
)
from .locks import ReadWriteLock
from .models import ControllerKind, Credentials, Session
from .transport import GatewayTransport
from .utils import shorten

_LOGGER = logging.getLogger(__name__)


def extract_csrf_token(auth_token: str) -> str:
    """Return the CSRF token embedded in a UniFi OS ``TOKEN`` JWT.

    The payload segment is decoded and searched for the first non-empty
    string among :data:`~unifi_speedtest.const.CSRF_FIELDS`. A payload
    without any of those fields yields an empty string; some firmware
    releases do not embed one.
    """

    parts = auth_token.split(".")
    if len(parts) != 3:
        raise CsrfExtractionError(
            f"Invalid JWT format - expected 3 parts, got {len(parts)}"
        )

    payload = parts[1].replace("-", "+").replace("_", "/")
    payload += "=" * (-len(payload) % 4)
    try:
        decoded = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as err:
        raise CsrfExtractionError(f"Failed to decode JWT payload: {err}") from err

    try:
        claims = json.loads(decoded)
    except ValueError as err:
        raise CsrfExtractionError(f"Failed to parse JWT payload: {err}") from err
    if not isinstance(claims, dict):
        raise CsrfExtractionError("JWT payload is not a JSON object")

    for field in CSRF_FIELDS:
        value = claims.get(field)
        if isinstance(value, str) and value:
            _LOGGER.debug(
                "Extracted CSRF token from field '%s': %s...", field, value[:4]
            )
            return value

    _LOGGER.debug(
        "No CSRF token found in JWT payload - this may be normal for some UniFi OS versions"
    )
    return ""


class SessionManager:
    """Own the authentication session for one gateway."""

    def __init__(
        self,
        transport: GatewayTransport,
        credentials: Credentials,
        kind: ControllerKind,
        lock: ReadWriteLock,
        *,
        lifetime: float = SESSION_LIFETIME,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._transport = transport
        self._credentials = credentials
        self._kind = kind
        self._lock = lock
        self._lifetime = lifetime
        self._clock = clock
        self._session = Session()

    @property
    def cookie_name(self) -> str:
        return COOKIE_UNIFI_OS if self._kind.is_unifi_os else COOKIE_LEGACY

    @property
    def login_path(self) -> str:
        return LOGIN_PATH_UNIFI_OS if self._kind.is_unifi_os else LOGIN_PATH_LEGACY

    def current(self) -> Session:
        with self._lock.read():
            return self._session

    def is_valid(self) -> bool:
        return self.current().is_valid(self._clock())

    def ensure_session(self) -> Session:
        """Return a valid session, logging in when the cached one has lapsed."""

        session = self.current()
        if session.is_valid(self._clock()):
            _LOGGER.debug("Using cached UniFi authentication session")
            return session
        _LOGGER.debug("No valid UniFi session - performing fresh login")
        return self.login()

    def login(self) -> Session:
        """Authenticate and replace the cached session."""

        path = self.login_path
        url = self._transport.url(path)
        base = self._transport.base_url
        self._transport.session.cookies.clear()
        # Never log the payload, it carries the password.
        _LOGGER.debug("Attempting UniFi login (%s controller)", self._kind.value)
        response = self._transport.request(
            "POST",
            path,
            json_payload={
                "username": self._credentials.username,
                "password": self._credentials.password,
            },
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "Referer": f"{base}/login",
            },
        )

        status = response.status_code
        if status == 429:
            raise RateLimitedError(
                "UniFi login rate limited (HTTP 429) - please wait before retrying",
                status_code=status,
                url=url,
                body=shorten(response.text, 256),
            )
        if status != 200:
            raise LoginFailedError(
                f"UniFi login failed with HTTP {status}",
                status_code=status,
                url=url,
                body=shorten(response.text, 256),
            )

        auth_token = self._auth_cookie(response)
        if not auth_token:
            raise NoAuthTokenError(
                f"No authentication token found in login response (cookie {self.cookie_name})",
                status_code=status,
                url=url,
            )

        csrf_token = extract_csrf_token(auth_token) if self._kind.is_unifi_os else ""
        session = Session(
            auth_token=auth_token,
            csrf_token=csrf_token,
            expires_at=self._clock() + self._lifetime,
        )
        with self._lock.write():
            self._session = session
        _LOGGER.debug(
            "UniFi login succeeded (csrf=%s, lifetime_s=%d)",
            "yes" if csrf_token else "no",
            self._lifetime,
        )
        return session

    def _auth_cookie(self, response: requests.Response) -> str:
        # Walk the jar; ``get`` raises CookieConflictError when the gateway
        # sets the same cookie for more than one path.
        for cookie in response.cookies:
            if cookie.name == self.cookie_name and cookie.value:
                return cookie.value
        return ""

    def invalidate(self) -> None:
        """Drop the cached tokens and force the next call to log in again."""

        with self._lock.write():
            self._session = Session(expires_at=self._clock())
        _LOGGER.debug("UniFi session invalidated")

    def cookies_for(self, session: Session) -> Dict[str, str]:
        return {self.cookie_name: session.auth_token}


__all__ = ["SessionManager", "extract_csrf_token"]
