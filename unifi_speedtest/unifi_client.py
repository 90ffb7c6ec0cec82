"""Speedtest client for UniFi OS and legacy UniFi Network controllers."""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

import requests

from .cache import ResultCache
from .config import ClientOptions
from .detector import ControllerTypeDetector
from .errors import APIError, NetworkUnreachableError, UnauthorizedRetryExhaustedError
from .locks import ReadWriteLock
from .models import ControllerKind, Credentials, SpeedtestResult
from .normalizer import ResponseNormalizer
from .request_builder import RequestBuilder, default_window
from .session import SessionManager
from .transport import GatewayTransport
from .utils import endpoint_label, shorten

_LOGGER = logging.getLogger(__name__)

# Re-login attempts allowed after the gateway answers 401 to a fetch.
MAX_REAUTH_ATTEMPTS = 1


class SpeedtestClient:
    """Fetch the latest gateway-recorded speedtest sample.

    The controller family is detected once, at construction; a gateway that
    changes family later (firmware upgrade) keeps the original behaviour
    until a new client is built.
    """

    def __init__(
        self,
        credentials: Credentials,
        options: Optional[ClientOptions] = None,
        *,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._credentials = credentials
        self._options = options or ClientOptions()
        self._clock = clock
        self._transport = GatewayTransport(
            credentials.base_url,
            timeout=self._options.timeout,
            verify_ssl=self._options.verify_ssl,
            session=session,
        )
        self._lock = ReadWriteLock()

        try:
            self._kind = ControllerTypeDetector(self._transport).detect()
        except NetworkUnreachableError:
            self._transport.close()
            raise

        self._sessions = SessionManager(
            self._transport,
            credentials,
            self._kind,
            self._lock,
            lifetime=self._options.session_lifetime,
            clock=clock,
        )
        self._builder = RequestBuilder(self._kind)
        self._normalizer = ResponseNormalizer()
        self._cache = ResultCache(self._lock, ttl=self._options.cache_ttl, clock=clock)

    def __enter__(self) -> "SpeedtestClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""

        self._transport.close()

    @property
    def controller_kind(self) -> ControllerKind:
        return self._kind

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def sessions(self) -> SessionManager:
        return self._sessions

    @property
    def cache(self) -> ResultCache:
        return self._cache

    def login(self) -> None:
        """Make sure a valid session exists, logging in if needed."""

        self._sessions.ensure_session()

    def fetch_speedtest(self) -> SpeedtestResult:
        """Return the most recent sample of the last 24 hours.

        Served from the result cache while it is fresh; a successful fetch
        refreshes the cache.
        """

        cached = self._cache.get()
        if cached is not None:
            _LOGGER.debug("Using cached speedtest sample from %s", cached.timestamp)
            return cached

        start_ms, end_ms = default_window(int(self._clock() * 1000))
        result = self._fetch(start_ms, end_ms)
        self._cache.set(result)
        _LOGGER.debug(
            "Fetched speedtest: download=%.1f Mbps, upload=%.1f Mbps, latency=%.1f ms",
            result.download_mbps,
            result.upload_mbps,
            result.latency_ms,
        )
        return result

    def fetch_speedtest_in_range(self, start_ms: int, end_ms: int) -> SpeedtestResult:
        """Return the most recent sample between ``start_ms`` and ``end_ms``.

        Bypasses the result cache.
        """

        return self._fetch(start_ms, end_ms)

    def _fetch(self, start_ms: int, end_ms: int) -> SpeedtestResult:
        site = self._credentials.site
        for attempt in range(MAX_REAUTH_ATTEMPTS + 1):
            session = self._sessions.ensure_session()
            call = self._builder.build(site, start_ms, end_ms, session.csrf_token)
            response = self._transport.request(
                call.method,
                call.path,
                json_payload=call.json,
                headers=call.headers,
                cookies=self._sessions.cookies_for(session),
            )
            status = response.status_code
            if status != 401:
                return self._handle_response(response)

            _LOGGER.warning(
                "UniFi speedtest request unauthorized (attempt %d/%d) - discarding session",
                attempt + 1,
                MAX_REAUTH_ATTEMPTS + 1,
            )
            self._sessions.invalidate()

        raise UnauthorizedRetryExhaustedError(
            "UniFi gateway rejected the speedtest request after re-authentication",
            status_code=401,
            url=self._transport.url(self._builder.archive_path(site)),
        )

    def _handle_response(self, response: requests.Response) -> SpeedtestResult:
        status = response.status_code
        text = response.text or ""
        if not 200 <= status < 300:
            body_preview = shorten(text)
            _LOGGER.error(
                "UniFi speedtest request %s failed (status=%s, body=%s)",
                endpoint_label(response.url),
                status,
                body_preview,
            )
            raise APIError(
                f"Speedtest request failed with HTTP {status}",
                status_code=status,
                url=response.url,
                body=body_preview,
            )
        return self._normalizer.normalize(text)


def get_speedtest(
    base_url: str,
    username: str,
    password: str,
    site: str,
    version: str,
    options: Optional[ClientOptions] = None,
) -> SpeedtestResult:
    """Build a client, log in and return the latest sample in one call."""

    credentials = Credentials(
        base_url=base_url,
        username=username,
        password=password,
        site=site,
        version=version,
    )
    with SpeedtestClient(credentials, options) as client:
        client.login()
        result = client.fetch_speedtest()
    _LOGGER.info(
        "Fetched UniFi speedtest: download=%.1f Mbps, upload=%.1f Mbps, latency=%.1f ms",
        result.download_mbps,
        result.upload_mbps,
        result.latency_ms,
    )
    return result


__all__ = ["MAX_REAUTH_ATTEMPTS", "SpeedtestClient", "get_speedtest"]
