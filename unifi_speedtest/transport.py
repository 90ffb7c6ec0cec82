"""HTTP transport shared by the detector, session manager and client."""
from __future__ import annotations

import logging
import time
from http.cookiejar import DefaultCookiePolicy
from typing import Any, Callable, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3 import disable_warnings
from urllib3.exceptions import InsecureRequestWarning
from urllib3.util.retry import Retry

from .const import DEFAULT_TIMEOUT
from .errors import (
    ConnectionRefusedByGatewayError,
    HostNotFoundError,
    NetworkTimeoutError,
    NetworkUnreachableError,
)
from .utils import endpoint_label, shorten

_LOGGER = logging.getLogger(__name__)

_READ_CHUNK = 1

_TIMEOUT_MARKERS = ("timeout", "timed out", "deadline exceeded")
_REFUSED_MARKERS = ("connection refused", "errno 111", "actively refused")
_DNS_MARKERS = (
    "no such host",
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "failed to resolve",
    "temporary failure in name resolution",
    "no address associated with hostname",
)


def build_session(verify_ssl: bool) -> requests.Session:
    """Return a ``requests`` session configured for a local gateway."""

    session = requests.Session()
    session.verify = verify_ssl
    if not verify_ssl:
        disable_warnings(InsecureRequestWarning)
        _LOGGER.debug(
            "SSL verification disabled for UniFi gateway – suppressing InsecureRequestWarning"
        )
    # Re-authentication is the only retry the client performs.
    adapter = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False))
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update({"Accept": "application/json"})
    # The auth cookie is sent explicitly from the cached session state.
    session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
    return session


def classify_network_error(
    err: Exception, url: str, base_url: str
) -> NetworkUnreachableError:
    """Map a transport exception onto the network error taxonomy."""

    text = str(err)
    lowered = text.lower()
    if isinstance(err, requests.exceptions.Timeout) or any(
        marker in lowered for marker in _TIMEOUT_MARKERS
    ):
        return NetworkTimeoutError(
            f"Network timeout - cannot reach UniFi gateway at {base_url}. "
            "Check IP address and network connectivity",
            url=url,
            reason="timeout",
        )
    if any(marker in lowered for marker in _REFUSED_MARKERS):
        return ConnectionRefusedByGatewayError(
            f"Connection refused - UniFi gateway at {base_url} is not accessible. "
            "Check if the device is running and firewall settings",
            url=url,
            reason="connection_refused",
        )
    if any(marker in lowered for marker in _DNS_MARKERS):
        return HostNotFoundError(
            f"Host not found - invalid UniFi gateway address: {base_url}. "
            "Check IP address or hostname",
            url=url,
            reason="host_not_found",
        )
    return NetworkUnreachableError(
        f"Request to {url} failed: {shorten(text, 256)}",
        url=url,
        reason="unreachable",
    )


class GatewayTransport:
    """Issue requests against one gateway base URL.

    ``timeout`` bounds the whole exchange: connecting, sending, receiving the
    headers and reading the body all have to finish before one deadline.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        verify_ssl: bool = False,
        session: Optional[requests.Session] = None,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._monotonic = monotonic
        self._session = session if session is not None else build_session(verify_ssl)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def session(self) -> requests.Session:
        return self._session

    def url(self, path: str) -> str:
        cleaned = str(path or "").lstrip("/")
        return f"{self._base_url}/{cleaned}"

    def request(
        self,
        method: str,
        path: str,
        *,
        json_payload: Any = None,
        headers: Optional[Dict[str, str]] = None,
        cookies: Optional[Dict[str, str]] = None,
        read_body: bool = True,
    ) -> requests.Response:
        """Send a request and return the response whatever its status.

        Transport failures, including overrunning the request deadline, are
        raised as :class:`NetworkUnreachableError` subclasses; status
        handling is left to the caller. With ``read_body=False`` only the
        status and headers are received and the caller must close the
        response.
        """

        url = self.url(path)
        label = endpoint_label(url)
        deadline = self._monotonic() + self._timeout
        kwargs: Dict[str, Any] = {
            "timeout": (self._timeout, self._timeout),
            "allow_redirects": False,
            "stream": True,
        }
        if json_payload is not None:
            kwargs["json"] = json_payload
        if headers:
            kwargs["headers"] = headers
        if cookies:
            kwargs["cookies"] = cookies
        _LOGGER.debug("UniFi request %s %s initiated", method, label)

        start = time.perf_counter()
        try:
            response = self._session.request(method, url, **kwargs)
        except requests.exceptions.RequestException as err:
            error = classify_network_error(err, url, self._base_url)
            _LOGGER.error(
                "UniFi request %s %s failed (%s): %s",
                method,
                label,
                error.reason,
                shorten(str(err), 256),
            )
            raise error from err

        self._check_deadline(response, deadline, method, url)
        if read_body:
            self._read_body(response, deadline, method, url)

        duration_ms = int((time.perf_counter() - start) * 1000)
        _LOGGER.debug(
            "UniFi request %s %s completed (status=%s, duration_ms=%d)",
            method,
            label,
            response.status_code,
            duration_ms,
        )
        return response

    def _read_body(
        self, response: requests.Response, deadline: float, method: str, url: str
    ) -> None:
        chunks: List[bytes] = []
        try:
            # Single-byte reads return as soon as data arrives, so a body
            # trickled in slowly is still checked against the deadline.
            for chunk in response.iter_content(chunk_size=_READ_CHUNK):
                chunks.append(chunk)
                self._check_deadline(response, deadline, method, url)
        except requests.exceptions.RequestException as err:
            response.close()
            error = classify_network_error(err, url, self._base_url)
            _LOGGER.error(
                "UniFi response body %s %s failed (%s): %s",
                method,
                endpoint_label(url),
                error.reason,
                shorten(str(err), 256),
            )
            raise error from err
        # Hand the buffered body to ``text``/``json`` like a non-streamed response.
        response._content = b"".join(chunks)

    def _check_deadline(
        self, response: requests.Response, deadline: float, method: str, url: str
    ) -> None:
        if self._monotonic() <= deadline:
            return
        response.close()
        _LOGGER.error(
            "UniFi request %s %s exceeded the %ss deadline",
            method,
            endpoint_label(url),
            self._timeout,
        )
        raise NetworkTimeoutError(
            f"Network timeout - UniFi gateway at {self._base_url} did not complete "
            f"the request within {self._timeout}s",
            url=url,
            reason="timeout",
        )

    def close(self) -> None:
        """Close the underlying HTTP session."""

        self._session.close()


__all__ = ["GatewayTransport", "build_session", "classify_network_error"]
