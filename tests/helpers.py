"""Testing utilities for the UniFi speedtest client."""

from __future__ import annotations

import base64
import json
from typing import Any, Dict, Iterator, List, Optional

from requests.cookies import RequestsCookieJar, cookiejar_from_dict

BASE_URL = "https://gateway.local"
JWT_HEADER = "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9"


def make_jwt(payload: Any, *, separators: tuple[str, str] = (",", ":")) -> str:
    """Return an unsigned three-part token whose middle segment encodes ``payload``."""

    raw = json.dumps(payload, separators=separators).encode()
    middle = base64.urlsafe_b64encode(raw).decode().rstrip("=")
    return f"{JWT_HEADER}.{middle}.c2lnbmF0dXJl"


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    def __init__(
        self,
        status: int,
        body: str = "",
        *,
        cookies: Optional[Dict[str, str] | RequestsCookieJar] = None,
        url: str = "https://gateway.local/",
    ) -> None:
        self.status_code = status
        self.text = body
        if isinstance(cookies, RequestsCookieJar):
            self.cookies = cookies
        else:
            self.cookies = cookiejar_from_dict(cookies or {})
        self.url = url
        self.closed = False
        self.chunks_read = 0

    def iter_content(self, chunk_size: int = 1) -> Iterator[bytes]:
        raw = self.text.encode()
        for index in range(0, len(raw), chunk_size):
            self.chunks_read += 1
            yield raw[index : index + chunk_size]

    def close(self) -> None:
        self.closed = True


class _FakeCookieJar(dict):
    pass


class FakeSession:
    """Minimal stand-in for ``requests.Session`` that replays queued responses."""

    def __init__(self, responses: List[object]) -> None:
        self.headers: Dict[str, str] = {}
        self.cookies = _FakeCookieJar()
        self.calls: List[Dict[str, Any]] = []
        self.closed = False
        self._responses = list(responses)

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        assert isinstance(response, FakeResponse)
        response.url = url
        return response

    def close(self) -> None:
        self.closed = True
