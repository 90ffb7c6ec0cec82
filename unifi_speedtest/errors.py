"""Error types raised by the UniFi speedtest client."""
from __future__ import annotations

from typing import Optional


class UniFiSpeedtestError(Exception):
    """Base class for UniFi speedtest client errors."""


class ValidationError(UniFiSpeedtestError):
    """Error to indicate invalid configuration."""

    def __init__(self, msg: str):
        """Initialize the error."""
        super().__init__(msg)


class NetworkUnreachableError(UniFiSpeedtestError):
    """The gateway could not be reached."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.reason = reason


class NetworkTimeoutError(NetworkUnreachableError):
    """The gateway did not answer before the request deadline."""


class ConnectionRefusedByGatewayError(NetworkUnreachableError):
    """The gateway host actively refused the connection."""


class HostNotFoundError(NetworkUnreachableError):
    """The gateway host name could not be resolved."""


class AuthError(UniFiSpeedtestError):
    """Authentication against the gateway failed."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.body = body


class LoginFailedError(AuthError):
    """The login endpoint answered with a non-200 status."""


class RateLimitedError(AuthError):
    """The login endpoint answered with HTTP 429."""


class NoAuthTokenError(AuthError):
    """Login succeeded but no session cookie was issued."""


class CsrfExtractionError(AuthError):
    """The UniFi OS token could not be decoded to look for a CSRF token."""


class UnauthorizedRetryExhaustedError(AuthError):
    """The gateway kept answering 401 after a fresh login."""


class APIError(UniFiSpeedtestError):
    """The gateway returned an error status or an explicit error payload."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        body: Optional[str] = None,
        code: Optional[int | str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.body = body
        self.code = code


class UnrecognizedFormatError(UniFiSpeedtestError):
    """The speedtest payload matched none of the known response shapes."""

    def __init__(self, message: str, *, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.body = body


class NoValidSamplesError(UniFiSpeedtestError):
    """The payload held no sample with a non-zero download or upload."""


__all__ = [
    "APIError",
    "AuthError",
    "ConnectionRefusedByGatewayError",
    "CsrfExtractionError",
    "HostNotFoundError",
    "LoginFailedError",
    "NetworkTimeoutError",
    "NetworkUnreachableError",
    "NoAuthTokenError",
    "NoValidSamplesError",
    "RateLimitedError",
    "UnauthorizedRetryExhaustedError",
    "UniFiSpeedtestError",
    "UnrecognizedFormatError",
    "ValidationError",
]
