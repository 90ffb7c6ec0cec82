"""Retrieve gateway-recorded speedtest results from UniFi controllers."""
from __future__ import annotations

from .config import ClientOptions, credentials_from_mapping, options_from_mapping
from .errors import (
    APIError,
    AuthError,
    ConnectionRefusedByGatewayError,
    CsrfExtractionError,
    HostNotFoundError,
    LoginFailedError,
    NetworkTimeoutError,
    NetworkUnreachableError,
    NoAuthTokenError,
    NoValidSamplesError,
    RateLimitedError,
    UnauthorizedRetryExhaustedError,
    UniFiSpeedtestError,
    UnrecognizedFormatError,
    ValidationError,
)
from .models import ControllerKind, Credentials, SpeedtestResult
from .unifi_client import SpeedtestClient, get_speedtest
from .utils import format_speed, relative_time

__version__ = "0.3.0"

__all__ = [
    "APIError",
    "AuthError",
    "ClientOptions",
    "ConnectionRefusedByGatewayError",
    "ControllerKind",
    "Credentials",
    "CsrfExtractionError",
    "HostNotFoundError",
    "LoginFailedError",
    "NetworkTimeoutError",
    "NetworkUnreachableError",
    "NoAuthTokenError",
    "NoValidSamplesError",
    "RateLimitedError",
    "SpeedtestClient",
    "SpeedtestResult",
    "UnauthorizedRetryExhaustedError",
    "UniFiSpeedtestError",
    "UnrecognizedFormatError",
    "ValidationError",
    "credentials_from_mapping",
    "format_speed",
    "get_speedtest",
    "options_from_mapping",
    "relative_time",
]
