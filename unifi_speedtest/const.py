"""Constants for the UniFi speedtest client."""

DEFAULT_SITE = "default"
DEFAULT_VERSION = "8.0.28"
DEFAULT_TIMEOUT = 30  # seconds
DEFAULT_VERIFY_SSL = False

SESSION_LIFETIME = 8 * 60 * 60  # seconds, gateways do not report a real TTL
CACHE_TTL = 24 * 60 * 60  # seconds, gateways run speedtests roughly daily
DEFAULT_WINDOW_MS = 24 * 60 * 60 * 1000

CONF_BASE_URL = "base_url"
CONF_USERNAME = "username"
# Placeholder configuration key, not a secret.
CONF_PASSWORD = "password"  # nosec B105
CONF_SITE = "site"
CONF_VERSION = "version"
CONF_TIMEOUT = "timeout"
CONF_VERIFY_SSL = "verify_ssl"
CONF_CACHE_TTL = "cache_ttl"
CONF_SESSION_LIFETIME = "session_lifetime"

LOGIN_PATH_UNIFI_OS = "/api/auth/login"
LOGIN_PATH_LEGACY = "/api/login"
PROXY_PREFIX = "/proxy/network"
ARCHIVE_SPEEDTEST_PATH = "/api/s/{site}/stat/report/archive.speedtest"

COOKIE_UNIFI_OS = "TOKEN"
COOKIE_LEGACY = "unifises"
HEADER_CSRF = "x-csrf-token"

CSRF_FIELDS = ("csrfToken", "csrf_token", "xsrfToken", "token")

SPEEDTEST_ATTRS = ("xput_download", "xput_upload", "latency", "time")
