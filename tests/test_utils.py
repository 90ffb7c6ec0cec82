from __future__ import annotations

import pytest

from unifi_speedtest.utils import (
    coerce_float,
    coerce_int,
    endpoint_label,
    format_speed,
    relative_time,
    shorten,
)

NOW_MS = 1_700_000_000_000


@pytest.mark.parametrize(
    ("mbps", "expected"),
    [
        (0, "0.0 Mb/s"),
        (38.74, "38.7 Mb/s"),
        (999, "999.0 Mb/s"),
        (999.96, "1000.0 Mb/s"),
        (1000, "1.0 Gb/s"),
        (2500, "2.5 Gb/s"),
    ],
)
def test_format_speed(mbps: float, expected: str) -> None:
    assert format_speed(mbps) == expected


@pytest.mark.parametrize(
    ("age_ms", "expected"),
    [
        (0, "just now"),
        (59_999, "just now"),
        (60_000, "1 minutes ago"),
        (45 * 60_000, "45 minutes ago"),
        (3 * 3_600_000 + 5, "3 hours ago"),
        (2 * 86_400_000, "2 days ago"),
    ],
)
def test_relative_time(age_ms: int, expected: str) -> None:
    assert relative_time(NOW_MS - age_ms, NOW_MS) == expected


def test_shorten_trims_long_previews() -> None:
    assert shorten(None) is None
    assert shorten("  ok  ") == "ok"
    assert shorten("x" * 20, 5) == "xxxxx…"


def test_endpoint_label_drops_scheme_and_query() -> None:
    label = endpoint_label("https://udm.local:8443/api/auth/login?next=/")

    assert label == "udm.local/api/auth/login"


def test_coercion_of_sample_fields() -> None:
    assert coerce_float("12.5") == 12.5
    assert coerce_float(None) == 0.0
    assert coerce_float("fast") == 0.0
    assert coerce_float(True) == 0.0
    assert coerce_int("1700") == 1700
    assert coerce_int(None) is None
    assert coerce_int("later") is None


def test_coerce_int_rejects_non_finite_floats() -> None:
    assert coerce_int(float("inf")) is None
    assert coerce_int(float("-inf")) is None
    assert coerce_int(float("nan")) is None
