"""Pytest configuration and shared fixtures."""
from __future__ import annotations

# ruff: noqa: E402

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TESTS_PATH = Path(__file__).resolve().parent
if str(TESTS_PATH) not in sys.path:
    sys.path.insert(0, str(TESTS_PATH))

import pytest

from helpers import BASE_URL, FakeClock
from unifi_speedtest.locks import ReadWriteLock
from unifi_speedtest.models import Credentials


@pytest.fixture
def clock() -> FakeClock:
    """Provide a manually advanced clock."""

    return FakeClock()


@pytest.fixture
def lock() -> ReadWriteLock:
    return ReadWriteLock()


@pytest.fixture
def credentials() -> Credentials:
    """Credentials for a test gateway."""

    return Credentials(
        base_url=f"{BASE_URL}/",
        username="admin",
        password="hunter2",
        site="default",
        version="8.0.28",
    )
