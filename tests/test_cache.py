from __future__ import annotations

from helpers import FakeClock
from unifi_speedtest.cache import ResultCache
from unifi_speedtest.const import CACHE_TTL
from unifi_speedtest.locks import ReadWriteLock
from unifi_speedtest.models import SpeedtestResult

RESULT = SpeedtestResult(download_mbps=900.0, upload_mbps=40.0, latency_ms=8.0, timestamp=1)


def test_empty_cache_returns_none(clock: FakeClock, lock: ReadWriteLock) -> None:
    cache = ResultCache(lock, clock=clock)

    assert cache.get() is None
    assert cache.age() is None


def test_result_fresh_until_ttl(clock: FakeClock, lock: ReadWriteLock) -> None:
    cache = ResultCache(lock, clock=clock)
    cache.set(RESULT)

    clock.advance(CACHE_TTL - 0.001)
    assert cache.get() == RESULT

    clock.advance(0.002)
    assert cache.get() is None


def test_set_overwrites_and_resets_clock(clock: FakeClock, lock: ReadWriteLock) -> None:
    cache = ResultCache(lock, ttl=60, clock=clock)
    cache.set(RESULT)
    clock.advance(50)

    newer = SpeedtestResult(download_mbps=1.0, upload_mbps=1.0, latency_ms=1.0, timestamp=2)
    cache.set(newer)
    clock.advance(50)

    assert cache.get() == newer
    assert cache.age() == 50


def test_clear_drops_result(clock: FakeClock, lock: ReadWriteLock) -> None:
    cache = ResultCache(lock, clock=clock)
    cache.set(RESULT)

    cache.clear()

    assert cache.get() is None
