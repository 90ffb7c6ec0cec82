"""TTL cache for the last successful speedtest sample."""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .const import CACHE_TTL
from .locks import ReadWriteLock
from .models import CachedResult, SpeedtestResult

_LOGGER = logging.getLogger(__name__)


class ResultCache:
    """Hold one :class:`SpeedtestResult` until ``ttl`` seconds have passed.

    Gateways run their own speedtests on a daily schedule, so asking more
    often than the TTL only costs a login and a report call.
    """

    def __init__(
        self,
        lock: ReadWriteLock,
        *,
        ttl: float = CACHE_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._lock = lock
        self._ttl = ttl
        self._clock = clock
        self._entry: Optional[CachedResult] = None

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self) -> Optional[SpeedtestResult]:
        with self._lock.read():
            entry = self._entry
        if entry is None or not entry.is_fresh(self._clock()):
            return None
        return entry.result

    def set(self, result: SpeedtestResult) -> None:
        entry = CachedResult(result=result, fetched_at=self._clock(), ttl=self._ttl)
        with self._lock.write():
            self._entry = entry
        _LOGGER.debug("Cached speedtest sample from %s", result.timestamp)

    def clear(self) -> None:
        with self._lock.write():
            self._entry = None

    def age(self) -> Optional[float]:
        """Return seconds since the cached sample was stored, if any."""

        with self._lock.read():
            entry = self._entry
        if entry is None:
            return None
        return self._clock() - entry.fetched_at


__all__ = ["ResultCache"]
