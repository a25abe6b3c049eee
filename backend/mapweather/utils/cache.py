# backend/mapweather/utils/cache.py
import asyncio
import logging
import time
from typing import Any, Callable, Iterable, NamedTuple, Optional

log = logging.getLogger("mapweather.cache")


class CacheEntry(NamedTuple):
    key: str
    stored_at: float
    payload: Any


# -----------------------------
# Raw forecast payloads keyed by city name
# -----------------------------
class ForecastCache:
    """In-memory store of raw forecast responses.

    One entry per city (last write wins). An entry is fresh while its age is
    below ``ttl``. ``sweep()`` trims the store to the ``keep`` most recently
    stored entries once it holds more than ``max_entries``.
    """

    def __init__(
        self,
        ttl: float = 600,
        max_entries: int = 10,
        keep: int = 5,
        clock: Callable[[], float] = time.time,
    ):
        self._data: dict[str, CacheEntry] = {}
        self._ttl = ttl
        self._max_entries = max_entries
        self._keep = keep
        self._clock = clock

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._data.get(key)
        if entry is None:
            return default
        if self._clock() - entry.stored_at >= self._ttl:
            # expired → drop
            self._data.pop(key, None)
            return default
        return entry.payload

    def set(self, key: str, payload: Any) -> None:
        # re-insert so dict order follows store time
        self._data.pop(key, None)
        self._data[key] = CacheEntry(key, self._clock(), payload)

    def entry(self, key: str) -> Optional[CacheEntry]:
        return self._data.get(key)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> Iterable[str]:
        return list(self._data.keys())

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def sweep(self) -> int:
        """Prune to the most recently stored entries; returns count removed."""
        if len(self._data) <= self._max_entries:
            return 0
        # dict order is store order (set() re-inserts)
        newest = list(self._data.items())[-self._keep:] if self._keep > 0 else []
        removed = len(self._data) - len(newest)
        self._data = dict(newest)
        return removed


# -----------------------------
# Periodic housekeeping
# -----------------------------

def start_sweeper(cache: ForecastCache, interval: float) -> "asyncio.Task[None]":
    """Run ``cache.sweep()`` every ``interval`` seconds on the running loop."""
    log.info("💾 Forecast cache sweeper started (every %ss)", interval)
    return asyncio.create_task(_sweep_loop(cache, interval))

async def stop_sweeper(task: Optional["asyncio.Task[None]"]) -> None:
    if task is None:
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    log.info("💾 Forecast cache sweeper stopped")

async def _sweep_loop(cache: ForecastCache, interval: float):
    while True:
        await asyncio.sleep(interval)
        n = cache.sweep()
        if n:
            log.info("🧹 Cache sweep removed %d entries (%d left)", n, len(cache))
