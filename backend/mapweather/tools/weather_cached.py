# mapweather/tools/weather_cached.py
import logging
from time import perf_counter
from typing import Any, Awaitable, Callable, Dict

from mapweather.utils.cache import ForecastCache
from .weather import fetch_forecast as _fetch, regroup

log = logging.getLogger("mapweather.weather")

def t(): return perf_counter()

Fetcher = Callable[[str], Awaitable[Dict[str, Any]]]

async def forecast_cached(city: str, cache: ForecastCache, fetch: Fetcher = _fetch) -> Dict[str, Any]:
    """Raw forecast payload for `city`, from cache while fresh, else from the network."""
    start = t()
    hit = cache.get(city)
    if hit is not None:
        log.info("💾 Forecast cache hit: %s (%dms)", city, round((t() - start) * 1000))
        return hit

    fresh = await fetch(city)
    # unusable payloads raise ForecastUnavailable here and are never stored
    regroup(fresh)
    cache.set(city, fresh)
    log.info("💾 Forecast cached for %ss: %s", int(cache.ttl), city)
    return fresh
