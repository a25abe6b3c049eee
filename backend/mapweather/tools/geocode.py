# backend/mapweather/tools/geocode.py
import logging
import time

from mapweather.config import settings
from mapweather.http import get_http_client

log = logging.getLogger("mapweather.geocode")

def t(): return time.perf_counter()

# Shown for points without a settlement (oceans, deserts, ...)
NOT_AVAILABLE = "n.V."

async def reverse_geocode_city(lat: float, lon: float) -> str:
    """
    Returns the most specific locality name for lat/lon, or "n.V." when the
    geocoder knows no city there. Network/parse errors propagate; no retry.
    """
    start = t()
    params = {
        "key": settings.OPENCAGE_API_KEY,
        "q": f"{lat},{lon}",
        "language": settings.DISPLAY_LANG,
        "no_annotations": "1",
        "limit": "1",
    }
    client = get_http_client()
    r = await client.get(settings.GEOCODE_URL, params=params)
    r.raise_for_status()
    data = r.json()
    if not isinstance(data, dict):
        raise ValueError("Unexpected geocoder response shape")

    results = data.get("results") or []
    comp = (results[0].get("components") or {}) if results else {}
    city = comp.get("_normalized_city") or comp.get("city") or NOT_AVAILABLE

    log.info("⏱️  Reverse geocode (%s, %s): %dms -> %s", lat, lon, round((t() - start) * 1000), city)
    return city
