# backend/mapweather/tools/weather.py
import logging
import time
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Dict, Iterable, List, Optional

import httpx
from pydantic import ValidationError

from mapweather.config import settings
from mapweather.http import get_http_client
from mapweather.schemas import (
    DailyBucket,
    ForecastEntry,
    ForecastView,
    LocationInfo,
    OwmForecastResponse,
)
from mapweather.tools.lang import country_display_name

log = logging.getLogger("mapweather.weather")

def t(): return time.perf_counter()

GENERIC_ERROR = "Die Wetterdaten konnten nicht geladen werden."


class ForecastUnavailable(RuntimeError):
    """Forecast could not be fetched or the response was unusable."""

    def __init__(self, message: str = GENERIC_ERROR):
        super().__init__(message)
        self.message = message


def _server_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None

def validate_payload(data: Any) -> OwmForecastResponse:
    """Shape check: a list of entries plus a city descriptor."""
    try:
        return OwmForecastResponse.model_validate(data)
    except ValidationError as e:
        raise ForecastUnavailable() from e

async def fetch_forecast(city: str) -> Dict[str, Any]:
    """
    5 day / 3 hour forecast for a city name, as the raw JSON payload.
    Raises ForecastUnavailable with the server's message when it sends one.
    """
    start = t()
    params = {
        "q": city,
        "appid": settings.OPENWEATHER_API_KEY,
        "units": "metric",
        "lang": settings.DISPLAY_LANG,
    }
    client = get_http_client()
    try:
        r = await client.get(settings.FORECAST_URL, params=params)
    except httpx.HTTPError as e:
        log.warning("Forecast request for %r failed: %s", city, e)
        raise ForecastUnavailable() from e

    if r.is_error:
        message = _server_message(r) or GENERIC_ERROR
        log.warning("Forecast for %r returned HTTP %s: %s", city, r.status_code, message)
        raise ForecastUnavailable(message)

    try:
        data = r.json()
    except ValueError as e:
        raise ForecastUnavailable() from e
    validate_payload(data)

    log.info("⏱️  Forecast %r: %dms", city, round((t() - start) * 1000))
    return data

# ---------- regrouping ----------

def _to_entries(resp: OwmForecastResponse) -> List[ForecastEntry]:
    entries: List[ForecastEntry] = []
    for item in resp.list:
        cond = item.weather[0] if item.weather else None
        try:
            when = datetime.fromtimestamp(item.dt, tz=timezone.utc)
        except (ValueError, OverflowError, OSError) as e:
            raise ForecastUnavailable() from e
        try:
            entries.append(ForecastEntry(
                timestamp_utc=when,
                temperature_c=item.main.temp,
                humidity_pct=item.main.humidity,
                wind_speed_ms=item.wind.speed if item.wind else None,
                precipitation_probability=item.pop,
                condition_code=cond.main if cond else "",
                condition_description=cond.description if cond else "",
                icon_id=cond.icon if cond else "",
            ))
        except ValidationError as e:
            raise ForecastUnavailable() from e
    return entries

def parse_entries(payload: Dict[str, Any]) -> List[ForecastEntry]:
    """Flat, chronological list of slots from a raw payload."""
    return _to_entries(validate_payload(payload))

def group_by_day(
    entries: Iterable[ForecastEntry],
    hours: Iterable[int] = settings.DISPLAY_HOURS,
    tz: tzinfo = timezone.utc,
) -> List[DailyBucket]:
    """
    Buckets per calendar date in first-seen order; inside a bucket only the
    slots whose UTC hour is in `hours` are kept. A date whose slots are all
    filtered out still gets an (empty) bucket.

    Dates come from `tz` (UTC by default, the same clock as the hour filter),
    not from the forecast city's local time.
    """
    keep = set(hours)
    days: Dict[date, List[ForecastEntry]] = {}
    for e in entries:
        bucket = days.setdefault(e.timestamp_utc.astimezone(tz).date(), [])
        if e.timestamp_utc.astimezone(timezone.utc).hour in keep:
            bucket.append(e)
    return [DailyBucket(calendar_date=d, entries=tuple(es)) for d, es in days.items()]

def regroup(payload: Dict[str, Any], hours: Iterable[int] = settings.DISPLAY_HOURS) -> ForecastView:
    """Raw forecast payload → current slot, today, upcoming days, location."""
    resp = validate_payload(payload)
    entries = _to_entries(resp)
    if not entries:
        raise ForecastUnavailable()
    buckets = group_by_day(entries, hours)
    city = resp.city
    return ForecastView(
        current=entries[0],
        today=buckets[0] if buckets else None,
        upcoming=buckets[1:],
        location=LocationInfo(
            city_name=city.name,
            country_display_name=country_display_name(city.country),
        ),
    )
