"""
German display strings for the viewer (slot times, day headers, icons).
"""
from datetime import date
from typing import Optional

from babel.dates import format_date

from mapweather.config import settings
from mapweather.schemas import (
    DailyBucket,
    DayOut,
    ForecastEntry,
    LocationOut,
    SlotOut,
    ViewerState,
)
from mapweather.services.forecast import ForecastAggregator
from mapweather.services.location import LocationResolver


def icon_url(icon_id: str) -> str:
    return settings.ICON_URL_TEMPLATE.format(icon=icon_id) if icon_id else ""

def slot_time_label(entry: ForecastEntry) -> str:
    return entry.timestamp_utc.strftime("%H:%M")

def day_label(d: date, lang: Optional[str] = None) -> str:
    return format_date(d, "EEEE, d. MMMM", locale=lang or settings.DISPLAY_LANG)

def format_temperature(value: float) -> str:
    return f"{round(value)} °C"

def format_probability(p: Optional[float]) -> Optional[str]:
    if p is None:
        return None
    return f"{round(p * 100)} %"

def format_wind(speed: Optional[float]) -> Optional[str]:
    if speed is None:
        return None
    return f"{speed:.1f} m/s"


def slot_out(entry: ForecastEntry) -> SlotOut:
    return SlotOut(
        time=slot_time_label(entry),
        temperature=format_temperature(entry.temperature_c),
        humidity=f"{entry.humidity_pct} %",
        wind=format_wind(entry.wind_speed_ms),
        precipitation=format_probability(entry.precipitation_probability),
        condition=entry.condition_code,
        description=entry.condition_description,
        icon_url=icon_url(entry.icon_id),
    )

def day_out(bucket: DailyBucket) -> DayOut:
    return DayOut(
        date=bucket.calendar_date,
        label=day_label(bucket.calendar_date),
        slots=[slot_out(e) for e in bucket.entries],
    )

def viewer_state(resolver: LocationResolver, aggregator: ForecastAggregator) -> ViewerState:
    """Everything the map page renders, already formatted."""
    loc = aggregator.location
    return ViewerState(
        latitude=resolver.latitude_display,
        longitude=resolver.longitude_display,
        place_name=resolver.place.value,
        geocode_failed=resolver.geocode_failed,
        status=aggregator.status.value,
        is_loading=aggregator.is_loading,
        error=aggregator.error,
        current=slot_out(aggregator.current) if aggregator.current else None,
        today=day_out(aggregator.today) if aggregator.today else None,
        upcoming=[day_out(b) for b in aggregator.upcoming],
        location=LocationOut(city=loc.city_name, country=loc.country_display_name) if loc else None,
    )
