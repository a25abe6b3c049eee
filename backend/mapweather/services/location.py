# mapweather/services/location.py
import logging
from typing import Awaitable, Callable, Optional

import httpx

from mapweather.schemas import GeoPoint, MapClickEvent
from mapweather.services.place import PlaceName
from mapweather.tools.geocode import NOT_AVAILABLE, reverse_geocode_city

log = logging.getLogger("mapweather.location")

# Distinct from NOT_AVAILABLE so the UI can tell "no city here" from "lookup broke"
GEOCODE_FAILED = "Fehler bei der Ortsbestimmung"

Geocoder = Callable[[float, float], Awaitable[str]]


def format_coordinate(value: Optional[float]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{value:.4f}"


class LocationResolver:
    """Turns map clicks into a place name.

    Only Web Mercator points are looked up; the result is published through
    the shared PlaceName, which is the sole signal to the forecast side.
    """

    def __init__(self, place: PlaceName, geocode: Geocoder = reverse_geocode_city):
        self.place = place
        self._geocode = geocode
        self.latitude_display: str = NOT_AVAILABLE
        self.longitude_display: str = NOT_AVAILABLE
        self.geocode_failed: bool = False

    def _accepts(self, point: GeoPoint) -> bool:
        # no reprojection; other spatial references are dropped
        if point.is_web_mercator:
            return True
        log.warning(
            "Ignoring point in spatial reference %s; only Web Mercator is supported",
            point.spatial_reference.value,
        )
        return False

    async def resolve_city_name(self, point: GeoPoint) -> Optional[str]:
        """
        Place name for a point. None means the point was rejected
        (not Web Mercator, or no coordinates); lookup errors yield GEOCODE_FAILED.
        """
        if not self._accepts(point):
            return None
        if not point.has_coordinates:
            return None
        try:
            return await self._geocode(point.latitude, point.longitude)
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
            log.warning("Reverse geocode failed for (%s, %s): %s", point.latitude, point.longitude, e)
            return GEOCODE_FAILED

    async def handle_click(self, event: MapClickEvent) -> Optional[str]:
        point = event.map_point
        if point is not None and not self._accepts(point):
            return self.place.value

        if point is None or not point.has_coordinates:
            self.latitude_display = NOT_AVAILABLE
            self.longitude_display = NOT_AVAILABLE
            self.geocode_failed = False
            self.place.set(None)
            return None

        self.latitude_display = format_coordinate(point.latitude)
        self.longitude_display = format_coordinate(point.longitude)
        name = await self.resolve_city_name(point)
        self.geocode_failed = name == GEOCODE_FAILED
        self.place.set(name)
        return name
