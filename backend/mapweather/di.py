"""
Dependency injection container for the application.
Constructs singletons and provides them to routes.
"""
from mapweather.config import settings
from mapweather.services.forecast import ForecastAggregator
from mapweather.services.location import LocationResolver
from mapweather.services.place import PlaceName
from mapweather.utils.cache import ForecastCache

# Singletons - created once and reused
_place_name = None
_forecast_cache = None
_location_resolver = None
_forecast_aggregator = None

def get_place_name() -> PlaceName:
    """Get the shared place name."""
    global _place_name
    if _place_name is None:
        _place_name = PlaceName()
    return _place_name

def get_forecast_cache() -> ForecastCache:
    """Get the process-wide forecast cache."""
    global _forecast_cache
    if _forecast_cache is None:
        _forecast_cache = ForecastCache(
            ttl=settings.FORECAST_CACHE_TTL_SEC,
            max_entries=settings.FORECAST_CACHE_MAX_ENTRIES,
            keep=settings.FORECAST_CACHE_KEEP,
        )
    return _forecast_cache

def get_location_resolver() -> LocationResolver:
    """Get singleton location resolver."""
    global _location_resolver
    if _location_resolver is None:
        _location_resolver = LocationResolver(place=get_place_name())
    return _location_resolver

def get_forecast_aggregator() -> ForecastAggregator:
    """Get singleton forecast aggregator (attached to the place name)."""
    global _forecast_aggregator
    if _forecast_aggregator is None:
        _forecast_aggregator = ForecastAggregator(cache=get_forecast_cache())
        _forecast_aggregator.attach(get_place_name())
    return _forecast_aggregator

def reset() -> None:
    """Drop all singletons (app shutdown, tests)."""
    global _place_name, _forecast_cache, _location_resolver, _forecast_aggregator
    if _forecast_aggregator is not None:
        _forecast_aggregator.close()
    _place_name = _forecast_cache = _location_resolver = _forecast_aggregator = None
