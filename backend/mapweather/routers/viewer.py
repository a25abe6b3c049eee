"""
Map viewer endpoints: click → place name, forecast state for the page.
"""
from fastapi import APIRouter, Depends

from mapweather.di import get_forecast_aggregator, get_location_resolver
from mapweather.schemas import ForecastRequest, MapClickEvent, ViewerState
from mapweather.services.forecast import ForecastAggregator
from mapweather.services.location import LocationResolver
from mapweather.utils.display import viewer_state

router = APIRouter(tags=["viewer"], prefix="/viewer")

@router.get("", response_model=ViewerState)
async def get_state(resolver: LocationResolver = Depends(get_location_resolver),
                    aggregator: ForecastAggregator = Depends(get_forecast_aggregator)):
    return viewer_state(resolver, aggregator)

@router.post("/click", response_model=ViewerState)
async def map_click(event: MapClickEvent,
                    resolver: LocationResolver = Depends(get_location_resolver),
                    aggregator: ForecastAggregator = Depends(get_forecast_aggregator)):
    """
    Map click payload ({mapPoint: {latitude, longitude, spatialReference}}).
    The forecast for the new place loads in the background; poll GET /viewer.
    """
    await resolver.handle_click(event)
    return viewer_state(resolver, aggregator)

@router.post("/forecast", response_model=ViewerState)
async def load_forecast(req: ForecastRequest,
                        resolver: LocationResolver = Depends(get_location_resolver),
                        aggregator: ForecastAggregator = Depends(get_forecast_aggregator)):
    await aggregator.load_forecast(req.city)
    return viewer_state(resolver, aggregator)
