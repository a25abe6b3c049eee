import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mapweather import di
from mapweather.config import settings
from mapweather.http import init_http, close_http
from mapweather.routers import viewer
from mapweather.utils.cache import start_sweeper, stop_sweeper

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
log = logging.getLogger("mapweather.main")

# Single FastAPI instance
app = FastAPI(title="MapWeather", version="1.0.0")
_sweeper = None

# Single startup event
@app.on_event("startup")
async def startup_event():
    """Initialize HTTP client, forecast wiring and the cache sweeper."""
    global _sweeper
    await init_http()
    di.get_forecast_aggregator()
    _sweeper = start_sweeper(di.get_forecast_cache(), settings.FORECAST_CACHE_SWEEP_SEC)
    log.info("HTTP client initialized")

# Single shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """Stop the sweeper, detach the forecast side and close the HTTP client."""
    global _sweeper
    await stop_sweeper(_sweeper)
    _sweeper = None
    di.reset()
    await close_http()
    log.info("HTTP client closed")

# CORS middleware (map page is served from elsewhere)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(viewer.router)

@app.get("/")
async def root():
    return {"ok": True, "service": "MapWeather", "version": app.version}

@app.get("/health")
async def health():
    return {
        "ok": True,
        "lang": settings.DISPLAY_LANG,
        "display_hours": list(settings.DISPLAY_HOURS),
        "cache": {
            "ttl_sec": settings.FORECAST_CACHE_TTL_SEC,
            "max_entries": settings.FORECAST_CACHE_MAX_ENTRIES,
            "keep": settings.FORECAST_CACHE_KEEP,
            "sweep_sec": settings.FORECAST_CACHE_SWEEP_SEC,
            "size": len(di.get_forecast_cache()),
        },
        "keys": {
            "opencage": bool(settings.OPENCAGE_API_KEY),
            "openweather": bool(settings.OPENWEATHER_API_KEY),
        },
    }
