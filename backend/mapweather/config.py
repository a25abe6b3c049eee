# backend/mapweather/config.py
import os
from dotenv import load_dotenv
from pathlib import Path

dotenv_path = Path(__file__).parents[2] / '.env'
load_dotenv(dotenv_path)


class Settings:
    # --- OpenCage (reverse geocoding) ---
    OPENCAGE_API_KEY: str = os.getenv("OPENCAGE_API_KEY", "")
    GEOCODE_URL: str = os.getenv("GEOCODE_URL", "https://api.opencagedata.com/geocode/v1/json")

    # --- OpenWeather (5 day / 3 hour forecast) ---
    OPENWEATHER_API_KEY: str = os.getenv("OPENWEATHER_API_KEY", "")
    FORECAST_URL: str = os.getenv("FORECAST_URL", "https://api.openweathermap.org/data/2.5/forecast")
    ICON_URL_TEMPLATE: str = os.getenv("ICON_URL_TEMPLATE", "https://openweathermap.org/img/wn/{icon}@2x.png")

    # Both APIs are asked for German text
    DISPLAY_LANG: str = os.getenv("DISPLAY_LANG", "de")

    # Forecast slots shown per day (UTC hours)
    DISPLAY_HOURS: tuple = (6, 12, 18, 21)

    # Forecast cache
    FORECAST_CACHE_TTL_SEC: int = int(os.getenv("FORECAST_CACHE_TTL_SEC", "600"))
    FORECAST_CACHE_MAX_ENTRIES: int = int(os.getenv("FORECAST_CACHE_MAX_ENTRIES", "10"))
    FORECAST_CACHE_KEEP: int = int(os.getenv("FORECAST_CACHE_KEEP", "5"))
    FORECAST_CACHE_SWEEP_SEC: int = int(os.getenv("FORECAST_CACHE_SWEEP_SEC", "1800"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
