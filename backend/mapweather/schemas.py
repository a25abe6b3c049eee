from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Esri / EPSG ids that all mean Web Mercator
WEB_MERCATOR_WKIDS = {3857, 102100, 102113, 900913}


# ---------- Map boundary (click events) ----------

class SpatialReference(str, Enum):
    WEB_MERCATOR = "web_mercator"
    OTHER = "other"

    @classmethod
    def from_raw(cls, raw: Any) -> "SpatialReference":
        """Accept an enum value or an Esri-style ``{"wkid": ...}`` object."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, dict):
            if raw.get("isWebMercator"):
                return cls.WEB_MERCATOR
            wkids = {raw.get("wkid"), raw.get("latestWkid")}
            return cls.WEB_MERCATOR if wkids & WEB_MERCATOR_WKIDS else cls.OTHER
        if isinstance(raw, str) and raw.lower() in ("web_mercator", "webmercator"):
            return cls.WEB_MERCATOR
        return cls.OTHER


class GeoPoint(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    latitude: Optional[float] = Field(None, description="Latitude in degrees")
    longitude: Optional[float] = Field(None, description="Longitude in degrees")
    spatial_reference: SpatialReference = Field(SpatialReference.WEB_MERCATOR, alias="spatialReference")

    @field_validator("spatial_reference", mode="before")
    @classmethod
    def _parse_spatial_reference(cls, v):
        return SpatialReference.from_raw(v)

    @property
    def is_web_mercator(self) -> bool:
        return self.spatial_reference is SpatialReference.WEB_MERCATOR

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class MapClickEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    map_point: Optional[GeoPoint] = Field(None, alias="mapPoint")


# ---------- Forecast domain ----------

class ForecastEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp_utc: datetime
    temperature_c: float
    humidity_pct: int
    wind_speed_ms: Optional[float] = None
    precipitation_probability: Optional[float] = Field(None, ge=0.0, le=1.0)
    condition_code: str = ""
    condition_description: str = ""
    icon_id: str = ""


class DailyBucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    calendar_date: date
    entries: Tuple[ForecastEntry, ...] = ()


class LocationInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    city_name: str
    country_display_name: str


class ForecastView(BaseModel):
    current: ForecastEntry
    today: Optional[DailyBucket] = None
    upcoming: List[DailyBucket] = Field(default_factory=list)
    location: LocationInfo


# ---------- Raw OpenWeather payload (shape validation) ----------

class OwmMain(BaseModel):
    temp: float
    humidity: int


class OwmCondition(BaseModel):
    main: str = ""
    description: str = ""
    icon: str = ""


class OwmWind(BaseModel):
    speed: Optional[float] = None


class OwmItem(BaseModel):
    dt: int
    dt_txt: Optional[str] = None
    main: OwmMain
    weather: List[OwmCondition] = Field(default_factory=list)
    wind: Optional[OwmWind] = None
    pop: Optional[float] = None


class OwmCity(BaseModel):
    name: str = ""
    country: str = ""


class OwmForecastResponse(BaseModel):
    list: List[OwmItem]
    city: OwmCity


# ---------- Presentation (response models) ----------

class ForecastRequest(BaseModel):
    city: str = Field(..., min_length=1, description="City name as returned by the geocoder")

class SlotOut(BaseModel):
    time: str                      # "HH:MM" (UTC)
    temperature: str               # "12 °C"
    humidity: str                  # "80 %"
    wind: Optional[str] = None     # "3.4 m/s"
    precipitation: Optional[str] = None
    condition: str
    description: str
    icon_url: str

class DayOut(BaseModel):
    date: date
    label: str                     # "Montag, 20. Oktober"
    slots: List[SlotOut] = Field(default_factory=list)

class LocationOut(BaseModel):
    city: str
    country: str

class ViewerState(BaseModel):
    latitude: str
    longitude: str
    place_name: Optional[str] = None
    geocode_failed: bool = False
    status: str
    is_loading: bool = False
    error: Optional[str] = None
    current: Optional[SlotOut] = None
    today: Optional[DayOut] = None
    upcoming: List[DayOut] = Field(default_factory=list)
    location: Optional[LocationOut] = None
