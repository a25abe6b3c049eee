# mapweather/services/forecast.py
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Set, Union

from mapweather.schemas import DailyBucket, ForecastEntry, ForecastView, LocationInfo
from mapweather.services.place import PlaceName
from mapweather.tools.weather import GENERIC_ERROR, ForecastUnavailable, fetch_forecast, regroup
from mapweather.tools.weather_cached import Fetcher, forecast_cached
from mapweather.utils.cache import ForecastCache

log = logging.getLogger("mapweather.forecast")


class ForecastStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class ForecastError:
    message: str


class ForecastAggregator:
    """
    Idle → Loading → Ready | Error, re-entered on every new city name.

    A city equal to the last requested one is ignored unless that request
    failed. Responses are applied in completion order; a slow response for an
    older city can overwrite a newer one.
    """

    def __init__(self, cache: ForecastCache, fetch: Fetcher = fetch_forecast):
        self._cache = cache
        self._fetch = fetch
        self._last_requested: Optional[str] = None
        self._tasks: Set["asyncio.Task[object]"] = set()
        self._unsubscribe: Optional[Callable[[], None]] = None

        self.status = ForecastStatus.IDLE
        self.city: Optional[str] = None
        self.error: Optional[str] = None
        self.current: Optional[ForecastEntry] = None
        self.today: Optional[DailyBucket] = None
        self.upcoming: List[DailyBucket] = []
        self.location: Optional[LocationInfo] = None

    @property
    def is_loading(self) -> bool:
        return self.status is ForecastStatus.LOADING

    # ---------- wiring to the place name ----------

    def attach(self, place: PlaceName) -> None:
        self.close()
        self._unsubscribe = place.subscribe(self._on_place_changed)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_place_changed(self, name: Optional[str]) -> None:
        if name is None:
            return
        task = asyncio.get_running_loop().create_task(self.load_forecast(name))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for loads scheduled by place-name changes."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # ---------- state machine ----------

    async def load_forecast(self, city: str) -> Union[ForecastView, ForecastError, None]:
        """
        Returns the regrouped view, a ForecastError, or None when the call was
        a no-op (same city as last request).
        """
        if not city or city == self._last_requested:
            log.debug("Forecast for %r already requested; skipping", city)
            return None
        self._last_requested = city
        self.status = ForecastStatus.LOADING
        self.error = None

        try:
            payload = await forecast_cached(city, self._cache, self._fetch)
            view = regroup(payload)
        except ForecastUnavailable as e:
            return self._fail(city, e.message)
        except Exception:
            log.exception("Forecast for %r failed unexpectedly", city)
            return self._fail(city, GENERIC_ERROR)

        self._apply(city, view)
        return view

    def _apply(self, city: str, view: ForecastView) -> None:
        self.status = ForecastStatus.READY
        self.city = city
        self.error = None
        self.current = view.current
        self.today = view.today
        self.upcoming = list(view.upcoming)
        self.location = view.location

    def _fail(self, city: str, message: Optional[str]) -> ForecastError:
        # a failed city may be requested again
        if self._last_requested == city:
            self._last_requested = None
        self.status = ForecastStatus.ERROR
        self.city = city
        self.error = message or GENERIC_ERROR
        self.current = None
        self.today = None
        self.upcoming = []
        self.location = None
        return ForecastError(self.error)

    def view(self) -> Optional[ForecastView]:
        if self.status is not ForecastStatus.READY or self.current is None or self.location is None:
            return None
        return ForecastView(current=self.current, today=self.today, upcoming=self.upcoming, location=self.location)
