import asyncio
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from mapweather import http as http_mod


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_item(when: datetime, temp: float = 10.0, **extra) -> dict:
    item = {
        "dt": int(when.timestamp()),
        "dt_txt": when.strftime("%Y-%m-%d %H:%M:%S"),
        "main": {"temp": temp, "humidity": 70},
        "weather": [{"main": "Clouds", "description": "Bedeckt", "icon": "04d"}],
        "wind": {"speed": 3.2},
        "pop": 0.2,
    }
    item.update(extra)
    return item


def make_payload(times, city: str = "Berlin", country: str = "DE") -> dict:
    return {
        "cod": "200",
        "list": [make_item(t, temp=10.0 + i) for i, t in enumerate(times)],
        "city": {"name": city, "country": country},
    }


def three_hourly(start: datetime, count: int = 40):
    return [start + timedelta(hours=3 * i) for i in range(count)]


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def mock_http():
    """Install a global HTTP client whose requests go to `handler`."""
    requests: list[httpx.Request] = []

    def install(handler):
        def record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        http_mod.client = httpx.AsyncClient(transport=httpx.MockTransport(record))
        return requests

    yield install

    if http_mod.client is not None:
        asyncio.run(http_mod.client.aclose())
    http_mod.client = None
