import asyncio
from datetime import timedelta, timezone

import httpx
import pytest

from conftest import make_item, make_payload, three_hourly, utc
from mapweather.tools.lang import country_display_name
from mapweather.tools.weather import (
    GENERIC_ERROR,
    ForecastUnavailable,
    fetch_forecast,
    group_by_day,
    parse_entries,
    regroup,
)

DISPLAY_HOURS = {6, 12, 18, 21}


def test_regroup_two_days_example():
    times = [utc(2024, 5, 1, h) for h in (3, 6, 9, 12, 15, 18, 21)] + [utc(2024, 5, 2, 0)]
    view = regroup(make_payload(times))

    assert view.current.timestamp_utc == utc(2024, 5, 1, 3)
    assert [e.timestamp_utc.hour for e in view.today.entries] == [6, 12, 18, 21]
    assert view.today.calendar_date.isoformat() == "2024-05-01"
    assert len(view.upcoming) == 1
    assert view.upcoming[0].calendar_date.isoformat() == "2024-05-02"
    assert view.upcoming[0].entries == ()


def test_regroup_five_days_only_display_hours():
    view = regroup(make_payload(three_hourly(utc(2024, 5, 1, 9))))
    buckets = [view.today, *view.upcoming]

    for bucket in buckets:
        assert all(e.timestamp_utc.hour in DISPLAY_HOURS for e in bucket.entries)
    assert [e.timestamp_utc.hour for e in view.today.entries] == [12, 18, 21]
    assert [b.calendar_date.day for b in buckets] == [1, 2, 3, 4, 5, 6]
    assert all(len(b.entries) == 4 for b in buckets[1:5])


def test_current_is_first_raw_entry_even_off_grid():
    view = regroup(make_payload(three_hourly(utc(2024, 5, 1, 15), count=8)))

    assert view.current.timestamp_utc.hour == 15
    assert view.current.temperature_c == 10.0
    assert view.today.entries[0].timestamp_utc.hour == 18


def test_regroup_location_info():
    view = regroup(make_payload([utc(2024, 5, 1, 6)], city="Paris", country="FR"))

    assert view.location.city_name == "Paris"
    assert view.location.country_display_name == "Frankreich"


def test_country_display_name_falls_back_to_code():
    assert country_display_name("DE") == "Deutschland"
    assert country_display_name("de") == "Deutschland"
    assert country_display_name("XZ") == "XZ"
    assert country_display_name("") == ""
    assert country_display_name("AT", lang="en") == "Austria"


def test_parse_entries_optional_fields():
    item = make_item(utc(2024, 5, 1, 6))
    del item["wind"]
    del item["pop"]
    entries = parse_entries({"list": [item], "city": {"name": "X", "country": "DE"}})

    assert entries[0].wind_speed_ms is None
    assert entries[0].precipitation_probability is None
    assert entries[0].condition_description == "Bedeckt"
    assert entries[0].icon_id == "04d"
    assert entries[0].humidity_pct == 70


def test_group_by_day_keeps_source_order():
    entries = parse_entries(make_payload([utc(2024, 5, 2, 6), utc(2024, 5, 3, 6)]))
    days = group_by_day(entries, hours=(6,))

    assert [d.calendar_date.day for d in days] == [2, 3]


@pytest.mark.parametrize(
    "payload",
    [
        {"list": "nope", "city": {"name": "X"}},
        {"list": []},
        {"city": {"name": "X"}},
        {"list": [], "city": {"name": "X", "country": "DE"}},
        {"list": [{"dt": 1}], "city": {"name": "X"}},
    ],
)
def test_regroup_rejects_bad_shape(payload):
    with pytest.raises(ForecastUnavailable) as exc:
        regroup(payload)
    assert exc.value.message == GENERIC_ERROR


def test_fetch_forecast_query(mock_http):
    payload = make_payload([utc(2024, 5, 1, 6)])
    requests = mock_http(lambda request: httpx.Response(200, json=payload))

    data = asyncio.run(fetch_forecast("München"))

    assert data == payload
    params = requests[0].url.params
    assert params["q"] == "München"
    assert params["units"] == "metric"
    assert params["lang"] == "de"
    assert "appid" in params


def test_fetch_forecast_server_message(mock_http):
    mock_http(lambda request: httpx.Response(404, json={"cod": "404", "message": "city not found"}))

    with pytest.raises(ForecastUnavailable) as exc:
        asyncio.run(fetch_forecast("Atlantis"))
    assert exc.value.message == "city not found"


def test_fetch_forecast_generic_message_without_body(mock_http):
    mock_http(lambda request: httpx.Response(502, text="Bad Gateway"))

    with pytest.raises(ForecastUnavailable) as exc:
        asyncio.run(fetch_forecast("Berlin"))
    assert exc.value.message == GENERIC_ERROR


def test_fetch_forecast_network_failure(mock_http):
    def boom(request):
        raise httpx.ConnectError("no route", request=request)

    mock_http(boom)

    with pytest.raises(ForecastUnavailable) as exc:
        asyncio.run(fetch_forecast("Berlin"))
    assert exc.value.message == GENERIC_ERROR


def test_fetch_forecast_invalid_shape(mock_http):
    mock_http(lambda request: httpx.Response(200, json={"list": []}))

    with pytest.raises(ForecastUnavailable):
        asyncio.run(fetch_forecast("Berlin"))


def test_regroup_rejects_out_of_range_timestamp():
    payload = make_payload([utc(2024, 5, 1, 6)])
    payload["list"][0]["dt"] = 10 ** 15

    with pytest.raises(ForecastUnavailable) as exc:
        regroup(payload)
    assert exc.value.message == GENERIC_ERROR


def test_group_by_day_dates_follow_tz_hours_stay_utc():
    entries = parse_entries(make_payload([utc(2024, 5, 1, 21), utc(2024, 5, 2, 6)]))

    by_utc = group_by_day(entries, hours=(6, 21))
    assert [d.calendar_date.day for d in by_utc] == [1, 2]

    plus_three = group_by_day(entries, hours=(6, 21), tz=timezone(timedelta(hours=3)))
    assert [d.calendar_date.day for d in plus_three] == [2]
    assert [e.timestamp_utc.hour for e in plus_three[0].entries] == [21, 6]
