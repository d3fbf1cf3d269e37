import asyncio

import httpx
import pytest

from travel_tools.errors import GeocodingError
from travel_tools.fallback import FALLBACK_DISCLAIMER, FallbackEstimator, haversine_meters
from travel_tools.geocoding import Geocoder

GEOCODE_URL = "https://geo.test/geocode/json"


def test_haversine_one_degree_of_longitude_at_equator():
    assert haversine_meters((0.0, 0.0), (0.0, 1.0)) == pytest.approx(111_195, abs=1)


def test_haversine_same_point_is_zero():
    assert haversine_meters((33.68, -117.83), (33.68, -117.83)) == 0


def test_estimate_applies_road_factor_speed_and_buffer(fake_geocoder):
    estimator = FallbackEstimator(
        fake_geocoder({}), road_factor=1.3, average_speed_kph=56.0, safety_multiplier=1.2, minimum_seconds=300
    )
    result = estimator.estimate_from_coordinates((0.0, 0.0), (0.0, 1.0))

    straight = haversine_meters((0.0, 0.0), (0.0, 1.0))
    expected = straight * 1.3 / 1000 / 56.0 * 3600 * 1.2
    assert result.duration_seconds == pytest.approx(expected, abs=1)
    assert result.distance_meters == pytest.approx(straight * 1.3, abs=1)
    assert result.straight_line_meters == round(straight)
    assert result.is_fallback
    assert result.disclaimer == FALLBACK_DISCLAIMER


def test_estimate_has_minimum_duration(fake_geocoder):
    estimator = FallbackEstimator(fake_geocoder({}), minimum_seconds=300)
    result = estimator.estimate_from_coordinates((33.68, -117.83), (33.68, -117.83))
    assert result.duration_seconds == 300


def test_estimate_geocodes_both_addresses(known_geocoder):
    result = asyncio.run(FallbackEstimator(known_geocoder).estimate("100 Main St, Irvine, CA", "9 Journey, Aliso Viejo, CA"))
    assert sorted(known_geocoder.calls) == ["100 Main St, Irvine, CA", "9 Journey, Aliso Viejo, CA"]
    assert result.duration_seconds >= 300


def test_estimate_fails_when_an_address_is_unknown(fake_geocoder):
    geocoder = fake_geocoder({"home": (33.0, -117.0)})
    with pytest.raises(GeocodingError):
        asyncio.run(FallbackEstimator(geocoder).estimate("home", "nowhere"))


def _geocoder(handler, api_key="maps-test-key"):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return Geocoder(client, api_key=api_key, base_url=GEOCODE_URL)


def test_geocoder_returns_first_result():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(
            200,
            json={"status": "OK", "results": [{"geometry": {"location": {"lat": 33.57, "lng": -117.72}}}]},
        )

    assert asyncio.run(_geocoder(handler).geocode("9 Journey, Aliso Viejo, CA")) == (33.57, -117.72)
    assert seen["params"] == {"address": "9 Journey, Aliso Viejo, CA", "key": "maps-test-key"}


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []}),
        httpx.Response(200, json={"status": "OK", "results": []}),
        httpx.Response(500, text="internal"),
        httpx.Response(200, json={"status": "OK", "results": [{"geometry": {}}]}),
        httpx.Response(
            200,
            content=b'{"status": "OK", "results": [{"geometry": {"location": {"lat": NaN, "lng": 1.0}}}]}',
            headers={"content-type": "application/json"},
        ),
    ],
)
def test_geocoder_failures(response):
    with pytest.raises(GeocodingError):
        asyncio.run(_geocoder(lambda request: response).geocode("somewhere"))


def test_geocoder_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GeocodingError):
        asyncio.run(_geocoder(handler).geocode("somewhere"))


def test_geocoder_requires_api_key():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    with pytest.raises(GeocodingError):
        asyncio.run(_geocoder(handler, api_key="").geocode("somewhere"))
    assert calls == []
