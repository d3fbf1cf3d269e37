import os

# Must be set before travel_tools.config builds CONFIG
os.environ.setdefault("TRAVEL_API_KEY", "test-key")
os.environ.setdefault("GOOGLE_MAPS_API_KEY", "maps-test-key")
os.environ.setdefault("TRAVEL_RATE_LIMIT", "1000/minute")

from datetime import datetime, timezone
from typing import Callable, Dict, List, Tuple, Union

import pytest

from travel_tools.errors import GeocodingError, RoutingError
from travel_tools.models import GameEvent, RouteSample, TrafficModel, TravelPreferences


Behavior = Union[int, Exception, Callable[[datetime], int]]


class FakeRoutes:
    """In-memory stand-in for RoutesClient. Behaviour is set per traffic model."""

    def __init__(self, default: Behavior = 2400, **per_model: Behavior) -> None:
        self.default = default
        self.per_model: Dict[str, Behavior] = per_model
        self.calls: List[Tuple[TrafficModel, datetime]] = []

    def calls_for(self, model: TrafficModel) -> List[datetime]:
        return [dep for m, dep in self.calls if m == model]

    async def query(self, origin, destination, departure, traffic_model=TrafficModel.BEST_GUESS):
        self.calls.append((traffic_model, departure))
        behavior = self.per_model.get(traffic_model.value, self.default)
        if isinstance(behavior, Exception):
            raise behavior
        duration = behavior(departure) if callable(behavior) else behavior
        return RouteSample(duration_seconds=duration, distance_meters=30_000, traffic_model=traffic_model)


class FakeGeocoder:
    def __init__(self, coords: Dict[str, Tuple[float, float]]) -> None:
        self.coords = coords
        self.calls: List[str] = []

    async def geocode(self, address):
        self.calls.append(address)
        if address not in self.coords:
            raise GeocodingError(f"Geocoding failed for '{address}': ZERO_RESULTS")
        return self.coords[address]


HOME = "100 Main St, Irvine, CA"
VENUE = "9 Journey, Aliso Viejo, CA"


@pytest.fixture
def fake_routes():
    return FakeRoutes


@pytest.fixture
def fake_geocoder():
    return FakeGeocoder


@pytest.fixture
def failing_routes():
    return FakeRoutes(default=RoutingError("Google Routes API error (status 503): unavailable", status_code=503))


@pytest.fixture
def known_geocoder():
    return FakeGeocoder({HOME: (33.6846, -117.8265), VENUE: (33.5753, -117.7256)})


@pytest.fixture
def game():
    return GameEvent(
        home_team="Jr. Kings (1)",
        away_team="OC Hockey (1)",
        date="2025-10-12",
        time="15:00",
        timezone="America/Los_Angeles",
        venue="Aliso Viejo Ice",
        season="2025/2026",
        division="14U B",
    )


@pytest.fixture
def preferences():
    return TravelPreferences(home_address=HOME, prep_time_minutes=45, arrival_buffer_minutes=60)


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2025, 10, 1, 12, 0, tzinfo=timezone.utc)
