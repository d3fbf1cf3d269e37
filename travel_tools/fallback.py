"""Distance-based travel estimate used when live routing is unavailable."""

from typing import Optional, Protocol, Tuple
import asyncio
import logging
import math

from .config import CONFIG
from .models import FallbackEstimate

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_008.8

FALLBACK_DISCLAIMER = (
    "Estimated travel time: live traffic data is unavailable, so this is based on "
    "straight-line distance and an average driving speed. Check a map before you leave."
)


class AddressGeocoder(Protocol):
    async def geocode(self, address: str) -> Tuple[float, float]:
        ...


def haversine_meters(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """Great-circle distance between two (lat, lng) pairs in degrees."""
    lat1, lon1 = map(math.radians, a)
    lat2, lon2 = map(math.radians, b)
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


class FallbackEstimator:
    def __init__(
        self,
        geocoder: AddressGeocoder,
        road_factor: Optional[float] = None,
        average_speed_kph: Optional[float] = None,
        safety_multiplier: Optional[float] = None,
        minimum_seconds: Optional[int] = None,
    ) -> None:
        self.geocoder = geocoder
        self.road_factor = road_factor if road_factor is not None else CONFIG.fallback_road_factor
        self.average_speed_kph = average_speed_kph if average_speed_kph is not None else CONFIG.fallback_speed_kph
        self.safety_multiplier = safety_multiplier if safety_multiplier is not None else CONFIG.fallback_safety_multiplier
        self.minimum_seconds = minimum_seconds if minimum_seconds is not None else CONFIG.fallback_min_sec

    def estimate_from_coordinates(
        self, origin: Tuple[float, float], destination: Tuple[float, float]
    ) -> FallbackEstimate:
        straight = haversine_meters(origin, destination)
        road = straight * self.road_factor
        hours = (road / 1000.0) / self.average_speed_kph
        seconds = hours * 3600 * self.safety_multiplier
        return FallbackEstimate(
            duration_seconds=max(self.minimum_seconds, int(round(seconds))),
            distance_meters=int(round(road)),
            straight_line_meters=int(round(straight)),
            disclaimer=FALLBACK_DISCLAIMER,
        )

    async def estimate(self, origin: str, destination: str) -> FallbackEstimate:
        """Raises GeocodingError if either address cannot be located."""
        origin_coords, destination_coords = await asyncio.gather(
            self.geocoder.geocode(origin),
            self.geocoder.geocode(destination),
        )
        result = self.estimate_from_coordinates(origin_coords, destination_coords)
        logger.info(
            "Fallback estimate: %dm straight-line, %dm road, %ds",
            result.straight_line_meters, result.distance_meters, result.duration_seconds,
        )
        return result
