from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from urllib.parse import quote
import logging

from .config import CONFIG
from .convergence import ConvergenceSolver
from .errors import GeocodingError, InvalidInputError, MissingInputError, RoutingError, TravelTimeUnavailableError
from .fallback import FallbackEstimator
from .models import GameEvent, TravelPlan, TravelPreferences
from .timezones import format_instant, resolve_zone, to_instant

logger = logging.getLogger(__name__)


def build_maps_url(origin: str, destination: str) -> str:
    return (
        f"{CONFIG.maps_dir_base}?api=1"
        f"&origin={quote(origin, safe='')}"
        f"&destination={quote(destination, safe='')}"
        f"&travelmode=driving"
    )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TravelPlanComposer:
    """Turns a game, the family's preferences and a venue address into wake-up / leave-by times.

    Live traffic-aware routing is tried first; if it fails outright the plan is
    built from a distance-based estimate and flagged as such. If both fail,
    TravelTimeUnavailableError is raised with the routing failure as its cause.
    """

    def __init__(
        self,
        solver: ConvergenceSolver,
        fallback: FallbackEstimator,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.solver = solver
        self.fallback = fallback
        self.clock = clock or _utc_now

    async def compose_plan(
        self,
        game: GameEvent,
        preferences: TravelPreferences,
        venue_address: Optional[str],
        timezone_override: Optional[str] = None,
    ) -> TravelPlan:
        home = (preferences.home_address or "").strip()
        venue = (venue_address or "").strip()
        if not home:
            raise MissingInputError("A home address is needed to calculate travel times")
        if not venue:
            raise MissingInputError(f"A venue address is needed for '{game.venue}'")

        zone = resolve_zone(timezone_override or game.timezone)
        try:
            game_instant = to_instant(game.date, game.time, zone)
        except ValueError as e:
            raise InvalidInputError(f"Invalid game date/time '{game.date} {game.time}': {e}") from e

        arrival = game_instant - timedelta(minutes=preferences.arrival_buffer_minutes)

        low: Optional[int] = None
        high: Optional[int] = None
        disclaimer: Optional[str] = None
        is_estimated = False
        try:
            route = await self.solver.solve(home, venue, arrival)
            duration = route.duration_seconds
            distance = route.distance_meters
            low, high = route.low_seconds, route.high_seconds
        except RoutingError as routing_error:
            logger.warning("Live routing failed (%s); trying distance-based estimate", routing_error)
            try:
                estimate = await self.fallback.estimate(home, venue)
            except GeocodingError as geocoding_error:
                logger.error("Distance-based estimate also failed: %s", geocoding_error)
                raise TravelTimeUnavailableError(routing_error, geocoding_error) from routing_error
            duration = estimate.duration_seconds
            distance = estimate.distance_meters
            disclaimer = estimate.disclaimer
            is_estimated = True

        # Plan against the pessimistic end: leaving early beats arriving late
        effective = high if high is not None else duration
        departure = arrival - timedelta(seconds=effective)
        wake_up = departure - timedelta(minutes=preferences.prep_time_minutes)

        return TravelPlan(
            game=game,
            preferences=preferences,
            venue_address=venue,
            timezone=zone,
            travel_duration_seconds=effective,
            travel_duration_low_seconds=low,
            travel_duration_high_seconds=high,
            distance_meters=distance,
            game_time=format_instant(game_instant, zone),
            arrival_time=format_instant(arrival, zone),
            departure_time=format_instant(departure, zone),
            wake_up_time=format_instant(wake_up, zone),
            calculated_at=self.clock().astimezone(timezone.utc).isoformat(),
            is_estimated=is_estimated,
            estimate_method="distance" if is_estimated else None,
            disclaimer=disclaimer,
            maps_url=build_maps_url(home, venue),
        )
