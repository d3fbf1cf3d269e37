"""Departure-time convergence.

Drive duration depends on departure time (traffic) and departure time depends on
drive duration. Starting from a guessed duration we compute a departure, ask the
routing service for the best-guess duration at that departure, and refine the
departure while the answer disagrees with the guess by more than the threshold.
The refinement count is capped (one pass by default) to bound latency; residual
error on long, traffic-sensitive routes is accepted.
"""

from datetime import datetime, timedelta
from typing import Optional, Protocol
import asyncio
import logging
import warnings

from .config import CONFIG
from .errors import RangeSamplingWarning, RoutingError
from .models import ConvergedRoute, RouteSample, TrafficModel

logger = logging.getLogger(__name__)


class RouteSource(Protocol):
    async def query(
        self,
        origin: str,
        destination: str,
        departure: datetime,
        traffic_model: TrafficModel = TrafficModel.BEST_GUESS,
    ) -> RouteSample:
        ...


class ConvergenceSolver:
    def __init__(
        self,
        routes: RouteSource,
        initial_guess_seconds: Optional[int] = None,
        threshold_seconds: Optional[int] = None,
        max_refinements: Optional[int] = None,
    ) -> None:
        self.routes = routes
        self.initial_guess_seconds = (
            initial_guess_seconds if initial_guess_seconds is not None else CONFIG.initial_guess_sec
        )
        self.threshold_seconds = threshold_seconds if threshold_seconds is not None else CONFIG.convergence_threshold_sec
        self.max_refinements = max(0, max_refinements if max_refinements is not None else CONFIG.max_refinements)

    async def solve(self, origin: str, destination: str, arrival: datetime) -> ConvergedRoute:
        """Best-guess duration for arriving by ``arrival``, plus an optimistic/pessimistic range.

        Raises RoutingError if a best-guess query fails. Range failures only drop the range.
        """
        guess = self.initial_guess_seconds
        departure = arrival - timedelta(seconds=guess)
        sample = await self.routes.query(origin, destination, departure, TrafficModel.BEST_GUESS)
        calls = 1

        refinements = 0
        while abs(sample.duration_seconds - guess) > self.threshold_seconds and refinements < self.max_refinements:
            logger.info(
                "Refining departure: guessed %ds, routing returned %ds", guess, sample.duration_seconds
            )
            guess = sample.duration_seconds
            departure = arrival - timedelta(seconds=guess)
            sample = await self.routes.query(origin, destination, departure, TrafficModel.BEST_GUESS)
            calls += 1
            refinements += 1

        low, high = await self._sample_range(origin, destination, departure, sample)
        return ConvergedRoute(
            duration_seconds=sample.duration_seconds,
            distance_meters=sample.distance_meters,
            low_seconds=low,
            high_seconds=high,
            departure=departure,
            best_guess_calls=calls,
        )

    async def _sample_range(
        self, origin: str, destination: str, departure: datetime, converged: RouteSample
    ) -> tuple[Optional[int], Optional[int]]:
        results = await asyncio.gather(
            self.routes.query(origin, destination, departure, TrafficModel.OPTIMISTIC),
            self.routes.query(origin, destination, departure, TrafficModel.PESSIMISTIC),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        for failure in failures:
            if not isinstance(failure, RoutingError):
                raise failure
        if failures:
            message = f"Traffic range sampling failed, using best-guess only: {failures[0]}"
            logger.warning(message)
            warnings.warn(message, RangeSamplingWarning, stacklevel=2)
            return None, None

        durations = [converged.duration_seconds] + [r.duration_seconds for r in results]
        return min(durations), max(durations)
