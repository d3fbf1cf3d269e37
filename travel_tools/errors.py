from typing import Optional


class TravelError(Exception):
    """Base class for travel-time calculation failures."""


class MissingInputError(TravelError):
    """A required input (home address, venue address) was not provided."""


class InvalidInputError(TravelError):
    """An input was present but could not be interpreted (e.g. a malformed game time)."""


class RoutingError(TravelError):
    """The traffic-aware routing call failed (network, non-2xx, no routes, bad duration)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GeocodingError(TravelError):
    """An address could not be turned into a finite lat/lng pair."""


class TravelTimeUnavailableError(RoutingError):
    """Both live routing and the distance-based estimate failed.

    The routing failure is the reported diagnosis and is chained as ``__cause__``;
    the estimate's own failure is kept on ``fallback_error``.
    """

    def __init__(self, routing_error: RoutingError, fallback_error: Optional[Exception] = None) -> None:
        super().__init__(
            f"Unable to calculate travel time: {routing_error}",
            status_code=routing_error.status_code,
        )
        self.routing_error = routing_error
        self.fallback_error = fallback_error


class RangeSamplingWarning(UserWarning):
    """Optimistic/pessimistic sampling failed after a successful best-guess convergence."""
