from typing import Optional
import httpx

from fastapi import Depends, Header, HTTPException, status, Request

from .composer import TravelPlanComposer
from .config import CONFIG
from .convergence import ConvergenceSolver
from .fallback import FallbackEstimator
from .geocoding import Geocoder
from .routing import RoutesClient
from .venues import StaticVenueResolver, VenueResolver


def get_api_key(x_api_key: Optional[str] = Header(default=None)) -> str:
    expected_api_key = CONFIG.api_key
    if expected_api_key is None or x_api_key != expected_api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
    return x_api_key


def get_http_client(request: Request) -> httpx.AsyncClient:
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="HTTP client not initialized",
        )
    return client


def get_routes_client(client: httpx.AsyncClient = Depends(get_http_client)) -> RoutesClient:
    return RoutesClient(client)


def get_geocoder(client: httpx.AsyncClient = Depends(get_http_client)) -> Geocoder:
    return Geocoder(client)


def get_composer(
    routes: RoutesClient = Depends(get_routes_client),
    geocoder: Geocoder = Depends(get_geocoder),
) -> TravelPlanComposer:
    return TravelPlanComposer(ConvergenceSolver(routes), FallbackEstimator(geocoder))


def get_venue_resolver() -> VenueResolver:
    return StaticVenueResolver()
