"""Google Routes API adapter.

``RoutesClient.query`` is a single traffic-aware route computation for one
origin/destination/departure/traffic-model combination. No retries happen here.
"""

from typing import Any, Dict, Optional
import json
import logging
import re
import time
from datetime import datetime

import httpx

from .config import CONFIG
from .errors import RoutingError
from .models import DistanceResult, RouteSample, TrafficModel
from .timezones import to_rfc3339_utc

logger = logging.getLogger(__name__)

ROUTES_PATH = "/directions/v2:computeRoutes"
ROUTE_MATRIX_PATH = "/distanceMatrix/v2:computeRouteMatrix"

# Limits the response payload to the fields we read
ROUTES_FIELD_MASK = "routes.duration,routes.distanceMeters,routes.polyline.encodedPolyline"
MATRIX_FIELD_MASK = "originIndex,destinationIndex,distanceMeters,status"

METERS_TO_MILES = 0.000621371

_DURATION_RE = re.compile(r"^(\d+)s$")


def parse_duration(value: Any) -> int:
    """Parse a Routes API duration such as ``"3720s"`` into whole seconds."""
    match = _DURATION_RE.match(value) if isinstance(value, str) else None
    if not match:
        raise RoutingError(f"Unexpected duration format returned by Google Routes API: {value!r}")
    return int(match.group(1))


def _log_call(fn: str, start_time: float, ok: bool, http_status: Optional[int]) -> None:
    latency_ms = (time.monotonic() - start_time) * 1000
    log_data = {
        "ts": datetime.utcnow().isoformat(),
        "tool": "travel-route",
        "fn": fn,
        "latency_ms": f"{latency_ms:.2f}",
        "ok": ok,
        "http_status": http_status,
    }
    logger.info(json.dumps(log_data))


class RoutesClient:
    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self._client = client
        self._api_key = api_key if api_key is not None else CONFIG.google_maps_api_key
        self._base_url = (base_url or CONFIG.routes_base).rstrip("/")

    def _headers(self, field_mask: str) -> Dict[str, str]:
        if not self._api_key:
            raise RoutingError("GOOGLE_MAPS_API_KEY is not configured")
        return {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self._api_key,
            "X-Goog-FieldMask": field_mask,
            "User-Agent": CONFIG.user_agent,
        }

    async def _post(self, fn: str, path: str, field_mask: str, body: Dict[str, Any]) -> Any:
        headers = self._headers(field_mask)
        start_time = time.monotonic()
        try:
            resp = await self._client.post(f"{self._base_url}{path}", json=body, headers=headers)
        except httpx.HTTPError as e:
            _log_call(fn, start_time, False, None)
            raise RoutingError(f"Google Routes request failed: {str(e)}") from e

        if resp.status_code != 200:
            _log_call(fn, start_time, False, resp.status_code)
            raise RoutingError(
                f"Google Routes API error (status {resp.status_code}): {resp.text or resp.reason_phrase}",
                status_code=resp.status_code,
            )
        try:
            data = resp.json()
        except ValueError as e:
            _log_call(fn, start_time, False, resp.status_code)
            raise RoutingError("Google Routes API response malformed") from e

        _log_call(fn, start_time, True, resp.status_code)
        return data

    async def query(
        self,
        origin: str,
        destination: str,
        departure: datetime,
        traffic_model: TrafficModel = TrafficModel.BEST_GUESS,
    ) -> RouteSample:
        body = {
            "origin": {"address": origin},
            "destination": {"address": destination},
            "travelMode": "DRIVE",
            "routingPreference": "TRAFFIC_AWARE_OPTIMAL",
            "departureTime": to_rfc3339_utc(departure),
            "trafficModel": traffic_model.value,
            "computeAlternativeRoutes": False,
            "languageCode": "en-US",
            "units": "IMPERIAL",
        }
        data = await self._post("compute_routes", ROUTES_PATH, ROUTES_FIELD_MASK, body)

        routes = data.get("routes") if isinstance(data, dict) else None
        if not routes:
            raise RoutingError("Google Routes API returned no routes")

        route0 = routes[0]
        duration_seconds = parse_duration(route0.get("duration"))
        try:
            distance_meters = int(route0.get("distanceMeters") or 0)
        except (TypeError, ValueError):
            raise RoutingError("Google Routes API returned a malformed distance")

        return RouteSample(
            duration_seconds=duration_seconds,
            distance_meters=max(distance_meters, 0),
            traffic_model=traffic_model,
            encoded_polyline=(route0.get("polyline") or {}).get("encodedPolyline"),
        )

    async def compute_distance(self, origin: str, destination: str) -> DistanceResult:
        """Driving distance without a departure time, so it works for any game date."""
        body = {
            "origins": [{"waypoint": {"address": origin}}],
            "destinations": [{"waypoint": {"address": destination}}],
            "travelMode": "DRIVE",
        }
        data = await self._post("compute_route_matrix", ROUTE_MATRIX_PATH, MATRIX_FIELD_MASK, body)

        if not isinstance(data, list) or not data:
            raise RoutingError("Google Routes API returned no route data")

        element = data[0] or {}
        code = (element.get("status") or {}).get("code")
        if code:
            raise RoutingError(f"Google Routes API route error: {code}")

        distance = element.get("distanceMeters")
        if not isinstance(distance, (int, float)):
            raise RoutingError("Google Routes API returned no distance data")

        return DistanceResult(
            distance_meters=int(distance),
            distance_miles=distance * METERS_TO_MILES,
            origin_address=origin,
            destination_address=destination,
        )
