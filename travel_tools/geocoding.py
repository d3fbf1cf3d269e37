from typing import Optional, Tuple
import json
import logging
import math
import time
from datetime import datetime

import httpx

from .config import CONFIG
from .errors import GeocodingError

logger = logging.getLogger(__name__)


class Geocoder:
    """Google Geocoding API lookup of a free-text address to (lat, lng)."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self._client = client
        self._api_key = api_key if api_key is not None else CONFIG.google_maps_api_key
        self._base_url = base_url or CONFIG.geocode_base

    async def geocode(self, address: str) -> Tuple[float, float]:
        if not self._api_key:
            raise GeocodingError("GOOGLE_MAPS_API_KEY is not configured")
        start_time = time.monotonic()
        params = {"address": address, "key": self._api_key}
        headers = {"User-Agent": CONFIG.user_agent}
        try:
            resp = await self._client.get(self._base_url, params=params, headers=headers)
            if resp.status_code != 200:
                raise GeocodingError(f"Geocoding error: {resp.status_code}")
            data = resp.json()
        except httpx.HTTPError as e:
            raise GeocodingError(f"Geocoding request failed: {str(e)}") from e
        except ValueError as e:
            raise GeocodingError("Geocoding response malformed") from e

        api_status = data.get("status") if isinstance(data, dict) else None
        results = (data.get("results") or []) if isinstance(data, dict) else []
        if api_status != "OK" or not results:
            raise GeocodingError(f"Geocoding failed for '{address}': {api_status or 'no results'}")

        location = (results[0].get("geometry") or {}).get("location") or {}
        try:
            lat = float(location.get("lat"))
            lng = float(location.get("lng"))
        except (TypeError, ValueError):
            raise GeocodingError(f"Geocoding returned no coordinates for '{address}'")
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise GeocodingError(f"Geocoding returned non-finite coordinates for '{address}'")

        latency_ms = (time.monotonic() - start_time) * 1000
        log_data = {
            "ts": datetime.utcnow().isoformat(),
            "tool": "travel-geo",
            "fn": "geocode",
            "latency_ms": f"{latency_ms:.2f}",
            "ok": True,
            "http_status": resp.status_code,
        }
        logger.info(json.dumps(log_data))
        return lat, lng
