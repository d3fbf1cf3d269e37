import json
import os
from typing import Dict, Final


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_json_dict(name: str) -> Dict[str, str]:
    raw = os.getenv(name)
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(k): str(v) for k, v in data.items()}


class _Config:
    def __init__(self) -> None:
        # Security / limits
        self.api_key: str | None = os.getenv("TRAVEL_API_KEY")
        self.rate_limit: str = os.getenv("TRAVEL_RATE_LIMIT", "30/minute")

        # HTTP behavior
        self.user_agent: str = os.getenv("TRAVEL_USER_AGENT", "RinkTravel-Tool")
        self.http_timeout_sec: float = _env_float("HTTP_TIMEOUT_SEC", 10.0)

        # External API bases
        self.google_maps_api_key: str | None = os.getenv("GOOGLE_MAPS_API_KEY")
        self.routes_base: str = os.getenv("ROUTES_BASE", "https://routes.googleapis.com")
        self.geocode_base: str = os.getenv(
            "GEOCODE_BASE", "https://maps.googleapis.com/maps/api/geocode/json"
        )
        self.maps_dir_base: str = os.getenv("MAPS_DIR_BASE", "https://www.google.com/maps/dir/")

        # Timezone
        self.default_timezone: str = os.getenv("DEFAULT_TIMEZONE", "America/Los_Angeles")

        # Departure-time convergence
        self.initial_guess_sec: int = _env_int("TRAVEL_INITIAL_GUESS_SEC", 45 * 60)
        self.convergence_threshold_sec: int = _env_int("TRAVEL_CONVERGENCE_THRESHOLD_SEC", 5 * 60)
        self.max_refinements: int = _env_int("TRAVEL_MAX_REFINEMENTS", 1)

        # Straight-line fallback estimate
        self.fallback_road_factor: float = _env_float("FALLBACK_ROAD_FACTOR", 1.3)
        self.fallback_speed_kph: float = _env_float("FALLBACK_SPEED_KPH", 56.0)
        self.fallback_safety_multiplier: float = _env_float("FALLBACK_SAFETY_MULTIPLIER", 1.2)
        self.fallback_min_sec: int = _env_int("FALLBACK_MIN_SEC", 5 * 60)

        # Venue name -> address directory, e.g. {"Anaheim Ice": "300 W Lincoln Ave, Anaheim, CA"}
        self.venue_addresses: Dict[str, str] = _env_json_dict("VENUE_ADDRESSES_JSON")


CONFIG: Final[_Config] = _Config()
