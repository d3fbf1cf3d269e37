from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


class TrafficModel(str, Enum):
    BEST_GUESS = "BEST_GUESS"
    OPTIMISTIC = "OPTIMISTIC"
    PESSIMISTIC = "PESSIMISTIC"


class GameEvent(BaseModel):
    """A scheduled game as supplied by the schedule provider."""

    id: Optional[str] = None
    home_team: str
    away_team: str
    home_jersey: Optional[str] = None
    away_jersey: Optional[str] = None
    date: str  # YYYY-MM-DD, local to the venue
    time: str  # HH:MM or HH:MM:SS, 24-hour local wall clock
    timezone: Optional[str] = None  # IANA name or abbreviation such as "PT"
    venue: str
    rink: Optional[str] = None
    season: str = ""
    division: str = ""
    game_type: Optional[str] = None

    class Config:
        frozen = True


class TravelPreferences(BaseModel):
    home_address: str
    prep_time_minutes: int = Field(30, ge=0)
    arrival_buffer_minutes: int = Field(60, ge=0)
    team: Optional[str] = None
    division: Optional[str] = None
    season: Optional[str] = None


class RouteSample(BaseModel):
    duration_seconds: int = Field(..., ge=0)
    distance_meters: int = Field(..., ge=0)
    traffic_model: TrafficModel
    encoded_polyline: Optional[str] = None


class DistanceResult(BaseModel):
    distance_meters: int
    distance_miles: float
    origin_address: str
    destination_address: str


class ConvergedRoute(BaseModel):
    duration_seconds: int
    distance_meters: int
    low_seconds: Optional[int] = None
    high_seconds: Optional[int] = None
    departure: datetime
    best_guess_calls: int = 1

    @property
    def has_range(self) -> bool:
        return self.low_seconds is not None and self.high_seconds is not None


class FallbackEstimate(BaseModel):
    duration_seconds: int
    distance_meters: int
    straight_line_meters: int
    is_fallback: bool = True
    disclaimer: str


class TravelPlan(BaseModel):
    """Wake-up / leave-by guidance for one game. All times are ISO-8601 with a numeric offset."""

    game: GameEvent
    preferences: TravelPreferences
    venue_address: str
    timezone: str

    travel_duration_seconds: int
    travel_duration_low_seconds: Optional[int] = None
    travel_duration_high_seconds: Optional[int] = None
    distance_meters: int

    game_time: str
    arrival_time: str
    departure_time: str
    wake_up_time: str

    calculated_at: str
    is_estimated: bool = False
    estimate_method: Optional[Literal["distance"]] = None
    disclaimer: Optional[str] = None
    maps_url: str

    class Config:
        frozen = True
