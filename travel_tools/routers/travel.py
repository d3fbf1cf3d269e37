from typing import Optional
import logging
import time
import json
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from ..composer import TravelPlanComposer
from ..deps import get_api_key, get_composer, get_venue_resolver
from ..errors import InvalidInputError, MissingInputError, TravelTimeUnavailableError
from ..models import GameEvent, TravelPlan, TravelPreferences
from ..venues import VenueResolver


router = APIRouter(dependencies=[Depends(get_api_key)])


class PlanRequest(BaseModel):
    game: GameEvent
    preferences: TravelPreferences
    venue_address: Optional[str] = None
    timezone: Optional[str] = None


@router.post("/plan", response_model=TravelPlan)
async def plan(
    req: PlanRequest,
    composer: TravelPlanComposer = Depends(get_composer),
    venues: VenueResolver = Depends(get_venue_resolver),
) -> TravelPlan:
    start_time = time.monotonic()
    venue_address = req.venue_address or venues.resolve(req.game.venue)
    if not venue_address:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown venue: {req.game.venue}",
        )

    try:
        result = await composer.compose_plan(req.game, req.preferences, venue_address, req.timezone)
    except (MissingInputError, InvalidInputError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except TravelTimeUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Live travel data unavailable: {e.routing_error}",
        )

    latency_ms = (time.monotonic() - start_time) * 1000
    log_data = {
        "ts": datetime.utcnow().isoformat(),
        "tool": "travel-plan",
        "fn": "plan",
        "latency_ms": f"{latency_ms:.2f}",
        "ok": True,
        "estimated": result.is_estimated,
    }
    logging.info(json.dumps(log_data))
    return result
