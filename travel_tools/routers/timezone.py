from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from ..deps import get_api_key
from ..timezones import format_full_datetime, format_instant, resolve_zone, to_instant


router = APIRouter(dependencies=[Depends(get_api_key)])


class ResolveRequest(BaseModel):
    indicator: Optional[str] = None
    date: Optional[str] = None  # YYYY-MM-DD
    time: Optional[str] = None  # HH:MM


class ResolveResponse(BaseModel):
    zone: str
    local_time: Optional[str] = None
    display: Optional[str] = None


@router.post("/resolve", response_model=ResolveResponse)
async def resolve(req: ResolveRequest) -> ResolveResponse:
    zone = resolve_zone(req.indicator)
    if not (req.date and req.time):
        return ResolveResponse(zone=zone)

    try:
        instant = to_instant(req.date, req.time, zone)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ResolveResponse(
        zone=zone,
        local_time=format_instant(instant, zone),
        display=format_full_datetime(instant, zone),
    )
