from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from ..deps import get_api_key, get_routes_client
from ..errors import RoutingError
from ..models import DistanceResult, RouteSample, TrafficModel
from ..routing import RoutesClient
from ..timezones import parse_instant


router = APIRouter(dependencies=[Depends(get_api_key)])


class QuantileRequest(BaseModel):
    origin: str
    destination: str
    departure_time: str  # ISO-8601 with offset
    traffic_model: TrafficModel = TrafficModel.BEST_GUESS


class DistanceRequest(BaseModel):
    origin: str
    destination: str


def _upstream_error(e: RoutingError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.post("/quantile", response_model=RouteSample)
async def quantile(req: QuantileRequest, routes: RoutesClient = Depends(get_routes_client)) -> RouteSample:
    try:
        departure = parse_instant(req.departure_time)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    try:
        return await routes.query(req.origin, req.destination, departure, req.traffic_model)
    except RoutingError as e:
        raise _upstream_error(e)


@router.post("/distance", response_model=DistanceResult)
async def distance(req: DistanceRequest, routes: RoutesClient = Depends(get_routes_client)) -> DistanceResult:
    try:
        return await routes.compute_distance(req.origin, req.destination)
    except RoutingError as e:
        raise _upstream_error(e)
