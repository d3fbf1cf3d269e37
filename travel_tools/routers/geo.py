from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from ..deps import get_api_key, get_geocoder
from ..errors import GeocodingError
from ..geocoding import Geocoder


router = APIRouter(dependencies=[Depends(get_api_key)])


class GeocodeRequest(BaseModel):
    address: str


class GeocodeResponse(BaseModel):
    lat: float
    lng: float


@router.post("/geocode", response_model=GeocodeResponse)
async def geocode(req: GeocodeRequest, geocoder: Geocoder = Depends(get_geocoder)) -> GeocodeResponse:
    if not req.address.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Address is required")
    try:
        lat, lng = await geocoder.geocode(req.address)
    except GeocodingError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    return GeocodeResponse(lat=lat, lng=lng)
