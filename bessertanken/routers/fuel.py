from fastapi import APIRouter, HTTPException, Query
from typing import List, Optional

from bessertanken.schemas.fuel import FuelStation, FuelStationDetail, FuelType, FuelTypeResponse
from bessertanken.services.errors import TransportError
from bessertanken.services.kraftstoffbilliger import get_kraftstoffbilliger_service

router = APIRouter()


def _unavailable(e: TransportError) -> HTTPException:
    return HTTPException(status_code=503, detail=f"Fuel price service unavailable: {str(e)}")


def _fuel_type(fuel_type_id: int) -> FuelType:
    try:
        return FuelType(fuel_type_id)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown fuel type id {fuel_type_id}")


@router.get("/fuel-types", response_model=List[FuelTypeResponse])
async def list_fuel_types_endpoint():
    """List the fuel types the API currently reports."""
    service = get_kraftstoffbilliger_service()
    try:
        fuel_types = await service.list_fuel_types()
    except TransportError as e:
        raise _unavailable(e)

    return [FuelTypeResponse(id=int(fuel_type), name=fuel_type.label) for fuel_type in fuel_types]


@router.get("/stations", response_model=List[FuelStation])
async def search_stations_endpoint(
    fuel_type: int,
    lat: float,
    lon: float,
    radius: Optional[int] = Query(default=None, gt=0, description="Search radius in km"),
):
    """
    Search stations around a coordinate.
    Returns an empty list when nothing is found or the API answer is unusable.
    Raises:
        HTTPException(503): If the fuel price API cannot be reached.
    """
    service = get_kraftstoffbilliger_service()
    try:
        return await service.search_stations(_fuel_type(fuel_type), lat, lon, radius)
    except TransportError as e:
        raise _unavailable(e)


@router.get("/stations/route", response_model=List[FuelStation])
async def search_stations_along_route_endpoint(
    lat: float,
    lon: float,
    lat2: float,
    lon2: float,
    fuel_type: int,
    map_provider: Optional[str] = Query(default=None, alias="map"),
):
    """Search stations along the route between two coordinates."""
    service = get_kraftstoffbilliger_service()
    try:
        return await service.search_stations_along_route(lat, lon, lat2, lon2, _fuel_type(fuel_type), map_provider)
    except TransportError as e:
        raise _unavailable(e)


@router.get("/stations/{station_id}", response_model=FuelStationDetail)
async def get_station_detail_endpoint(station_id: str):
    service = get_kraftstoffbilliger_service()
    try:
        detail = await service.get_station_detail(station_id)
    except TransportError as e:
        raise _unavailable(e)

    if detail is None:
        raise HTTPException(status_code=404, detail="Fuel station not found")
    return detail
