"""API routes for locations."""
from typing import List
from fastapi import APIRouter, Depends, Query

from backend.schemas.location import CoastlineBearingSchema, LocationSchema, PlaceNameSchema
from backend.services.location_service import LocationService
from backend.api.dependencies import get_location_service

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("/search", response_model=List[LocationSchema])
def search_locations(
    q: str = Query(..., description="Place name"),
    location_service: LocationService = Depends(get_location_service),
) -> List[LocationSchema]:
    """Search UK places by name. Queries under two characters return nothing."""
    return location_service.search(q)


@router.get("/coastline-bearing", response_model=CoastlineBearingSchema)
def get_coastline_bearing(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    location_service: LocationService = Depends(get_location_service),
) -> CoastlineBearingSchema:
    """Get the bearing from a point to the nearest coastline within 50 km."""
    return location_service.coastline_bearing(lat, lon)


@router.get("/reverse", response_model=PlaceNameSchema)
def reverse_geocode(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    location_service: LocationService = Depends(get_location_service),
) -> PlaceNameSchema:
    """Get a display name for a point."""
    return location_service.place_name(lat, lon)
