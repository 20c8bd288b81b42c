"""Pydantic schemas for locations."""
from pydantic import BaseModel
from typing import Optional


class LocationSchema(BaseModel):
    """Geocoded place."""

    name: str
    latitude: float
    longitude: float
    type: Optional[str] = None
    address: dict = {}


class CoastlineBearingSchema(BaseModel):
    """Bearing to the nearest coastline, None when none was found."""

    latitude: float
    longitude: float
    bearing: Optional[float] = None
    compass: Optional[str] = None


class PlaceNameSchema(BaseModel):
    latitude: float
    longitude: float
    name: str
