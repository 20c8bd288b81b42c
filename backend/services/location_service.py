"""Service for location search and coastline lookups."""
from typing import List

from backend.schemas.location import CoastlineBearingSchema, LocationSchema, PlaceNameSchema
from conditions_pipeline.services.coastline_service import CoastlineService
from conditions_pipeline.services.geocoding_service import GeocodingService
from conditions_pipeline.utils.units import degrees_to_compass


class LocationService:
    """Service for location operations."""

    def __init__(
        self,
        geocoding: GeocodingService = None,
        coastline: CoastlineService = None,
    ):
        self.geocoding = geocoding or GeocodingService()
        self.coastline = coastline or CoastlineService()

    def search(self, text: str) -> List[LocationSchema]:
        """Search places by name."""
        return [
            LocationSchema(
                name=loc.name,
                latitude=loc.latitude,
                longitude=loc.longitude,
                type=loc.type,
                address=loc.address,
            )
            for loc in self.geocoding.search(text)
        ]

    def coastline_bearing(self, latitude: float, longitude: float) -> CoastlineBearingSchema:
        bearing = self.coastline.coastline_bearing(latitude, longitude)
        return CoastlineBearingSchema(
            latitude=latitude,
            longitude=longitude,
            bearing=bearing,
            compass=degrees_to_compass(bearing),
        )

    def place_name(self, latitude: float, longitude: float) -> PlaceNameSchema:
        """Reverse geocode coordinates, falling back to the coordinates themselves."""
        return PlaceNameSchema(
            latitude=latitude,
            longitude=longitude,
            name=self.geocoding.reverse(latitude, longitude),
        )
