"""Location model for geocoding results."""
from attrs import define, field
from typing import Optional


@define
class Location:
    """A named place returned by the geocoder."""

    name: str
    latitude: float
    longitude: float
    type: Optional[str] = None
    address: dict = field(factory=dict)

    @classmethod
    def from_nominatim(cls, row: dict) -> "Location":
        """Create a Location from a Nominatim search result."""
        return cls(
            name=row["display_name"],
            latitude=float(row["lat"]),
            longitude=float(row["lon"]),
            type=row.get("type"),
            address=row.get("address") or {},
        )
