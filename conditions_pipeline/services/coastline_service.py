"""Service for finding the bearing to the nearest coastline via Overpass."""
import logging
from typing import Any, Dict, Optional

from conditions_pipeline.config import (
    OVERPASS_URL,
    COASTLINE_CACHE_TTL,
    COASTLINE_SEARCH_RADIUS_M,
    CACHE_KEY_PRECISION,
)
from conditions_pipeline.errors import ProviderError
from conditions_pipeline.models.query import validate_coordinates
from conditions_pipeline.services.source_adapter import SourceAdapter
from conditions_pipeline.utils.geo_utils import haversine_km, calculate_bearing

logger = logging.getLogger(__name__)


def nearest_coastline_node(data: Dict[str, Any], latitude: float, longitude: float) -> Optional[Dict[str, float]]:
    """Closest node of any returned coastline way, or None."""
    nearest = None
    min_distance = float("inf")
    for way in data.get("elements") or []:
        for node in way.get("geometry") or []:
            distance = haversine_km(latitude, longitude, node["lat"], node["lon"])
            if distance < min_distance:
                min_distance = distance
                nearest = node
    return nearest


class CoastlineService(SourceAdapter):
    """
    Bearing from a location to its nearest mapped coastline.

    Only used for the advisory onshore/offshore label, so every failure
    yields None instead of an error.
    """

    provider = "overpass"
    cache_ttl = COASTLINE_CACHE_TTL

    def coastline_bearing(self, latitude: float, longitude: float) -> Optional[float]:
        validate_coordinates(latitude, longitude)
        key = (
            "coastline",
            round(latitude, CACHE_KEY_PRECISION),
            round(longitude, CACHE_KEY_PRECISION),
        )
        cached = self.cache.get(key, long_lived=True)
        if cached is not None:
            logger.info("Using cached coastline bearing")
            return cached

        query = (
            "[out:json][timeout:25];"
            f'(way["natural"="coastline"](around:{COASTLINE_SEARCH_RADIUS_M},{latitude},{longitude}););'
            "out geom;"
        )
        try:
            data = self._get(OVERPASS_URL, params={"data": query})
            node = nearest_coastline_node(data, latitude, longitude)
        except (ProviderError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Coastline lookup failed: %s", e)
            return None

        if node is None:
            logger.info("No coastline found within %d m", COASTLINE_SEARCH_RADIUS_M)
            return None

        bearing = calculate_bearing(latitude, longitude, node["lat"], node["lon"])
        self.cache.set(key, bearing, self.cache_ttl, long_lived=True)
        logger.info("Coastline bearing %.1f deg", bearing)
        return bearing
