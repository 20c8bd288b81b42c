"""Service for place search and reverse geocoding via Nominatim."""
import logging
from typing import List

from conditions_pipeline.config import (
    NOMINATIM_URL,
    GEOCODING_CACHE_TTL,
    GEOCODING_COUNTRY_CODES,
    GEOCODING_LIMIT,
    GEOCODING_MIN_QUERY_LENGTH,
)
from conditions_pipeline.errors import ConditionsFetchError, ProviderError
from conditions_pipeline.models.location import Location
from conditions_pipeline.models.query import validate_coordinates
from conditions_pipeline.services.source_adapter import SourceAdapter

logger = logging.getLogger(__name__)


class GeocodingService(SourceAdapter):
    """Looks up places by name (UK only by default). Results are cached long-lived."""

    provider = "nominatim"
    cache_ttl = GEOCODING_CACHE_TTL

    def __init__(self, country_codes: str = GEOCODING_COUNTRY_CODES, limit: int = GEOCODING_LIMIT, **kwargs):
        super().__init__(**kwargs)
        self.country_codes = country_codes
        self.limit = limit

    def search(self, text: str) -> List[Location]:
        """
        Search for places matching ``text``.

        Queries shorter than two characters return an empty list without a
        request.

        Raises:
            ConditionsFetchError: The geocoder could not be reached
        """
        query = (text or "").strip()
        if len(query) < GEOCODING_MIN_QUERY_LENGTH:
            return []

        key = ("geocode", query.lower())
        cached = self.cache.get(key, long_lived=True)
        if cached is not None:
            logger.info("Using cached location data for %r", query)
            return cached

        try:
            rows = self._get(
                f"{NOMINATIM_URL}/search",
                params={
                    "q": query,
                    "format": "json",
                    "countrycodes": self.country_codes,
                    "limit": self.limit,
                    "addressdetails": 1,
                },
            )
            results = [Location.from_nominatim(row) for row in rows]
        except (ProviderError, KeyError, TypeError, ValueError) as e:
            logger.warning("Location search for %r failed: %s", query, e)
            raise ConditionsFetchError(
                "geocoding", "Failed to search location. Please try again.", e,
            )

        if results:
            self.cache.set(key, results, self.cache_ttl, long_lived=True)
        return results

    def reverse(self, latitude: float, longitude: float) -> str:
        """Place name for coordinates, falling back to ``"lat, lon"``."""
        validate_coordinates(latitude, longitude)
        fallback = f"{latitude:.4f}, {longitude:.4f}"
        try:
            data = self._get(
                f"{NOMINATIM_URL}/reverse",
                params={"lat": latitude, "lon": longitude, "format": "json"},
            )
        except ProviderError as e:
            logger.warning("Reverse geocoding failed: %s", e)
            return fallback
        if not isinstance(data, dict):
            return fallback
        return data.get("display_name") or fallback
