"""FastAPI dependencies for dependency injection."""
from functools import lru_cache

import requests

from backend.config import settings
from backend.services.conditions_service import ConditionsService
from backend.services.location_service import LocationService
from conditions_pipeline.services.cache_service import CacheService
from conditions_pipeline.services.coastline_service import CoastlineService
from conditions_pipeline.services.daylight_service import DaylightService
from conditions_pipeline.services.fallback_orchestrator import FallbackOrchestrator
from conditions_pipeline.services.geocoding_service import GeocodingService
from conditions_pipeline.services.marine_service import MarineService
from conditions_pipeline.services.stormglass_service import StormglassService
from conditions_pipeline.services.tide_service import TideService
from conditions_pipeline.services.weather_service import WeatherService


@lru_cache()
def get_cache() -> CacheService:
    """Get cached in-memory cache instance."""
    return CacheService()


@lru_cache()
def get_http_session() -> requests.Session:
    """Get shared HTTP session."""
    return requests.Session()


def _adapter_kwargs() -> dict:
    return {
        "session": get_http_session(),
        "cache": get_cache(),
        "timezone": settings.timezone,
        "timeout": settings.request_timeout,
    }


@lru_cache()
def get_coastline_service() -> CoastlineService:
    """Get cached coastline service instance."""
    return CoastlineService(**_adapter_kwargs())


@lru_cache()
def get_geocoding_service() -> GeocodingService:
    """Get cached geocoding service instance."""
    return GeocodingService(**_adapter_kwargs())


@lru_cache()
def get_orchestrator() -> FallbackOrchestrator:
    """Get cached orchestrator wired to all providers."""
    kwargs = _adapter_kwargs()
    return FallbackOrchestrator(
        stormglass=StormglassService(
            api_key=settings.stormglass_api_key,
            priority=settings.sub_source_priority,
            **kwargs,
        ),
        marine=MarineService(**kwargs),
        weather=WeatherService(**kwargs),
        tides=TideService(api_key=settings.worldtides_api_key, **kwargs),
        coastline=get_coastline_service(),
        max_workers=settings.max_workers,
    )


@lru_cache()
def get_daylight_service() -> DaylightService:
    """Get cached daylight service instance."""
    return DaylightService(timezone=settings.timezone)


def get_conditions_service() -> ConditionsService:
    """Get conditions service instance."""
    return ConditionsService(
        orchestrator=get_orchestrator(),
        daylight=get_daylight_service(),
    )


def get_location_service() -> LocationService:
    """Get location service instance."""
    return LocationService(
        geocoding=get_geocoding_service(),
        coastline=get_coastline_service(),
    )
