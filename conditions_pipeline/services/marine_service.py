"""Adapter for the Open-Meteo marine forecast API (free fallback)."""
from conditions_pipeline.config import (
    OPEN_METEO_MARINE_URL,
    OPEN_METEO_MARINE_HOURLY,
    MARINE_CACHE_TTL,
)
from conditions_pipeline.models.series import HourlySeries
from conditions_pipeline.services.source_adapter import OpenMeteoAdapter
from conditions_pipeline.utils.units import kmh_to_mps


class MarineService(OpenMeteoAdapter):
    """Wave, swell, current and sea temperature from Open-Meteo."""

    provider = "open-meteo-marine"
    cache_ttl = MARINE_CACHE_TTL
    url = OPEN_METEO_MARINE_URL
    hourly_params = OPEN_METEO_MARINE_HOURLY
    field_map = {
        "wave_height": "wave_height",
        "wave_period": "wave_period",
        "wave_direction": "wave_direction",
        "swell_wave_height": "swell_height",
        "swell_wave_period": "swell_period",
        "swell_wave_direction": "swell_direction",
        "ocean_current_velocity": "current_speed",
        "ocean_current_direction": "current_direction",
        "sea_surface_temperature": "sea_temperature",
    }

    def convert_units(self, series: HourlySeries) -> HourlySeries:
        # Current velocity is reported in km/h
        current = series.get("current_speed")
        if current is not None:
            series.channels["current_speed"] = [kmh_to_mps(v) for v in current]
        return series
