"""Adapter for the Open-Meteo weather forecast API (free fallback)."""
from conditions_pipeline.config import (
    OPEN_METEO_WEATHER_URL,
    OPEN_METEO_WEATHER_HOURLY,
    WEATHER_CACHE_TTL,
)
from conditions_pipeline.services.source_adapter import OpenMeteoAdapter


class WeatherService(OpenMeteoAdapter):
    """Air temperature, wind, precipitation and visibility from Open-Meteo."""

    provider = "open-meteo-weather"
    cache_ttl = WEATHER_CACHE_TTL
    url = OPEN_METEO_WEATHER_URL
    hourly_params = OPEN_METEO_WEATHER_HOURLY
    # Wind is requested in m/s so no conversion is needed downstream
    extra_params = {"wind_speed_unit": "ms"}
    field_map = {
        "temperature_2m": "air_temperature",
        "apparent_temperature": "apparent_temperature",
        "windspeed_10m": "wind_speed",
        "windgusts_10m": "wind_gust",
        "winddirection_10m": "wind_direction",
        "precipitation_probability": "precipitation_probability",
        "precipitation": "precipitation",
        "visibility": "visibility",
        "weather_code": "weather_code",
    }
