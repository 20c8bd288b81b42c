"""Adapter for the Stormglass multi-model marine and weather API."""
import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from conditions_pipeline.config import (
    STORMGLASS_URL,
    STORMGLASS_PARAMS,
    STORMGLASS_CACHE_TTL,
    SUB_SOURCE_PRIORITY,
    DEFAULT_SUB_SOURCE,
)
from conditions_pipeline.errors import ProviderNotConfigured, MalformedPayload
from conditions_pipeline.models.series import HourlySeries
from conditions_pipeline.services.source_adapter import SourceAdapter

logger = logging.getLogger(__name__)

# Stormglass parameter -> canonical channel
MARINE_FIELDS = {
    "waveHeight": "wave_height",
    "wavePeriod": "wave_period",
    "waveDirection": "wave_direction",
    "swellHeight": "swell_height",
    "swellPeriod": "swell_period",
    "swellDirection": "swell_direction",
    "currentSpeed": "current_speed",
    "currentDirection": "current_direction",
    "waterTemperature": "sea_temperature",
}
WEATHER_FIELDS = {
    "airTemperature": "air_temperature",
    "windSpeed": "wind_speed",
    "windDirection": "wind_direction",
    "precipitation": "precipitation",
}


def resolve_sub_source(
    point: Optional[Dict[str, Any]],
    preferred: str = DEFAULT_SUB_SOURCE,
    priority: Sequence[str] = SUB_SOURCE_PRIORITY,
) -> Optional[float]:
    """
    Pick one model's value for a single sample of a single parameter.

    The preferred sub-source wins when it has a value; otherwise the first
    sub-source in ``priority`` that has one.
    """
    if not point:
        return None
    for key in [preferred, *priority]:
        value = point.get(key)
        if value is not None:
            return value
    return None


def weather_code_from_cloud_cover(cloud_cover: Optional[float], precipitation: Optional[float]) -> int:
    """Approximate WMO weather code from cloud cover (%) and precipitation (mm/h)."""
    precipitation = precipitation or 0
    cloud_cover = cloud_cover or 0
    if precipitation > 5:
        return 65
    if precipitation > 1:
        return 63
    if precipitation > 0:
        return 61
    if cloud_cover > 75:
        return 3
    if cloud_cover > 50:
        return 2
    if cloud_cover > 25:
        return 1
    return 0


class StormglassService(SourceAdapter):
    """
    Premium combined source: one request yields both marine and weather series.

    Each hour carries values from several forecast models (``sg``, ``noaa``,
    ``meto``...). The raw payload is cached, so switching the preferred model
    re-normalises without another request.
    """

    provider = "stormglass"
    cache_ttl = STORMGLASS_CACHE_TTL
    required_field = "hours"

    def __init__(
        self,
        api_key: Optional[str] = None,
        priority: Optional[Sequence[str]] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.priority = list(priority or SUB_SOURCE_PRIORITY)

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def fetch_conditions(
        self,
        latitude: float,
        longitude: float,
        day,
        preferred_sub_source: str = DEFAULT_SUB_SOURCE,
    ) -> Tuple[HourlySeries, HourlySeries]:
        """
        Fetch marine and weather series for a day.

        Returns:
            Tuple of (marine, weather) series

        Raises:
            ProviderNotConfigured: No API key
            ProviderError: Request failed, quota reached or payload malformed
        """
        return self.load(
            latitude, longitude, day,
            lambda payload, day: self.normalize(payload, day, preferred_sub_source),
        )

    def _request(self, latitude: float, longitude: float, day: date) -> Dict[str, Any]:
        if not self.configured:
            raise ProviderNotConfigured(self.provider, "API key not configured")
        start = self.local_midnight(day)
        end = start + timedelta(days=1) - timedelta(seconds=1)
        logger.info("Requesting Stormglass data for %.4f, %.4f on %s", latitude, longitude, day)
        return self._get(
            STORMGLASS_URL,
            params={
                "lat": f"{latitude:.4f}",
                "lng": f"{longitude:.4f}",
                "params": ",".join(STORMGLASS_PARAMS),
                "start": int(start.timestamp()),
                "end": int(end.timestamp()),
            },
            headers={"Authorization": self.api_key},
        )

    def normalize(
        self,
        payload: Dict[str, Any],
        day: date,
        preferred_sub_source: str = DEFAULT_SUB_SOURCE,
    ) -> Tuple[HourlySeries, HourlySeries]:
        hours = payload.get("hours") or []
        if not hours:
            raise MalformedPayload(self.provider, "no hourly data returned")

        def pick(hour: Dict[str, Any], name: str) -> Optional[float]:
            value = resolve_sub_source(hour.get(name), preferred_sub_source, self.priority)
            return None if value is None else float(value)

        times = []
        marine: Dict[str, List[Optional[float]]] = {c: [] for c in MARINE_FIELDS.values()}
        weather: Dict[str, List[Optional[float]]] = {
            c: [] for c in [
                *WEATHER_FIELDS.values(), "apparent_temperature", "wind_gust",
                "precipitation_probability", "visibility", "weather_code",
            ]
        }

        for hour in hours:
            try:
                times.append(self.parse_local(hour["time"]))
            except (KeyError, TypeError, ValueError) as e:
                raise MalformedPayload(self.provider, f"bad hour timestamp: {e}")
            try:
                self._append_hour(hour, pick, marine, weather)
            except (AttributeError, TypeError, ValueError) as e:
                raise MalformedPayload(self.provider, f"bad hour at {hour['time']}: {e}")

        logger.info(
            "Normalised %d Stormglass hours using preferred sub-source %r",
            len(times), preferred_sub_source,
        )
        try:
            return (
                HourlySeries(source=self.provider, times=times, channels=marine),
                HourlySeries(source=self.provider, times=list(times), channels=weather),
            )
        except ValueError as e:
            raise MalformedPayload(self.provider, str(e))

    @staticmethod
    def _append_hour(hour, pick, marine, weather) -> None:
        for name, channel in MARINE_FIELDS.items():
            marine[channel].append(pick(hour, name))
        for name, channel in WEATHER_FIELDS.items():
            weather[channel].append(pick(hour, name))

        wind = pick(hour, "windSpeed")
        gust = pick(hour, "gust")
        precipitation = pick(hour, "precipitation")
        visibility_km = pick(hour, "visibility")

        # No separate feels-like temperature; air temperature stands in
        weather["apparent_temperature"].append(pick(hour, "airTemperature"))
        weather["wind_gust"].append(gust if gust is not None else wind)
        weather["precipitation_probability"].append(
            min(100.0, precipitation * 20) if precipitation and precipitation > 0 else 0.0
        )
        weather["visibility"].append(
            visibility_km * 1000 if visibility_km is not None else None
        )
        weather["weather_code"].append(
            weather_code_from_cloud_cover(pick(hour, "cloudCover"), precipitation)
        )
