"""Adapter for the WorldTides v3 API, the dedicated tide provider."""
import logging
from datetime import date
from typing import Any, Dict, Optional

from conditions_pipeline.config import (
    WORLDTIDES_URL,
    WORLDTIDES_REGISTER_URL,
    TIDE_CACHE_TTL,
    TIDE_STEP_SECONDS,
    TIDE_DATUM,
    DEFAULT_STATION_NAME,
)
from conditions_pipeline.errors import (
    ApiKeyRequired,
    MalformedPayload,
    NoDataForLocation,
    QuotaExceeded,
)
from conditions_pipeline.models.tide import (
    TideData,
    TideEvent,
    TideHeight,
    TideKind,
    TideStation,
    TidalSummary,
)
from conditions_pipeline.services.source_adapter import SourceAdapter
from conditions_pipeline.services.tide_processor import TideProcessor

logger = logging.getLogger(__name__)

API_KEY_HELP = (
    "WorldTides API key required. Please register for a free API key:\n"
    f"1. Visit {WORLDTIDES_REGISTER_URL}\n"
    "2. Verify your email\n"
    "3. Copy the API key from your account\n"
    "4. Set it as SEAKAYAK_WORLDTIDES_API_KEY"
)
QUOTA_HELP = (
    "WorldTides API quota exceeded. The free tier resets next month, "
    "or upgrade for more requests."
)


class TideService(SourceAdapter):
    """High/low water and 30-minute heights for one local day."""

    provider = "worldtides"
    cache_ttl = TIDE_CACHE_TTL
    required_field = "extremes"

    def __init__(self, api_key: Optional[str] = None, processor: TideProcessor = None, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.processor = processor or TideProcessor()

    def _request(self, latitude: float, longitude: float, day: date) -> Dict[str, Any]:
        params = {
            "lat": f"{latitude:.6f}",
            "lon": f"{longitude:.6f}",
            "start": int(self.local_midnight(day).timestamp()),
            "length": 86400,
            "extremes": "true",
            "heights": "true",
            "step": TIDE_STEP_SECONDS,
            "datum": TIDE_DATUM,
        }
        if self.api_key:
            params["key"] = self.api_key
        logger.info("Requesting WorldTides data for %.6f, %.6f on %s", latitude, longitude, day)
        return self._get(WORLDTIDES_URL, params=params)

    def _check_status(self, response) -> None:
        if response.status_code == 400:
            raise ApiKeyRequired(self.provider, "HTTP 400", user_message=API_KEY_HELP)
        if response.status_code == 402:
            raise QuotaExceeded(self.provider, "HTTP 402", user_message=QUOTA_HELP)
        super()._check_status(response)

    def _check_payload(self, payload: Any) -> None:
        super()._check_payload(payload)
        if not payload["extremes"]:
            raise NoDataForLocation(
                "WorldTides returned no extremes",
                user_message="No tide data available for this location",
            )

    def parse(self, payload: Dict[str, Any]) -> TideData:
        """Raw WorldTides payload -> TideData with local-time events."""
        try:
            events = [
                TideEvent(
                    time=self.from_epoch(extreme["dt"]),
                    kind=TideKind.HIGH if extreme["type"] == "High" else TideKind.LOW,
                    height=float(extreme["height"]),
                )
                for extreme in payload["extremes"]
            ]
            heights = [
                TideHeight(time=self.from_epoch(h["dt"]), height=float(h["height"]))
                for h in payload.get("heights") or []
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedPayload(self.provider, f"bad tide record: {e}")

        distance = payload.get("stationDistance")
        station = TideStation(
            name=payload.get("stationName") or DEFAULT_STATION_NAME,
            latitude=payload.get("responseLat"),
            longitude=payload.get("responseLon"),
            distance_km=round(distance / 1000, 1) if distance else None,
        )
        return TideData(
            events=events,
            heights=heights,
            station=station,
            datum=payload.get("datum") or TIDE_DATUM,
            copyright=payload.get("copyright") or "WorldTides",
            source=self.provider,
        )

    def normalize(self, payload: Dict[str, Any], day: date) -> TidalSummary:
        return self.processor.summarize(self.parse(payload), day)
