"""Service for fetching a day's conditions with premium-to-free fallback."""
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Optional

from attrs import define, field

from conditions_pipeline.config import DEFAULT_SUB_SOURCE
from conditions_pipeline.errors import (
    ApiKeyRequired,
    ConditionsError,
    ConditionsFetchError,
    InvalidInput,
    ProviderError,
    QuotaExceeded,
    TideDataError,
)
from conditions_pipeline.models.query import ConditionsQuery
from conditions_pipeline.models.series import HourlySeries
from conditions_pipeline.models.tide import TidalSummary
from conditions_pipeline.services.coastline_service import CoastlineService
from conditions_pipeline.services.marine_service import MarineService
from conditions_pipeline.services.stormglass_service import StormglassService
from conditions_pipeline.services.tide_service import TideService
from conditions_pipeline.services.weather_service import WeatherService

logger = logging.getLogger(__name__)

MARINE_FAILED = "Failed to fetch marine conditions. Please try again."
WEATHER_FAILED = "Failed to fetch weather data. Please try again."
TIDE_QUOTA_REACHED = (
    "Free API quota reached. The app will work again after some time, "
    "or register for a free WorldTides API key for unlimited use."
)


@define
class ConditionsResult:
    """Tides, marine and weather for one query, plus where each came from."""

    tides: TidalSummary
    marine: HourlySeries
    weather: HourlySeries
    coastline_bearing: Optional[float] = None
    sources: Dict[str, str] = field(factory=dict)


class FallbackOrchestrator:
    """
    Fetches everything a query needs, degrading from the premium source to free ones.

    Tides always come from the dedicated tide provider, even when the premium
    source is available. The premium source failing for any reason is not an
    error: marine and weather then come from the free providers in parallel.
    A failure of tides, marine or weather aborts the query; the coastline
    lookup is advisory and may yield None.
    """

    def __init__(
        self,
        stormglass: StormglassService = None,
        marine: MarineService = None,
        weather: WeatherService = None,
        tides: TideService = None,
        coastline: CoastlineService = None,
        max_workers: int = 4,
    ):
        self.stormglass = stormglass or StormglassService()
        self.marine = marine or MarineService()
        self.weather = weather or WeatherService()
        self.tides = tides or TideService()
        self.coastline = coastline or CoastlineService()
        self.max_workers = max_workers

    def get_conditions(
        self,
        query: ConditionsQuery,
        preferred_sub_source: str = DEFAULT_SUB_SOURCE,
    ) -> ConditionsResult:
        """
        Fetch tides, marine and weather for a query.

        Args:
            query: Location and date
            preferred_sub_source: Stormglass model to prefer per sample

        Returns:
            ConditionsResult with all three categories populated

        Raises:
            TideDataError: Tide fetch failed (with remediation text)
            ConditionsFetchError: Marine or weather could not be fetched
        """
        lat, lon, day = query.latitude, query.longitude, query.day

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            tide_future = executor.submit(self.tides.fetch, lat, lon, day)
            coastline_future = executor.submit(self.coastline.coastline_bearing, lat, lon)

            premium = self._try_premium(query, preferred_sub_source)
            if premium is not None:
                marine_future = self._done(premium[0])
                weather_future = self._done(premium[1])
                sources = {"marine": self.stormglass.provider, "weather": self.stormglass.provider}
            else:
                marine_future = executor.submit(self.marine.fetch, lat, lon, day)
                weather_future = executor.submit(self.weather.fetch, lat, lon, day)
                sources = {"marine": self.marine.provider, "weather": self.weather.provider}

            # Leaving the executor block waits for every outstanding fetch
            tides = self._resolve_tides(tide_future)
            marine = self._resolve(marine_future, "marine", MARINE_FAILED)
            weather = self._resolve(weather_future, "weather", WEATHER_FAILED)
            coastline_bearing = coastline_future.result()

        sources["tides"] = self.tides.provider
        return ConditionsResult(
            tides=tides,
            marine=marine,
            weather=weather,
            coastline_bearing=coastline_bearing,
            sources=sources,
        )

    def _try_premium(self, query: ConditionsQuery, preferred_sub_source: str):
        if not self.stormglass.configured:
            logger.info("Stormglass API key not configured, using fallback APIs")
            return None
        try:
            return self.stormglass.fetch_conditions(
                query.latitude, query.longitude, query.day, preferred_sub_source,
            )
        except QuotaExceeded:
            logger.warning("Stormglass rate limit reached, using fallback APIs")
        except ProviderError as e:
            logger.warning("Stormglass unavailable (%s), using fallback APIs", e)
        return None

    @staticmethod
    def _done(value) -> Future:
        future = Future()
        future.set_result(value)
        return future

    @staticmethod
    def _resolve(future: Future, category: str, message: str):
        try:
            return future.result()
        except InvalidInput:
            raise
        except ConditionsError as e:
            logger.error("%s fetch failed: %s", category.capitalize(), e)
            raise ConditionsFetchError(category, message, e)

    @staticmethod
    def _resolve_tides(future: Future) -> TidalSummary:
        try:
            return future.result()
        except InvalidInput:
            raise
        except QuotaExceeded as e:
            logger.error("Tide quota exceeded: %s", e)
            raise TideDataError(TIDE_QUOTA_REACHED, e)
        except ApiKeyRequired as e:
            logger.error("Tide API key required: %s", e)
            raise TideDataError(e.user_message, e)
        except ConditionsError as e:
            logger.error("Tide fetch failed: %s", e)
            raise TideDataError(f"Failed to fetch tide data: {e.user_message}", e)
