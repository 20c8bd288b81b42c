"""Service for assembling the conditions report for one trip."""
import logging
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, List, Optional
from zoneinfo import ZoneInfo

from backend.config import settings
from backend.schemas.conditions import (
    AtTimeSnapshot,
    ConditionsBlock,
    ConditionsReport,
    DaylightSchema,
    DirectionalStatSchema,
    HourlySeriesSchema,
    LocationRef,
    RiskAssessmentSchema,
    RiskFactorSchema,
    ScalarStatSchema,
    SeriesSummarySchema,
    TideEventSchema,
    TideHeightSchema,
    TideStationSchema,
    TidesSchema,
    WindSnapshot,
)
from conditions_pipeline.config import LOOKAHEAD_HOURS
from conditions_pipeline.errors import InvalidInput, NoDataForTime
from conditions_pipeline.models.query import ConditionsQuery
from conditions_pipeline.models.risk import Activity, RiskAssessment
from conditions_pipeline.models.series import HourlySeries, SeriesSummary
from conditions_pipeline.models.tide import TidalSummary
from conditions_pipeline.services import risk_engine
from conditions_pipeline.services.daylight_service import DaylightService
from conditions_pipeline.services.fallback_orchestrator import FallbackOrchestrator
from conditions_pipeline.services.summary_builder import SummaryBuilder
from conditions_pipeline.utils.geo_utils import is_wind_against_tide, wind_shore_direction
from conditions_pipeline.utils.interpolation import snapshot_at, tide_height_at
from conditions_pipeline.utils.units import (
    beaufort,
    degrees_to_compass,
    meters_to_feet,
    mps_to_knots,
    mps_to_mph,
    paddler_level_for_wind,
    round_half_up,
)

logger = logging.getLogger(__name__)


def parse_activities(values: Iterable[str]) -> List[Activity]:
    """Map activity names onto Activity, rejecting unknown ones."""
    activities = []
    for value in values:
        try:
            activities.append(Activity(value))
        except ValueError:
            valid = ", ".join(a.value for a in Activity)
            raise InvalidInput(f"Unknown activity {value!r}, expected one of: {valid}")
    return activities


class ConditionsService:
    """Service for conditions reports."""

    def __init__(
        self,
        orchestrator: FallbackOrchestrator = None,
        summary_builder: SummaryBuilder = None,
        daylight: DaylightService = None,
        max_forecast_days: int = None,
        timezone: str = None,
        today: Callable[[], date] = None,
    ):
        self.orchestrator = orchestrator or FallbackOrchestrator()
        self.summary_builder = summary_builder or SummaryBuilder()
        self.timezone = timezone or settings.timezone
        self.daylight = daylight or DaylightService(timezone=self.timezone)
        self.max_forecast_days = (
            settings.max_forecast_days if max_forecast_days is None else max_forecast_days
        )
        self.today = today or (lambda: datetime.now(ZoneInfo(self.timezone)).date())

    def validate_forecast_date(self, day: date) -> None:
        """Only today and the next ``max_forecast_days`` days are forecast."""
        today = self.today()
        if not today <= day <= today + timedelta(days=self.max_forecast_days):
            raise InvalidInput(
                f"Please select a valid date within the next {self.max_forecast_days + 1} days"
            )

    def build_report(
        self,
        latitude: float,
        longitude: float,
        day: str,
        start_time: str = "09:00",
        activities: Iterable[str] = (),
        preferred_sub_source: Optional[str] = None,
        name: Optional[str] = None,
    ) -> ConditionsReport:
        """
        Fetch, summarise and grade conditions for a trip.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees
            day: Trip date (YYYY-MM-DD)
            start_time: Trip start (HH:MM, local)
            activities: Hazardous activity names
            preferred_sub_source: Stormglass model to prefer
            name: Optional display name for the location

        Returns:
            ConditionsReport

        Raises:
            InvalidInput: Bad coordinates, date, time or activity
            ConditionsFetchError: Mandatory data could not be fetched
        """
        query = ConditionsQuery.create(latitude, longitude, day, start_time, self.timezone)
        self.validate_forecast_date(query.day)
        selected = parse_activities(activities)

        result = self.orchestrator.get_conditions(
            query, preferred_sub_source or settings.preferred_sub_source,
        )
        marine_summary = self.summary_builder.summarize(result.marine)
        weather_summary = self.summary_builder.summarize(result.weather)

        assessment = risk_engine.score(
            result.weather, result.marine, query.start, selected, marine_summary,
        )

        window = self.daylight.get_daylight_window(query.latitude, query.longitude, query.day)
        daylight = DaylightSchema(
            dawn=window.dawn,
            dusk=window.dusk,
            trip_runs_into_darkness=self.daylight.runs_into_darkness(
                query.latitude, query.longitude, query.start, LOOKAHEAD_HOURS,
            ),
        )

        return ConditionsReport(
            location=LocationRef(latitude=query.latitude, longitude=query.longitude, name=name),
            date=query.day,
            time=query.start_time.strftime("%H:%M"),
            tides=self._tides_schema(result.tides),
            marine=self._block(result.marine, marine_summary),
            weather=self._block(result.weather, weather_summary),
            coastline_bearing=result.coastline_bearing,
            at_time=self._snapshot(query, result.weather, result.marine, result.tides,
                                   result.coastline_bearing),
            daylight=daylight,
            risk_assessment=self._assessment_schema(assessment),
            sources=result.sources,
        )

    def _snapshot(
        self,
        query: ConditionsQuery,
        weather: HourlySeries,
        marine: HourlySeries,
        tides: TidalSummary,
        coastline_bearing: Optional[float],
    ) -> Optional[AtTimeSnapshot]:
        try:
            weather_now = snapshot_at(weather, query.day, query.start_time)
            marine_now = snapshot_at(marine, query.day, query.start_time)
        except NoDataForTime as e:
            logger.warning("No hourly sample for the start time: %s", e)
            return None

        try:
            tide_height = round_half_up(tide_height_at(tides, query.start), 2)
        except NoDataForTime:
            tide_height = None

        at = weather_now.pop("time")
        marine_now.pop("time")
        wind_mps = weather_now.get("wind_speed")
        gust_mps = weather_now.get("wind_gust")
        wind_direction = weather_now.get("wind_direction")

        wind = WindSnapshot(direction=wind_direction, compass=degrees_to_compass(wind_direction))
        if wind_mps is not None:
            knots = round_half_up(mps_to_knots(wind_mps), 1)
            force, force_description = beaufort(knots)
            wind.speed_mps = wind_mps
            wind.speed_knots = knots
            wind.speed_mph = round_half_up(mps_to_mph(wind_mps), 1)
            wind.beaufort_force = force
            wind.beaufort_description = force_description
            wind.paddler_level = paddler_level_for_wind(knots)
        if gust_mps is not None:
            wind.gust_knots = round_half_up(mps_to_knots(gust_mps), 1)
        wind.shore_direction = wind_shore_direction(wind_direction, coastline_bearing)

        wave_height = marine_now.get("wave_height")
        wave_height_ft = None
        if wave_height is not None:
            wave_height_ft = round_half_up(meters_to_feet(wave_height), 1)

        return AtTimeSnapshot(
            time=at,
            weather=weather_now,
            marine=marine_now,
            wind=wind,
            wave_height_ft=wave_height_ft,
            tide_height=tide_height,
            wind_against_tide=is_wind_against_tide(
                wind_direction, marine_now.get("current_direction"),
            ),
        )

    @staticmethod
    def _block(series: HourlySeries, summary: SeriesSummary) -> ConditionsBlock:
        return ConditionsBlock(
            source=series.source,
            series=HourlySeriesSchema(times=series.times, channels=series.channels),
            summary=SeriesSummarySchema(
                scalars={
                    name: ScalarStatSchema(avg=stat.avg, min=stat.min, max=stat.max)
                    for name, stat in summary.scalars.items()
                },
                directions={
                    name: DirectionalStatSchema(
                        avg=stat.avg, compass=degrees_to_compass(stat.avg), raw=stat.raw,
                    )
                    for name, stat in summary.directions.items()
                },
                sample_count=summary.sample_count,
            ),
        )

    @staticmethod
    def _tides_schema(tides: TidalSummary) -> TidesSchema:
        def event(e):
            return TideEventSchema(time=e.time, kind=e.kind.value, height=e.height)

        station = None
        if tides.station is not None:
            station = TideStationSchema(
                name=tides.station.name,
                latitude=tides.station.latitude,
                longitude=tides.station.longitude,
                distance_km=tides.station.distance_km,
            )
        return TidesSchema(
            date=tides.date,
            events=[event(e) for e in tides.events],
            highs=[event(e) for e in tides.highs],
            lows=[event(e) for e in tides.lows],
            range=tides.range,
            tidal_type=tides.tidal_type,
            moon_phase=tides.moon_phase,
            station=station,
            heights=[TideHeightSchema(time=h.time, height=h.height) for h in tides.heights],
            datum=tides.datum,
            copyright=tides.copyright,
            source=tides.source,
        )

    @staticmethod
    def _assessment_schema(assessment: RiskAssessment) -> RiskAssessmentSchema:
        return RiskAssessmentSchema(
            total_points=assessment.total_points,
            score=assessment.score,
            display_score=assessment.display_score,
            category=assessment.category,
            category_name=assessment.category_name,
            description=assessment.description,
            narrative=assessment.narrative,
            factors=[
                RiskFactorSchema(
                    name=f.name, value=f.value, points=f.points, severity=f.severity.value,
                )
                for f in assessment.factors
            ],
            concerns=assessment.concerns,
            activities=[a.value for a in assessment.activities],
        )
