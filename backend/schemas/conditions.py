"""Pydantic schemas for the conditions report."""
from datetime import date, datetime
from pydantic import BaseModel
from typing import Dict, List, Optional


class ScalarStatSchema(BaseModel):
    """Daytime mean/min/max of a channel."""

    avg: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None


class DirectionalStatSchema(BaseModel):
    """Daytime circular mean of a direction channel."""

    avg: Optional[float] = None
    compass: Optional[str] = None
    raw: List[float] = []


class SeriesSummarySchema(BaseModel):
    scalars: Dict[str, ScalarStatSchema]
    directions: Dict[str, DirectionalStatSchema]
    sample_count: int


class HourlySeriesSchema(BaseModel):
    """Full hourly series for hour-by-hour display."""

    times: List[datetime]
    channels: Dict[str, List[Optional[float]]]


class ConditionsBlock(BaseModel):
    """Marine or weather data with its source."""

    source: str
    series: HourlySeriesSchema
    summary: SeriesSummarySchema


class TideEventSchema(BaseModel):
    time: datetime
    kind: str
    height: float


class TideHeightSchema(BaseModel):
    time: datetime
    height: float


class TideStationSchema(BaseModel):
    name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance_km: Optional[float] = None


class TidesSchema(BaseModel):
    """Tide events and heights for the requested day."""

    date: date
    events: List[TideEventSchema]
    highs: List[TideEventSchema]
    lows: List[TideEventSchema]
    range: float
    tidal_type: str
    moon_phase: str
    station: Optional[TideStationSchema] = None
    heights: List[TideHeightSchema] = []
    datum: Optional[str] = None
    copyright: Optional[str] = None
    source: str


class RiskFactorSchema(BaseModel):
    name: str
    value: str
    points: float
    severity: str


class RiskAssessmentSchema(BaseModel):
    """Weighted risk score and its breakdown."""

    total_points: float
    score: float
    display_score: str
    category: int
    category_name: str
    description: str
    narrative: str
    factors: List[RiskFactorSchema]
    concerns: List[str]
    activities: List[str]


class WindSnapshot(BaseModel):
    speed_mps: Optional[float] = None
    speed_knots: Optional[float] = None
    speed_mph: Optional[float] = None
    gust_knots: Optional[float] = None
    direction: Optional[float] = None
    compass: Optional[str] = None
    beaufort_force: Optional[int] = None
    beaufort_description: Optional[str] = None
    shore_direction: Optional[str] = None
    paddler_level: Optional[str] = None


class AtTimeSnapshot(BaseModel):
    """Conditions at the requested start hour."""

    time: datetime
    weather: Dict[str, Optional[float]]
    marine: Dict[str, Optional[float]]
    wind: WindSnapshot
    wave_height_ft: Optional[float] = None
    tide_height: Optional[float] = None
    wind_against_tide: bool = False


class DaylightSchema(BaseModel):
    dawn: Optional[datetime] = None
    dusk: Optional[datetime] = None
    trip_runs_into_darkness: bool = False


class LocationRef(BaseModel):
    latitude: float
    longitude: float
    name: Optional[str] = None


class ConditionsReport(BaseModel):
    """Everything a client needs to render one day's conditions."""

    location: LocationRef
    date: date
    time: str
    tides: TidesSchema
    marine: ConditionsBlock
    weather: ConditionsBlock
    coastline_bearing: Optional[float] = None
    at_time: Optional[AtTimeSnapshot] = None
    daylight: DaylightSchema
    risk_assessment: RiskAssessmentSchema
    sources: Dict[str, str]
