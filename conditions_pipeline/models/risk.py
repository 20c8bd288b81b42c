"""Risk scoring models."""
from enum import Enum
from typing import List, Optional

from attrs import define, field, frozen


class Severity(str, Enum):
    GREEN = "green"
    AMBER = "amber"
    RED = "red"


class Activity(str, Enum):
    """Optional hazardous activities that add a flat surcharge."""

    ROCKHOPPING = "rockhopping"
    SEA_CAVES = "sea_caves"
    SURFING = "surfing"
    NIGHT_PADDLING = "night_paddling"


@frozen
class ConditionBundle:
    """Worst-case conditions inside the look-ahead window."""

    sea_temperature_c: Optional[float]
    wind_speed_knots: float = 0.0
    wind_gust_knots: float = 0.0
    wave_height_m: float = 0.0
    wave_period_s: float = 0.0


@frozen
class RiskFactor:
    name: str
    value: str
    points: float
    severity: Severity


@define
class RiskAssessment:
    """Weighted risk score with category and narrative."""

    total_points: float
    score: float
    category: int
    category_name: str
    description: str
    narrative: str
    factors: List[RiskFactor] = field(factory=list)
    concerns: List[str] = field(factory=list)
    activities: List[Activity] = field(factory=list)
    bundle: Optional[ConditionBundle] = None

    @property
    def display_score(self) -> str:
        return f"{self.score:.1f}"
