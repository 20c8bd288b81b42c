"""Unit conversion and descriptive scales for wind and sea conditions."""
import math
from typing import Optional, Tuple

from conditions_pipeline.config import (
    MS_TO_KNOTS,
    MS_TO_MPH,
    KMH_TO_MS,
    M_TO_FEET,
    PADDLER_LEVELS,
    EXPERT_LEVEL,
)

# Upper bounds (exclusive, knots) for Beaufort forces 0..11; anything above is force 12
BEAUFORT_LIMITS = [1, 4, 7, 11, 16, 22, 28, 34, 41, 48, 56, 64]
BEAUFORT_DESCRIPTIONS = [
    "Calm", "Light air", "Light breeze", "Gentle breeze", "Moderate breeze",
    "Fresh breeze", "Strong breeze", "Near gale", "Gale", "Strong gale",
    "Storm", "Violent storm", "Hurricane",
]
COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero for positives, matching display rounding (2.5 -> 3)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def mps_to_knots(value: float) -> float:
    return value * MS_TO_KNOTS


def knots_to_mps(value: float) -> float:
    return value / MS_TO_KNOTS


def mps_to_mph(value: float) -> float:
    return value * MS_TO_MPH


def kmh_to_mps(value: Optional[float]) -> Optional[float]:
    return None if value is None else value * KMH_TO_MS


def meters_to_feet(value: float) -> float:
    return value * M_TO_FEET


def beaufort(knots: float) -> Tuple[int, str]:
    """Beaufort force and description for a wind speed in knots."""
    for force, limit in enumerate(BEAUFORT_LIMITS):
        if knots < limit:
            return force, BEAUFORT_DESCRIPTIONS[force]
    return 12, BEAUFORT_DESCRIPTIONS[12]


def degrees_to_compass(degrees: Optional[float]) -> Optional[str]:
    """16-point compass label, e.g. 225 -> 'SW'."""
    if degrees is None:
        return None
    index = int(round_half_up((degrees % 360) / 22.5)) % 16
    return COMPASS_POINTS[index]


def paddler_level_for_wind(knots: float) -> str:
    """Lowest paddler level comfortable in the given wind."""
    for level, max_wind in PADDLER_LEVELS:
        if knots <= max_wind:
            return level
    return EXPERT_LEVEL
