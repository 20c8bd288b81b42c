"""Geographic utility functions."""
import math
from typing import Optional

from conditions_pipeline.config import (
    EARTH_RADIUS_KM,
    ONSHORE_MAX_DIFF,
    OFFSHORE_MIN_DIFF,
    WIND_AGAINST_TIDE_MIN,
)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def calculate_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial bearing from point 1 to point 2, in degrees [0, 360)."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_lambda = math.radians(lon2 - lon1)
    y = math.sin(d_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lambda)
    return (math.degrees(math.atan2(y, x)) + 360) % 360


def angle_difference(a: float, b: float) -> float:
    """Smallest absolute difference between two directions, in [0, 180]."""
    diff = abs(a - b) % 360
    return 360 - diff if diff > 180 else diff


def wind_shore_direction(wind_direction: Optional[float], coast_bearing: Optional[float]) -> Optional[str]:
    """
    Classify wind relative to the shore.

    Args:
        wind_direction: Direction the wind blows from, in degrees
        coast_bearing: Bearing from the location to the nearest coastline

    Returns:
        "onshore", "offshore", "parallel", or None if either input is missing
    """
    if wind_direction is None or coast_bearing is None:
        return None
    diff = angle_difference(wind_direction % 360, coast_bearing % 360)
    if diff <= ONSHORE_MAX_DIFF:
        return "onshore"
    if diff >= OFFSHORE_MIN_DIFF:
        return "offshore"
    return "parallel"


def is_wind_against_tide(wind_direction: Optional[float], tide_direction: Optional[float]) -> bool:
    """True when wind and tidal stream directions differ by 135-225 degrees."""
    if wind_direction is None or tide_direction is None:
        return False
    return angle_difference(wind_direction, tide_direction) >= WIND_AGAINST_TIDE_MIN
