"""Arithmetic and circular statistics over hourly channels."""
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

import numpy as np

from conditions_pipeline.config import DAYTIME_START_HOUR, DAYTIME_END_HOUR
from conditions_pipeline.models.series import ScalarStat, DirectionalStat
from conditions_pipeline.utils.units import round_half_up


def valid_values(values: Iterable[Optional[float]]) -> np.ndarray:
    """Drop None and NaN entries."""
    arr = np.array(
        [np.nan if v is None else v for v in values],
        dtype=float,
    )
    return arr[~np.isnan(arr)]


def arithmetic_stat(values: Sequence[Optional[float]], precision: int = 1) -> ScalarStat:
    """
    Mean, minimum and maximum of a channel.

    Args:
        values: Samples, possibly containing None/NaN
        precision: Decimal places for the average

    Returns:
        ScalarStat; all fields None when no valid samples remain
    """
    arr = valid_values(values)
    if arr.size == 0:
        return ScalarStat()
    return ScalarStat(
        avg=round_half_up(float(arr.mean()), precision),
        min=float(arr.min()),
        max=float(arr.max()),
    )


def circular_mean(directions: Sequence[Optional[float]]) -> Optional[float]:
    """
    Vector mean of directions in degrees, normalised into [0, 360).

    Returns None for empty input: there is no meaningful direction to report.
    """
    arr = valid_values(directions)
    if arr.size == 0:
        return None
    radians = np.deg2rad(arr)
    mean_sin = np.sin(radians).mean()
    mean_cos = np.cos(radians).mean()
    avg = float(np.rad2deg(np.arctan2(mean_sin, mean_cos)))
    if avg < 0:
        avg += 360
    # [350, 10] sums to ~-1e-15 degrees; round before wrapping so 360 becomes 0
    avg = round_half_up(avg, 1)
    return 0.0 if avg >= 360 else avg


def circular_stat(directions: Sequence[Optional[float]]) -> DirectionalStat:
    """Circular mean plus the raw valid directions."""
    return DirectionalStat(
        avg=circular_mean(directions),
        raw=[float(v) for v in valid_values(directions)],
    )


def daytime_indices(times: Sequence[datetime]) -> List[int]:
    """Indices whose local hour falls within the daytime window (inclusive)."""
    return [
        i for i, t in enumerate(times)
        if DAYTIME_START_HOUR <= t.hour <= DAYTIME_END_HOUR
    ]


def select(values: Sequence[Optional[float]], indices: Iterable[int]) -> List[Optional[float]]:
    return [values[i] for i in indices]


def window_max(values: Sequence[Optional[float]], indices: Iterable[int]) -> Optional[float]:
    arr = valid_values(select(values, indices))
    return float(arr.max()) if arr.size else None


def window_min(values: Sequence[Optional[float]], indices: Iterable[int]) -> Optional[float]:
    arr = valid_values(select(values, indices))
    return float(arr.min()) if arr.size else None
