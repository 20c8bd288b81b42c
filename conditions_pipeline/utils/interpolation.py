"""Point-in-time lookups over discrete series."""
from datetime import date, datetime, time
from typing import Dict, Optional, Sequence

import numpy as np

from conditions_pipeline.errors import NoDataForTime
from conditions_pipeline.models.series import HourlySeries
from conditions_pipeline.models.tide import TidalSummary


def value_at(
    times: Sequence[datetime],
    values: Sequence[Optional[float]],
    target: datetime,
) -> float:
    """
    Linearly interpolate a value at ``target``.

    Outside the sampled range the nearest endpoint value is held rather than
    extrapolated.

    Args:
        times: Ascending sample times
        values: Sample values aligned with ``times`` (None entries are skipped)
        target: Instant to evaluate

    Returns:
        Interpolated value

    Raises:
        NoDataForTime: Fewer than two valid samples
    """
    pairs = [(t, v) for t, v in zip(times, values) if v is not None]
    if len(pairs) < 2:
        raise NoDataForTime(
            f"Need at least two samples to interpolate, got {len(pairs)}",
            user_message="Not enough data to work out a value for this time.",
        )
    xs = np.array([t.timestamp() for t, _ in pairs])
    ys = np.array([v for _, v in pairs], dtype=float)
    # np.interp holds the endpoint values outside [xs[0], xs[-1]]
    return float(np.interp(target.timestamp(), xs, ys))


def tide_height_at(summary: TidalSummary, target: datetime) -> float:
    """Tide height at ``target``, from the dense heights when available, else the events."""
    if len(summary.heights) >= 2:
        return value_at(
            [h.time for h in summary.heights],
            [h.height for h in summary.heights],
            target,
        )
    return value_at(
        [e.time for e in summary.events],
        [e.height for e in summary.events],
        target,
    )


def hour_index(times: Sequence[datetime], day: date, target: time) -> int:
    """
    Index of the sample on ``day`` whose hour matches ``target``'s hour.

    Only samples on ``day`` are considered, so multi-day series never resolve
    to the same hour on a neighbouring day.
    """
    for i, t in enumerate(times):
        if t.date() == day and t.hour == target.hour:
            return i
    raise NoDataForTime(
        f"No sample at {target.hour:02d}:00 on {day.isoformat()}",
        user_message=f"No forecast data for {day.isoformat()} at {target.hour:02d}:00.",
    )


def snapshot_at(series: HourlySeries, day: date, target: time) -> Dict[str, Optional[float]]:
    """All channel values at the requested hour."""
    index = hour_index(series.times, day, target)
    snapshot = series.sample(index)
    snapshot["time"] = series.times[index]
    return snapshot
