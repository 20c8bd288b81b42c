"""Canonical hourly time series and summary statistics."""
from datetime import date, datetime
from typing import Dict, List, Optional

import numpy as np
import pandas as pd
from attrs import define, field


@define
class ScalarStat:
    """Arithmetic summary of a channel. All fields are None when no samples remain."""

    avg: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None


@define
class DirectionalStat:
    """Circular summary of a direction channel (degrees)."""

    avg: Optional[float] = None
    raw: List[float] = field(factory=list)


@define
class HourlySeries:
    """
    Provider-independent hourly series.

    ``times`` are timezone-aware and strictly ascending. Every channel is
    aligned index-for-index with ``times``; missing samples are None.
    Channels a provider does not report are simply absent.
    """

    source: str
    times: List[datetime]
    channels: Dict[str, List[Optional[float]]] = field(factory=dict)

    def __attrs_post_init__(self):
        for previous, current in zip(self.times, self.times[1:]):
            if current <= previous:
                raise ValueError(
                    f"{self.source} times must be strictly ascending ({previous} -> {current})"
                )
        for name, values in self.channels.items():
            if len(values) != len(self.times):
                raise ValueError(
                    f"{self.source} channel {name!r} has {len(values)} samples, "
                    f"expected {len(self.times)}"
                )

    def __len__(self) -> int:
        return len(self.times)

    def has_channel(self, name: str) -> bool:
        """True if the channel exists and holds at least one sample."""
        values = self.channels.get(name)
        return values is not None and any(v is not None for v in values)

    def get(self, name: str) -> Optional[List[Optional[float]]]:
        return self.channels.get(name)

    def values(self, name: str) -> List[Optional[float]]:
        """Channel values, or an all-None list when the channel is absent."""
        return self.channels.get(name) or [None] * len(self.times)

    def indices_on(self, day: date) -> List[int]:
        return [i for i, t in enumerate(self.times) if t.date() == day]

    def index_at_or_after(self, moment: datetime) -> Optional[int]:
        """Index of the first sample at or after ``moment``, or None."""
        for i, t in enumerate(self.times):
            if t >= moment:
                return i
        return None

    def window(self, start: datetime, hours: int) -> List[int]:
        """Indices of up to ``hours`` samples starting at the first sample >= start."""
        first = self.index_at_or_after(start)
        if first is None:
            return []
        return list(range(first, min(first + hours, len(self.times))))

    def sample(self, index: int) -> Dict[str, Optional[float]]:
        return {name: values[index] for name, values in self.channels.items()}

    def to_frame(self) -> pd.DataFrame:
        """Series as a DataFrame indexed by time; missing samples become NaN."""
        index = pd.DatetimeIndex(self.times, name="time")
        return pd.DataFrame(
            {name: [np.nan if v is None else float(v) for v in values]
             for name, values in self.channels.items()},
            index=index,
        )


@define
class SeriesSummary:
    """Representative-day summary of a series over the daytime window."""

    source: str
    scalars: Dict[str, ScalarStat] = field(factory=dict)
    directions: Dict[str, DirectionalStat] = field(factory=dict)
    sample_count: int = 0

    def stat(self, channel: str) -> ScalarStat:
        return self.scalars.get(channel) or ScalarStat()
