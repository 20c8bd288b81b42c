"""Tide models."""
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from attrs import define, field


class TideKind(str, Enum):
    HIGH = "High"
    LOW = "Low"


@define
class TideEvent:
    """A single high or low water."""

    time: datetime
    kind: TideKind
    height: float


@define
class TideHeight:
    time: datetime
    height: float


@define
class TideStation:
    """Station or grid point the tide prediction was made for."""

    name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance_km: Optional[float] = None


@define
class TideData:
    """Raw provider tide data, normalised to local-time events and heights."""

    events: List[TideEvent]
    heights: List[TideHeight] = field(factory=list)
    station: Optional[TideStation] = None
    datum: Optional[str] = None
    copyright: Optional[str] = None
    source: str = "worldtides"


@define
class TidalSummary:
    """Tides for a single day."""

    date: date
    events: List[TideEvent]
    highs: List[TideEvent]
    lows: List[TideEvent]
    range: float
    tidal_type: str
    moon_phase: str
    station: Optional[TideStation] = None
    heights: List[TideHeight] = field(factory=list)
    datum: Optional[str] = None
    copyright: Optional[str] = None
    source: str = "worldtides"
