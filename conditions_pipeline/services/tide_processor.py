"""Service for turning raw tide extremes into a single-day tidal summary."""
import logging
from datetime import date
from typing import List

from conditions_pipeline.config import (
    SPRING_RANGE_M,
    NEAP_RANGE_M,
    SYNODIC_MONTH_DAYS,
    MOON_PHASES,
)
from conditions_pipeline.errors import NoDataForLocation
from conditions_pipeline.models.tide import TideData, TideEvent, TideKind, TidalSummary
from conditions_pipeline.utils.units import round_half_up

logger = logging.getLogger(__name__)


def tidal_range(events: List[TideEvent]) -> float:
    """Max minus min event height in metres (2 dp), 0 for no events."""
    if not events:
        return 0.0
    heights = [e.height for e in events]
    return round_half_up(max(heights) - min(heights), 2)


def tidal_type(range_m: float) -> str:
    """Classify a day's range as spring, neap or mid tides."""
    if range_m > SPRING_RANGE_M:
        return "Spring Tides"
    if range_m < NEAP_RANGE_M:
        return "Neap Tides"
    return "Mid Tides"


def moon_phase_index(day: date) -> int:
    """Moon phase 0..7 (0 = new, 4 = full) from a synodic-month approximation."""
    year, month = day.year, day.month
    if month < 3:
        year -= 1
        month += 12
    days = 365.25 * year + 30.6 * month + day.day - 694039.09
    cycles = days / SYNODIC_MONTH_DAYS
    fraction = cycles - int(cycles)
    index = int(round_half_up(fraction * 8))
    return 0 if index >= 8 else index


def moon_phase(day: date) -> str:
    return MOON_PHASES[moon_phase_index(day)]


class TideProcessor:
    """Filters provider tide data to one local day and derives summary values."""

    def summarize(self, data: TideData, day: date) -> TidalSummary:
        """
        Build the tidal summary for ``day``.

        Events and heights outside the day are discarded. Highs and lows are
        each kept in chronological order; providers do not guarantee strict
        alternation so no pairing is assumed.

        Args:
            data: Normalised provider tide data (local-time timestamps)
            day: Requested local date

        Returns:
            TidalSummary for the day

        Raises:
            NoDataForLocation: Provider returned no events at all
        """
        if not data.events:
            raise NoDataForLocation(
                "no tide extremes", user_message="No tide data available for this location",
            )

        events = sorted(
            (e for e in data.events if e.time.date() == day),
            key=lambda e: e.time,
        )
        dropped = len(data.events) - len(events)
        if dropped:
            logger.debug("Discarded %d tide events outside %s", dropped, day)

        heights = sorted(
            (h for h in data.heights if h.time.date() == day),
            key=lambda h: h.time,
        )
        day_range = tidal_range(events)

        return TidalSummary(
            date=day,
            events=events,
            highs=[e for e in events if e.kind == TideKind.HIGH],
            lows=[e for e in events if e.kind == TideKind.LOW],
            range=day_range,
            tidal_type=tidal_type(day_range),
            moon_phase=moon_phase(day),
            station=data.station,
            heights=heights,
            datum=data.datum,
            copyright=data.copyright,
            source=data.source,
        )
