"""Service for grading sea kayaking conditions into a weighted risk score."""
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from conditions_pipeline.config import (
    LOOKAHEAD_HOURS,
    POINTS_PER_CATEGORY,
    MAX_CATEGORY,
    WATER_TEMP_REFERENCE_C,
    WATER_TEMP_POINTS_PER_DEGREE,
    WATER_TEMP_GREEN_C,
    WATER_TEMP_AMBER_C,
    WIND_GREEN_KN,
    WIND_AMBER_KN,
    GUST_GREEN_KN,
    GUST_AMBER_KN,
    GUST_EXCESS_DIVISOR,
    WAVE_HEIGHT_POINTS_PER_M,
    WAVE_HEIGHT_GREEN_M,
    WAVE_HEIGHT_AMBER_M,
    WAVE_PERIOD_GREEN_S,
    WAVE_PERIOD_AMBER_S,
    ACTIVITY_SURCHARGE,
)
from conditions_pipeline.errors import NoDataForTime
from conditions_pipeline.models.risk import (
    Activity,
    ConditionBundle,
    RiskAssessment,
    RiskFactor,
    Severity,
)
from conditions_pipeline.models.series import HourlySeries, SeriesSummary
from conditions_pipeline.utils.stats_utils import window_max, window_min
from conditions_pipeline.utils.units import mps_to_knots, round_half_up

logger = logging.getLogger(__name__)

# category -> (name, description, narrative)
CATEGORY_TIERS = {
    1: ("Easy", "Little Danger", "Excellent conditions for sea kayaking."),
    2: ("Moderate", "Small Sea, very easy terrain", "Moderate conditions for sea kayaking."),
    3: ("Intermediate", "Regular seas, easy landing areas", "Intermediate conditions for sea kayaking."),
    4: (
        "Advanced",
        "Confused Seas, difficult landing areas",
        "Challenging conditions for sea kayaking.",
    ),
    5: ("Extreme", "Heavy Water, very confused sea", "Extreme conditions for sea kayaking."),
    6: (
        "Very Extreme",
        "V heavy water, completely unpredictable",
        "Very dangerous conditions for sea kayaking.",
    ),
}
CATEGORY_ADVICE = {
    4: "Only suitable for experienced kayakers with proper skills and equipment.",
    5: "Only expert paddlers should consider venturing out.",
    6: "Conditions are severe and not recommended.",
}

ACTIVITY_LABELS = {
    Activity.ROCKHOPPING: "rockhopping",
    Activity.SEA_CAVES: "sea caves",
    Activity.SURFING: "surfing",
    Activity.NIGHT_PADDLING: "night time",
}
ACTIVITY_WARNINGS = {
    Activity.ROCKHOPPING: (
        "Rockhopping demands precise maneuvering near rocks with hazards from "
        "waves, surge, and submerged obstacles."
    ),
    Activity.SEA_CAVES: (
        "Sea caves require careful assessment of swell, tide levels, and exit "
        "routes - never enter alone."
    ),
    Activity.SURFING: (
        "Surf zone kayaking demands strong bracing skills, roll ability, and "
        "understanding of wave dynamics."
    ),
    Activity.NIGHT_PADDLING: (
        "Night kayaking requires navigation lights, headlamp, reflective gear, and "
        "excellent knowledge of the area - disorientation and limited visibility "
        "create serious hazards."
    ),
}


def _severity(value: float, green_below: float, amber_up_to: float) -> Severity:
    if value < green_below:
        return Severity.GREEN
    if value <= amber_up_to:
        return Severity.AMBER
    return Severity.RED


def water_temperature_factor(temp_c: Optional[float]) -> RiskFactor:
    """2 points per degree below 20C; a zero-point N/A factor when unknown."""
    if temp_c is None:
        return RiskFactor("Water Temperature", "N/A", 0, Severity.AMBER)
    points = max(0, (WATER_TEMP_REFERENCE_C - temp_c) * WATER_TEMP_POINTS_PER_DEGREE)
    if temp_c >= WATER_TEMP_GREEN_C:
        severity = Severity.GREEN
    elif temp_c >= WATER_TEMP_AMBER_C:
        severity = Severity.AMBER
    else:
        severity = Severity.RED
    return RiskFactor("Water Temperature", f"{temp_c:.1f}°C", points, severity)


def wind_speed_factor(knots: float) -> RiskFactor:
    return RiskFactor(
        "Wind Speed",
        f"{knots:.1f} kn",
        round_half_up(knots),
        _severity(knots, WIND_GREEN_KN, WIND_AMBER_KN),
    )


def wind_gust_factor(gust_knots: float, wind_knots: float) -> RiskFactor:
    """Points only for the gust excess over sustained wind; colour from the absolute gust."""
    excess = max(0, gust_knots - wind_knots)
    return RiskFactor(
        "Wind Gust",
        f"{gust_knots:.1f} kn",
        round_half_up(excess / GUST_EXCESS_DIVISOR),
        _severity(gust_knots, GUST_GREEN_KN, GUST_AMBER_KN),
    )


def wave_height_factor(meters: float) -> RiskFactor:
    return RiskFactor(
        "Wave Height",
        f"{meters:.1f}m",
        round_half_up(meters * WAVE_HEIGHT_POINTS_PER_M),
        _severity(meters, WAVE_HEIGHT_GREEN_M, WAVE_HEIGHT_AMBER_M),
    )


def wave_period_factor(seconds: float) -> RiskFactor:
    # Informational only
    return RiskFactor(
        "Wave Period",
        f"{seconds:.0f}s",
        0,
        _severity(seconds, WAVE_PERIOD_GREEN_S, WAVE_PERIOD_AMBER_S),
    )


def category_for_score(score: float) -> int:
    """Nearest whole category, at least 1 and at most 6."""
    return min(MAX_CATEGORY, max(1, int(round_half_up(score))))


def grading_window(
    series: HourlySeries, start_time: datetime, hours: int = LOOKAHEAD_HOURS,
) -> List[int]:
    """
    Indices graded for a trip starting at ``start_time``.

    When no sample falls at or after the start, the first ``hours`` samples
    of the trip day are graded instead.

    Raises:
        NoDataForTime: The series has no samples on the trip day
    """
    window = series.window(start_time, hours)
    if window:
        return window
    window = series.indices_on(start_time.date())[:hours]
    if not window:
        raise NoDataForTime(f"{series.source} has no samples on {start_time.date()}")
    logger.info(
        "No %s sample at or after %s, grading from %s",
        series.source, start_time, series.times[window[0]],
    )
    return window


def extract_bundle(
    weather: HourlySeries,
    marine: HourlySeries,
    start_time: datetime,
    marine_summary: Optional[SeriesSummary] = None,
    hours: int = LOOKAHEAD_HOURS,
) -> ConditionBundle:
    """
    Worst conditions over the look-ahead window of each series.

    The window is up to ``hours`` samples from the first sample at or after
    ``start_time`` (see ``grading_window``). Sea temperature takes the
    minimum and falls back to the day summary (min, then average) when the
    hourly channel has nothing.
    Everything else takes the maximum, 0 when missing.
    """
    weather_window = grading_window(weather, start_time, hours)
    marine_window = grading_window(marine, start_time, hours)
    if not marine.has_channel("wave_height"):
        logger.warning("No wave heights from %s, waves score as calm", marine.source)

    wind_mps = window_max(weather.values("wind_speed"), weather_window) or 0.0
    gust_mps = window_max(weather.values("wind_gust"), weather_window) or 0.0
    wave_height = window_max(marine.values("wave_height"), marine_window) or 0.0
    wave_period = window_max(marine.values("wave_period"), marine_window) or 0.0

    sea_temp = window_min(marine.values("sea_temperature"), marine_window)
    if sea_temp is None and marine_summary is not None:
        stat = marine_summary.stat("sea_temperature")
        sea_temp = stat.min if stat.min is not None else stat.avg
        if sea_temp is not None:
            logger.info("Hourly sea temperature missing, using day summary %.1f", sea_temp)

    return ConditionBundle(
        sea_temperature_c=sea_temp,
        wind_speed_knots=round_half_up(mps_to_knots(wind_mps), 1),
        wind_gust_knots=round_half_up(mps_to_knots(gust_mps), 1),
        wave_height_m=wave_height,
        wave_period_s=wave_period,
    )


def _activity_text(activities: List[Activity]) -> str:
    activity_points = len(activities) * ACTIVITY_SURCHARGE
    labels = ", ".join(ACTIVITY_LABELS[a] for a in activities)
    parts = [
        f"Selected Activities: You have selected {labels} which adds "
        f"{activity_points / POINTS_PER_CATEGORY:.1f} risk to your score."
    ]
    if activity_points >= 2 * ACTIVITY_SURCHARGE:
        parts.append(
            "These activities significantly increase risk and require advanced skills, "
            "proper equipment, and thorough knowledge of the area."
        )
    else:
        parts.append(
            "This activity increases risk and requires good judgment, experience, "
            "and proper safety precautions."
        )
    parts.extend(ACTIVITY_WARNINGS[a] for a in activities)
    return " ".join(parts)


def assess(bundle: ConditionBundle, activities: Iterable[Activity] = ()) -> RiskAssessment:
    """
    Grade a condition bundle.

    Pure function of its inputs: the same bundle and activities always give
    an identical assessment.

    Args:
        bundle: Worst-case conditions for the trip window
        activities: Hazardous activities, each adding a flat surcharge

    Returns:
        RiskAssessment with factors, score, category and narrative
    """
    # Keep the canonical order and drop duplicates
    requested = {Activity(a) for a in activities}
    selected = [a for a in Activity if a in requested]

    factors = [
        water_temperature_factor(bundle.sea_temperature_c),
        wind_speed_factor(bundle.wind_speed_knots),
        wind_gust_factor(bundle.wind_gust_knots, bundle.wind_speed_knots),
        wave_height_factor(bundle.wave_height_m),
        wave_period_factor(bundle.wave_period_s),
    ]
    total_points = sum(f.points for f in factors) + len(selected) * ACTIVITY_SURCHARGE
    score = total_points / POINTS_PER_CATEGORY
    category = category_for_score(score)
    name, description, summary = CATEGORY_TIERS[category]

    concerns = [f.name.lower() for f in factors if f.severity == Severity.RED]

    parts = [f"Risk Score: {score:.1f}.", f"{summary} {description}."]
    if category in CATEGORY_ADVICE:
        parts.append(CATEGORY_ADVICE[category])
    if concerns:
        parts.append(f"Key concerns: {', '.join(concerns)}.")
    if selected:
        parts.append(_activity_text(selected))

    return RiskAssessment(
        total_points=total_points,
        score=score,
        category=category,
        category_name=name,
        description=description,
        narrative=" ".join(parts),
        factors=factors,
        concerns=concerns,
        activities=selected,
        bundle=bundle,
    )


def score(
    weather: HourlySeries,
    marine: HourlySeries,
    start_time: datetime,
    activities: Iterable[Activity] = (),
    marine_summary: Optional[SeriesSummary] = None,
) -> RiskAssessment:
    """Extract the look-ahead bundle from both series and grade it."""
    bundle = extract_bundle(weather, marine, start_time, marine_summary)
    assessment = assess(bundle, activities)
    logger.info(
        "Risk score %.2f (category %d) from %s",
        assessment.score, assessment.category, bundle,
    )
    return assessment
