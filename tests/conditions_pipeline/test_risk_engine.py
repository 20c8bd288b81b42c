"""Tests for the risk grading engine."""
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from attrs import evolve

from conditions_pipeline.errors import NoDataForTime
from conditions_pipeline.models.risk import Activity, ConditionBundle, Severity
from conditions_pipeline.models.series import ScalarStat, SeriesSummary
from conditions_pipeline.services import risk_engine
from conditions_pipeline.utils.units import knots_to_mps, mps_to_knots, round_half_up

LONDON = ZoneInfo("Europe/London")

# Wind 18 kn, gust 30 kn, waves 1.2 m at 9 s, sea 14 C
MODERATE_DAY = ConditionBundle(
    sea_temperature_c=14.0,
    wind_speed_knots=18.0,
    wind_gust_knots=30.0,
    wave_height_m=1.2,
    wave_period_s=9.0,
)


def factor(assessment, name):
    return next(f for f in assessment.factors if f.name == name)


class TestAssess:
    """Tests for assess."""

    def test_moderate_day(self):
        """Test 41 points grade as 2.05, category 2 Moderate."""
        assessment = risk_engine.assess(MODERATE_DAY)

        assert factor(assessment, "Water Temperature").points == 12
        assert factor(assessment, "Water Temperature").severity == Severity.AMBER
        assert factor(assessment, "Wind Speed").points == 18
        assert factor(assessment, "Wind Speed").severity == Severity.AMBER
        assert factor(assessment, "Wind Gust").points == 4
        assert factor(assessment, "Wind Gust").severity == Severity.RED
        assert factor(assessment, "Wave Height").points == 7
        assert factor(assessment, "Wave Height").severity == Severity.AMBER
        assert factor(assessment, "Wave Period").points == 0
        assert factor(assessment, "Wave Period").severity == Severity.GREEN
        assert assessment.total_points == 41
        assert assessment.score == pytest.approx(2.05)
        assert assessment.category == 2
        assert assessment.category_name == "Moderate"
        assert assessment.concerns == ["wind gust"]

    def test_narrative(self):
        """Test the narrative leads with the score and lists red factors."""
        narrative = risk_engine.assess(MODERATE_DAY).narrative

        assert narrative.startswith("Risk Score: 2.0.")
        assert "Moderate conditions for sea kayaking. Small Sea, very easy terrain." in narrative
        assert "Key concerns: wind gust." in narrative

    def test_idempotent(self):
        """Test the same inputs always give the same assessment."""
        assert risk_engine.assess(MODERATE_DAY) == risk_engine.assess(MODERATE_DAY)

    @pytest.mark.parametrize("change", [
        {"wind_speed_knots": 25.0},
        {"wind_gust_knots": 40.0},
        {"wave_height_m": 2.0},
        {"sea_temperature_c": 8.0},
    ])
    def test_worse_conditions_never_lower_the_score(self, change):
        """Test each factor is monotone in its hazard direction."""
        baseline = risk_engine.assess(MODERATE_DAY).score

        assert risk_engine.assess(evolve(MODERATE_DAY, **change)).score >= baseline

    def test_unknown_sea_temperature(self):
        """Test a missing sea temperature is a zero-point N/A factor."""
        assessment = risk_engine.assess(evolve(MODERATE_DAY, sea_temperature_c=None))

        water = factor(assessment, "Water Temperature")
        assert water.value == "N/A"
        assert water.points == 0
        assert assessment.total_points == 29

    def test_warm_water_scores_nothing(self):
        """Test water above 20 C never gives negative points."""
        assessment = risk_engine.assess(evolve(MODERATE_DAY, sea_temperature_c=23.0))

        assert factor(assessment, "Water Temperature").points == 0

    def test_calm_day_is_category_one(self):
        """Test the category floor is 1."""
        calm = ConditionBundle(sea_temperature_c=20.0)

        assessment = risk_engine.assess(calm)

        assert assessment.score == 0
        assert assessment.category == 1
        assert assessment.category_name == "Easy"

    def test_category_capped_at_six(self):
        """Test extreme scores stay in category 6."""
        storm = ConditionBundle(
            sea_temperature_c=5.0,
            wind_speed_knots=60.0,
            wind_gust_knots=90.0,
            wave_height_m=8.0,
        )

        assessment = risk_engine.assess(storm, [Activity.SURFING, Activity.SEA_CAVES])

        assert assessment.score > 6
        assert assessment.category == 6
        assert assessment.category_name == "Very Extreme"
        assert "Conditions are severe and not recommended." in assessment.narrative

    def test_activities_add_one_category_each(self):
        """Test each activity adds 20 points, duplicates counted once."""
        base = risk_engine.assess(MODERATE_DAY)
        assessment = risk_engine.assess(
            MODERATE_DAY,
            [Activity.SURFING, Activity.ROCKHOPPING, Activity.SURFING],
        )

        assert assessment.total_points == base.total_points + 40
        assert assessment.activities == [Activity.ROCKHOPPING, Activity.SURFING]
        assert "rockhopping, surfing" in assessment.narrative
        assert "significantly increase risk" in assessment.narrative

    def test_activity_names_accepted(self):
        """Test activities may be passed by value."""
        assessment = risk_engine.assess(MODERATE_DAY, ["night_paddling"])

        assert assessment.activities == [Activity.NIGHT_PADDLING]
        assert "Night kayaking requires navigation lights" in assessment.narrative

    def test_display_score(self):
        """Test the display score has one decimal place."""
        assert risk_engine.assess(MODERATE_DAY).display_score == "2.0"


class TestCategoryForScore:
    """Tests for category_for_score."""

    def test_rounding(self):
        """Test scores round half up to the nearest category."""
        assert risk_engine.category_for_score(0.0) == 1
        assert risk_engine.category_for_score(2.49) == 2
        assert risk_engine.category_for_score(2.5) == 3
        assert risk_engine.category_for_score(9.0) == 6


class TestExtractBundle:
    """Tests for extract_bundle."""

    def test_worst_values_in_window(self, series_factory):
        """Test the six hours from the start time are reduced to their worst values."""
        wind = [knots_to_mps(5)] * 24
        wind[10] = knots_to_mps(18)
        wind[16] = knots_to_mps(40)
        weather = series_factory(wind_speed=wind, wind_gust=[knots_to_mps(30)] * 24)
        sea = [15.0] * 24
        sea[12] = 14.0
        marine = series_factory(
            wave_height=[1.2] * 24,
            wave_period=[9.0] * 24,
            sea_temperature=sea,
        )

        bundle = risk_engine.extract_bundle(
            weather, marine, datetime(2024, 6, 15, 9, tzinfo=LONDON),
        )

        # 09:00..14:00 inclusive: the 40 kn spike at 16:00 is outside
        assert bundle.wind_speed_knots == 18.0
        assert bundle.wind_gust_knots == 30.0
        assert bundle.wave_height_m == 1.2
        assert bundle.wave_period_s == 9.0
        assert bundle.sea_temperature_c == 14.0

    def test_missing_channels_default_to_zero(self, series_factory):
        """Test absent wind and wave channels count as calm."""
        weather = series_factory(air_temperature=[15.0] * 24)
        marine = series_factory(sea_temperature=[12.0] * 24)

        bundle = risk_engine.extract_bundle(
            weather, marine, datetime(2024, 6, 15, 9, tzinfo=LONDON),
        )

        assert bundle.wind_speed_knots == 0.0
        assert bundle.wave_height_m == 0.0
        assert bundle.sea_temperature_c == 12.0

    def test_sea_temperature_from_summary(self, series_factory):
        """Test the day summary fills in a missing hourly sea temperature."""
        weather = series_factory(wind_speed=[5.0] * 24)
        marine = series_factory(wave_height=[1.0] * 24)
        summary = SeriesSummary(
            source="test", scalars={"sea_temperature": ScalarStat(avg=13.4, min=13.0, max=14.0)},
        )

        bundle = risk_engine.extract_bundle(
            weather, marine, datetime(2024, 6, 15, 9, tzinfo=LONDON), summary,
        )

        assert bundle.sea_temperature_c == 13.0

    def test_start_after_last_sample_grades_start_of_day(self, series_factory):
        """Test a start past the last sample grades the first hours of the day."""
        wind = [20.0] * 6 + [2.0] * 18
        weather = series_factory(wind_speed=wind, wind_gust=[30.0] * 6 + [3.0] * 18)
        marine = series_factory(
            wave_height=[3.0] * 6 + [0.5] * 18,
            sea_temperature=[8.0] * 24,
        )

        bundle = risk_engine.extract_bundle(
            weather, marine, datetime(2024, 6, 15, 23, 30, tzinfo=LONDON),
        )

        assert bundle.wind_speed_knots == round_half_up(mps_to_knots(20.0), 1)
        assert bundle.wave_height_m == 3.0
        assert bundle.sea_temperature_c == 8.0
        assert risk_engine.assess(bundle).category > 1

    def test_no_samples_on_trip_day(self, series_factory):
        """Test a series with nothing on the trip day is not graded."""
        weather = series_factory(wind_speed=[10.0] * 24)
        marine = series_factory(wave_height=[1.0] * 24)

        with pytest.raises(NoDataForTime):
            risk_engine.extract_bundle(
                weather, marine, datetime(2024, 6, 16, 9, tzinfo=LONDON),
            )

    def test_score_from_series(self, series_factory):
        """Test score grades the extracted bundle."""
        weather = series_factory(
            wind_speed=[knots_to_mps(18)] * 24,
            wind_gust=[knots_to_mps(30)] * 24,
        )
        marine = series_factory(
            wave_height=[1.2] * 24,
            wave_period=[9.0] * 24,
            sea_temperature=[14.0] * 24,
        )

        assessment = risk_engine.score(
            weather, marine, datetime(2024, 6, 15, 9, tzinfo=LONDON),
        )

        assert assessment.total_points == 41
        assert assessment.category == 2
        assert assessment.bundle.sea_temperature_c == 14.0
