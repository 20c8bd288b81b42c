"""Tests for arithmetic and circular statistics."""
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import numpy as np
import pytest

from conditions_pipeline.models.series import ScalarStat
from conditions_pipeline.utils.stats_utils import (
    arithmetic_stat,
    circular_mean,
    circular_stat,
    daytime_indices,
    valid_values,
    window_max,
    window_min,
)


class TestArithmeticStat:
    """Tests for arithmetic_stat."""

    def test_ignores_missing_samples(self):
        """Test None and NaN entries do not count towards the statistics."""
        stat = arithmetic_stat([1.0, None, 2.0, np.nan])

        assert stat.avg == 1.5
        assert stat.min == 1.0
        assert stat.max == 2.0

    def test_empty_input_gives_empty_stat(self):
        """Test all fields are None when nothing is left."""
        assert arithmetic_stat([]) == ScalarStat()
        assert arithmetic_stat([None, None]) == ScalarStat()

    def test_average_rounds_half_up(self):
        """Test the average is rounded to the requested precision, halves up."""
        assert arithmetic_stat([1.25, 1.25], precision=1).avg == 1.3
        assert arithmetic_stat([1.0, 2.0], precision=0).avg == 2.0

    def test_min_max_are_not_rounded(self):
        """Test min and max keep full precision."""
        stat = arithmetic_stat([0.123, 0.456], precision=1)

        assert stat.min == pytest.approx(0.123)
        assert stat.max == pytest.approx(0.456)
        assert stat.avg == 0.3


class TestCircularMean:
    """Tests for circular_mean."""

    def test_wraps_around_north(self):
        """Test 350 and 10 degrees average to north, not 180."""
        assert circular_mean([350, 10]) == 0.0

    def test_quarter_between_directions(self):
        """Test two perpendicular directions average to the bisector."""
        assert circular_mean([90, 180]) == 135.0
        assert circular_mean([270, 0]) == 315.0

    def test_result_is_in_range(self):
        """Test the mean is always within [0, 360)."""
        for directions in ([359, 358], [1, 359], [180, 181], [0, 0]):
            avg = circular_mean(directions)
            assert 0 <= avg < 360

    def test_empty_returns_none(self):
        """Test there is no mean direction without samples."""
        assert circular_mean([]) is None
        assert circular_mean([None]) is None

    def test_circular_stat_keeps_raw_values(self):
        """Test circular_stat carries the valid raw directions."""
        stat = circular_stat([10, None, 20])

        assert stat.avg == 15.0
        assert stat.raw == [10.0, 20.0]


class TestDaytimeIndices:
    """Tests for daytime_indices."""

    def test_full_day_has_fifteen_daytime_hours(self):
        """Test 06:00 to 20:00 inclusive is selected from a 24-hour day."""
        start = datetime(2024, 6, 15, tzinfo=ZoneInfo("Europe/London"))
        times = [start + timedelta(hours=h) for h in range(24)]

        indices = daytime_indices(times)

        assert len(indices) == 15
        assert indices[0] == 6
        assert indices[-1] == 20


class TestWindowHelpers:
    """Tests for valid_values, window_max and window_min."""

    def test_valid_values_drops_missing(self):
        """Test None and NaN are removed."""
        assert valid_values([1.0, None, np.nan, 3.0]).tolist() == [1.0, 3.0]

    def test_window_extremes(self):
        """Test max and min only look at the given indices."""
        values = [9.0, 1.0, None, 4.0, 2.0]

        assert window_max(values, [1, 2, 3]) == 4.0
        assert window_min(values, [1, 2, 3]) == 1.0

    def test_window_without_values(self):
        """Test an all-missing window gives None."""
        assert window_max([None, None], [0, 1]) is None
        assert window_min([1.0], []) is None
