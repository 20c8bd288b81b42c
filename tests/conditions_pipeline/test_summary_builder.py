"""Tests for representative-day summaries."""
import pytest

from conditions_pipeline.services.summary_builder import SummaryBuilder


class TestSummaryBuilder:
    """Tests for SummaryBuilder."""

    def test_daytime_only(self, series_factory):
        """Test only 06:00-20:00 samples are summarised."""
        # Night hours are very windy, daytime is a steady 4 m/s
        wind = [20.0] * 6 + [4.0] * 15 + [20.0] * 3
        series = series_factory(wind_speed=wind)

        summary = SummaryBuilder().summarize(series)

        assert summary.sample_count == 15
        stat = summary.stat("wind_speed")
        assert stat.avg == 4.0
        assert stat.max == 4.0

    def test_direction_channels_use_circular_mean(self, series_factory):
        """Test directions either side of north average to north."""
        directions = [180.0] * 6 + [350.0, 10.0] * 7 + [0.0] + [180.0] * 3
        series = series_factory(wind_direction=directions)

        summary = SummaryBuilder().summarize(series)

        assert summary.directions["wind_direction"].avg == 0.0
        assert "wind_direction" not in summary.scalars

    def test_channel_precision(self, series_factory):
        """Test wave height averages keep two decimals, visibility none."""
        series = series_factory(
            wave_height=[1.234] * 24,
            visibility=[10000.4] * 24,
        )

        summary = SummaryBuilder().summarize(series)

        assert summary.stat("wave_height").avg == 1.23
        assert summary.stat("visibility").avg == 10000.0

    def test_missing_samples_and_channels(self, series_factory):
        """Test gaps are skipped and unknown channels give empty stats."""
        series = series_factory(air_temperature=[None] * 12 + [15.0] * 12)

        summary = SummaryBuilder().summarize(series)

        assert summary.stat("air_temperature").avg == 15.0
        assert summary.stat("wave_height").avg is None

    def test_weather_code_not_averaged(self, series_factory):
        """Test categorical weather codes are left out of the summary."""
        series = series_factory(weather_code=[3.0] * 24)

        summary = SummaryBuilder().summarize(series)

        assert "weather_code" not in summary.scalars
        assert "weather_code" not in summary.directions

    def test_custom_precision(self, series_factory):
        """Test precision can be overridden per channel."""
        series = series_factory(wind_speed=[4.26] * 24)

        summary = SummaryBuilder(precision={"wind_speed": 0}).summarize(series)

        assert summary.stat("wind_speed").avg == pytest.approx(4.0)
