"""Service for building representative-day summaries of hourly series."""
import logging

from conditions_pipeline.config import CHANNEL_PRECISION, DIRECTION_CHANNELS
from conditions_pipeline.models.series import HourlySeries, SeriesSummary
from conditions_pipeline.utils.stats_utils import (
    arithmetic_stat,
    circular_stat,
    daytime_indices,
)

logger = logging.getLogger(__name__)


class SummaryBuilder:
    """
    Summarises every channel of a series over the daytime window.

    Direction channels use the circular mean; everything else gets an
    arithmetic mean rounded to the channel's precision plus min/max.
    """

    def __init__(self, precision: dict = None, direction_channels: list = None):
        self.precision = precision or CHANNEL_PRECISION
        self.direction_channels = set(direction_channels or DIRECTION_CHANNELS)

    def summarize(self, series: HourlySeries) -> SeriesSummary:
        indices = daytime_indices(series.times)
        daytime = series.to_frame().iloc[indices]

        summary = SeriesSummary(source=series.source, sample_count=len(indices))
        for channel in daytime.columns:
            values = daytime[channel].tolist()
            if channel in self.direction_channels:
                summary.directions[channel] = circular_stat(values)
            elif channel != "weather_code":
                summary.scalars[channel] = arithmetic_stat(
                    values, self.precision.get(channel, 1),
                )

        logger.debug(
            "Summarised %s over %d daytime samples", series.source, len(indices),
        )
        return summary
