"""Service for calculating paddling daylight at a given location."""
import logging
from datetime import date, datetime, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from astral import Observer
from astral.sun import sun
from attrs import define

from conditions_pipeline.config import DAYLIGHT_DEPRESSION_ANGLE, DEFAULT_TIMEZONE

logger = logging.getLogger(__name__)


@define
class DaylightWindow:
    """Light-to-dark span for one day. Both ends are None during polar night."""

    dawn: Optional[datetime]
    dusk: Optional[datetime]

    @property
    def duration(self) -> Optional[timedelta]:
        if self.dawn is None or self.dusk is None:
            return None
        return self.dusk - self.dawn


class DaylightService:
    """
    Service for calculating dawn/dusk and checking whether a trip runs into darkness.

    Uses the astral library to compute solar position based on geographic coordinates.
    Times are returned in the configured local timezone.
    """

    def __init__(
        self,
        depression_angle: float = DAYLIGHT_DEPRESSION_ANGLE,
        timezone: str = DEFAULT_TIMEZONE,
    ):
        """
        Initialize the daylight service.

        Args:
            depression_angle: Sun depression angle for twilight definition.
                             0 = geometric sunrise/sunset (sun center at horizon)
                             6 = civil twilight (enough light to paddle)
                            12 = nautical twilight
            timezone: IANA zone the returned times are expressed in
        """
        self.depression_angle = depression_angle
        self.tz = ZoneInfo(timezone)

        # (lat, lon, date) -> DaylightWindow
        self._cache: dict = {}

    def get_daylight_window(self, latitude: float, longitude: float, day: date) -> DaylightWindow:
        """
        Dawn and dusk for a location and date.

        Returns:
            DaylightWindow. For polar day the window spans the whole date;
            for polar night both ends are None.
        """
        cache_key = (round(latitude, 2), round(longitude, 2), day)
        if cache_key in self._cache:
            return self._cache[cache_key]

        observer = Observer(latitude=latitude, longitude=longitude)
        try:
            sun_times = sun(
                observer,
                date=day,
                tzinfo=self.tz,
                dawn_dusk_depression=self.depression_angle,
            )
            if self.depression_angle > 0:
                window = DaylightWindow(dawn=sun_times["dawn"], dusk=sun_times["dusk"])
            else:
                window = DaylightWindow(dawn=sun_times["sunrise"], dusk=sun_times["sunset"])
        except ValueError:
            # Sun never reaches the depression angle: polar day or polar night
            day_of_year = day.timetuple().tm_yday
            is_northern_summer = 80 < day_of_year < 265
            is_polar_day = (latitude > 0 and is_northern_summer) or \
                           (latitude < 0 and not is_northern_summer)
            if is_polar_day:
                window = DaylightWindow(
                    dawn=datetime.combine(day, datetime.min.time(), tzinfo=self.tz),
                    dusk=datetime.combine(day, datetime.max.time().replace(microsecond=0), tzinfo=self.tz),
                )
            else:
                window = DaylightWindow(dawn=None, dusk=None)
            logger.debug("No dawn/dusk at %.2f on %s, polar day=%s", latitude, day, is_polar_day)

        self._cache[cache_key] = window
        return window

    def is_daylight(self, latitude: float, longitude: float, moment: datetime) -> bool:
        """True if ``moment`` falls between dawn and dusk at the location."""
        window = self.get_daylight_window(latitude, longitude, moment.astimezone(self.tz).date())
        if window.dawn is None or window.dusk is None:
            return False
        return window.dawn <= moment <= window.dusk

    def runs_into_darkness(
        self,
        latitude: float,
        longitude: float,
        start: datetime,
        hours: int,
    ) -> bool:
        """True if any part of a trip starting at ``start`` lasting ``hours`` is outside daylight."""
        end = start + timedelta(hours=hours)
        return not (
            self.is_daylight(latitude, longitude, start)
            and self.is_daylight(latitude, longitude, end)
        )
