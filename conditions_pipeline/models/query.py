"""Immutable conditions query."""
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from attrs import frozen

from conditions_pipeline.config import DEFAULT_TIMEZONE
from conditions_pipeline.errors import InvalidInput


def validate_coordinates(latitude: float, longitude: float) -> None:
    """Raise InvalidInput for out-of-range or non-numeric coordinates."""
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid coordinates: {latitude}, {longitude}")
    if lat != lat or lon != lon:
        raise InvalidInput("Coordinates must be numbers")
    if not -90 <= lat <= 90:
        raise InvalidInput(f"Latitude {lat} is outside [-90, 90]")
    if not -180 <= lon <= 180:
        raise InvalidInput(f"Longitude {lon} is outside [-180, 180]")


def parse_date(value) -> date:
    """Parse an ISO ``YYYY-MM-DD`` date (or pass a date through)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise InvalidInput(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_time(value) -> time:
    """Parse an ``HH:MM`` time (or pass a time through)."""
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(str(value))
    except ValueError:
        raise InvalidInput(f"Invalid time {value!r}, expected HH:MM")


@frozen
class ConditionsQuery:
    """Location, date and start time of a planned trip."""

    latitude: float
    longitude: float
    day: date
    start_time: time = time(9, 0)
    timezone: str = DEFAULT_TIMEZONE

    @classmethod
    def create(cls, latitude, longitude, day, start_time="09:00", timezone=DEFAULT_TIMEZONE):
        """Validate raw inputs and build a query."""
        validate_coordinates(latitude, longitude)
        return cls(
            latitude=float(latitude),
            longitude=float(longitude),
            day=parse_date(day),
            start_time=parse_time(start_time),
            timezone=timezone,
        )

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def start(self) -> datetime:
        """Trip start as an aware datetime in the query timezone."""
        return datetime.combine(self.day, self.start_time, tzinfo=self.tz)
