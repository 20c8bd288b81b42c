"""Shared fixtures for pipeline tests."""
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from conditions_pipeline.models.series import HourlySeries

LONDON = ZoneInfo("Europe/London")
TEST_DAY = date(2024, 6, 15)


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Records GET calls and replays queued responses (the last one repeats)."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers})
        if len(self.responses) > 1:
            response = self.responses.pop(0)
        else:
            response = self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def hourly_times(day=TEST_DAY, hours=24, tz=LONDON):
    start = datetime(day.year, day.month, day.day, tzinfo=tz)
    return [start + timedelta(hours=h) for h in range(hours)]


def make_series(source="test", day=TEST_DAY, **channels):
    """Series with one sample per hour starting at local midnight."""
    length = len(next(iter(channels.values()))) if channels else 24
    return HourlySeries(source=source, times=hourly_times(day, length), channels=channels)


def open_meteo_payload(day=TEST_DAY, **columns):
    start = datetime(day.year, day.month, day.day, tzinfo=LONDON)
    times = [int((start + timedelta(hours=h)).timestamp()) for h in range(24)]
    hourly = {"time": times}
    hourly.update(columns)
    return {"latitude": 50.35, "longitude": -3.58, "hourly": hourly}


def stormglass_payload(day=TEST_DAY, hours=24, **fields):
    """Every hour carries the given ``{param: {sub_source: value}}`` mapping."""
    start = datetime(day.year, day.month, day.day, tzinfo=LONDON)
    return {
        "hours": [
            {"time": (start + timedelta(hours=h)).astimezone(ZoneInfo("UTC")).isoformat(), **fields}
            for h in range(hours)
        ],
        "meta": {"cost": 1},
    }


def worldtides_payload(day=TEST_DAY):
    start = datetime(day.year, day.month, day.day, tzinfo=LONDON)

    def at(hours):
        return int((start + timedelta(hours=hours)).timestamp())

    return {
        "status": 200,
        "stationName": "Salcombe",
        "stationDistance": 2300,
        "responseLat": 50.23,
        "responseLon": -3.77,
        "datum": "LAT",
        "copyright": "Tidal data retrieved from www.worldtides.info",
        "extremes": [
            {"dt": at(-2), "type": "Low", "height": 0.6},
            {"dt": at(2), "type": "High", "height": 4.9},
            {"dt": at(8), "type": "Low", "height": 0.4},
            {"dt": at(14), "type": "High", "height": 5.1},
            {"dt": at(20.5), "type": "Low", "height": 0.7},
            {"dt": at(26), "type": "High", "height": 4.8},
        ],
        "heights": [
            {"dt": at(h / 2), "height": 2.5} for h in range(48)
        ],
    }


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def series_factory():
    return make_series


@pytest.fixture
def open_meteo_factory():
    return open_meteo_payload


@pytest.fixture
def stormglass_factory():
    return stormglass_payload


@pytest.fixture
def worldtides_factory():
    return worldtides_payload
