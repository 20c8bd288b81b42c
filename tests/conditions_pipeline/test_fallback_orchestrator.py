"""Tests for premium-to-free fallback orchestration."""
from datetime import date

import pytest

from conditions_pipeline.errors import (
    ApiKeyRequired,
    ConditionsFetchError,
    NoDataForLocation,
    ProviderUnavailable,
    QuotaExceeded,
    TideDataError,
)
from conditions_pipeline.models.query import ConditionsQuery
from conditions_pipeline.models.tide import TidalSummary
from conditions_pipeline.services.cache_service import CacheService
from conditions_pipeline.services.fallback_orchestrator import (
    MARINE_FAILED,
    TIDE_QUOTA_REACHED,
    WEATHER_FAILED,
    FallbackOrchestrator,
)
from conditions_pipeline.services.stormglass_service import StormglassService

QUERY = ConditionsQuery.create(50.35, -3.58, "2024-06-15")


def tidal_summary():
    return TidalSummary(
        date=date(2024, 6, 15), events=[], highs=[], lows=[],
        range=0.0, tidal_type="Neap Tides", moon_phase="Full Moon",
    )


class FakeFetcher:
    """Stands in for a single-category adapter."""

    def __init__(self, provider, result=None, error=None):
        self.provider = provider
        self.result = result
        self.error = error
        self.calls = 0

    def fetch(self, latitude, longitude, day):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


class FakeStormglass:
    provider = "stormglass"

    def __init__(self, configured=True, result=None, error=None):
        self.configured = configured
        self.result = result
        self.error = error
        self.calls = []

    def fetch_conditions(self, latitude, longitude, day, preferred_sub_source):
        self.calls.append(preferred_sub_source)
        if self.error is not None:
            raise self.error
        return self.result


class FakeCoastline:
    def __init__(self, bearing=180.0):
        self.bearing = bearing

    def coastline_bearing(self, latitude, longitude):
        return self.bearing


@pytest.fixture
def providers(series_factory):
    premium_marine = series_factory("stormglass", wave_height=[1.0] * 24)
    premium_weather = series_factory("stormglass", wind_speed=[5.0] * 24)
    return {
        "stormglass": FakeStormglass(result=(premium_marine, premium_weather)),
        "marine": FakeFetcher("open-meteo-marine", series_factory("open-meteo-marine", wave_height=[2.0] * 24)),
        "weather": FakeFetcher("open-meteo-weather", series_factory("open-meteo-weather", wind_speed=[7.0] * 24)),
        "tides": FakeFetcher("worldtides", tidal_summary()),
        "coastline": FakeCoastline(),
    }


class TestFallbackOrchestrator:
    """Tests for FallbackOrchestrator."""

    def test_premium_success_skips_fallback(self, providers):
        """Test free providers are not called when the premium source succeeds."""
        result = FallbackOrchestrator(**providers).get_conditions(QUERY, "noaa")

        assert providers["marine"].calls == 0
        assert providers["weather"].calls == 0
        assert providers["stormglass"].calls == ["noaa"]
        assert providers["tides"].calls == 1
        assert result.marine.source == "stormglass"
        assert result.sources == {
            "marine": "stormglass", "weather": "stormglass", "tides": "worldtides",
        }
        assert result.coastline_bearing == 180.0

    def test_unconfigured_premium_uses_fallback(self, providers):
        """Test a missing premium key goes straight to the free providers."""
        providers["stormglass"] = FakeStormglass(configured=False)

        result = FallbackOrchestrator(**providers).get_conditions(QUERY)

        assert providers["stormglass"].calls == []
        assert result.marine.values("wave_height")[0] == 2.0
        assert result.weather.values("wind_speed")[0] == 7.0
        assert result.sources["marine"] == "open-meteo-marine"
        assert result.sources["weather"] == "open-meteo-weather"

    @pytest.mark.parametrize("error", [
        QuotaExceeded("stormglass", "HTTP 429"),
        ProviderUnavailable("stormglass", "HTTP 503", 503),
    ])
    def test_premium_failure_falls_back(self, providers, error):
        """Test rate limits and outages of the premium source are not errors."""
        providers["stormglass"] = FakeStormglass(error=error)

        result = FallbackOrchestrator(**providers).get_conditions(QUERY)

        assert providers["marine"].calls == 1
        assert providers["weather"].calls == 1
        assert result.marine.source == "open-meteo-marine"

    @pytest.mark.parametrize("break_payload", [
        lambda payload: payload["hours"].reverse(),
        lambda payload: payload["hours"][0].update(waveHeight=1.0),
    ])
    def test_malformed_premium_payload_falls_back(
        self, providers, fake_session, fake_response, stormglass_factory, break_payload,
    ):
        """Test a premium payload that cannot be normalised degrades to the free providers."""
        payload = stormglass_factory(waveHeight={"sg": 1.0}, windSpeed={"sg": 5.0})
        break_payload(payload)
        providers["stormglass"] = StormglassService(
            api_key="key", session=fake_session(fake_response(200, payload)), cache=CacheService(),
        )

        result = FallbackOrchestrator(**providers).get_conditions(QUERY)

        assert providers["marine"].calls == 1
        assert providers["weather"].calls == 1
        assert result.sources["marine"] == "open-meteo-marine"
        assert result.marine.values("wave_height")[0] == 2.0

    def test_tides_always_from_tide_provider(self, providers):
        """Test tides come from the tide provider even with premium data."""
        result = FallbackOrchestrator(**providers).get_conditions(QUERY)

        assert result.tides.source == "worldtides"
        assert result.sources["tides"] == "worldtides"

    def test_tide_quota_message(self, providers):
        """Test a tide quota failure aborts with remediation text."""
        providers["tides"] = FakeFetcher("worldtides", error=QuotaExceeded("worldtides", "HTTP 402"))

        with pytest.raises(TideDataError) as excinfo:
            FallbackOrchestrator(**providers).get_conditions(QUERY)
        assert excinfo.value.user_message == TIDE_QUOTA_REACHED

    def test_tide_key_message_passed_through(self, providers):
        """Test the key registration guidance reaches the user."""
        providers["tides"] = FakeFetcher(
            "worldtides", error=ApiKeyRequired("worldtides", "HTTP 400", user_message="Register"),
        )

        with pytest.raises(TideDataError) as excinfo:
            FallbackOrchestrator(**providers).get_conditions(QUERY)
        assert excinfo.value.user_message == "Register"

    def test_tide_other_failure(self, providers):
        """Test other tide failures are prefixed."""
        providers["tides"] = FakeFetcher(
            "worldtides",
            error=NoDataForLocation("empty", user_message="No tide data available for this location"),
        )

        with pytest.raises(TideDataError) as excinfo:
            FallbackOrchestrator(**providers).get_conditions(QUERY)
        assert excinfo.value.user_message == (
            "Failed to fetch tide data: No tide data available for this location"
        )

    def test_fallback_marine_failure(self, providers):
        """Test a failing fallback marine fetch aborts the query."""
        providers["stormglass"] = FakeStormglass(configured=False)
        providers["marine"] = FakeFetcher(
            "open-meteo-marine", error=ProviderUnavailable("open-meteo-marine", "HTTP 500", 500),
        )

        with pytest.raises(ConditionsFetchError) as excinfo:
            FallbackOrchestrator(**providers).get_conditions(QUERY)
        assert excinfo.value.category == "marine"
        assert excinfo.value.user_message == MARINE_FAILED

    def test_fallback_weather_failure(self, providers):
        """Test a failing fallback weather fetch aborts the query."""
        providers["stormglass"] = FakeStormglass(configured=False)
        providers["weather"] = FakeFetcher(
            "open-meteo-weather", error=QuotaExceeded("open-meteo-weather", "HTTP 429"),
        )

        with pytest.raises(ConditionsFetchError) as excinfo:
            FallbackOrchestrator(**providers).get_conditions(QUERY)
        assert excinfo.value.user_message == WEATHER_FAILED

    def test_missing_coastline_is_not_an_error(self, providers):
        """Test an unknown coastline bearing is carried as None."""
        providers["coastline"] = FakeCoastline(bearing=None)

        result = FallbackOrchestrator(**providers).get_conditions(QUERY)

        assert result.coastline_bearing is None
