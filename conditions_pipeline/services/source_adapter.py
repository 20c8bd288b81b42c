"""Shared fetch/normalise machinery for data provider adapters."""
import logging
from datetime import date, datetime, time
from typing import Any, Callable, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

import requests

from conditions_pipeline.config import (
    CACHE_KEY_PRECISION,
    DEFAULT_TIMEZONE,
    REQUEST_TIMEOUT,
    USER_AGENT,
)
from conditions_pipeline.errors import (
    MalformedPayload,
    ProviderUnavailable,
    QuotaExceeded,
)
from conditions_pipeline.models.query import parse_date, validate_coordinates
from conditions_pipeline.models.series import HourlySeries
from conditions_pipeline.services.cache_service import CacheService

logger = logging.getLogger(__name__)


class SourceAdapter:
    """
    Base class for provider adapters.

    Subclasses set ``provider``, ``cache_ttl`` and ``required_field`` and
    implement ``_request`` (build and send the HTTP request) and
    ``normalize`` (raw payload -> canonical model). ``fetch`` validates the
    inputs, serves the raw payload from cache when possible and only then
    touches the network.
    """

    provider = "provider"
    cache_ttl = 60 * 60
    required_field: Optional[str] = None

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        cache: Optional[CacheService] = None,
        timezone: str = DEFAULT_TIMEZONE,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.session = session or requests.Session()
        self.cache = cache or CacheService()
        self.tz = ZoneInfo(timezone)
        self.timezone = timezone
        self.timeout = timeout

    def cache_key(self, latitude: float, longitude: float, day: date) -> Tuple:
        return (
            self.provider,
            round(latitude, CACHE_KEY_PRECISION),
            round(longitude, CACHE_KEY_PRECISION),
            day.isoformat(),
        )

    def load(
        self,
        latitude: float,
        longitude: float,
        day,
        normalize: Callable[[Dict[str, Any], date], Any],
    ):
        """
        Normalise the provider payload for a day, from cache or network.

        A fresh payload is cached only after ``normalize`` accepts it, so a
        malformed response is retried on the next request.

        Raises:
            InvalidInput: Coordinates or date are malformed
            ProviderError: The provider could not supply a usable payload
        """
        validate_coordinates(latitude, longitude)
        day = parse_date(day)
        latitude, longitude = float(latitude), float(longitude)

        key = self.cache_key(latitude, longitude, day)
        payload = self.cache.get(key)
        if payload is not None:
            logger.info("Using cached %s data for %s", self.provider, key[1:])
            return normalize(payload, day)

        payload = self._request(latitude, longitude, day)
        self._check_payload(payload)
        result = normalize(payload, day)
        self.cache.set(key, payload, self.cache_ttl)
        return result

    def fetch(self, latitude: float, longitude: float, day):
        return self.load(latitude, longitude, day, self.normalize)

    def _request(self, latitude: float, longitude: float, day: date) -> Dict[str, Any]:
        raise NotImplementedError

    def normalize(self, payload: Dict[str, Any], day: date):
        raise NotImplementedError

    def _get(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """GET ``url`` and decode JSON, mapping failures onto provider errors."""
        request_headers = {"User-Agent": USER_AGENT}
        request_headers.update(headers or {})
        try:
            response = self.session.get(
                url, params=params, headers=request_headers, timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ProviderUnavailable(self.provider, f"request failed: {e}")

        self._check_status(response)

        try:
            return response.json()
        except ValueError as e:
            raise MalformedPayload(self.provider, f"invalid JSON: {e}", response.status_code)

    def _check_status(self, response) -> None:
        """Raise for non-2xx responses. Subclasses map provider-specific codes first."""
        if response.status_code == 429:
            raise QuotaExceeded(self.provider, "rate limit reached (HTTP 429)")
        if not 200 <= response.status_code < 300:
            raise ProviderUnavailable(
                self.provider,
                f"HTTP {response.status_code}: {response.text[:200]}",
                response.status_code,
            )

    def _check_payload(self, payload: Any) -> None:
        if not isinstance(payload, dict):
            raise MalformedPayload(self.provider, "payload is not a JSON object")
        if self.required_field and self.required_field not in payload:
            raise MalformedPayload(self.provider, f"missing required field {self.required_field!r}")

    def local_midnight(self, day: date) -> datetime:
        return datetime.combine(day, time(0, 0), tzinfo=self.tz)

    def parse_local(self, value: str) -> datetime:
        """Parse a provider timestamp into an aware datetime in the local zone."""
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=self.tz)
        return parsed.astimezone(self.tz)

    def from_epoch(self, seconds: float) -> datetime:
        return datetime.fromtimestamp(seconds, tz=self.tz)


class OpenMeteoAdapter(SourceAdapter):
    """Common request and column mapping for the Open-Meteo APIs."""

    required_field = "hourly"
    url = ""
    hourly_params: List[str] = []
    # Open-Meteo column -> canonical channel
    field_map: Dict[str, str] = {}
    extra_params: Dict[str, Any] = {}

    def _request(self, latitude: float, longitude: float, day: date) -> Dict[str, Any]:
        logger.info("Requesting %s data for %.4f, %.4f on %s", self.provider, latitude, longitude, day)
        params = {
            "latitude": f"{latitude:.4f}",
            "longitude": f"{longitude:.4f}",
            "start_date": day.isoformat(),
            "end_date": day.isoformat(),
            "hourly": ",".join(self.hourly_params),
            "timezone": self.timezone,
            "timeformat": "unixtime",
        }
        params.update(self.extra_params)
        return self._get(self.url, params=params)

    def normalize(self, payload: Dict[str, Any], day: date) -> HourlySeries:
        hourly = payload.get("hourly")
        if not isinstance(hourly, dict) or "time" not in hourly:
            raise MalformedPayload(self.provider, "hourly block has no time column")
        try:
            times = [self.from_epoch(t) for t in hourly["time"]]
        except (TypeError, ValueError, OverflowError) as e:
            raise MalformedPayload(self.provider, f"bad timestamps: {e}")

        channels = {}
        for column, channel in self.field_map.items():
            values = hourly.get(column)
            if values is None:
                continue
            if not isinstance(values, list) or len(values) != len(times):
                raise MalformedPayload(
                    self.provider, f"column {column!r} is not aligned with time",
                )
            try:
                channels[channel] = [None if v is None else float(v) for v in values]
            except (TypeError, ValueError) as e:
                raise MalformedPayload(self.provider, f"column {column!r} is not numeric: {e}")

        try:
            series = HourlySeries(source=self.provider, times=times, channels=channels)
        except ValueError as e:
            raise MalformedPayload(self.provider, str(e))
        return self.convert_units(series)

    def convert_units(self, series: HourlySeries) -> HourlySeries:
        return series
