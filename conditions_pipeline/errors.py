"""Exception types raised by the conditions pipeline."""
from typing import Optional


class ConditionsError(Exception):
    """Base class for all pipeline errors.

    Every error carries a ``user_message`` that is safe to show to an end user.
    """

    default_message = "Something went wrong while fetching conditions."

    def __init__(self, message: Optional[str] = None, user_message: Optional[str] = None):
        super().__init__(message or user_message or self.default_message)
        self.user_message = user_message or self.default_message


class InvalidInput(ConditionsError):
    """Malformed coordinates, dates or times. Raised before any network call."""

    def __init__(self, message: str):
        super().__init__(message, user_message=message)


class ProviderError(ConditionsError):
    """A data provider could not supply a usable response."""

    default_message = "The data provider could not be reached."

    def __init__(self, provider: str, message: str, user_message: Optional[str] = None):
        super().__init__(f"{provider}: {message}", user_message)
        self.provider = provider


class ProviderUnavailable(ProviderError):
    """Transport failure or non-2xx status."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        super().__init__(provider, message)
        self.status_code = status_code


class MalformedPayload(ProviderUnavailable):
    """Response parsed but a required top-level field is missing."""


class ProviderNotConfigured(ProviderError):
    """Provider requires an API key that has not been configured."""


class QuotaExceeded(ProviderError):
    """Provider reported that its rate limit or quota is exhausted."""


class ApiKeyRequired(ProviderError):
    """Provider rejected the request because a key is needed."""


class NoDataForLocation(ConditionsError):
    """Valid request, but the provider has nothing for this location."""

    default_message = "No data available for this location."


class NoDataForTime(ConditionsError):
    """Valid request, but no sample covers the requested time."""

    default_message = "No data available for the requested time."


class ConditionsFetchError(ConditionsError):
    """A mandatory category (marine, weather, tides) could not be fetched."""

    def __init__(self, category: str, user_message: str, cause: Optional[Exception] = None):
        super().__init__(f"{category} fetch failed: {cause}", user_message)
        self.category = category
        self.cause = cause


class TideDataError(ConditionsFetchError):
    """Mandatory tide fetch failed; the message carries remediation guidance."""

    def __init__(self, user_message: str, cause: Optional[Exception] = None):
        super().__init__("tides", user_message, cause)
