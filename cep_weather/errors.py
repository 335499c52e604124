"""
Error taxonomy for the weather-by-CEP pipeline.

Every failure carries the HTTP status and the client-facing message it is
rendered with. Collaborators raise these at the point of failure and the
application exception handler turns them into ``{"message": ...}`` bodies.
"""

from typing import Optional

from fastapi import status

# Upstream labels, also used as metric label values
CEP_UPSTREAM = "cep"
WEATHER_UPSTREAM = "weather"

_UPSTREAM_NAMES = {
    CEP_UPSTREAM: "CEP",
    WEATHER_UPSTREAM: "WeatherAPI",
}


class WeatherServiceError(Exception):
    """Base error for the weather service."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    outcome: str = "error"

    def __init__(self, message: str, upstream: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.upstream = upstream


class InvalidZipcodeError(WeatherServiceError):
    """Raised when the postal code is not exactly 8 digits."""

    status_code = 422
    outcome = "invalid_input"

    def __init__(self):
        super().__init__("invalid zipcode")


class ZipcodeNotFoundError(WeatherServiceError):
    """Raised when the CEP service flags an error or returns no city."""

    status_code = status.HTTP_404_NOT_FOUND
    outcome = "not_found"

    def __init__(self):
        super().__init__("can not find zipcode", upstream=CEP_UPSTREAM)


class ConfigMissingError(WeatherServiceError):
    """Raised when no WeatherAPI key is configured."""

    outcome = "config_missing"

    def __init__(self):
        super().__init__("WeatherAPI key not configured")


class UpstreamUnreachableError(WeatherServiceError):
    """Network error or timeout while calling an upstream."""

    outcome = "unreachable"

    def __init__(self, upstream: str):
        super().__init__(f"error querying {_UPSTREAM_NAMES[upstream]}", upstream=upstream)


class UpstreamReadError(WeatherServiceError):
    """Upstream response body could not be read."""

    outcome = "read_error"

    def __init__(self, upstream: str):
        super().__init__(
            f"error reading {_UPSTREAM_NAMES[upstream]} response", upstream=upstream
        )


class UpstreamDecodeError(WeatherServiceError):
    """Upstream response body is not the expected JSON document."""

    outcome = "decode_error"

    def __init__(self, upstream: str):
        super().__init__(
            f"error processing {_UPSTREAM_NAMES[upstream]} response", upstream=upstream
        )
