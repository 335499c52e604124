"""Data models for the weather service.

This package contains Pydantic models for upstream payloads, domain values
and response bodies.
"""

from cep_weather.models.weather import (
    CityLookupResult,
    ErrorResponse,
    HealthResponse,
    TemperatureReading,
    ViaCepPayload,
    WeatherApiPayload,
    WeatherResult,
)

__all__ = [
    "CityLookupResult",
    "ErrorResponse",
    "HealthResponse",
    "TemperatureReading",
    "ViaCepPayload",
    "WeatherApiPayload",
    "WeatherResult",
]
