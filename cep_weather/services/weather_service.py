"""
Weather-by-CEP service.

Runs the request pipeline:
1. Validate the CEP format
2. Resolve the CEP to a city (ViaCEP)
3. Check the WeatherAPI key is configured
4. Fetch the current temperature (WeatherAPI)
5. Convert to Celsius, Fahrenheit and Kelvin

The two upstream calls are strictly sequential and never retried; the
first failure ends the request.
"""

import re
from typing import Optional

import structlog

from cep_weather.errors import (
    CEP_UPSTREAM,
    ConfigMissingError,
    InvalidZipcodeError,
    WEATHER_UPSTREAM,
    WeatherServiceError,
    ZipcodeNotFoundError,
)
from cep_weather.models.weather import WeatherResult
from cep_weather.services.cep_resolver import CepResolver
from cep_weather.services.weather_provider import WeatherProvider
from cep_weather.utils.temperature import convert_temperature
from shared.metrics import ServiceMetrics

logger = structlog.get_logger(__name__)

CEP_PATTERN = re.compile(r"^[0-9]{8}$")


def is_valid_cep(cep: Optional[str]) -> bool:
    """Check a CEP is exactly 8 ASCII digits."""
    return cep is not None and CEP_PATTERN.fullmatch(cep) is not None


class WeatherService:
    """Orchestrates the CEP lookup and the temperature lookup."""

    def __init__(
        self,
        cep_resolver: CepResolver,
        weather_provider: WeatherProvider,
        weather_api_key: Optional[str],
        metrics: Optional[ServiceMetrics] = None,
    ):
        """
        Initialize weather service.

        Args:
            cep_resolver: CEP to city collaborator
            weather_provider: City to temperature collaborator
            weather_api_key: Configured WeatherAPI key, None when absent
            metrics: Optional metrics to record upstream outcomes
        """
        self.cep_resolver = cep_resolver
        self.weather_provider = weather_provider
        self.weather_api_key = weather_api_key
        self.metrics = metrics

    async def get_weather(self, cep: Optional[str]) -> WeatherResult:
        """
        Get the current temperature for the city a CEP belongs to.

        Args:
            cep: Postal code from the request, possibly missing or malformed

        Returns:
            Temperature in the three scales

        Raises:
            InvalidZipcodeError: CEP is not exactly 8 digits
            ZipcodeNotFoundError: ViaCEP has no city for the CEP
            ConfigMissingError: No WeatherAPI key configured
            UpstreamUnreachableError: An upstream could not be reached
            UpstreamReadError: An upstream body could not be read
            UpstreamDecodeError: An upstream body is not the expected JSON
        """
        if not is_valid_cep(cep):
            logger.info("invalid_zipcode", cep=cep)
            raise InvalidZipcodeError()

        try:
            lookup = await self.cep_resolver.resolve(cep)
        except WeatherServiceError as e:
            self._record(CEP_UPSTREAM, e.outcome)
            logger.warning("cep_lookup_failed", cep=cep, error=e.message)
            raise

        if not lookup.found:
            self._record(CEP_UPSTREAM, "not_found")
            logger.info("zipcode_not_found", cep=cep)
            raise ZipcodeNotFoundError()
        self._record(CEP_UPSTREAM, "success")

        if not self.weather_api_key:
            logger.error("weather_api_key_missing")
            raise ConfigMissingError()

        try:
            reading = await self.weather_provider.fetch_temperature(lookup.city)
        except WeatherServiceError as e:
            self._record(WEATHER_UPSTREAM, e.outcome)
            logger.warning("weather_lookup_failed", city=lookup.city, error=e.message)
            raise
        self._record(WEATHER_UPSTREAM, "success")

        result = convert_temperature(reading)
        logger.info(
            "weather_resolved",
            cep=cep,
            city=lookup.city,
            temp_c=result.temp_C,
        )
        return result

    def _record(self, upstream: str, outcome: str) -> None:
        if self.metrics is not None:
            self.metrics.upstream_requests.labels(upstream=upstream, outcome=outcome).inc()
