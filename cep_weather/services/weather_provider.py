"""
WeatherAPI collaborator: fetches the current temperature for a city.
"""

from typing import Optional, Protocol

import aiohttp
import structlog

from cep_weather.errors import ConfigMissingError, WEATHER_UPSTREAM
from cep_weather.models.weather import TemperatureReading, WeatherApiPayload
from cep_weather.services.http import decode_payload, fetch_body

logger = structlog.get_logger(__name__)


class WeatherProvider(Protocol):
    """Anything that can report the current temperature of a city."""

    async def fetch_temperature(self, city: str) -> TemperatureReading:
        ...


class WeatherApiProvider:
    """Fetch current conditions from weatherapi.com."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str,
        api_key: Optional[str],
    ):
        """
        Initialize the provider.

        Args:
            session: Shared outbound HTTP session
            base_url: WeatherAPI base URL, without trailing slash
            api_key: WeatherAPI key, sent as the ``key`` query parameter
        """
        self.session = session
        self.base_url = base_url.rstrip("/")
        self._api_key = api_key

    @property
    def current_url(self) -> str:
        return f"{self.base_url}/v1/current.json"

    async def fetch_temperature(self, city: str) -> TemperatureReading:
        """
        Fetch the current temperature for a city.

        Args:
            city: City name as returned by the CEP lookup

        Returns:
            Current temperature in Celsius

        Raises:
            ConfigMissingError: No API key was configured
            UpstreamUnreachableError: WeatherAPI could not be reached
            UpstreamReadError: Response body could not be read
            UpstreamDecodeError: Response body is not the expected JSON
        """
        if not self._api_key:
            raise ConfigMissingError()

        body = await fetch_body(
            self.session,
            self.current_url,
            WEATHER_UPSTREAM,
            params={"key": self._api_key, "q": city},
        )
        payload = decode_payload(body, WeatherApiPayload, WEATHER_UPSTREAM)

        logger.debug("temperature_fetched", city=city, celsius=payload.current.temp_c)
        return TemperatureReading(celsius=payload.current.temp_c)
