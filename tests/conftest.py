"""
Shared fixtures and test doubles for the weather service tests.
"""

from typing import List, Optional

import pytest

from cep_weather.config import Settings
from cep_weather.models.weather import CityLookupResult, TemperatureReading
from shared.metrics import setup_metrics


# ============================================================================
# COLLABORATOR DOUBLES
# ============================================================================


class FakeCepResolver:
    """CEP resolver returning a canned result or raising a canned error."""

    def __init__(
        self,
        result: Optional[CityLookupResult] = None,
        error: Optional[Exception] = None,
    ):
        self.result = result or CityLookupResult(city="Sao Paulo", found=True)
        self.error = error
        self.calls: List[str] = []

    async def resolve(self, cep: str) -> CityLookupResult:
        self.calls.append(cep)
        if self.error is not None:
            raise self.error
        return self.result


class FakeWeatherProvider:
    """Weather provider returning a canned reading or raising a canned error."""

    def __init__(self, celsius: float = 25.0, error: Optional[Exception] = None):
        self.celsius = celsius
        self.error = error
        self.calls: List[str] = []

    async def fetch_temperature(self, city: str) -> TemperatureReading:
        self.calls.append(city)
        if self.error is not None:
            raise self.error
        return TemperatureReading(celsius=self.celsius)


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def settings():
    """Settings isolated from the host environment and any .env file."""
    return Settings(
        _env_file=None,
        weather_api_key="dummy",
        log_level="WARNING",
    )


@pytest.fixture
def settings_without_key():
    return Settings(
        _env_file=None,
        weather_api_key=None,
        log_level="WARNING",
    )


@pytest.fixture
def cep_resolver():
    return FakeCepResolver()


@pytest.fixture
def weather_provider():
    return FakeWeatherProvider()


@pytest.fixture
def metrics():
    return setup_metrics()


@pytest.fixture
def make_cep_resolver():
    """Factory for CEP resolver doubles with custom results or errors."""
    return FakeCepResolver


@pytest.fixture
def make_weather_provider():
    """Factory for weather provider doubles with custom readings or errors."""
    return FakeWeatherProvider
