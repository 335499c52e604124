"""Business logic services.

This package contains the weather pipeline and the upstream collaborators
it orchestrates.
"""

from cep_weather.services.cep_resolver import CepResolver, ViaCepResolver
from cep_weather.services.weather_provider import WeatherApiProvider, WeatherProvider
from cep_weather.services.weather_service import WeatherService, is_valid_cep

__all__ = [
    "CepResolver",
    "ViaCepResolver",
    "WeatherProvider",
    "WeatherApiProvider",
    "WeatherService",
    "is_valid_cep",
]
