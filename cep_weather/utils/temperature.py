"""Temperature scale conversions."""

from cep_weather.models.weather import TemperatureReading, WeatherResult

KELVIN_OFFSET = 273.15


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 1.8 + 32


def celsius_to_kelvin(celsius: float) -> float:
    return celsius + KELVIN_OFFSET


def convert_temperature(reading: TemperatureReading) -> WeatherResult:
    """Build the three-scale result for a Celsius reading."""
    celsius = reading.celsius
    return WeatherResult(
        temp_C=celsius,
        temp_F=celsius_to_fahrenheit(celsius),
        temp_K=celsius_to_kelvin(celsius),
    )
