"""FastAPI service that reports the current weather for a Brazilian CEP.

The service resolves the postal code to a city through ViaCEP and reads the
city's current temperature from WeatherAPI.
"""

__version__ = "1.0.0"
