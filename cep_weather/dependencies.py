"""
FastAPI dependency injection for the weather service.

Shared resources are built once in the application lifespan and stored on
``app.state``; these providers hand them to route handlers.
"""

import structlog
from fastapi import Request

from cep_weather.services.weather_service import WeatherService

logger = structlog.get_logger(__name__)


def get_weather_service(request: Request) -> WeatherService:
    """
    Get the weather service.

    Returns:
        WeatherService built during startup

    Raises:
        RuntimeError: If the application lifespan has not run
    """
    service = getattr(request.app.state, "weather_service", None)
    if service is None:
        logger.error("weather_service_not_initialized")
        raise RuntimeError(
            "Weather service not initialized. Start the application lifespan first."
        )
    return service
