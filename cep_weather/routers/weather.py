"""
Weather router.

Provides the single public endpoint:
- GET /weather?cep=<8 digits>: current temperature for the CEP's city
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, status

from cep_weather.dependencies import get_weather_service
from cep_weather.models.weather import ErrorResponse, WeatherResult
from cep_weather.services.weather_service import WeatherService

logger = structlog.get_logger(__name__)

router = APIRouter(
    tags=["Weather"],
    responses={
        404: {"model": ErrorResponse, "description": "CEP not found"},
        422: {"model": ErrorResponse, "description": "Invalid CEP"},
        500: {"model": ErrorResponse, "description": "Upstream or configuration failure"},
    }
)


@router.get(
    "/weather",
    response_model=WeatherResult,
    status_code=status.HTTP_200_OK,
    summary="Current temperature by CEP",
    description="""
    Resolve a Brazilian postal code (CEP) to its city and return the city's
    current temperature in Celsius, Fahrenheit and Kelvin.

    **Query Parameters:**
    - cep: exactly 8 digits, no separators

    **Error Responses:**
    - 422: invalid zipcode
    - 404: can not find zipcode
    - 500: upstream failure or missing WeatherAPI key
    """,
    responses={
        200: {
            "description": "Temperature found",
            "model": WeatherResult
        },
        422: {
            "description": "Invalid CEP",
            "model": ErrorResponse,
            "content": {
                "application/json": {
                    "example": {"message": "invalid zipcode"}
                }
            }
        }
    }
)
async def get_weather(
    cep: Optional[str] = Query(None, description="8-digit CEP"),
    weather_service: WeatherService = Depends(get_weather_service),
) -> WeatherResult:
    """
    Get the current weather for a CEP.

    Failures are raised as WeatherServiceError subclasses and rendered by
    the application exception handler.
    """
    return await weather_service.get_weather(cep)
