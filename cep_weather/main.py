"""
FastAPI application entry point for the CEP Weather API.

This module provides the FastAPI application with:
- GET /weather: temperature by Brazilian postal code
- Health and Prometheus metrics endpoints
- Request logging with correlation IDs
- Uniform ``{"message": ...}`` error bodies
- A shared outbound HTTP session opened at startup and closed at shutdown
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST
from starlette.exceptions import HTTPException as StarletteHTTPException

from cep_weather.config import Settings, get_settings
from cep_weather.errors import WeatherServiceError
from cep_weather.middleware import RequestLoggingMiddleware
from cep_weather.models.weather import HealthResponse
from cep_weather.routers import weather
from cep_weather.services.cep_resolver import CepResolver, ViaCepResolver
from cep_weather.services.http import create_client_session
from cep_weather.services.weather_provider import WeatherApiProvider, WeatherProvider
from cep_weather.services.weather_service import WeatherService
from shared.logging import configure_logging
from shared.metrics import get_metrics_handler, setup_metrics

logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    cep_resolver: Optional[CepResolver] = None,
    weather_provider: Optional[WeatherProvider] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration; loaded from the environment when omitted
        cep_resolver: CEP collaborator; ViaCEP over aiohttp when omitted
        weather_provider: Weather collaborator; WeatherAPI over aiohttp when omitted

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()
    metrics = setup_metrics()

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.log_format == "json",
        service_name=settings.app_name,
    )

    # ========================================================================
    # Lifespan Management
    # ========================================================================

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Open the outbound session and build the weather service on startup;
        close the session on shutdown.
        """
        logger.info(
            "application_starting",
            app_name=settings.app_name,
            version=settings.app_version,
            weather_api_key_configured=settings.weather_api_configured,
        )

        session = None
        if cep_resolver is None or weather_provider is None:
            session = create_client_session(settings)
            logger.info(
                "http_session_opened",
                timeout_seconds=settings.http_timeout_seconds,
                pool_size=settings.http_pool_size,
            )

        try:
            app.state.weather_service = WeatherService(
                cep_resolver=cep_resolver or ViaCepResolver(session, settings.cep_api_base_url),
                weather_provider=weather_provider or WeatherApiProvider(
                    session,
                    settings.weather_api_base_url,
                    settings.weather_api_key,
                ),
                weather_api_key=settings.weather_api_key,
                metrics=metrics,
            )

            if not settings.weather_api_configured:
                logger.warning("weather_api_key_not_configured")

            logger.info("application_started", port=settings.port)
            yield

        finally:
            logger.info("application_shutting_down")
            app.state.weather_service = None
            if session is not None:
                await session.close()
                logger.info("http_session_closed")
            logger.info("application_shutdown_complete")

    # ========================================================================
    # FastAPI Application
    # ========================================================================

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Resolves a Brazilian postal code (CEP) to its city and reports the "
            "city's current temperature in Celsius, Fahrenheit and Kelvin."
        ),
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.metrics = metrics
    app.state.weather_service = None

    app.add_middleware(RequestLoggingMiddleware, metrics=metrics)

    # ========================================================================
    # Exception Handlers
    # ========================================================================

    @app.exception_handler(WeatherServiceError)
    async def weather_exception_handler(request: Request, exc: WeatherServiceError):
        """Render pipeline failures as ``{"message": ...}``."""
        logger.info(
            "weather_request_rejected",
            path=request.url.path,
            status_code=exc.status_code,
            message=exc.message,
            upstream=exc.upstream,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        logger.warning(
            "validation_error",
            path=request.url.path,
            errors=exc.errors()
        )
        return JSONResponse(
            status_code=422,
            content={"message": "invalid request"}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        logger.warning(
            "http_exception",
            path=request.url.path,
            status_code=exc.status_code,
            detail=exc.detail
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(
            "unexpected_exception",
            path=request.url.path,
            error=str(exc),
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "internal server error"}
        )

    # ========================================================================
    # Health and Metrics Endpoints
    # ========================================================================

    @app.get("/health", tags=["Health"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """
        Health check endpoint.

        Reports process health without calling any upstream.
        """
        return HealthResponse(
            status="healthy",
            service=settings.app_name,
            version=settings.app_version,
            weather_api_key_configured=settings.weather_api_configured,
        )

    if settings.metrics_enabled:
        metrics_handler = get_metrics_handler(metrics)

        @app.get("/metrics", tags=["Monitoring"], include_in_schema=False)
        async def metrics_endpoint() -> Response:
            """Prometheus metrics endpoint."""
            return Response(content=metrics_handler(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(weather.router)

    return app


app = create_app()


def run() -> None:
    """
    Run the application with Uvicorn.

    Uvicorn exits the process when the listening socket cannot be bound.
    """
    settings = get_settings()
    logger.info("starting_uvicorn_server", host=settings.host, port=settings.port)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    run()
