"""FastAPI middleware components."""

from cep_weather.middleware.request_logging import (
    CORRELATION_HEADER,
    RequestLoggingMiddleware,
)

__all__ = [
    "CORRELATION_HEADER",
    "RequestLoggingMiddleware",
]
