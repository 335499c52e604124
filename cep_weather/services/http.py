"""
Outbound HTTP helpers shared by the upstream collaborators.

Maps aiohttp failures onto the service error taxonomy:
- connection errors and timeouts before a response arrives -> unreachable
- failures while reading the body -> read error
- bodies that do not validate against the expected model -> decode error
"""

import asyncio
from typing import Mapping, Optional, Type, TypeVar

import aiohttp
import structlog
from pydantic import BaseModel, ValidationError

from cep_weather.config import Settings
from cep_weather.errors import (
    UpstreamDecodeError,
    UpstreamReadError,
    UpstreamUnreachableError,
)

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def create_client_session(settings: Settings) -> aiohttp.ClientSession:
    """
    Create the long-lived outbound session.

    The session pools connections, verifies TLS certificates with the system
    trust store and bounds every request with the configured total timeout.

    Args:
        settings: Application settings

    Returns:
        aiohttp client session (caller closes it)
    """
    connector = aiohttp.TCPConnector(limit=settings.http_pool_size, ssl=True)
    timeout = aiohttp.ClientTimeout(total=settings.http_timeout_seconds)
    return aiohttp.ClientSession(
        connector=connector,
        timeout=timeout,
        headers={"Accept": "application/json"},
    )


async def fetch_body(
    session: aiohttp.ClientSession,
    url: str,
    upstream: str,
    params: Optional[Mapping[str, str]] = None,
) -> bytes:
    """
    Issue a GET request and return the raw response body.

    Upstream status codes are not inspected; the body decides the outcome.

    Raises:
        UpstreamUnreachableError: Request could not be sent or no response arrived
        UpstreamReadError: Response body could not be read
    """
    try:
        async with session.get(url, params=params) as response:
            try:
                body = await response.read()
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.warning(
                    "upstream_read_failed",
                    upstream=upstream,
                    url=url,
                    error=str(e) or type(e).__name__,
                )
                raise UpstreamReadError(upstream) from e

            logger.debug(
                "upstream_response",
                upstream=upstream,
                url=url,
                status_code=response.status,
                size=len(body),
            )
            return body

    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error(
            "upstream_request_failed",
            upstream=upstream,
            url=url,
            error=str(e) or type(e).__name__,
        )
        raise UpstreamUnreachableError(upstream) from e


def decode_payload(body: bytes, model: Type[ModelT], upstream: str) -> ModelT:
    """
    Parse and validate a JSON body.

    Raises:
        UpstreamDecodeError: Body is not valid JSON or does not match ``model``
    """
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        logger.warning(
            "upstream_decode_failed",
            upstream=upstream,
            errors=e.error_count(),
        )
        raise UpstreamDecodeError(upstream) from e
