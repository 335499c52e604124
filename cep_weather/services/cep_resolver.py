"""
ViaCEP collaborator: resolves a CEP to a city name.
"""

from typing import Protocol
from urllib.parse import quote

import aiohttp
import structlog

from cep_weather.errors import CEP_UPSTREAM
from cep_weather.models.weather import CityLookupResult, ViaCepPayload
from cep_weather.services.http import decode_payload, fetch_body

logger = structlog.get_logger(__name__)


class CepResolver(Protocol):
    """Anything that can turn a validated CEP into a city lookup result."""

    async def resolve(self, cep: str) -> CityLookupResult:
        ...


class ViaCepResolver:
    """Resolve CEPs through the ViaCEP web service."""

    def __init__(self, session: aiohttp.ClientSession, base_url: str):
        """
        Initialize the resolver.

        Args:
            session: Shared outbound HTTP session
            base_url: ViaCEP base URL, without trailing slash
        """
        self.session = session
        self.base_url = base_url.rstrip("/")

    def lookup_url(self, cep: str) -> str:
        return f"{self.base_url}/ws/{quote(cep, safe='')}/json/"

    async def resolve(self, cep: str) -> CityLookupResult:
        """
        Look up the city for a CEP.

        Args:
            cep: Validated 8-digit postal code

        Returns:
            Lookup result; ``found`` is False when ViaCEP flags an error
            or returns an empty city

        Raises:
            UpstreamUnreachableError: ViaCEP could not be reached
            UpstreamReadError: Response body could not be read
            UpstreamDecodeError: Response body is not the expected JSON
        """
        body = await fetch_body(self.session, self.lookup_url(cep), CEP_UPSTREAM)
        payload = decode_payload(body, ViaCepPayload, CEP_UPSTREAM)
        result = CityLookupResult.from_payload(payload)

        logger.debug("cep_resolved", cep=cep, city=result.city, found=result.found)
        return result
