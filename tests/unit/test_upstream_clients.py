"""
Unit tests for the ViaCEP and WeatherAPI collaborators.

The aiohttp session is replaced by a test double so that transport, read
and decode failures can be produced deterministically.
"""

import asyncio
from typing import Optional

import aiohttp
import pytest

from cep_weather.errors import (
    ConfigMissingError,
    UpstreamDecodeError,
    UpstreamReadError,
    UpstreamUnreachableError,
)
from cep_weather.services.cep_resolver import ViaCepResolver
from cep_weather.services.weather_provider import WeatherApiProvider


# ============================================================================
# SESSION DOUBLES
# ============================================================================


class StubResponse:
    def __init__(self, body: bytes = b"", status: int = 200, read_error: Optional[Exception] = None):
        self.body = body
        self.status = status
        self.read_error = read_error

    async def read(self) -> bytes:
        if self.read_error is not None:
            raise self.read_error
        return self.body


class StubRequestContext:
    def __init__(self, response: StubResponse, error: Optional[Exception]):
        self.response = response
        self.error = error

    async def __aenter__(self) -> StubResponse:
        if self.error is not None:
            raise self.error
        return self.response

    async def __aexit__(self, exc_type, exc, tb):
        return False


class StubSession:
    """Records GET calls and answers them with a fixed outcome."""

    def __init__(self, response: Optional[StubResponse] = None, error: Optional[Exception] = None):
        self.response = response or StubResponse()
        self.error = error
        self.calls = []

    def get(self, url, params=None):
        self.calls.append((url, params))
        return StubRequestContext(self.response, self.error)


def json_session(body: str, status: int = 200) -> StubSession:
    return StubSession(StubResponse(body.encode("utf-8"), status=status))


# ============================================================================
# VIACEP RESOLVER
# ============================================================================


class TestViaCepResolver:

    @pytest.mark.asyncio
    async def test_builds_lookup_url(self):
        session = json_session('{"localidade": "Sao Paulo"}')
        resolver = ViaCepResolver(session, "https://viacep.com.br/")

        await resolver.resolve("01001000")

        assert session.calls == [("https://viacep.com.br/ws/01001000/json/", None)]

    @pytest.mark.asyncio
    async def test_found_city(self):
        session = json_session(
            '{"cep": "01001-000", "logradouro": "Praça da Sé", '
            '"localidade": "São Paulo", "uf": "SP"}'
        )
        resolver = ViaCepResolver(session, "https://viacep.com.br")

        result = await resolver.resolve("01001000")

        assert result.found is True
        assert result.city == "São Paulo"

    @pytest.mark.parametrize("body", [
        '{"erro": true}',
        '{"erro": "true"}',
        '{"localidade": ""}',
        '{}',
        '{"localidade": "Sao Paulo", "erro": true}',
        "null",
        '{"localidade": null}',
        '{"localidade": null, "erro": null}',
    ])
    @pytest.mark.asyncio
    async def test_not_found(self, body):
        resolver = ViaCepResolver(json_session(body), "https://viacep.com.br")

        result = await resolver.resolve("99999999")

        assert result.found is False

    @pytest.mark.parametrize("body", [
        "<html>Bad Request</html>",
        "",
        "[]",
        '{"localidade": 42}',
        '{"localidade": "Sao Paulo"',
    ])
    @pytest.mark.asyncio
    async def test_decode_error(self, body):
        resolver = ViaCepResolver(json_session(body, status=400), "https://viacep.com.br")

        with pytest.raises(UpstreamDecodeError) as exc_info:
            await resolver.resolve("01001000")

        assert exc_info.value.message == "error processing CEP response"

    @pytest.mark.parametrize("error", [
        aiohttp.ClientConnectionError("connection refused"),
        aiohttp.ServerDisconnectedError(),
        asyncio.TimeoutError(),
    ])
    @pytest.mark.asyncio
    async def test_transport_error(self, error):
        resolver = ViaCepResolver(StubSession(error=error), "https://viacep.com.br")

        with pytest.raises(UpstreamUnreachableError) as exc_info:
            await resolver.resolve("01001000")

        assert exc_info.value.message == "error querying CEP"
        assert exc_info.value.status_code == 500

    @pytest.mark.parametrize("error", [
        aiohttp.ClientPayloadError("response payload is not completed"),
        asyncio.TimeoutError(),
    ])
    @pytest.mark.asyncio
    async def test_read_error(self, error):
        session = StubSession(StubResponse(read_error=error))
        resolver = ViaCepResolver(session, "https://viacep.com.br")

        with pytest.raises(UpstreamReadError) as exc_info:
            await resolver.resolve("01001000")

        assert exc_info.value.message == "error reading CEP response"


# ============================================================================
# WEATHERAPI PROVIDER
# ============================================================================


class TestWeatherApiProvider:

    @pytest.mark.asyncio
    async def test_sends_key_and_city_as_query(self):
        session = json_session('{"current": {"temp_c": 25}}')
        provider = WeatherApiProvider(session, "https://api.weatherapi.com", "dummy")

        await provider.fetch_temperature("São Paulo")

        assert session.calls == [
            ("https://api.weatherapi.com/v1/current.json", {"key": "dummy", "q": "São Paulo"})
        ]

    @pytest.mark.parametrize("body,celsius", [
        ('{"current": {"temp_c": 25}}', 25.0),
        ('{"current": {"temp_c": -3.4, "temp_f": 25.9}, "location": {"name": "X"}}', -3.4),
    ])
    @pytest.mark.asyncio
    async def test_reads_celsius(self, body, celsius):
        provider = WeatherApiProvider(json_session(body), "https://api.weatherapi.com", "dummy")

        reading = await provider.fetch_temperature("Sao Paulo")

        assert reading.celsius == celsius

    @pytest.mark.parametrize("body", [
        '{"error": {"code": 2006, "message": "API key is invalid."}}',
        '{"current": {}}',
        '{"current": {"temp_c": "warm"}}',
        '{"current": {"temp_c": NaN}}',
        '{"current": {"temp_c": Infinity}}',
        '{"current": {"temp_c": -Infinity}}',
        "not json",
    ])
    @pytest.mark.asyncio
    async def test_decode_error(self, body):
        provider = WeatherApiProvider(json_session(body), "https://api.weatherapi.com", "dummy")

        with pytest.raises(UpstreamDecodeError) as exc_info:
            await provider.fetch_temperature("Sao Paulo")

        assert exc_info.value.message == "error processing WeatherAPI response"

    @pytest.mark.asyncio
    async def test_transport_error(self):
        session = StubSession(error=aiohttp.ClientConnectionError("dns failure"))
        provider = WeatherApiProvider(session, "https://api.weatherapi.com", "dummy")

        with pytest.raises(UpstreamUnreachableError) as exc_info:
            await provider.fetch_temperature("Sao Paulo")

        assert exc_info.value.message == "error querying WeatherAPI"

    @pytest.mark.asyncio
    async def test_read_error(self):
        session = StubSession(StubResponse(read_error=aiohttp.ClientPayloadError("truncated")))
        provider = WeatherApiProvider(session, "https://api.weatherapi.com", "dummy")

        with pytest.raises(UpstreamReadError) as exc_info:
            await provider.fetch_temperature("Sao Paulo")

        assert exc_info.value.message == "error reading WeatherAPI response"

    @pytest.mark.parametrize("api_key", [None, ""])
    @pytest.mark.asyncio
    async def test_missing_key_makes_no_request(self, api_key):
        session = json_session('{"current": {"temp_c": 25}}')
        provider = WeatherApiProvider(session, "https://api.weatherapi.com", api_key)

        with pytest.raises(ConfigMissingError):
            await provider.fetch_temperature("Sao Paulo")

        assert session.calls == []
