"""Tests for NPI API Client"""

import pytest
import asyncio
import aiohttp
from unittest.mock import AsyncMock, MagicMock
from npi_common.config import Settings
from npi_common.errors import LookupTimeoutError, UpstreamError
from npi_common.models import RawProviderRecord
from npi_lookup.npi_api_client import NPIClient


def make_session(response=None, enter_side_effect=None):
    """Build a mock aiohttp session whose get() works as an async context manager."""
    mock_session = MagicMock()
    mock_session.get = MagicMock()
    mock_session.get.return_value.__aenter__ = AsyncMock(
        return_value=response, side_effect=enter_side_effect
    )
    mock_session.get.return_value.__aexit__ = AsyncMock(return_value=False)
    return mock_session


def make_response(data, status=200):
    mock_response = MagicMock()
    mock_response.status = status
    mock_response.json = AsyncMock(return_value=data)
    mock_response.raise_for_status = MagicMock()
    return mock_response


class TestNPIClient:
    """Test suite for NPIClient class"""

    def test_init_default_settings(self):
        client = NPIClient()
        assert client.settings.npi_api_version == "2.1"
        assert client.timeout.total == client.settings.npi_request_timeout

    def test_init_custom_settings(self):
        client = NPIClient(settings=Settings(npi_api_url="http://registry.test/api/", npi_request_timeout=1.5))
        assert client.settings.npi_api_url == "http://registry.test/api/"
        assert client.timeout.total == 1.5

    @pytest.mark.asyncio
    async def test_fetch_provider_success(self):
        """Returns the first result and queries by number and version"""
        client = NPIClient(settings=Settings(npi_api_url="http://registry.test/api/"))
        response = make_response({
            "result_count": 2,
            "results": [
                {"number": "1417005489", "enumeration_type": "NPI-1", "basic": {"first_name": "JANE"}},
                {"number": "9999999999", "enumeration_type": "NPI-2"},
            ],
        })
        session = make_session(response)

        result = await client.fetch_provider("1417005489", session)

        assert isinstance(result, RawProviderRecord)
        assert result.is_individual
        assert result.basic.first_name == "JANE"

        args, kwargs = session.get.call_args
        assert args[0] == "http://registry.test/api/"
        assert kwargs["params"] == {"number": "1417005489", "version": "2.1"}
        assert kwargs["headers"] == {"Accept": "application/json"}
        assert kwargs["timeout"].total == 5.0

    @pytest.mark.asyncio
    async def test_fetch_provider_no_results(self):
        client = NPIClient()
        session = make_session(make_response({"result_count": 0, "results": []}))

        assert await client.fetch_provider("1417005489", session) is None

    @pytest.mark.asyncio
    async def test_fetch_provider_missing_results_key(self):
        """The registry answers validation problems with an Errors object"""
        client = NPIClient()
        session = make_session(make_response({"Errors": [{"description": "bad number"}]}))

        assert await client.fetch_provider("1417005489", session) is None

    @pytest.mark.asyncio
    async def test_fetch_provider_timeout(self):
        client = NPIClient()
        session = make_session(enter_side_effect=asyncio.TimeoutError())

        with pytest.raises(LookupTimeoutError):
            await client.fetch_provider("1417005489", session)

    @pytest.mark.asyncio
    async def test_fetch_provider_http_error(self):
        client = NPIClient()
        response = make_response({})
        response.raise_for_status = MagicMock(
            side_effect=aiohttp.ClientResponseError(None, None, status=500)
        )
        session = make_session(response)

        with pytest.raises(UpstreamError) as exc_info:
            await client.fetch_provider("1417005489", session)
        assert "500" in exc_info.value.detail
        assert exc_info.value.message == "Failed to retrieve provider data"

    @pytest.mark.asyncio
    async def test_fetch_provider_connection_error(self):
        client = NPIClient()
        session = make_session(enter_side_effect=aiohttp.ClientConnectionError("refused"))

        with pytest.raises(UpstreamError):
            await client.fetch_provider("1417005489", session)

    @pytest.mark.asyncio
    async def test_fetch_provider_invalid_json(self):
        client = NPIClient()
        response = make_response(None)
        response.json = AsyncMock(side_effect=ValueError("Expecting value"))
        session = make_session(response)

        with pytest.raises(UpstreamError):
            await client.fetch_provider("1417005489", session)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        ["not", "an", "object"],
        {"results": "nope"},
        {"results": [{"taxonomies": "not-a-list"}]},
    ])
    async def test_fetch_provider_malformed_payload(self, payload):
        client = NPIClient()
        session = make_session(make_response(payload))

        with pytest.raises(UpstreamError):
            await client.fetch_provider("1417005489", session)
