"""Unit tests for the async RiotClient transport."""

import pytest
import aiohttp
from unittest.mock import AsyncMock, MagicMock
from tftquery.riot.client import RiotClient, RiotAPIError
from tftquery.riot.routes import Resource


def _mock_session(response=None, side_effect=None):
    session = MagicMock()
    session.closed = False
    if side_effect is not None:
        session.get.side_effect = side_effect
    else:
        session.get.return_value = response
    return session


def _mock_response(status=200, body=None):
    resp = MagicMock()
    resp.status = status
    resp.json = AsyncMock(return_value=body)
    resp.__aenter__.return_value = resp
    resp.__aexit__.return_value = None
    return resp


RESOURCE = Resource("match-by-id", "https://europe.api.riotgames.com/tft/match/v1/matches/EUW1_1")


@pytest.mark.asyncio
class TestRiotClient:
    """Test suite for RiotClient async operations."""

    async def test_client_initialization(self):
        """Test client initializes correctly."""
        client = RiotClient("test_api_key")
        assert client.api_key == "test_api_key"
        assert client._session is None

    async def test_get_session_creates_session(self):
        """Test session creation on first call carries the token header."""
        client = RiotClient("test_key")
        session = await client._get_session()

        assert isinstance(session, aiohttp.ClientSession)
        assert not session.closed
        assert session.headers["X-Riot-Token"] == "test_key"

        await client.close()

    async def test_context_manager(self):
        """Test client works as async context manager."""
        async with RiotClient("test_key") as client:
            session = await client._get_session()
            assert not session.closed

        assert client._session.closed

    async def test_fetch_returns_json(self):
        """Test a 200 response returns the parsed body."""
        client = RiotClient("test_key")
        client._session = _mock_session(_mock_response(200, {"metadata": {"match_id": "EUW1_1"}}))

        result = await client.fetch(RESOURCE)

        assert result == {"metadata": {"match_id": "EUW1_1"}}
        client._session.get.assert_called_once_with(RESOURCE.url)

    async def test_fetch_raises_on_404(self):
        """Test that a 404 is a transport error, not an empty result."""
        client = RiotClient("test_key")
        client._session = _mock_session(_mock_response(404))

        with pytest.raises(RiotAPIError) as exc:
            await client.fetch(RESOURCE)

        assert exc.value.status == 404
        assert exc.value.url == RESOURCE.url

    async def test_fetch_does_not_retry_429(self):
        """Test that rate limiting responses surface immediately."""
        client = RiotClient("test_key")
        client._session = _mock_session(_mock_response(429))

        with pytest.raises(RiotAPIError) as exc:
            await client.fetch(RESOURCE)

        assert exc.value.status == 429
        assert client._session.get.call_count == 1

    async def test_fetch_wraps_network_errors(self):
        """Test that aiohttp errors become RiotAPIError."""
        client = RiotClient("test_key")
        client._session = _mock_session(side_effect=aiohttp.ClientConnectionError("boom"))

        with pytest.raises(RiotAPIError) as exc:
            await client.fetch(RESOURCE)

        assert exc.value.status is None
        assert isinstance(exc.value.__cause__, aiohttp.ClientConnectionError)

    async def test_fetch_wraps_malformed_body(self):
        """Test that an undecodable body becomes RiotAPIError."""
        resp = _mock_response(200)
        resp.json = AsyncMock(side_effect=ValueError("Expecting value"))
        client = RiotClient("test_key")
        client._session = _mock_session(resp)

        with pytest.raises(RiotAPIError, match="Malformed body"):
            await client.fetch(RESOURCE)
