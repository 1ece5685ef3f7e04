"""Precise unit tests for HTTPClient.

Tests focus on session management, URL resolution and error mapping.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from laakhay.pacer.core import DecodeError, ProviderError, RateLimitError, TransportError
from laakhay.pacer.io import HTTPClient


def mock_response(status=200, body='{"data": []}', headers=None, reason="OK"):
    response = AsyncMock()
    response.status = status
    response.reason = reason
    response.headers = headers or {}
    response.text = AsyncMock(return_value=body)
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=None)
    return response


@pytest.fixture
def client_with():
    """HTTPClient whose session returns the given mock response."""

    def build(response=None, side_effect=None, base_url="https://api.example.com/2"):
        client = HTTPClient(base_url=base_url)
        session = MagicMock()
        session.closed = False  # Important: session property checks this
        session.request = MagicMock(return_value=response, side_effect=side_effect)
        client._session = session
        return client, session

    return build


class TestHTTPClientSessionManagement:
    """Test HTTPClient session management."""

    def test_init(self):
        """Test client initialization."""
        client = HTTPClient(timeout=10.0, headers={"Authorization": "Bearer x"})
        assert client.timeout.total == 10.0
        assert client.headers == {"Authorization": "Bearer x"}
        assert client._session is None

    @pytest.mark.asyncio
    async def test_session_property_creates_session(self):
        """Test session property creates session."""
        client = HTTPClient()
        session = client.session
        assert isinstance(session, aiohttp.ClientSession)
        assert client._session is session
        await client.close()

    @pytest.mark.asyncio
    async def test_close_idempotent(self):
        """Test close idempotent."""
        client = HTTPClient()
        await client.close()
        await client.close()  # Should not raise

    @pytest.mark.asyncio
    async def test_context_manager(self):
        """Test context manager."""
        async with HTTPClient() as client:
            assert client.session is not None

        # Session should be closed after context exit
        assert client._session is None or client._session.closed

    def test_resolve(self):
        """Test resolving paths against the base URL."""
        client = HTTPClient(base_url="https://api.example.com/2/")
        assert client.resolve("/tweets") == "https://api.example.com/2/tweets"
        assert client.resolve("tweets") == "https://api.example.com/2/tweets"
        assert client.resolve("https://other.example.com/x") == "https://other.example.com/x"
        assert HTTPClient().resolve("/tweets") == "/tweets"


class TestHTTPClientRequests:
    """Test request dispatch and decoding."""

    @pytest.mark.asyncio
    async def test_request_returns_json(self, client_with):
        """Test request returns json."""
        client, session = client_with(mock_response(body='{"data": [1]}'))

        result = await client.request("GET", "/tweets", params=[("ids", "1")])

        assert result == {"data": [1]}
        session.request.assert_called_once_with(
            "GET",
            "https://api.example.com/2/tweets",
            params=[("ids", "1")],
            data=None,
            headers=None,
        )

    @pytest.mark.asyncio
    async def test_get_shortcut(self, client_with):
        """Test get shortcut."""
        client, session = client_with(mock_response())
        await client.get("/tweets")
        assert session.request.call_args[0][0] == "GET"

    @pytest.mark.asyncio
    async def test_empty_body_returns_none(self, client_with):
        """Test empty body returns none."""
        client, _ = client_with(mock_response(body=""))
        assert await client.request("GET", "/tweets") is None

    @pytest.mark.asyncio
    async def test_invalid_json_raises_decode_error(self, client_with):
        """Test invalid json raises decode error."""
        client, _ = client_with(mock_response(body="<html>oops</html>"))
        with pytest.raises(DecodeError) as exc_info:
            await client.request("GET", "/tweets")
        assert exc_info.value.body == "<html>oops</html>"


class TestHTTPClientErrorMapping:
    """Test mapping of failures onto the error taxonomy."""

    @pytest.mark.asyncio
    async def test_status_error(self, client_with):
        """Test status error."""
        body = '{"title": "Invalid Request", "detail": "bad ids"}'
        client, _ = client_with(mock_response(status=400, body=body, reason="Bad Request"))

        with pytest.raises(ProviderError) as exc_info:
            await client.request("GET", "/tweets")

        assert exc_info.value.status_code == 400
        assert exc_info.value.payload == {"title": "Invalid Request", "detail": "bad ids"}
        assert not isinstance(exc_info.value, RateLimitError)

    @pytest.mark.asyncio
    async def test_non_json_error_body_kept_as_text(self, client_with):
        """Test non json error body kept as text."""
        client, _ = client_with(mock_response(status=503, body="unavailable"))
        with pytest.raises(ProviderError) as exc_info:
            await client.request("GET", "/tweets")
        assert exc_info.value.payload == "unavailable"

    @pytest.mark.asyncio
    async def test_rate_limit_with_retry_after(self, client_with):
        """Test rate limit with retry after."""
        client, _ = client_with(
            mock_response(status=429, body="", headers={"Retry-After": "17"}, reason="Too Many")
        )
        with pytest.raises(RateLimitError) as exc_info:
            await client.request("GET", "/tweets")
        assert exc_info.value.retry_after == 17
        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_rate_limit_default_retry_after(self, client_with):
        """Test rate limit default retry after."""
        client, _ = client_with(mock_response(status=429, body="{}"))
        with pytest.raises(RateLimitError) as exc_info:
            await client.request("GET", "/tweets")
        assert exc_info.value.retry_after == 60

    @pytest.mark.asyncio
    async def test_connection_error(self, client_with):
        """Test connection error."""
        client, _ = client_with(side_effect=aiohttp.ClientConnectionError("reset"))
        with pytest.raises(TransportError, match="reset"):
            await client.request("GET", "/tweets")

    @pytest.mark.asyncio
    async def test_timeout(self, client_with):
        """Test timeouts map to TransportError."""
        client, _ = client_with(side_effect=asyncio.TimeoutError())
        with pytest.raises(TransportError, match="timed out"):
            await client.request("GET", "/tweets")
