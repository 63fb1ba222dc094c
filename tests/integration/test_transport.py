"""Integration tests for the subgraph HTTP client."""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from chain_ownership.config import HttpConfig
from chain_ownership.graph.transport import GraphQLHttpClient, GraphQLResponseError

URL = "https://subgraph.example.com"


@pytest.fixture()
def client() -> GraphQLHttpClient:
    return GraphQLHttpClient(HttpConfig(timeout=5))


def _mock_session(
    response_data: dict | None = None, status: int = 200, error: Exception | None = None
):
    """Create a mock aiohttp session that returns given data or raises error."""
    mock_response = AsyncMock()
    mock_response.status = status
    mock_response.json = AsyncMock(return_value=response_data or {})
    mock_response.__aenter__ = AsyncMock(return_value=mock_response)
    mock_response.__aexit__ = AsyncMock(return_value=None)

    mock_session = AsyncMock()
    if error:
        mock_session.post = MagicMock(side_effect=error)
    else:
        mock_session.post = MagicMock(return_value=mock_response)
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=None)

    return mock_session


class TestExecute:
    @pytest.mark.asyncio
    async def test_returns_data(self, client: GraphQLHttpClient) -> None:
        mock_session = _mock_session({"data": {"nfts": [{"name": "alice"}]}})

        with patch("chain_ownership.graph.transport.aiohttp.ClientSession", return_value=mock_session):
            with patch("chain_ownership.graph.transport.aiohttp.TCPConnector"):
                result = await client.execute(URL, "query {}", {"owner": "0x1"})

        assert result == {"nfts": [{"name": "alice"}]}
        _, kwargs = mock_session.post.call_args
        assert kwargs["json"] == {"query": "query {}", "variables": {"owner": "0x1"}}

    @pytest.mark.asyncio
    async def test_graphql_errors_raise(self, client: GraphQLHttpClient) -> None:
        mock_session = _mock_session(
            {"errors": [{"message": "block not yet available"}]}
        )

        with patch("chain_ownership.graph.transport.aiohttp.ClientSession", return_value=mock_session):
            with patch("chain_ownership.graph.transport.aiohttp.TCPConnector"):
                with pytest.raises(GraphQLResponseError, match="GraphQL Error"):
                    await client.execute(URL, "query {}", {})

    @pytest.mark.asyncio
    async def test_http_error_raises(self, client: GraphQLHttpClient) -> None:
        mock_session = _mock_session(status=502)

        with patch("chain_ownership.graph.transport.aiohttp.ClientSession", return_value=mock_session):
            with patch("chain_ownership.graph.transport.aiohttp.TCPConnector"):
                with pytest.raises(GraphQLResponseError, match="HTTP 502"):
                    await client.execute(URL, "query {}", {})

    @pytest.mark.asyncio
    async def test_missing_data_raises(self, client: GraphQLHttpClient) -> None:
        mock_session = _mock_session({"data": None})

        with patch("chain_ownership.graph.transport.aiohttp.ClientSession", return_value=mock_session):
            with patch("chain_ownership.graph.transport.aiohttp.TCPConnector"):
                with pytest.raises(GraphQLResponseError, match="no data"):
                    await client.execute(URL, "query {}", {})

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [None, [], "oops"])
    async def test_non_object_body_raises(self, client: GraphQLHttpClient, body) -> None:
        mock_session = _mock_session()
        mock_session.post.return_value.json = AsyncMock(return_value=body)

        with patch("chain_ownership.graph.transport.aiohttp.ClientSession", return_value=mock_session):
            with patch("chain_ownership.graph.transport.aiohttp.TCPConnector"):
                with pytest.raises(GraphQLResponseError, match="body"):
                    await client.execute(URL, "query {}", {})

    @pytest.mark.asyncio
    async def test_connection_error_propagates(self, client: GraphQLHttpClient) -> None:
        mock_session = _mock_session(error=ConnectionError("down"))

        with patch("chain_ownership.graph.transport.aiohttp.ClientSession", return_value=mock_session):
            with patch("chain_ownership.graph.transport.aiohttp.TCPConnector"):
                with pytest.raises(ConnectionError):
                    await client.execute(URL, "query {}", {})
