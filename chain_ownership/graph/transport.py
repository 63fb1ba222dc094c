"""Subgraph HTTP client."""
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ..config import HttpConfig

logger = logging.getLogger(__name__)


class GraphQLResponseError(RuntimeError):
    """Subgraph answered with a non-2xx status or a GraphQL ``errors`` list."""


class GraphQLHttpClient:
    """POSTs GraphQL queries to subgraph endpoints.

    A fresh session is opened per request; nothing is pooled across calls.
    """

    def __init__(self, config: HttpConfig) -> None:
        self.timeout = config.timeout

    async def execute(
        self, url: str, query: str, variables: dict[str, Any]
    ) -> dict[str, Any]:
        """Run a query and return its ``data`` object."""
        payload = {"query": query, "variables": variables}

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.post(
                url,
                json=payload,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status < 200 or response.status >= 300:
                    raise GraphQLResponseError(
                        f"Subgraph {url} answered HTTP {response.status}"
                    )

                result = await response.json()
                if not isinstance(result, dict):
                    raise GraphQLResponseError(
                        f"Subgraph {url} returned a {type(result).__name__} body"
                    )
                if result.get("errors"):
                    raise GraphQLResponseError(f"GraphQL Error: {result['errors']}")

                data = result.get("data")
                if data is None:
                    raise GraphQLResponseError(f"Subgraph {url} returned no data")

                logger.debug("Query to %s returned %d fields", url, len(data))
                return data
