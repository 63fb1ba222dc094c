"""Chain query executor: one subgraph request, one typed result."""
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

import aiohttp

from ..interfaces.transport import GraphQLTransport
from .transport import GraphQLResponseError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Raised for malformed payloads that the mapper trips over.
_MAPPING_ERRORS = (KeyError, TypeError, ValueError, AttributeError)

# Raised by transports that do not go through aiohttp; covers ConnectionError.
_TRANSPORT_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError, GraphQLResponseError)


class SubgraphQueryError(RuntimeError):
    """Generic failure of a subgraph query; the cause is chained, not exposed."""


@dataclass(frozen=True)
class SubgraphQuery(Generic[T]):
    """A query bound to its endpoint and the pure mapper for its response."""

    description: str
    subgraph: str
    url: str
    text: str
    mapper: Callable[[dict[str, Any]], T]


class ChainQueryExecutor:
    """Runs subgraph queries and maps their responses. Never retries."""

    def __init__(self, transport: GraphQLTransport) -> None:
        self._transport = transport

    async def run(self, query: SubgraphQuery[T], variables: dict[str, Any]) -> T:
        try:
            response = await self._transport.execute(query.url, query.text, variables)
            return query.mapper(response)
        except (*_TRANSPORT_ERRORS, *_MAPPING_ERRORS) as e:
            logger.error(
                "Failed to execute the following query to the subgraph %s (%s) '%s': %s",
                query.subgraph,
                query.url,
                query.description,
                e,
            )
            logger.debug("Failed query variables: %s", json.dumps(variables, default=str))
            raise SubgraphQueryError("Internal server error") from e

    async def run_at_block(
        self, query: SubgraphQuery[T], block: int, variables: dict[str, Any]
    ) -> T:
        """Run a query pinned to a block height."""
        return await self.run(query, {**variables, "block": block})
