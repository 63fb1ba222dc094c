"""GraphQL transport protocol: subgraph request execution."""
from typing import Any, Protocol


class GraphQLTransport(Protocol):
    """Abstract interface for executing a GraphQL query against a subgraph."""

    async def execute(
        self, url: str, query: str, variables: dict[str, Any]
    ) -> dict[str, Any]: ...
