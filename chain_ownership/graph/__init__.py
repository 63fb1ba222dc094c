"""Subgraph access: HTTP transport, query text and the query executor."""
from .executor import ChainQueryExecutor, SubgraphQuery, SubgraphQueryError
from .transport import GraphQLHttpClient, GraphQLResponseError

__all__ = [
    "ChainQueryExecutor",
    "GraphQLHttpClient",
    "GraphQLResponseError",
    "SubgraphQuery",
    "SubgraphQueryError",
]
