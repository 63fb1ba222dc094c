"""Protocol interfaces for the ownership client."""
from .asset_router import AssetRouter
from .block_search import BlockSearch
from .transport import GraphQLTransport

__all__ = ["AssetRouter", "BlockSearch", "GraphQLTransport"]
