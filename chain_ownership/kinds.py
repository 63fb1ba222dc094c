"""Asset kinds the client checks ownership for."""
from __future__ import annotations

from dataclasses import dataclass

from .config import ChainSubgraphs
from .graph import queries


@dataclass(frozen=True)
class AssetKind:
    """Where an asset kind is indexed and how its queries are shaped."""

    name: str
    subgraph: str
    at_block_query: str
    latest_query: str
    assets_variable: str
    asset_field: str

    def url(self, subgraphs: ChainSubgraphs) -> str:
        return getattr(subgraphs, self.subgraph)


NAMES = AssetKind(
    name="names",
    subgraph="ens_owner",
    at_block_query=queries.NAMES_FOR_OWNER_AT_BLOCK,
    latest_query=queries.NAMES_FOR_OWNERS,
    assets_variable="names",
    asset_field="name",
)

ITEMS = AssetKind(
    name="items",
    subgraph="collections",
    at_block_query=queries.ITEMS_FOR_OWNER_AT_BLOCK,
    latest_query=queries.ITEMS_FOR_OWNERS,
    assets_variable="urns",
    asset_field="urn",
)
