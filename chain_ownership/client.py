"""Ownership resolution client: public entry point."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Iterable, Sequence

from .aggregator import OwnershipAggregator
from .batching import (
    merge_owned_assets,
    normalize_queries,
    paginate,
    slice_assets,
    slice_ownership_queries,
)
from .blocks import SubgraphBlockSearch
from .concurrency import gather_or_cancel
from .config import AppConfig
from .graph import queries
from .graph.executor import ChainQueryExecutor, SubgraphQuery, SubgraphQueryError
from .graph.transport import GraphQLHttpClient
from .interfaces.asset_router import AssetRouter
from .interfaces.block_search import BlockSearch
from .interfaces.transport import GraphQLTransport
from .kinds import ITEMS, NAMES, AssetKind
from .models import (
    Chain,
    Collection,
    NameOwner,
    OwnedAssets,
    OwnershipQuery,
    OwnershipResult,
    ResolvedBlock,
    ThirdPartyIntegration,
)
from .resolver import BlockResolver

logger = logging.getLogger(__name__)

BatchInput = Iterable[OwnershipQuery | tuple[str, Sequence[str]]]


# ---------------------------------------------------------------------------
# Response mappers
# ---------------------------------------------------------------------------


def _owned_pairs_mapper(kind: AssetKind):
    def mapper(response: dict[str, Any]) -> list[tuple[str, str]]:
        return [
            (nft["owner"]["address"].lower(), nft[kind.asset_field])
            for nft in response["nfts"]
        ]

    return mapper


def _map_name_owners(response: dict[str, Any]) -> list[NameOwner]:
    return [
        NameOwner(name=nft["name"], owner=nft["owner"]["address"].lower())
        for nft in response["nfts"]
    ]


def _map_collections(response: dict[str, Any]) -> list[Collection]:
    return [Collection(name=c["name"], urn=c["urn"]) for c in response["collections"]]


def _map_third_parties(response: dict[str, Any]) -> list[ThirdPartyIntegration]:
    integrations: list[ThirdPartyIntegration] = []
    for tp in response["thirdParties"]:
        metadata = (tp.get("metadata") or {}).get("thirdParty") or {}
        integrations.append(
            ThirdPartyIntegration(
                urn=tp["id"],
                name=metadata.get("name", ""),
                description=metadata.get("description") or "",
            )
        )
    return integrations


class OwnershipClient:
    """Answers ownership questions against the L1 and L2 subgraphs."""

    def __init__(
        self,
        config: AppConfig,
        executor: ChainQueryExecutor,
        block_searches: dict[Chain, BlockSearch],
        asset_router: AssetRouter | None = None,
    ) -> None:
        self._config = config
        self._executor = executor
        self._max_batch_size = config.resolution.max_batch_size
        self._page_size = config.resolution.page_size

        self._resolvers: dict[Chain, BlockResolver] = {
            chain: BlockResolver(chain, search, config.resolution)
            for chain, search in block_searches.items()
        }
        self._aggregator = OwnershipAggregator(
            executor,
            self._resolvers,
            config.subgraphs,
            config.resolution,
            asset_router=asset_router,
        )

    # ------------------------------------------------------------------
    # Point-in-time ownership
    # ------------------------------------------------------------------

    async def owns_names_at_timestamp(
        self, owner: str, names: Sequence[str], timestamp: int
    ) -> OwnershipResult:
        """Check names on the primary chain at ``timestamp`` (milliseconds)."""
        return await self._aggregator.owns_at_timestamp(
            owner, names, timestamp, NAMES, chains=(Chain.PRIMARY,)
        )

    async def owns_items_at_timestamp(
        self, owner: str, asset_ids: Sequence[str], timestamp: int
    ) -> OwnershipResult:
        """Check catalog items on every chain at ``timestamp`` (milliseconds)."""
        return await self._aggregator.owns_at_timestamp(owner, asset_ids, timestamp, ITEMS)

    async def owns_any_name_at_timestamp(self, owner: str, timestamp: int) -> OwnershipResult:
        return await self._aggregator.owns_any_name_at_timestamp(owner, timestamp)

    async def find_blocks_for_timestamp(
        self, chain: Chain, timestamp: int
    ) -> tuple[ResolvedBlock | None, ResolvedBlock | None]:
        """Primary and fallback block candidates for a chain.

        See ``BlockResolver.find_blocks`` for the timestamp an advanced
        fallback carries.
        """
        return await self._resolvers[chain].find_blocks(timestamp)

    # ------------------------------------------------------------------
    # Latest-block batch checks
    # ------------------------------------------------------------------

    async def check_names_ownership(self, checks: BatchInput) -> list[OwnedAssets]:
        return await self._check_ownership(checks, NAMES, (Chain.PRIMARY,))

    async def check_items_ownership(self, checks: BatchInput) -> list[OwnedAssets]:
        return await self._check_ownership(checks, ITEMS, tuple(self._resolvers))

    async def _check_ownership(
        self, checks: BatchInput, kind: AssetKind, chains: tuple[Chain, ...]
    ) -> list[OwnedAssets]:
        batches = slice_ownership_queries(normalize_queries(checks), self._max_batch_size)
        if not batches:
            return []

        per_chain = await gather_or_cancel(
            *(self._check_on_chain(chain, batches, kind) for chain in chains)
        )
        return merge_owned_assets(*per_chain)

    async def _check_on_chain(
        self, chain: Chain, batches: list[list[OwnershipQuery]], kind: AssetKind
    ) -> list[OwnedAssets]:
        query: SubgraphQuery[list[tuple[str, str]]] = SubgraphQuery(
            description=f"check for {kind.name} ownership",
            subgraph=f"{chain.value}.{kind.subgraph}",
            url=kind.url(self._config.subgraphs.for_chain(chain)),
            text=kind.latest_query,
            mapper=_owned_pairs_mapper(kind),
        )

        results: list[OwnedAssets] = []
        for batch in batches:
            owners = list(dict.fromkeys(q.owner for q in batch))
            assets = list(dict.fromkeys(a for q in batch for a in q.assets))

            async def fetch_page(first: int, skip: int) -> list[tuple[str, str]]:
                return await self._executor.run(
                    query,
                    {"owners": owners, kind.assets_variable: assets, "first": first, "skip": skip},
                )

            owned_by: dict[str, set[str]] = defaultdict(set)
            for owner, asset in await paginate(fetch_page, self._page_size):
                owned_by[owner].add(asset)

            for q in batch:
                confirmed = tuple(a for a in q.assets if a in owned_by[q.owner])
                results.append(OwnedAssets(owner=q.owner, assets=confirmed))

        return results

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def find_owners_by_name(self, names: Sequence[str]) -> list[NameOwner]:
        """Current owner of each registered name."""
        query: SubgraphQuery[list[NameOwner]] = SubgraphQuery(
            description="fetch owners by name",
            subgraph=f"{Chain.PRIMARY.value}.ens_owner",
            url=self._config.subgraphs.primary.ens_owner,
            text=queries.OWNERS_BY_NAME,
            mapper=_map_name_owners,
        )

        owners: list[NameOwner] = []
        for chunk in slice_assets(list(dict.fromkeys(names)), self._max_batch_size):
            async def fetch_page(first: int, skip: int, chunk=chunk) -> list[NameOwner]:
                return await self._executor.run(
                    query, {"names": list(chunk), "first": first, "skip": skip}
                )

            owners.extend(await paginate(fetch_page, self._page_size))
        return owners

    async def get_all_collections(self) -> list[Collection]:
        """Every collection on every chain; a failing chain contributes nothing."""
        per_chain = await gather_or_cancel(
            *(self._collections_on_chain(chain) for chain in self._resolvers)
        )
        return [collection for chain_collections in per_chain for collection in chain_collections]

    async def _collections_on_chain(self, chain: Chain) -> list[Collection]:
        url = self._config.subgraphs.for_chain(chain).collections
        if not url:
            return []

        query: SubgraphQuery[list[Collection]] = SubgraphQuery(
            description="fetch collections",
            subgraph=f"{chain.value}.collections",
            url=url,
            text=queries.COLLECTIONS,
            mapper=_map_collections,
        )

        async def fetch_page(first: int, skip: int) -> list[Collection]:
            return await self._executor.run(query, {"first": first, "skip": skip})

        try:
            return await paginate(fetch_page, self._page_size)
        except SubgraphQueryError as e:
            logger.error("Error fetching collections on %s: %s", chain.value, e)
            return []

    async def get_third_party_integrations(self) -> list[ThirdPartyIntegration]:
        """Approved third-party integrations from the L2 registry."""
        url = self._config.subgraphs.secondary.third_party_registry
        if not url:
            logger.debug("No third party registry configured")
            return []

        query: SubgraphQuery[list[ThirdPartyIntegration]] = SubgraphQuery(
            description="fetch third party integrations",
            subgraph=f"{Chain.SECONDARY.value}.third_party_registry",
            url=url,
            text=queries.THIRD_PARTIES,
            mapper=_map_third_parties,
        )

        async def fetch_page(first: int, skip: int) -> list[ThirdPartyIntegration]:
            return await self._executor.run(query, {"first": first, "skip": skip})

        try:
            return await paginate(fetch_page, self._page_size)
        except SubgraphQueryError as e:
            logger.error("Error fetching third party integrations: %s", e)
            return []


def create_client(
    config: AppConfig,
    transport: GraphQLTransport | None = None,
    block_searches: dict[Chain, BlockSearch] | None = None,
    asset_router: AssetRouter | None = None,
) -> OwnershipClient:
    """Wire a client from configuration.

    Block searches default to the chains' blocks subgraphs.
    """
    executor = ChainQueryExecutor(transport or GraphQLHttpClient(config.http))

    if block_searches is None:
        block_searches = {
            chain: SubgraphBlockSearch(
                executor,
                config.subgraphs.for_chain(chain).blocks,
                name=f"{chain.value}.blocks",
            )
            for chain in Chain
        }

    return OwnershipClient(config, executor, block_searches, asset_router=asset_router)
