"""Ownership aggregation across chains at a point in time."""
from __future__ import annotations

import logging
from typing import Any, Sequence

from .batching import paginate, slice_assets
from .concurrency import gather_or_cancel
from .config import ResolutionConfig, SubgraphsConfig
from .graph.executor import ChainQueryExecutor, SubgraphQuery
from .graph import queries
from .interfaces.asset_router import AssetRouter
from .kinds import AssetKind
from .models import Chain, OwnershipResult, PartialOwnership
from .resolver import BlockResolver

logger = logging.getLogger(__name__)


def _field_mapper(kind: AssetKind):
    def mapper(response: dict[str, Any]) -> list[str]:
        return [nft[kind.asset_field] for nft in response["nfts"]]

    return mapper


def _has_any_nft(response: dict[str, Any]) -> bool:
    return len(response["nfts"]) > 0


def merge_partials(
    assets: Sequence[str], partials: Sequence[PartialOwnership]
) -> OwnershipResult:
    """Union the per-chain evidence and report what is left unverified."""
    owned: set[str] = set()
    for partial in partials:
        owned |= partial.owned_assets

    failing = tuple(asset for asset in assets if asset not in owned)
    if not failing:
        return OwnershipResult(result=True)

    unresolved = tuple(p.chain for p in partials if not p.resolved)
    return OwnershipResult(result=False, failing=failing, unresolved_chains=unresolved)


class OwnershipAggregator:
    """Resolves each chain independently and in parallel, then merges."""

    def __init__(
        self,
        executor: ChainQueryExecutor,
        resolvers: dict[Chain, BlockResolver],
        subgraphs: SubgraphsConfig,
        config: ResolutionConfig,
        asset_router: AssetRouter | None = None,
    ) -> None:
        self._executor = executor
        self._resolvers = resolvers
        self._subgraphs = subgraphs
        self._max_batch_size = config.max_batch_size
        self._page_size = config.page_size
        self._router = asset_router

    @property
    def chains(self) -> tuple[Chain, ...]:
        return tuple(self._resolvers)

    def _route(
        self, assets: Sequence[str], chains: Sequence[Chain]
    ) -> dict[Chain, tuple[str, ...]]:
        routed: dict[Chain, tuple[str, ...]] = {}
        for chain in chains:
            if self._router is None:
                routed[chain] = tuple(assets)
            else:
                routed[chain] = tuple(a for a in assets if chain in self._router.chains_for(a))
        return routed

    async def owns_at_timestamp(
        self,
        owner: str,
        assets: Sequence[str],
        timestamp: int,
        kind: AssetKind,
        chains: Sequence[Chain] | None = None,
    ) -> OwnershipResult:
        owner = owner.lower()
        assets = tuple(dict.fromkeys(assets))
        if not assets:
            return OwnershipResult(result=True)

        routed = self._route(assets, chains or self.chains)
        partials = await gather_or_cancel(
            *(
                self._chain_ownership(chain, owner, chain_assets, timestamp, kind)
                for chain, chain_assets in routed.items()
                if chain_assets
            )
        )

        result = merge_partials(assets, partials)
        if not result.result:
            logger.info(
                "Not owned by %s at %d: %s (unresolved chains: %s)",
                owner, timestamp, list(result.failing or ()),
                [c.value for c in result.unresolved_chains],
            )
        return result

    async def _chain_ownership(
        self,
        chain: Chain,
        owner: str,
        assets: tuple[str, ...],
        timestamp: int,
        kind: AssetKind,
    ) -> PartialOwnership:
        query: SubgraphQuery[list[str]] = SubgraphQuery(
            description=f"check for {kind.name} ownership",
            subgraph=f"{chain.value}.{kind.subgraph}",
            url=kind.url(self._subgraphs.for_chain(chain)),
            text=kind.at_block_query,
            mapper=_field_mapper(kind),
        )

        async def owned_at_block(block: int) -> frozenset[str]:
            logger.debug(
                "Checking %s owned by %s on %s at block %d: %s",
                kind.name, owner, chain.value, block, list(assets),
            )
            owned: set[str] = set()
            for chunk in slice_assets(assets, self._max_batch_size):
                async def fetch_page(first: int, skip: int, chunk=chunk) -> list[str]:
                    return await self._executor.run_at_block(
                        query,
                        block,
                        {
                            "owner": owner,
                            kind.assets_variable: list(chunk),
                            "first": first,
                            "skip": skip,
                        },
                    )

                owned.update(await paginate(fetch_page, self._page_size))
            return frozenset(owned)

        resolution = await self._resolvers[chain].resolve(timestamp, owned_at_block)
        if not resolution.resolved:
            return PartialOwnership(owner=owner, chain=chain, resolved=False)

        return PartialOwnership(
            owner=owner,
            chain=chain,
            owned_assets=resolution.value or frozenset(),
            block=resolution.block,
        )

    async def owns_any_name_at_timestamp(self, owner: str, timestamp: int) -> OwnershipResult:
        """Whether the owner held at least one name on the primary chain."""
        owner = owner.lower()
        query: SubgraphQuery[bool] = SubgraphQuery(
            description="check for any name ownership",
            subgraph=f"{Chain.PRIMARY.value}.ens_owner",
            url=self._subgraphs.primary.ens_owner,
            text=queries.ANY_NAME_FOR_OWNER_AT_BLOCK,
            mapper=_has_any_nft,
        )

        async def owns_any_at_block(block: int) -> bool:
            return await self._executor.run_at_block(query, block, {"owner": owner})

        resolution = await self._resolvers[Chain.PRIMARY].resolve(timestamp, owns_any_at_block)
        if not resolution.resolved:
            return OwnershipResult(
                result=False, failing=(), unresolved_chains=(Chain.PRIMARY,)
            )
        if resolution.value:
            return OwnershipResult(result=True)
        return OwnershipResult(result=False, failing=())
