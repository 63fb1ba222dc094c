"""Block search backed by a chain's blocks subgraph."""
from __future__ import annotations

import logging
from typing import Any

from ..graph import queries
from ..graph.executor import ChainQueryExecutor, SubgraphQuery
from ..models import ResolvedBlock

logger = logging.getLogger(__name__)


def _map_block(response: dict[str, Any]) -> ResolvedBlock | None:
    if not response["after"] or not response["before"]:
        return None
    before = response["before"][0]
    return ResolvedBlock(timestamp=int(before["timestamp"]), block=int(before["number"]))


class SubgraphBlockSearch:
    """Latest block at or before a timestamp, once the indexer has passed it."""

    def __init__(self, executor: ChainQueryExecutor, url: str, name: str = "blocks") -> None:
        self._executor = executor
        self._query: SubgraphQuery[ResolvedBlock | None] = SubgraphQuery(
            description="fetch block for timestamp",
            subgraph=name,
            url=url,
            text=queries.BLOCK_FOR_TIMESTAMP,
            mapper=_map_block,
        )

    async def find_block_for_timestamp(self, timestamp: int) -> ResolvedBlock | None:
        block = await self._executor.run(self._query, {"timestamp": str(timestamp)})
        if block is None:
            logger.debug("%s: no indexed block for timestamp %d", self._query.subgraph, timestamp)
        return block
