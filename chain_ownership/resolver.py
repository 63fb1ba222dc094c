"""Block resolution under indexing lag.

A chain's ownership is read at one block height per attempt. The resolver
first tries the block at the upper edge of the tolerance window; when that
block is missing, or the indexer refuses queries at it, it tries once more at
the lower edge. The sequence is an explicit state machine:

    TRY_PRIMARY --ok--> RESOLVED
    TRY_PRIMARY --not found / query failed--> TRY_FALLBACK
    TRY_FALLBACK --ok--> RESOLVED
    TRY_FALLBACK --not found / query failed--> UNRESOLVED

Only query failures (``SubgraphQueryError``) at a candidate height move the
machine forward. Errors raised by the block search itself propagate.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, TypeVar

from .config import ResolutionConfig
from .graph.executor import SubgraphQueryError
from .interfaces.block_search import BlockSearch
from .models import Chain, ResolvedBlock, TimestampBounds

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResolutionState(str, Enum):
    TRY_PRIMARY = "try_primary"
    TRY_FALLBACK = "try_fallback"
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


class AttemptOutcome(str, Enum):
    SUCCEEDED = "succeeded"
    NOT_FOUND = "not_found"
    FAILED = "failed"


_TRANSITIONS: dict[tuple[ResolutionState, AttemptOutcome], ResolutionState] = {
    (ResolutionState.TRY_PRIMARY, AttemptOutcome.SUCCEEDED): ResolutionState.RESOLVED,
    (ResolutionState.TRY_PRIMARY, AttemptOutcome.NOT_FOUND): ResolutionState.TRY_FALLBACK,
    (ResolutionState.TRY_PRIMARY, AttemptOutcome.FAILED): ResolutionState.TRY_FALLBACK,
    (ResolutionState.TRY_FALLBACK, AttemptOutcome.SUCCEEDED): ResolutionState.RESOLVED,
    (ResolutionState.TRY_FALLBACK, AttemptOutcome.NOT_FOUND): ResolutionState.UNRESOLVED,
    (ResolutionState.TRY_FALLBACK, AttemptOutcome.FAILED): ResolutionState.UNRESOLVED,
}


def next_state(state: ResolutionState, outcome: AttemptOutcome) -> ResolutionState:
    """Transition rule; terminal states accept no further outcomes."""
    try:
        return _TRANSITIONS[(state, outcome)]
    except KeyError:
        raise ValueError(f"No transition from {state.value} on {outcome.value}") from None


@dataclass(frozen=True)
class Resolution(Generic[T]):
    state: ResolutionState
    block: int | None = None
    value: T | None = None

    @property
    def resolved(self) -> bool:
        return self.state is ResolutionState.RESOLVED


def timestamp_bounds(
    timestamp_ms: int, tolerance_seconds: int = 307, lookahead_seconds: int = 8
) -> TimestampBounds:
    """Window in seconds for a millisecond timestamp.

    ``upper`` is the timestamp rounded up plus the lookahead; ``lower`` lies
    ``tolerance_seconds`` before ``upper`` and never below zero.
    """
    upper = max(math.ceil(timestamp_ms / 1000) + lookahead_seconds, 0)
    lower = max(upper - tolerance_seconds, 0)
    return TimestampBounds(lower=lower, upper=upper)


class BlockResolver:
    """Resolves the block height to read one chain at."""

    def __init__(
        self, chain: Chain, block_search: BlockSearch, config: ResolutionConfig
    ) -> None:
        self.chain = chain
        self._block_search = block_search
        self._tolerance = config.tolerance_seconds
        self._lookahead = config.lookahead_seconds

    def bounds(self, timestamp_ms: int) -> TimestampBounds:
        return timestamp_bounds(timestamp_ms, self._tolerance, self._lookahead)

    async def _primary_block(self, bounds: TimestampBounds) -> ResolvedBlock | None:
        return await self._block_search.find_block_for_timestamp(bounds.upper)

    async def _fallback_block(self, bounds: TimestampBounds) -> ResolvedBlock | None:
        found = await self._block_search.find_block_for_timestamp(bounds.lower)
        if found and found.timestamp < bounds.lower:
            # The block at or before ``lower`` predates the window; take the next one.
            # Its own timestamp is unknown, so the found block's is kept.
            found = ResolvedBlock(timestamp=found.timestamp, block=found.block + 1)
        return found

    async def find_blocks(
        self, timestamp_ms: int
    ) -> tuple[ResolvedBlock | None, ResolvedBlock | None]:
        """Primary and fallback candidates, without querying at them.

        When the block found at the lower bound predates the window, the
        fallback is the block after it. That candidate carries the found
        block's timestamp, which is earlier than the candidate's own.
        """
        bounds = self.bounds(timestamp_ms)
        return await self._primary_block(bounds), await self._fallback_block(bounds)

    async def resolve(
        self, timestamp_ms: int, attempt: Callable[[int], Awaitable[T]]
    ) -> Resolution[T]:
        """Run ``attempt`` at the primary block, then at the fallback if needed."""
        bounds = self.bounds(timestamp_ms)
        state = ResolutionState.TRY_PRIMARY

        while state in (ResolutionState.TRY_PRIMARY, ResolutionState.TRY_FALLBACK):
            if state is ResolutionState.TRY_PRIMARY:
                candidate = await self._primary_block(bounds)
            else:
                candidate = await self._fallback_block(bounds)

            if candidate is None:
                logger.info(
                    "%s: no indexed block for %s (window %d..%d)",
                    self.chain.value, state.value, bounds.lower, bounds.upper,
                )
                state = next_state(state, AttemptOutcome.NOT_FOUND)
                continue

            try:
                value = await attempt(candidate.block)
            except SubgraphQueryError as e:
                logger.warning(
                    "%s: query at block %d failed (%s): %s",
                    self.chain.value, candidate.block, state.value, e,
                )
                state = next_state(state, AttemptOutcome.FAILED)
                continue

            state = next_state(state, AttemptOutcome.SUCCEEDED)
            return Resolution(state=state, block=candidate.block, value=value)

        return Resolution(state=state)
