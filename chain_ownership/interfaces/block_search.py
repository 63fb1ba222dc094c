"""Block search protocol: timestamp to block height lookup."""
from typing import Protocol

from ..models import ResolvedBlock


class BlockSearch(Protocol):
    """Finds the indexed block for a unix timestamp (seconds).

    Returns None when the chain has not been indexed up to the timestamp.
    Raises only on infrastructure failure.
    """

    async def find_block_for_timestamp(self, timestamp: int) -> ResolvedBlock | None: ...
