"""Request shaping: batching ownership checks and draining paginated queries."""
from __future__ import annotations

import logging
from typing import Awaitable, Callable, Iterable, Sequence, TypeVar

from .models import OwnedAssets, OwnershipQuery

logger = logging.getLogger(__name__)

T = TypeVar("T")

PageFetcher = Callable[[int, int], Awaitable[Sequence[T]]]


def normalize_queries(
    queries: Iterable[OwnershipQuery | tuple[str, Sequence[str]]],
) -> list[OwnershipQuery]:
    """Lower-case owners and drop duplicate assets, keeping first-seen order."""
    normalized: list[OwnershipQuery] = []
    for q in queries:
        owner, assets = (q.owner, q.assets) if isinstance(q, OwnershipQuery) else q
        normalized.append(
            OwnershipQuery(owner=owner.lower(), assets=tuple(dict.fromkeys(assets)))
        )
    return normalized


def slice_ownership_queries(
    queries: Sequence[OwnershipQuery], max_size: int
) -> list[list[OwnershipQuery]]:
    """Pack queries into the fewest batches of at most ``max_size`` assets.

    Packing is greedy and keeps input order. An owner is only split when its
    own list exceeds ``max_size``; its chunks then go out as separate batches.
    Owners with no assets are dropped.
    """
    if max_size < 1:
        raise ValueError("max_size must be positive")

    batches: list[list[OwnershipQuery]] = []
    current: list[OwnershipQuery] = []
    current_size = 0

    for query in queries:
        size = len(query.assets)
        if size == 0:
            continue

        if size > max_size:
            if current:
                batches.append(current)
                current, current_size = [], 0
            for start in range(0, size, max_size):
                chunk = query.assets[start:start + max_size]
                batches.append([OwnershipQuery(owner=query.owner, assets=chunk)])
            continue

        if current_size + size > max_size:
            batches.append(current)
            current, current_size = [], 0

        current.append(query)
        current_size += size

    if current:
        batches.append(current)

    logger.debug(
        "Sliced %d ownership queries into %d batches (max %d assets)",
        len(queries), len(batches), max_size,
    )
    return batches


def slice_assets(assets: Sequence[str], max_size: int) -> list[tuple[str, ...]]:
    """Contiguous chunks of at most ``max_size`` assets."""
    if max_size < 1:
        raise ValueError("max_size must be positive")
    return [tuple(assets[i:i + max_size]) for i in range(0, len(assets), max_size)]


def merge_owned_assets(*results: Iterable[OwnedAssets]) -> list[OwnedAssets]:
    """Concatenate per-owner results, first-seen owner and asset order wins."""
    merged: dict[str, dict[str, None]] = {}
    for result in results:
        for entry in result:
            assets = merged.setdefault(entry.owner, {})
            for asset in entry.assets:
                assets.setdefault(asset, None)
    return [
        OwnedAssets(owner=owner, assets=tuple(assets))
        for owner, assets in merged.items()
        if assets
    ]


async def paginate(fetch_page: PageFetcher[T], page_size: int) -> list[T]:
    """Drain a ``first``/``skip`` query until a short page comes back.

    Pages are fetched one after the other; any failure propagates.
    """
    if page_size < 1:
        raise ValueError("page_size must be positive")

    elements: list[T] = []
    skip = 0
    while True:
        page = await fetch_page(page_size, skip)
        elements.extend(page)
        if len(page) < page_size:
            break
        skip += page_size
    return elements
