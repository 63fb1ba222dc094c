"""Fan-out helpers for per-chain reads."""
from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

T = TypeVar("T")


async def gather_or_cancel(*aws: Awaitable[T]) -> list[T]:
    """Await all of ``aws`` in order, like ``asyncio.gather``.

    When one fails, the others are cancelled and awaited before the first
    error is re-raised unchanged, so no request outlives the failed call.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
