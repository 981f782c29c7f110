"""Bounded fan-out helper for concurrent gateway calls.

``bounded_gather`` is ``asyncio.gather`` with a semaphore wrapped around
each awaitable, so a document with hundreds of chunks does not open
hundreds of simultaneous connections to the embedding service.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

_T = TypeVar("_T")


async def bounded_gather(
    coros: list[Awaitable[_T]],
    limit: int = 8,
    return_exceptions: bool = False,
) -> list[_T]:
    """Run awaitables concurrently with at most *limit* in flight.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    limit:
        Maximum number of awaitables executing at any moment.
    return_exceptions:
        Mirrors ``asyncio.gather``.  With the default ``False`` the first
        exception propagates to the caller once raised.

    Returns
    -------
    list
        Results in the same order as the input awaitables, regardless of
        the order in which they completed.
    """
    semaphore = asyncio.Semaphore(max(1, limit))

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    tasks = [asyncio.ensure_future(_wrapped(c)) for c in coros]
    try:
        return await asyncio.gather(*tasks, return_exceptions=return_exceptions)
    except BaseException:
        # Stop the remaining calls once one has failed, then close the
        # coroutines that never got past the semaphore.
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        for coro in coros:
            if asyncio.iscoroutine(coro):
                coro.close()
        raise
