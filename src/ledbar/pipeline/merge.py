"""Fan-in of several async message streams into one ordered stream."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def merge_streams(*sources: AsyncIterator[T]) -> AsyncIterator[T]:
    """Interleave ``sources`` in arrival order.

    The merged stream ends the moment any one source stops: it returns if
    that source finished, or raises the source's exception if it failed.
    The surviving sources are cancelled and nothing they produce after
    that point is yielded.

    Wrap in ``contextlib.aclosing`` when the consumer may stop early, so
    the per-source tasks are torn down deterministically.
    """
    queue: asyncio.Queue[tuple[bool, Any]] = asyncio.Queue()

    async def pump(source: AsyncIterator[T]) -> None:
        try:
            async for item in source:
                queue.put_nowait((False, item))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            queue.put_nowait((True, e))
        else:
            queue.put_nowait((True, None))

    tasks = [asyncio.create_task(pump(source)) for source in sources]
    try:
        while True:
            finished, item = await queue.get()
            if finished:
                if item is not None:
                    raise item
                logger.debug("A source finished, ending merged stream")
                return
            yield item
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
