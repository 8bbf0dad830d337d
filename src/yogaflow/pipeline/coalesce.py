"""In-process coalescing of duplicate concurrent requests.

Only deduplicates within one process and one event loop. A second server
instance will simply redo the work.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from functools import partial
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 5.0


class RequestCoalescer:
    """Share one in-flight task between concurrent calls with the same key.

    A successful result stays cached for *ttl* seconds after completion and
    is then evicted. A failed or cancelled task is evicted as soon as it
    finishes, so the next call starts over.
    """

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS) -> None:
        self.ttl = ttl
        self._tasks: dict[str, asyncio.Task[Any]] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        """Return the result of ``factory()``, sharing it with other callers of *key*."""
        task = self._tasks.get(key)
        if task is not None:
            logger.debug("Joining in-flight request for %s", key)
        else:
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
            task.add_done_callback(partial(self._on_done, key))
        # A cancelled caller must not cancel the work other callers wait on.
        return await asyncio.shield(task)

    def clear(self) -> None:
        self._tasks.clear()

    def _on_done(self, key: str, task: asyncio.Task[Any]) -> None:
        if task.cancelled() or task.exception() is not None:
            self._evict(key, task)
            return
        if self.ttl <= 0:
            self._evict(key, task)
            return
        task.get_loop().call_later(self.ttl, self._evict, key, task)

    def _evict(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
            logger.debug("Evicted coalesced request for %s", key)
