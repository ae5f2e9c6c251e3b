# ==============================================================================
# Background Task Registry
# ==============================================================================
"""
Registry for fire-and-forget asyncio tasks.

The event loop only keeps weak references to tasks, so anything spawned
without awaiting it must be held somewhere until it completes. Tasks are
removed from the registry as soon as they finish. Teardown can wait for
outstanding work with drain(); nothing here ever cancels a task.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class BackgroundTasks:
    """Holds strong references to spawned tasks until they finish."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        """
        Schedule a coroutine on the running loop.

        Args:
            coro: Coroutine to run in the background

        Returns:
            The created task
        """
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    async def drain(self) -> None:
        """Wait until every task spawned so far (and any they spawn) is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background task failed: %r", exc)
