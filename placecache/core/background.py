"""
Detached background work.
Refreshes and remote syncs are submitted here instead of being awaited by the
request that triggered them. The scheduler owns the delays and keeps a strong
reference to every task until it finishes.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, Set

from placecache.core.logger import logs


class BackgroundTaskScheduler:
    """Runs coroutine factories after an optional delay, never raising to the submitter."""

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()
        self.completed = 0
        self.failed = 0

    def schedule(
        self,
        factory: Callable[[], Awaitable[object]],
        delay: float = 0.0,
        name: Optional[str] = None
    ) -> asyncio.Task:
        """Start `factory()` after `delay` seconds on the running loop."""
        task_name = name or getattr(factory, "__name__", "background-task")
        task = asyncio.create_task(self._run(factory, delay, task_name), name=task_name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logs.log(logging.DEBUG, f"Scheduled background task '{task_name}' (delay {delay}s)")
        return task

    async def _run(self, factory: Callable[[], Awaitable[object]], delay: float, name: str):
        try:
            if delay > 0:
                await asyncio.sleep(delay)
            await factory()
            self.completed += 1
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.failed += 1
            logs.log(logging.WARNING, f"Background task '{name}' failed: {str(e)}")

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self):
        """Wait until every scheduled task, including ones scheduled meanwhile, has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
