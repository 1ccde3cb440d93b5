"""
Background Task Runner
Tracks fire-and-forget work spawned by request handlers so it can finish
(or be cancelled) cleanly when the process shuts down
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Set

logger = logging.getLogger(__name__)


class BackgroundTaskRunner:
    """
    Owns post-response tasks such as call enrichment.

    Tasks are held until they complete; failures are logged and never
    propagate to the request that spawned them.
    """

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()
        self._completed = 0
        self._failed = 0

    @property
    def active_count(self) -> int:
        return len(self._tasks)

    def stats(self) -> dict:
        return {
            "active": self.active_count,
            "completed": self._completed,
            "failed": self._failed,
        }

    def spawn(
        self,
        coro_fn: Callable[..., Awaitable[Any]],
        *args: Any,
        name: str = "background-task"
    ) -> asyncio.Task:
        """Schedule coro_fn(*args) on the running loop."""
        task = asyncio.create_task(self._run(coro_fn, args, name), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, coro_fn: Callable[..., Awaitable[Any]], args: tuple, name: str) -> None:
        try:
            await coro_fn(*args)
            self._completed += 1
        except asyncio.CancelledError:
            logger.warning(f"Background task cancelled: {name}")
            raise
        except Exception as e:
            self._failed += 1
            logger.error(f"Background task {name} failed: {e}", exc_info=True)

    async def drain(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for outstanding tasks, including ones spawned while waiting.

        Returns:
            True if everything finished within the timeout
        """
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout

        while self._tasks:
            remaining = None if deadline is None else deadline - loop.time()
            if remaining is not None and remaining <= 0:
                return False
            _, pending = await asyncio.wait(set(self._tasks), timeout=remaining)
            if pending and deadline is not None and loop.time() >= deadline:
                return False

        return True

    async def shutdown(self, grace_seconds: float = 30) -> None:
        """Drain for up to grace_seconds, then cancel whatever is left."""
        if self._tasks:
            logger.info(f"Waiting up to {grace_seconds}s for {len(self._tasks)} background task(s)")

        finished = await self.drain(grace_seconds)
        if finished:
            return

        leftover = list(self._tasks)
        logger.warning(f"Cancelling {len(leftover)} background task(s) after grace period")
        for task in leftover:
            task.cancel()
        await asyncio.gather(*leftover, return_exceptions=True)
