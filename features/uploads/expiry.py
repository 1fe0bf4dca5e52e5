"""Process-wide registry of scheduled object deletions.

Each published object with a positive TTL gets one detached task that sleeps
for the TTL and then deletes the object. The registry maps object key to that
task so that re-publishing a key replaces (cancels) the older deletion instead
of letting a stale timer remove the newer object. Nothing awaits these tasks;
their failures are logged here and go nowhere else.

Pending deletions live only in this process: a restart drops them.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

DeleteCallable = Callable[[str], Awaitable[None]]
SleepCallable = Callable[[float], Awaitable[None]]


class ExpiryScheduler:
    """Schedule and replace deferred object deletions."""

    def __init__(self, *, sleep: SleepCallable = asyncio.sleep) -> None:
        self._sleep = sleep
        self._pending: Dict[str, asyncio.Task[None]] = {}

    def schedule(
        self,
        key: str,
        ttl_seconds: int,
        delete: DeleteCallable,
    ) -> Optional[asyncio.Task[None]]:
        """Delete ``key`` after ``ttl_seconds``; a TTL of zero schedules nothing.

        Must be called from the event loop thread.
        """

        if ttl_seconds <= 0:
            logger.debug("No expiry scheduled for %s (ttl=0)", key)
            return None

        previous = self._pending.pop(key, None)
        if previous is not None and not previous.done():
            previous.cancel()
            logger.info("Replaced pending deletion for %s", key)

        task = asyncio.create_task(self._expire(key, ttl_seconds, delete), name=f"expire:{key}")
        self._pending[key] = task
        task.add_done_callback(partial(self._forget, key))
        logger.info("Scheduled deletion of %s in %d seconds", key, ttl_seconds)
        return task

    def pending_keys(self) -> List[str]:
        return sorted(key for key, task in self._pending.items() if not task.done())

    async def shutdown(self) -> None:
        """Cancel every pending deletion and wait for the tasks to settle."""

        keys = self.pending_keys()
        tasks = list(self._pending.values())
        self._pending.clear()
        if not keys:
            return

        logger.warning(
            "Shutting down with %d pending deletion(s); these objects will not expire: %s",
            len(keys),
            ", ".join(keys),
        )
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _forget(self, key: str, task: asyncio.Task[None]) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]

    async def _expire(self, key: str, ttl_seconds: int, delete: DeleteCallable) -> None:
        await self._sleep(ttl_seconds)
        try:
            await delete(key)
        except Exception as exc:
            logger.error("Scheduled deletion of %s failed: %s", key, exc)
            return
        logger.info("Expired %s after %d seconds", key, ttl_seconds)


_scheduler = ExpiryScheduler()


def get_expiry_scheduler() -> ExpiryScheduler:
    """Return the process-wide scheduler."""

    return _scheduler


__all__ = ["ExpiryScheduler", "get_expiry_scheduler"]
