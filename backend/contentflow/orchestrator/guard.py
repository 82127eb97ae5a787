"""Per-job serialization of transitions.

JobLockRegistry hands out one asyncio.Lock per job id. Deliveries for the
same job queue behind each other in arrival order; deliveries for different
jobs never contend. Locks are dropped as soon as nobody holds or awaits them.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional


class JobLockRegistry:
    """Sharded lock keyed by job id.

    Registry bookkeeping happens between awaits, so it is consistent for all
    tasks on the event loop that owns the registry.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}
        self._logger = logger or logging.getLogger(__name__)

    @asynccontextmanager
    async def hold(self, job_id: str) -> AsyncIterator[None]:
        """Hold the exclusive critical section for job_id.

        Usage:
            async with registry.hold(job_id):
                ...  # read, compute, write
        """
        lock = self._locks.get(job_id)
        if lock is None:
            lock = self._locks[job_id] = asyncio.Lock()
            self._users[job_id] = 0
        self._users[job_id] += 1

        if lock.locked():
            self._logger.debug(
                "Job %s busy, waiting behind %d other delivery(ies)",
                job_id,
                self._users[job_id] - 1,
            )

        try:
            async with lock:
                yield
        finally:
            self._users[job_id] -= 1
            if self._users[job_id] == 0:
                del self._users[job_id]
                del self._locks[job_id]

    def is_held(self, job_id: str) -> bool:
        """Return True if a delivery for job_id is currently inside its critical section."""
        lock = self._locks.get(job_id)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        """Number of job ids with a live lock."""
        return len(self._locks)
