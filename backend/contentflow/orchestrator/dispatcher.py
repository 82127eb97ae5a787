"""Event dispatcher: admitted webhook payload in, acknowledgment out.

Coordinates one delivery end to end:
- Call-scoped logging (job id and event name on every record)
- Per-job critical section via JobLockRegistry
- Transition via apply_event()
- Uniform acknowledgment shape for applied and unrecognised events
"""

import asyncio
import logging
from typing import Optional

from contentflow.orchestrator.guard import JobLockRegistry
from contentflow.orchestrator.machine import TransitionResult, apply_event
from contentflow.orchestrator.store import JobStore
from contentflow.schemas.events import WebhookAck, WebhookPayload

ACK_MESSAGE = "Event acknowledged"


class EventDispatcher:
    """Route webhook payloads to the state machine under the per-job guard.

    Args:
        store: Job store the transitions are persisted to
        locks: Lock registry; share one across dispatchers serving the same store
        strict: Enforce predecessor rules instead of applying events unconditionally
        logger: Base logger; each dispatch derives a call-scoped adapter from it
    """

    def __init__(
        self,
        store: JobStore,
        locks: Optional[JobLockRegistry] = None,
        *,
        strict: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.strict = strict
        self._logger = logger or logging.getLogger(__name__)
        self.locks = locks or JobLockRegistry(logger=self._logger)

    async def dispatch(self, payload: WebhookPayload) -> WebhookAck:
        """Apply one admitted webhook event and build its acknowledgment.

        Returns:
            {"success": true, "status": ...} when a transition was applied,
            {"success": true, "message": "Event acknowledged"} for unknown events

        Raises:
            JobNotFound: The payload references a job that does not exist
            IllegalTransition: Strict mode rejected the transition
            StorageFailure: The store write did not commit
        """
        result = await self.apply(payload.content_job_id, payload.event, payload.data, payload.timestamp)
        if not result.recognized:
            return WebhookAck(success=True, message=ACK_MESSAGE)
        return WebhookAck(success=True, status=result.status.value)

    async def apply(
        self,
        job_id: str,
        event_type: str,
        data=None,
        timestamp: Optional[str] = None,
    ) -> TransitionResult:
        """Apply one event under the job's lock and return the raw result.

        The locked section runs shielded: once admitted, cancelling the caller
        (for example a dropped HTTP connection) does not interrupt it, and its
        outcome is logged once it finishes.
        """
        log = logging.LoggerAdapter(self._logger, {"job_id": job_id, "event": event_type})
        log.info(f"Received webhook: {event_type} for content {job_id} (sent {timestamp or 'n/a'})")
        task = asyncio.ensure_future(self._apply_locked(job_id, event_type, data, log))
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            task.add_done_callback(lambda done: self._log_detached_outcome(done, log))
            raise

    @staticmethod
    def _log_detached_outcome(task: asyncio.Future, log: logging.LoggerAdapter) -> None:
        """Report how a transition ended after its caller went away."""
        if task.cancelled():
            log.warning("Transition cancelled after caller disconnected")
            return
        exc = task.exception()
        if exc is not None:
            log.error(f"Transition failed after caller disconnected: {type(exc).__name__}: {exc}")
        else:
            log.info(f"Transition completed after caller disconnected: {task.result().status.value}")

    async def _apply_locked(
        self,
        job_id: str,
        event_type: str,
        data,
        log: logging.LoggerAdapter,
    ) -> TransitionResult:
        async with self.locks.hold(job_id):
            return await apply_event(
                self.store,
                job_id,
                event_type,
                data,
                strict=self.strict,
                logger=log,
            )
