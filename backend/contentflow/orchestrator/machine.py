"""Apply one webhook event to one content job.

apply_event() is the read-compute-write sequence of a single transition:
load the job, map the event type to its target status and fields, and write
them in one store call. It does no locking itself; callers that may deliver
concurrently for the same job go through EventDispatcher, which wraps it in
the per-job guard.
"""

import logging
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict

from contentflow.orchestrator.errors import IllegalTransition, JobNotFound
from contentflow.orchestrator.state import (
    JobStatus,
    is_allowed_strict,
    normalize_event_type,
    target_status,
)
from contentflow.orchestrator.store import JobStore
from contentflow.schemas.events import StageEvent, parse_stage_event

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


class TransitionResult(BaseModel):
    """Outcome of apply_event(), for acknowledgment and logging."""

    model_config = ConfigDict(frozen=True)

    job_id: str
    event_type: str
    recognized: bool
    previous_status: JobStatus
    status: JobStatus
    fields: Dict[str, str] = {}


def compute_transition(
    job_id: str,
    current: JobStatus,
    event: StageEvent,
    *,
    strict: bool = False,
) -> Dict[str, Any]:
    """Compute the store update for event applied to a job in status current.

    Args:
        job_id: Job being transitioned (for error reporting)
        current: Status currently persisted
        event: Parsed event variant
        strict: Reject transitions that skip or rewind pipeline stages

    Returns:
        Column -> value mapping including "status"

    Raises:
        IllegalTransition: strict is set and current is not a valid predecessor
    """
    target = target_status(event.event_type)
    if strict and not is_allowed_strict(current, target):
        raise IllegalTransition(job_id, current.value, target.value)
    return {"status": target, **event.fields()}


async def apply_event(
    store: JobStore,
    job_id: str,
    event_type: str,
    data: Any = None,
    *,
    strict: bool = False,
    logger: Optional[LoggerLike] = None,
) -> TransitionResult:
    """Apply a webhook event to a job and persist the result.

    Permissive by default: a recognised event is applied whatever the job's
    current status, so replays and out-of-order deliveries still land. Pass
    strict=True to enforce predecessor rules instead.

    Args:
        store: Job store to read from and write to
        job_id: Target job id
        event_type: Raw event type string ("tts_completed", "content.failed", ...)
        data: Loosely-typed event data; missing or malformed members default
        strict: Enforce predecessor rules (see state.is_allowed_strict)
        logger: Call-scoped logger; defaults to this module's logger

    Returns:
        TransitionResult with the resulting status and the fields written.
        For unrecognised event types, recognized is False and nothing is written.

    Raises:
        JobNotFound: No job with job_id exists; nothing is written
        IllegalTransition: strict is set and the transition is not allowed
        StorageFailure: The store write did not commit
    """
    log = logger if logger is not None else logging.getLogger(__name__)

    job = await store.get(job_id)
    if job is None:
        raise JobNotFound(job_id)

    known = normalize_event_type(event_type)
    if known is None:
        log.warning(f"Unknown webhook event '{event_type}' for job {job_id}, acknowledging")
        return TransitionResult(
            job_id=job_id,
            event_type=str(event_type),
            recognized=False,
            previous_status=job.status,
            status=job.status,
        )

    event = parse_stage_event(known, data)
    try:
        update = compute_transition(job_id, job.status, event, strict=strict)
    except IllegalTransition as e:
        log.warning(f"Rejected {known.value} for job {job_id}: {e}")
        raise

    await store.update(job_id, update)

    new_status = update["status"]
    log.info(f"Job {job_id}: {job.status.value} -> {new_status.value} via {known.value}")
    return TransitionResult(
        job_id=job_id,
        event_type=known.value,
        recognized=True,
        previous_status=job.status,
        status=new_status,
        fields={name: value for name, value in update.items() if name != "status"},
    )
