"""Job status orchestrator.

Advances content jobs through their pipeline in response to worker webhooks:
- State machine constants and strict predecessor rules (state)
- Single-transition read-compute-write (machine)
- Per-job serialization (guard)
- Webhook payload routing and acknowledgment (dispatcher)
- Job store boundary (store)
"""

from contentflow.orchestrator.state import EventType, JobStatus
from contentflow.orchestrator.errors import (
    IllegalTransition,
    JobNotFound,
    OrchestratorError,
    StorageFailure,
)
from contentflow.orchestrator.store import JobStore, SqlJobStore
from contentflow.orchestrator.guard import JobLockRegistry
from contentflow.orchestrator.machine import TransitionResult, apply_event
from contentflow.orchestrator.dispatcher import EventDispatcher

__all__ = [
    "EventDispatcher",
    "EventType",
    "IllegalTransition",
    "JobLockRegistry",
    "JobNotFound",
    "JobStatus",
    "JobStore",
    "OrchestratorError",
    "SqlJobStore",
    "StorageFailure",
    "TransitionResult",
    "apply_event",
]
