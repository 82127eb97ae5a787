"""Exceptions raised by the orchestrator core.

Unrecognised event types and malformed event data are deliberately not
errors: the former are acknowledged, the latter fall back to defaults.
"""


class OrchestratorError(Exception):
    """Base class for orchestrator errors."""


class JobNotFound(OrchestratorError):
    """The event references a job that does not exist in the store."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Content job {job_id} not found")


class StorageFailure(OrchestratorError):
    """A job store write did not commit. Nothing was persisted."""

    def __init__(self, job_id: str, reason: str):
        self.job_id = job_id
        self.reason = reason
        super().__init__(f"Failed to persist content job {job_id}: {reason}")


class IllegalTransition(OrchestratorError):
    """Strict mode rejected a transition from the job's current status."""

    def __init__(self, job_id: str, current: str, target: str):
        self.job_id = job_id
        self.current = current
        self.target = target
        super().__init__(
            f"Content job {job_id} cannot move from {current} to {target}"
        )
