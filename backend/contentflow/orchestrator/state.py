"""State machine constants and transition rules for content jobs.

Defines the ordered pipeline a content job moves through, the mapping from
webhook event types to target statuses, and the optional strict predecessor
rules. Nothing here touches storage; see machine.py for applying a transition.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional


class JobStatus(str, Enum):
    """Content job status. Values are the strings persisted in the job store."""

    PENDING = "PENDING"
    SCRIPT_GENERATING = "SCRIPT_GENERATING"
    TTS_PROCESSING = "TTS_PROCESSING"
    VIDEO_RENDERING = "VIDEO_RENDERING"
    UPLOADING = "UPLOADING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class EventType(str, Enum):
    """Webhook event types that drive a transition."""

    SCRIPT_GENERATED = "script_generated"
    TTS_COMPLETED = "tts_completed"
    VIDEO_RENDERED = "video_rendered"
    UPLOAD_COMPLETED = "upload_completed"
    FAILED = "failed"


# Pipeline states in execution order
PIPELINE_ORDER = (
    JobStatus.PENDING,
    JobStatus.SCRIPT_GENERATING,
    JobStatus.TTS_PROCESSING,
    JobStatus.VIDEO_RENDERING,
    JobStatus.UPLOADING,
    JobStatus.COMPLETED,
)

TERMINAL_STATES: FrozenSet[JobStatus] = frozenset({JobStatus.COMPLETED, JobStatus.FAILED})

# Event type -> status the job moves to
TRANSITIONS: Dict[EventType, JobStatus] = {
    EventType.SCRIPT_GENERATED: JobStatus.TTS_PROCESSING,
    EventType.TTS_COMPLETED: JobStatus.VIDEO_RENDERING,
    EventType.VIDEO_RENDERED: JobStatus.UPLOADING,
    EventType.UPLOAD_COMPLETED: JobStatus.COMPLETED,
    EventType.FAILED: JobStatus.FAILED,
}

# Strict mode only: statuses a forward target may be entered from.
# Script generation can report before the job was marked SCRIPT_GENERATING,
# so PENDING is accepted as well.
EXPECTED_PREDECESSORS: Dict[JobStatus, FrozenSet[JobStatus]] = {
    JobStatus.TTS_PROCESSING: frozenset({JobStatus.PENDING, JobStatus.SCRIPT_GENERATING}),
    JobStatus.VIDEO_RENDERING: frozenset({JobStatus.TTS_PROCESSING}),
    JobStatus.UPLOADING: frozenset({JobStatus.VIDEO_RENDERING}),
    JobStatus.COMPLETED: frozenset({JobStatus.UPLOADING}),
}

# Upstream workflows namespace their event names ("content.tts_completed")
EVENT_NAMESPACE = "content."


def normalize_event_type(raw: str) -> Optional[EventType]:
    """Map a raw webhook event string to a known EventType.

    Accepts both bare names and the "content."-namespaced form. Matching is
    exact otherwise: an unexpected string returns None rather than raising,
    so that new upstream event types are acknowledged instead of rejected.

    Args:
        raw: Event string as received on the wire

    Returns:
        The matching EventType, or None if the event is not recognised
    """
    if not isinstance(raw, str):
        return None
    name = raw[len(EVENT_NAMESPACE):] if raw.startswith(EVENT_NAMESPACE) else raw
    try:
        return EventType(name)
    except ValueError:
        return None


def is_terminal(status: JobStatus) -> bool:
    """Return True if no further transition is expected from status."""
    return status in TERMINAL_STATES


def target_status(event_type: EventType) -> JobStatus:
    """Return the status a job moves to when event_type is applied."""
    return TRANSITIONS[event_type]


def is_allowed_strict(current: JobStatus, target: JobStatus) -> bool:
    """Check a transition against the strict predecessor rules.

    Rules:
        - Re-asserting the current status is always allowed (redelivery).
        - Nothing leaves a terminal status.
        - FAILED may be entered from any non-terminal status.
        - A forward stage may only be entered from its expected predecessor.

    Args:
        current: Status currently persisted for the job
        target: Status the event would move the job to

    Returns:
        True if the transition is allowed in strict mode

    Examples:
        >>> is_allowed_strict(JobStatus.TTS_PROCESSING, JobStatus.VIDEO_RENDERING)
        True
        >>> is_allowed_strict(JobStatus.SCRIPT_GENERATING, JobStatus.COMPLETED)
        False
    """
    if current == target:
        return True
    if is_terminal(current):
        return False
    if target == JobStatus.FAILED:
        return True
    return current in EXPECTED_PREDECESSORS.get(target, frozenset())
