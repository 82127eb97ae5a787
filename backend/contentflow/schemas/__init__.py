"""Pydantic schemas for webhook payloads and job views."""

from contentflow.schemas.events import (
    StageEvent,
    WebhookAck,
    WebhookPayload,
    parse_stage_event,
)
from contentflow.schemas.jobs import JobSnapshot, JobStatusResponse

__all__ = [
    "JobSnapshot",
    "JobStatusResponse",
    "StageEvent",
    "WebhookAck",
    "WebhookPayload",
    "parse_stage_event",
]
