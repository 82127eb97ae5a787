"""Pydantic schemas describing content jobs outside the ORM."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from contentflow.orchestrator.state import JobStatus


class JobSnapshot(BaseModel):
    """Read-only view of a job as returned by a JobStore."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    status: JobStatus
    script: Optional[str] = None
    voiceover_text: Optional[str] = None
    title: Optional[str] = None
    audio_url: Optional[str] = None
    video_url: Optional[str] = None
    published_video_id: Optional[str] = None
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class JobStatusResponse(BaseModel):
    """Response schema for GET /api/jobs/{id}/status."""
    job_id: str
    status: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    error_message: Optional[str] = None
