"""SQLAlchemy 2.0 ORM models for contentflow."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _new_job_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


class ContentJob(Base):
    """A content item moving through script -> TTS -> render -> upload.

    Rows are created upstream in PENDING status. Afterwards status and the
    stage payload columns are only written by the orchestrator; each payload
    column belongs to exactly one stage.
    """
    __tablename__ = "content_jobs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_job_id)
    status: Mapped[str] = mapped_column(String(32), default="PENDING", index=True)

    # script_generated
    script: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    voiceover_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    title: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    # tts_completed
    audio_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    # video_rendered
    video_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    # upload_completed
    published_video_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    # failed
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now()
    )
