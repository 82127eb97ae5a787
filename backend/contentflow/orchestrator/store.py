"""Job store boundary used by the orchestrator.

JobStore is the abstract interface the state machine depends on: keyed reads
and partial-field updates that commit atomically per call. SqlJobStore
implements it on top of the async SQLAlchemy session factory.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from contentflow.db.models import ContentJob
from contentflow.orchestrator.errors import JobNotFound, StorageFailure
from contentflow.orchestrator.state import JobStatus
from contentflow.schemas.jobs import JobSnapshot

logger = logging.getLogger(__name__)

# Columns the orchestrator may write through update()
WRITABLE_FIELDS = frozenset({
    "status",
    "script",
    "voiceover_text",
    "title",
    "audio_url",
    "video_url",
    "published_video_id",
    "error_message",
})


class JobStore(ABC):
    """Abstract durable store for content jobs."""

    @abstractmethod
    async def get(self, job_id: str) -> Optional[JobSnapshot]:
        """Return the job with job_id, or None if it does not exist."""
        ...

    @abstractmethod
    async def update(self, job_id: str, fields: Dict[str, Any]) -> None:
        """Write fields to the job in a single atomic commit.

        Only the given fields change; every other column keeps its value.

        Raises:
            JobNotFound: The job disappeared before the write.
            StorageFailure: The write did not commit. Nothing was persisted.
        """
        ...


class SqlJobStore(JobStore):
    """JobStore backed by the content_jobs table.

    Each call opens its own session. update() issues one UPDATE statement in
    one transaction, so a transition commits all of its fields or none.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, job_id: str) -> Optional[JobSnapshot]:
        try:
            async with self._session_factory() as session:
                job = await session.get(ContentJob, job_id)
                if job is None:
                    return None
                return JobSnapshot.model_validate(job)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load content job {job_id}: {type(e).__name__}: {e}")
            raise StorageFailure(job_id, f"read failed: {type(e).__name__}") from e

    async def update(self, job_id: str, fields: Dict[str, Any]) -> None:
        unknown = set(fields) - WRITABLE_FIELDS
        if unknown:
            raise ValueError(f"Not writable on content jobs: {sorted(unknown)}")

        values = dict(fields)
        if isinstance(values.get("status"), JobStatus):
            values["status"] = values["status"].value

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(
                        update(ContentJob)
                        .where(ContentJob.id == job_id)
                        .values(**values)
                    )
                    # Raising inside begin() rolls back
                    if result.rowcount == 0:
                        raise JobNotFound(job_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to update content job {job_id}: {type(e).__name__}: {e}")
            raise StorageFailure(job_id, f"write failed: {type(e).__name__}") from e

    async def create(self, status: JobStatus = JobStatus.PENDING, job_id: Optional[str] = None) -> JobSnapshot:
        """Insert a new job. Used by upstream tooling and the CLI, not by transitions."""
        job = ContentJob(status=status.value)
        if job_id:
            job.id = job_id
        try:
            async with self._session_factory() as session:
                session.add(job)
                await session.commit()
                await session.refresh(job)
                return JobSnapshot.model_validate(job)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create content job: {type(e).__name__}: {e}")
            raise StorageFailure(job_id or "<new>", f"insert failed: {type(e).__name__}") from e

    async def list_recent(self, limit: int = 50) -> List[JobSnapshot]:
        """Most recently created jobs first."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(ContentJob).order_by(ContentJob.created_at.desc()).limit(limit)
                )
                return [JobSnapshot.model_validate(job) for job in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list content jobs: {type(e).__name__}: {e}")
            raise StorageFailure("<all>", f"read failed: {type(e).__name__}") from e
