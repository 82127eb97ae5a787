"""Shared fixtures: a throwaway SQLite job store and an in-memory store double."""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from sqlalchemy.pool import NullPool

from contentflow.db import build_engine, build_sessionmaker, init_database
from contentflow.orchestrator import (
    JobNotFound,
    JobStatus,
    JobStore,
    SqlJobStore,
    StorageFailure,
)
from contentflow.schemas.jobs import JobSnapshot

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    # NullPool: no connection outlives the event loop that opened it
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'contentflow.db'}", poolclass=NullPool)
    await init_database(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_sessionmaker(db_engine)


@pytest.fixture
def sql_store(session_factory) -> SqlJobStore:
    return SqlJobStore(session_factory)


class MemoryJobStore(JobStore):
    """JobStore double that records every call.

    Args:
        delay: Seconds each get/update sleeps, making both real suspension points
    """

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.rows: Dict[str, Dict[str, Any]] = {}
        self.updates: List[Tuple[str, Dict[str, Any]]] = []
        self.calls: List[Tuple[str, str]] = []
        self.fail_updates = False
        # job id -> event the next get() waits on
        self.gates: Dict[str, asyncio.Event] = {}

    def add(self, job_id: str, status: JobStatus = JobStatus.PENDING, **fields) -> None:
        self.rows[job_id] = {"id": job_id, "status": status, **fields}

    def status_of(self, job_id: str) -> JobStatus:
        return JobStatus(self.rows[job_id]["status"])

    async def get(self, job_id: str) -> Optional[JobSnapshot]:
        self.calls.append(("get", job_id))
        gate = self.gates.get(job_id)
        if gate is not None:
            await gate.wait()
        row = self.rows.get(job_id)
        snapshot = JobSnapshot(**row) if row is not None else None
        await asyncio.sleep(self.delay)
        return snapshot

    async def update(self, job_id: str, fields: Dict[str, Any]) -> None:
        self.calls.append(("update", job_id))
        await asyncio.sleep(self.delay)
        if self.fail_updates:
            raise StorageFailure(job_id, "simulated outage")
        if job_id not in self.rows:
            raise JobNotFound(job_id)
        self.updates.append((job_id, dict(fields)))
        self.rows[job_id].update(fields)


@pytest.fixture
def memory_store() -> MemoryJobStore:
    return MemoryJobStore()
