"""In-process AnalysisStore for local development and tests.

Keeps job records in a dict guarded by an asyncio lock. Reads and writes hand
out deep copies, so a snapshot never changes after it was returned.
"""

import asyncio
import logging
from typing import Dict, Optional

from idea_analysis.errors import ConflictError, PersistenceError
from idea_analysis.jobs.models import (
    AnalysisJob,
    SectionResult,
    WriteOutcome,
    utcnow,
)
from idea_analysis.jobs.store import AnalysisStore
from idea_analysis.orchestration.status import compute_job_status, with_derived_status

logger = logging.getLogger(__name__)


class InMemoryAnalysisStore(AnalysisStore):
    """Local async job store. State is lost when the process exits."""

    def __init__(self):
        self._jobs: Dict[str, AnalysisJob] = {}
        self._lock = asyncio.Lock()
        self._closed = False

    async def create(self, job: AnalysisJob) -> None:
        self._ensure_open()
        async with self._lock:
            if job.id in self._jobs:
                raise ConflictError(f"Analysis {job.id} already exists")
            self._jobs[job.id] = job.model_copy(deep=True)

    async def update_section(
        self,
        job_id: str,
        section_id: str,
        result: SectionResult,
    ) -> WriteOutcome:
        self._ensure_open()
        async with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return WriteOutcome.JOB_MISSING

            current = job.sections.get(section_id)
            if current is None:
                # Section keys are fixed at creation time.
                raise PersistenceError(
                    f"Analysis {job_id} has no section '{section_id}'"
                )
            if current.status.is_terminal:
                return WriteOutcome.ALREADY_FINAL

            job.sections[section_id] = result.model_copy(deep=True)
            job.status = compute_job_status(job.sections, job.required_sections)
            job.updated_at = utcnow()
            return WriteOutcome.APPLIED

    async def get(self, job_id: str) -> Optional[AnalysisJob]:
        self._ensure_open()
        async with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return None
            snapshot = job.model_copy(deep=True)
        return with_derived_status(snapshot)

    async def remove(self, job_id: str) -> bool:
        """Drop a job record, as an external retention process would."""
        async with self._lock:
            return self._jobs.pop(job_id, None) is not None

    async def close(self) -> None:
        self._closed = True
        logger.info("In-memory analysis store closed (%d jobs dropped)", len(self._jobs))

    def __len__(self) -> int:
        return len(self._jobs)

    def _ensure_open(self) -> None:
        if self._closed:
            raise PersistenceError("Analysis store is closed")
