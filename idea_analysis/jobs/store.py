"""AnalysisStore interface."""

from abc import ABC, abstractmethod
from typing import Optional

from idea_analysis.jobs.models import (
    AnalysisJob,
    SectionResult,
    WriteOutcome,
)


class AnalysisStore(ABC):
    """Abstract persistence for analysis jobs (in-memory or Supabase).

    All mutation after creation goes through update_section, which touches
    exactly one section entry plus the overall status. Implementations must
    keep concurrent update_section calls for different sections of the same
    job from losing each other's writes.
    """

    @abstractmethod
    async def create(self, job: AnalysisJob) -> None:
        """Insert a new job. Raises ConflictError if the id already exists."""
        ...

    @abstractmethod
    async def update_section(
        self,
        job_id: str,
        section_id: str,
        result: SectionResult,
    ) -> WriteOutcome:
        """Store a terminal section result and recompute the job status.

        The status is derived from the stored sections inside the same
        critical section as the write, never from a caller-side read.

        A section that is already terminal is left untouched
        (ALREADY_FINAL). A missing job is reported as JOB_MISSING.
        Raises PersistenceError if the backend is unavailable.
        """
        ...

    @abstractmethod
    async def get(self, job_id: str) -> Optional[AnalysisJob]:
        """Return a snapshot of the job, or None if it does not exist."""
        ...

    async def close(self) -> None:
        """Release backend resources."""
        return None
