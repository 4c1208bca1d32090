"""Analysis API: submit an idea, poll the report snapshot."""

from datetime import datetime
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from idea_analysis.api.deps import get_orchestrator
from idea_analysis.auth.supabase_auth import get_current_user_id
from idea_analysis.jobs.models import AnalysisJob, JobStatus, SectionResult
from idea_analysis.orchestration.orchestrator import Orchestrator
from idea_analysis.orchestration.status import section_counts

router = APIRouter()

POLL_INTERVAL_SECONDS = 2


class AnalysisCreateRequest(BaseModel):
    # Validated by the orchestrator so bad input maps to 400, not 422.
    input: Dict[str, Any] = Field(default_factory=dict)


class AnalysisCreateResponse(BaseModel):
    job_id: str
    status: JobStatus
    message: str


class AnalysisProgress(BaseModel):
    pending: int
    completed: int
    failed: int
    total: int


class AnalysisSnapshot(BaseModel):
    id: str
    status: JobStatus
    sections: Dict[str, SectionResult]
    required_sections: List[str]
    progress: AnalysisProgress
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_job(cls, job: AnalysisJob) -> "AnalysisSnapshot":
        counts = section_counts(job)
        return cls(
            id=job.id,
            status=job.status,
            sections=job.sections,
            required_sections=job.required_sections,
            progress=AnalysisProgress(total=len(job.sections), **counts),
            created_at=job.created_at,
            updated_at=job.updated_at,
        )


@router.post("/analyses", response_model=AnalysisCreateResponse, status_code=201)
async def create_analysis(
    request: AnalysisCreateRequest,
    owner_id: str = Depends(get_current_user_id),
    orchestrator: Orchestrator = Depends(get_orchestrator),
):
    """Submit a business idea for analysis.

    Returns as soon as the job is stored; sections are generated in the
    background.
    """
    job_id = await orchestrator.create_analysis(owner_id, request.input)
    return AnalysisCreateResponse(
        job_id=job_id,
        status=JobStatus.PROCESSING,
        message=(
            f"Analysis submitted. Poll GET /api/v1/analyses/{job_id} "
            f"every {POLL_INTERVAL_SECONDS}s until status is completed or failed."
        ),
    )


@router.get("/analyses/{job_id}", response_model=AnalysisSnapshot)
async def get_analysis(
    job_id: str,
    requester_id: str = Depends(get_current_user_id),
    orchestrator: Orchestrator = Depends(get_orchestrator),
):
    """Current snapshot of an analysis. Safe to poll."""
    job = await orchestrator.get_analysis(job_id, requester_id)
    return AnalysisSnapshot.from_job(job)
