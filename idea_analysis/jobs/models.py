"""Analysis job data model."""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
import uuid

from idea_analysis.sections.schemas import SectionData


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class SectionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not SectionStatus.PENDING


class WriteOutcome(str, Enum):
    """Result of AnalysisStore.update_section."""
    APPLIED = "applied"
    ALREADY_FINAL = "already_final"
    JOB_MISSING = "job_missing"


class AnalysisInput(BaseModel):
    """Business-idea description submitted by the user."""
    description: str = ""
    industry: str = ""
    sub_industry: str = ""
    target_customers: str = ""
    pricing_model: str = ""
    current_stage: str = ""
    team_composition: str = ""
    additional_info: Optional[str] = None

    model_config = {"str_strip_whitespace": True, "extra": "ignore"}


class SectionError(BaseModel):
    code: str
    message: str


class SectionResult(BaseModel):
    """State of one section. Terminal states are write-once."""
    status: SectionStatus = SectionStatus.PENDING
    data: Optional[SectionData] = None
    error: Optional[SectionError] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @classmethod
    def pending(cls) -> "SectionResult":
        return cls()

    @classmethod
    def completed(cls, data, started_at: Optional[datetime] = None) -> "SectionResult":
        return cls(
            status=SectionStatus.COMPLETED,
            data=data,
            started_at=started_at,
            finished_at=utcnow(),
        )

    @classmethod
    def failed(
        cls,
        code: str,
        message: str,
        started_at: Optional[datetime] = None,
    ) -> "SectionResult":
        return cls(
            status=SectionStatus.FAILED,
            error=SectionError(code=code, message=message),
            started_at=started_at,
            finished_at=utcnow(),
        )


class AnalysisJob(BaseModel):
    """One analysis request and its full set of section results."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    owner_id: str
    status: JobStatus = JobStatus.PROCESSING
    input: AnalysisInput
    sections: Dict[str, SectionResult] = Field(default_factory=dict)
    required_sections: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_terminal(self) -> bool:
        return self.status is not JobStatus.PROCESSING
