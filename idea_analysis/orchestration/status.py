"""Overall job status aggregation over the per-section results."""

from typing import Dict, Iterable, Mapping

from idea_analysis.jobs.models import (
    AnalysisJob,
    JobStatus,
    SectionResult,
    SectionStatus,
)


def compute_job_status(
    sections: Mapping[str, SectionResult],
    required: Iterable[str],
) -> JobStatus:
    """Derive the job status from its sections.

    - FAILED as soon as any required section has failed
    - COMPLETED once every required section has completed
    - PROCESSING otherwise

    Optional sections never affect the outcome. A required id missing from
    `sections` counts as still pending.
    """
    required_states = [
        sections[s].status if s in sections else SectionStatus.PENDING
        for s in required
    ]

    if any(state == SectionStatus.FAILED for state in required_states):
        return JobStatus.FAILED
    if all(state == SectionStatus.COMPLETED for state in required_states):
        return JobStatus.COMPLETED
    return JobStatus.PROCESSING


def with_derived_status(job: AnalysisJob) -> AnalysisJob:
    """Return `job` with its status re-derived from its sections.

    Stores already recompute the status on every section write; reads go
    through here as well so a record written by another process cannot
    surface a stale aggregate.
    """
    derived = compute_job_status(job.sections, job.required_sections)
    if derived == job.status:
        return job
    return job.model_copy(update={"status": derived})


def section_counts(job: AnalysisJob) -> Dict[str, int]:
    """Count sections per status (pending/completed/failed)."""
    counts = {s.value: 0 for s in SectionStatus}
    for result in job.sections.values():
        counts[result.status.value] += 1
    return counts
