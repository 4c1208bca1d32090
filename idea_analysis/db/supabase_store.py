"""AnalysisStore backed by a Supabase (Postgres) table.

One row per job. Section results live in a jsonb column; per-section writes go
through the `update_analysis_section` Postgres function
(see migrations/001_create_analyses.sql), which patches a single key with
jsonb_set and recomputes the job status under a row lock. The client never
reads and rewrites the whole sections document.

The supabase-py client is synchronous, so every call runs in the default
thread executor to keep the event loop free.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from postgrest.exceptions import APIError
from supabase import Client

from idea_analysis.errors import ConflictError, PersistenceError
from idea_analysis.jobs.models import (
    AnalysisJob,
    SectionResult,
    WriteOutcome,
)
from idea_analysis.jobs.store import AnalysisStore
from idea_analysis.orchestration.status import with_derived_status

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
UPDATE_SECTION_FN = "update_analysis_section"


class SupabaseAnalysisStore(AnalysisStore):
    def __init__(self, client: Client, table: str = "analyses"):
        self._client = client
        self._table = table

    async def create(self, job: AnalysisJob) -> None:
        row = job_to_row(job)
        try:
            await self._run(
                lambda: self._client.table(self._table).insert(row).execute()
            )
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise ConflictError(f"Analysis {job.id} already exists") from e
            raise PersistenceError(f"Failed to create analysis: {e.message}") from e
        except Exception as e:
            raise PersistenceError(f"Failed to create analysis: {e}") from e

    async def update_section(
        self,
        job_id: str,
        section_id: str,
        result: SectionResult,
    ) -> WriteOutcome:
        params = {
            "p_job_id": job_id,
            "p_section_id": section_id,
            "p_result": result.model_dump(mode="json"),
        }
        try:
            response = await self._run(
                lambda: self._client.rpc(UPDATE_SECTION_FN, params).execute()
            )
        except Exception as e:
            raise PersistenceError(
                f"Failed to update section '{section_id}' of {job_id}: {e}"
            ) from e

        return _parse_outcome(response.data)

    async def get(self, job_id: str) -> Optional[AnalysisJob]:
        try:
            response = await self._run(
                lambda: (
                    self._client.table(self._table)
                    .select("*")
                    .eq("id", job_id)
                    .limit(1)
                    .execute()
                )
            )
        except Exception as e:
            raise PersistenceError(f"Failed to read analysis {job_id}: {e}") from e

        if not response.data:
            return None
        return with_derived_status(row_to_job(response.data[0]))

    async def close(self) -> None:
        logger.info("Supabase analysis store closed")

    async def _run(self, fn: Callable[[], Any]) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn)


def job_to_row(job: AnalysisJob) -> Dict[str, Any]:
    return {
        "id": job.id,
        "owner_id": job.owner_id,
        "status": job.status.value,
        "input": job.input.model_dump(mode="json"),
        "sections": {
            section_id: result.model_dump(mode="json")
            for section_id, result in job.sections.items()
        },
        "section_order": list(job.sections.keys()),
        "required_sections": list(job.required_sections),
        "created_at": job.created_at.isoformat(),
        "updated_at": job.updated_at.isoformat(),
    }


def row_to_job(row: Dict[str, Any]) -> AnalysisJob:
    """Rebuild a job from a table row.

    jsonb does not keep key order, so sections are re-ordered from the
    section_order column.
    """
    raw_sections: Dict[str, Any] = row.get("sections") or {}
    order = row.get("section_order") or list(raw_sections.keys())
    sections = {
        section_id: SectionResult.model_validate(raw_sections[section_id])
        for section_id in order
        if section_id in raw_sections
    }
    return AnalysisJob(
        id=row["id"],
        owner_id=row["owner_id"],
        status=row["status"],
        input=row.get("input") or {},
        sections=sections,
        required_sections=row.get("required_sections") or [],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _parse_outcome(data: Any) -> WriteOutcome:
    """The RPC returns a scalar text value; postgrest may wrap it in a list."""
    if isinstance(data, list):
        data = data[0] if data else None
    if isinstance(data, dict):
        data = next(iter(data.values()), None)
    try:
        return WriteOutcome(data)
    except ValueError:
        raise PersistenceError(f"Unexpected {UPDATE_SECTION_FN} result: {data!r}") from None
