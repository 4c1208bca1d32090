import asyncio

import pytest

from idea_analysis.errors import ConflictError, PersistenceError
from idea_analysis.jobs.models import (
    AnalysisInput,
    AnalysisJob,
    JobStatus,
    SectionResult,
    SectionStatus,
    WriteOutcome,
)

from conftest import VALID_INPUT, summary_data


def _new_job(section_ids, required=None) -> AnalysisJob:
    return AnalysisJob(
        owner_id="user-1",
        input=AnalysisInput(**VALID_INPUT),
        sections={sid: SectionResult.pending() for sid in section_ids},
        required_sections=list(required if required is not None else section_ids),
    )


@pytest.mark.anyio
async def test_create_and_get(store):
    job = _new_job(["a", "b"])
    await store.create(job)

    snapshot = await store.get(job.id)

    assert snapshot is not None
    assert snapshot.id == job.id
    assert snapshot.status == JobStatus.PROCESSING
    assert list(snapshot.sections) == ["a", "b"]
    assert all(s.status == SectionStatus.PENDING for s in snapshot.sections.values())


@pytest.mark.anyio
async def test_create_duplicate_id_conflicts(store):
    job = _new_job(["a"])
    await store.create(job)

    with pytest.raises(ConflictError):
        await store.create(job)


@pytest.mark.anyio
async def test_get_unknown_returns_none(store):
    assert await store.get("does-not-exist") is None


@pytest.mark.anyio
async def test_terminal_section_is_write_once(store):
    job = _new_job(["a", "b"])
    await store.create(job)

    first = SectionResult.completed(summary_data(score=90))
    second = SectionResult.failed("timeout", "late write")

    assert await store.update_section(job.id, "a", first) == WriteOutcome.APPLIED
    assert await store.update_section(job.id, "a", second) == WriteOutcome.ALREADY_FINAL

    snapshot = await store.get(job.id)
    assert snapshot.sections["a"].status == SectionStatus.COMPLETED
    assert snapshot.sections["a"].data.score == 90
    assert snapshot.status == JobStatus.PROCESSING


@pytest.mark.anyio
async def test_update_missing_job_is_reported(store):
    outcome = await store.update_section(
        "gone", "a", SectionResult.completed(summary_data())
    )
    assert outcome == WriteOutcome.JOB_MISSING


@pytest.mark.anyio
async def test_update_unknown_section_is_rejected(store):
    job = _new_job(["a"])
    await store.create(job)

    with pytest.raises(PersistenceError):
        await store.update_section(
            job.id, "zzz", SectionResult.completed(summary_data())
        )


@pytest.mark.anyio
async def test_concurrent_disjoint_writes_are_all_kept(store):
    section_ids = [f"section_{i}" for i in range(25)]
    job = _new_job(section_ids)
    await store.create(job)

    async def write(i: int, sid: str):
        await asyncio.sleep(0)
        return await store.update_section(
            job.id, sid, SectionResult.completed(summary_data(score=i))
        )

    outcomes = await asyncio.gather(*(write(i, sid) for i, sid in enumerate(section_ids)))

    assert all(o == WriteOutcome.APPLIED for o in outcomes)
    assert store._jobs[job.id].status == JobStatus.COMPLETED
    snapshot = await store.get(job.id)
    for i, sid in enumerate(section_ids):
        assert snapshot.sections[sid].status == SectionStatus.COMPLETED
        assert snapshot.sections[sid].data.score == i
    assert snapshot.status == JobStatus.COMPLETED


@pytest.mark.anyio
async def test_snapshot_is_not_affected_by_later_writes(store):
    job = _new_job(["a", "b"])
    await store.create(job)
    before = await store.get(job.id)

    await store.update_section(
        job.id, "a", SectionResult.completed(summary_data())
    )

    assert before.sections["a"].status == SectionStatus.PENDING
    after = await store.get(job.id)
    assert after.sections["a"].status == SectionStatus.COMPLETED
    assert after.updated_at >= before.updated_at


@pytest.mark.anyio
async def test_required_failure_is_persisted(store):
    job = _new_job(["a", "b"], required=["a"])
    await store.create(job)

    await store.update_section(
        job.id, "a", SectionResult.failed("malformed_output", "bad json")
    )

    assert store._jobs[job.id].status == JobStatus.FAILED
    snapshot = await store.get(job.id)
    assert snapshot.status == JobStatus.FAILED


@pytest.mark.anyio
async def test_optional_failure_keeps_persisted_status_processing(store):
    job = _new_job(["a", "b"], required=["a"])
    await store.create(job)

    await store.update_section(
        job.id, "b", SectionResult.failed("timeout", "too slow")
    )

    assert store._jobs[job.id].status == JobStatus.PROCESSING


@pytest.mark.anyio
async def test_closed_store_rejects_operations(store):
    await store.close()

    with pytest.raises(PersistenceError):
        await store.get("anything")
