"""Analysis-job orchestrator.

Creates jobs, fans work out to one Section Runner per registered section and
serves consistent snapshots to polling clients. Only creation-time and
read-time errors are raised to callers; section failures are recorded in the
job and surface through get_analysis.
"""

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError as SchemaValidationError

from idea_analysis.errors import ForbiddenError, NotFoundError, ValidationError
from idea_analysis.jobs.models import AnalysisInput, AnalysisJob, SectionResult
from idea_analysis.jobs.store import AnalysisStore
from idea_analysis.orchestration.runner import SectionRunner
from idea_analysis.orchestration.status import with_derived_status
from idea_analysis.sections.registry import SectionRegistry

logger = logging.getLogger(__name__)


class Orchestrator:
    """Owns the lifecycle of analysis jobs.

    Runner tasks are tracked so they are not garbage collected mid-flight and
    can be drained on shutdown. There is no per-job cancellation.
    """

    def __init__(
        self,
        registry: SectionRegistry,
        store: AnalysisStore,
        runner: Optional[SectionRunner] = None,
        shutdown_grace_seconds: float = 30.0,
    ):
        if not registry.frozen:
            registry.freeze()
        self._registry = registry
        self._store = store
        self._runner = runner or SectionRunner(store)
        self._shutdown_grace = shutdown_grace_seconds
        # Runner task -> job id it writes to.
        self._tasks: Dict[asyncio.Task, str] = {}
        self._running = False

    @property
    def registry(self) -> SectionRegistry:
        return self._registry

    @property
    def store(self) -> AnalysisStore:
        return self._store

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def start(self) -> None:
        self._running = True
        logger.info(
            "Orchestrator started with %d sections (%d required)",
            len(self._registry), len(self._registry.required_ids()),
        )

    async def stop(self) -> None:
        """Stop accepting jobs, wait for in-flight runners, cancel leftovers."""
        self._running = False
        if not self._tasks:
            return
        logger.info(
            "Waiting up to %.0fs for %d in-flight section runners",
            self._shutdown_grace, len(self._tasks),
        )
        _, pending = await asyncio.wait(set(self._tasks), timeout=self._shutdown_grace)
        if not pending:
            return
        abandoned = sorted({self._tasks[task] for task in pending})
        for task in pending:
            task.cancel()
        # Sections of these jobs stay pending in the store.
        logger.warning(
            "Cancelled %d section runners at shutdown; unfinished analyses: %s",
            len(pending), ", ".join(abandoned),
        )
        await asyncio.gather(*pending, return_exceptions=True)

    async def drain(self) -> None:
        """Wait until every launched runner has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def create_analysis(
        self,
        owner_id: str,
        analysis_input: Union[AnalysisInput, Mapping[str, Any]],
    ) -> str:
        """Validate input, persist a new job and launch its section runners.

        Returns the job id without waiting for any section.
        """
        if not self._running:
            raise RuntimeError("Orchestrator is not running")
        if not owner_id:
            raise ValidationError("owner_id is required")

        validated = self.validate_input(analysis_input)

        job = AnalysisJob(
            owner_id=owner_id,
            input=validated,
            sections={
                section_id: SectionResult.pending()
                for section_id in self._registry.section_ids()
            },
            required_sections=self._registry.required_ids(),
        )
        await self._store.create(job)
        logger.info(
            "Created analysis %s for owner %s (%d sections)",
            job.id, owner_id, len(job.sections),
        )

        for spec in self._registry:
            task = asyncio.create_task(
                self._runner.run(job.id, spec, validated),
                name=f"section:{job.id}:{spec.section_id}",
            )
            self._tasks[task] = job.id
            task.add_done_callback(self._on_task_done)

        return job.id

    async def get_analysis(self, job_id: str, requester_id: str) -> AnalysisJob:
        """Return a point-in-time snapshot of a job owned by `requester_id`."""
        job = await self._store.get(job_id)
        if job is None:
            raise NotFoundError(f"Analysis {job_id} not found")
        if job.owner_id != requester_id:
            raise ForbiddenError("You do not have access to this analysis")
        return with_derived_status(job)

    def validate_input(
        self, analysis_input: Union[AnalysisInput, Mapping[str, Any]]
    ) -> AnalysisInput:
        """Check the input carries every field the registered generators need."""
        if isinstance(analysis_input, AnalysisInput):
            candidate = analysis_input
        else:
            try:
                candidate = AnalysisInput.model_validate(analysis_input)
            except SchemaValidationError as e:
                raise ValidationError(
                    "Invalid analysis input",
                    details={"errors": _field_errors(e)},
                ) from e

        missing: List[str] = [
            name
            for name in self._registry.required_input_fields()
            if not str(getattr(candidate, name, "") or "").strip()
        ]
        if missing:
            raise ValidationError(
                f"Missing required input fields: {', '.join(missing)}",
                details={"missing_fields": missing},
            )
        return candidate

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.pop(task, None)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            # SectionRunner.run handles generator failures itself; reaching
            # this means a bug in the runner.
            logger.error(
                "Section runner %s crashed", task.get_name(), exc_info=exc
            )


def _field_errors(error: SchemaValidationError) -> List[Dict[str, Any]]:
    return [
        {"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]}
        for e in error.errors()
    ]
