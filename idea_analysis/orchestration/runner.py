"""Section Runner: executes one section's generator and records the outcome.

Steps:
1. Call the generator under a per-call timeout
2. Retry transient failures with exponential backoff and jitter
3. Translate the outcome into a terminal SectionResult
4. Write it through AnalysisStore.update_section, which recomputes the
   job status atomically with the section write

Nothing raised by a generator escapes run(); failures end up in the job
record and are observed by polling.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Optional

from idea_analysis.errors import (
    GenerationError,
    GenerationTimeout,
    PersistenceError,
)
from idea_analysis.jobs.models import (
    AnalysisInput,
    SectionResult,
    WriteOutcome,
    utcnow,
)
from idea_analysis.jobs.store import AnalysisStore
from idea_analysis.sections.base import SectionSpec

logger = logging.getLogger(__name__)

PERSISTENCE_UNAVAILABLE = "persistence_unavailable"
GENERATOR_ERROR = "generator_error"


@dataclass(frozen=True)
class RetryPolicy:
    """Bounds for generator and store retries."""
    timeout_seconds: float = 90.0
    max_retries: int = 2
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 8.0
    jitter_seconds: float = 0.5
    persistence_max_retries: int = 3
    persistence_delay_seconds: float = 0.5

    def __post_init__(self):
        if self.max_retries < 0 or self.persistence_max_retries < 0:
            raise ValueError("retry counts must be >= 0")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")

    def backoff(self, attempt: int) -> float:
        """Delay before retry number `attempt` (1-based)."""
        delay = min(self.base_delay_seconds * (2 ** (attempt - 1)), self.max_delay_seconds)
        if self.jitter_seconds > 0:
            delay += random.uniform(0, self.jitter_seconds)
        return delay


class SectionRunner:
    def __init__(
        self,
        store: AnalysisStore,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._store = store
        self._policy = policy or RetryPolicy()
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def run(
        self,
        job_id: str,
        spec: SectionSpec,
        analysis_input: AnalysisInput,
    ) -> SectionResult:
        started_at = utcnow()
        label = f"{job_id}/{spec.section_id}"
        logger.info("[%s] Section started", label)

        result = await self._execute(label, spec, analysis_input, started_at)

        if result.error is None:
            logger.info("[%s] Section completed", label)
        else:
            logger.warning(
                "[%s] Section failed: %s (%s)",
                label, result.error.code, result.error.message,
            )

        return await self._record(job_id, spec.section_id, result, label)

    async def _execute(
        self,
        label: str,
        spec: SectionSpec,
        analysis_input: AnalysisInput,
        started_at: datetime,
    ) -> SectionResult:
        attempts = self._policy.max_retries + 1
        last_error: Optional[GenerationError] = None

        for attempt in range(attempts):
            if attempt > 0:
                delay = self._policy.backoff(attempt)
                logger.warning(
                    "[%s] Retry %d/%d after %.2fs (previous error: %s)",
                    label, attempt, self._policy.max_retries, delay, last_error,
                )
                await self._sleep(delay)

            try:
                data = await self._call_generator(spec, analysis_input)
                return SectionResult.completed(data, started_at=started_at)
            except GenerationError as e:
                last_error = e
                if not e.transient:
                    break
            except Exception as e:
                logger.exception("[%s] Generator raised unexpectedly", label)
                return SectionResult.failed(
                    GENERATOR_ERROR,
                    f"{type(e).__name__}: {e}",
                    started_at=started_at,
                )

        return SectionResult.failed(
            last_error.code, last_error.message, started_at=started_at
        )

    async def _call_generator(self, spec: SectionSpec, analysis_input: AnalysisInput):
        try:
            return await asyncio.wait_for(
                spec.generator.generate(analysis_input),
                timeout=self._policy.timeout_seconds,
            )
        except asyncio.TimeoutError:
            raise GenerationTimeout(
                f"Generator exceeded {self._policy.timeout_seconds:g}s timeout"
            )

    async def _record(
        self,
        job_id: str,
        section_id: str,
        result: SectionResult,
        label: str,
    ) -> SectionResult:
        attempts = self._policy.persistence_max_retries + 1
        last_error: Optional[PersistenceError] = None

        for attempt in range(attempts):
            if attempt > 0:
                await self._sleep(self._policy.persistence_delay_seconds * attempt)
            try:
                outcome = await self._write(job_id, section_id, result)
            except PersistenceError as e:
                last_error = e
                logger.warning(
                    "[%s] Store write attempt %d/%d failed: %s",
                    label, attempt + 1, attempts, e,
                )
                continue
            self._log_outcome(label, outcome)
            return result

        fallback = SectionResult.failed(
            PERSISTENCE_UNAVAILABLE,
            f"Could not store section result: {last_error}",
            started_at=result.started_at,
        )
        try:
            outcome = await self._write(job_id, section_id, fallback)
        except PersistenceError as e:
            logger.error(
                "[%s] Giving up, section stays pending in the store: %s", label, e
            )
            return fallback
        self._log_outcome(label, outcome)
        return fallback

    async def _write(
        self, job_id: str, section_id: str, result: SectionResult
    ) -> WriteOutcome:
        return await self._store.update_section(job_id, section_id, result)

    def _log_outcome(self, label: str, outcome: WriteOutcome) -> None:
        if outcome == WriteOutcome.JOB_MISSING:
            logger.info("[%s] Job no longer exists, result discarded", label)
        elif outcome == WriteOutcome.ALREADY_FINAL:
            logger.warning("[%s] Section already final, result discarded", label)
