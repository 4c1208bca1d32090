import asyncio
from typing import Any, List, Optional, Sequence, Tuple

import pytest

from idea_analysis.jobs.memory_store import InMemoryAnalysisStore
from idea_analysis.jobs.models import AnalysisInput
from idea_analysis.orchestration.orchestrator import Orchestrator
from idea_analysis.orchestration.runner import RetryPolicy, SectionRunner
from idea_analysis.sections.base import SectionGenerator, SectionSpec
from idea_analysis.sections.registry import SectionRegistry
from idea_analysis.sections.schemas import (
    CriticalQuestionsData,
    ExecutiveSummaryData,
    VCActivityData,
)


VALID_INPUT = {
    "description": "A marketplace matching freelance bookkeepers with small restaurants",
    "industry": "Fintech",
    "sub_industry": "Accounting services",
    "target_customers": "Independent restaurants with under 50 staff",
    "pricing_model": "Subscription",
    "current_stage": "Idea",
    "team_composition": "Two founders, one accountant and one engineer",
}


def summary_data(score: int = 72) -> ExecutiveSummaryData:
    return ExecutiveSummaryData(
        title="Bookkeeping marketplace for restaurants",
        verdict="positive",
        score=score,
        summary="Clear pain point with a reachable niche.",
    )


def vc_data() -> VCActivityData:
    return VCActivityData(
        active_vcs=12,
        total_investment="$450M",
        average_deal_size="$6M",
    )


def questions_data() -> CriticalQuestionsData:
    return CriticalQuestionsData(categories=[{
        "category": "Market",
        "questions": [{"question": "Will owners pay monthly?", "importance": "high"}],
    }])


class StaticGenerator(SectionGenerator):
    """Always returns the same payload."""

    def __init__(self, data: Any):
        self.data = data
        self.calls = 0

    async def generate(self, analysis_input: AnalysisInput):
        self.calls += 1
        return self.data


class ScriptedGenerator(SectionGenerator):
    """Plays back outcomes in order; exceptions are raised, anything else returned.

    The last outcome repeats once the script runs out.
    """

    def __init__(self, outcomes: Sequence[Any]):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def generate(self, analysis_input: AnalysisInput):
        outcome = self.outcomes[min(self.calls, len(self.outcomes) - 1)]
        self.calls += 1
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class SlowGenerator(SectionGenerator):
    def __init__(self, delay: float, data: Any = None):
        self.delay = delay
        self.data = data
        self.calls = 0

    async def generate(self, analysis_input: AnalysisInput):
        self.calls += 1
        await asyncio.sleep(self.delay)
        return self.data


class BlockingGenerator(SectionGenerator):
    """Waits for `release` before returning, to observe in-flight state."""

    def __init__(self, data: Any):
        self.data = data
        self.release = asyncio.Event()
        self.started = asyncio.Event()

    async def generate(self, analysis_input: AnalysisInput):
        self.started.set()
        await self.release.wait()
        return self.data


def make_registry(entries: List[Tuple[str, bool, SectionGenerator]]) -> SectionRegistry:
    registry = SectionRegistry()
    for section_id, required, generator in entries:
        registry.register(SectionSpec(
            section_id=section_id,
            title=section_id.replace("_", " ").title(),
            required=required,
            generator=generator,
        ))
    return registry.freeze()


def fast_policy(**overrides) -> RetryPolicy:
    values = dict(
        timeout_seconds=0.5,
        max_retries=2,
        base_delay_seconds=0.0,
        max_delay_seconds=0.0,
        jitter_seconds=0.0,
        persistence_max_retries=2,
        persistence_delay_seconds=0.0,
    )
    values.update(overrides)
    return RetryPolicy(**values)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def analysis_input() -> AnalysisInput:
    return AnalysisInput(**VALID_INPUT)


@pytest.fixture
def store() -> InMemoryAnalysisStore:
    return InMemoryAnalysisStore()


@pytest.fixture
def build_orchestrator(store):
    """Factory: start an orchestrator over the given registry entries."""
    async def _build(
        entries: List[Tuple[str, bool, SectionGenerator]],
        policy: Optional[RetryPolicy] = None,
        shutdown_grace_seconds: float = 1.0,
    ) -> Orchestrator:
        orchestrator = Orchestrator(
            registry=make_registry(entries),
            store=store,
            runner=SectionRunner(store, policy or fast_policy()),
            shutdown_grace_seconds=shutdown_grace_seconds,
        )
        await orchestrator.start()
        return orchestrator

    return _build
