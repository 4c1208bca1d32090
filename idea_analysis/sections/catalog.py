"""Default report sections and the LLM provider each one uses."""

from typing import Optional

from idea_analysis.llm.client import LLMClient
from idea_analysis.sections import prompts
from idea_analysis.sections.base import SectionSpec
from idea_analysis.sections.generators import PromptedSectionGenerator
from idea_analysis.sections.registry import SectionRegistry
from idea_analysis.sections.schemas import (
    CompetitionData,
    CriticalQuestionsData,
    ExecutiveSummaryData,
    FinancialProjectionsData,
    GoToMarketPlanData,
    MarketingChannelsData,
    MarketSizeGrowthData,
    TargetUsersData,
    UnitEconomicsData,
    VCActivityData,
    VCSentimentData,
)

# (section_id, title, required, prompt, output model, uses research provider)
DEFAULT_SECTIONS = [
    ("executive_summary", "Executive Summary", True,
     prompts.EXECUTIVE_SUMMARY, ExecutiveSummaryData, False),
    ("market_size_growth", "Market Size & Growth", True,
     prompts.MARKET_SIZE_GROWTH, MarketSizeGrowthData, True),
    ("target_users", "Target Users", True,
     prompts.TARGET_USERS, TargetUsersData, False),
    ("competition", "Competition", True,
     prompts.COMPETITION, CompetitionData, True),
    ("unit_economics", "Unit Economics", True,
     prompts.UNIT_ECONOMICS, UnitEconomicsData, True),
    ("financial_projections", "Financial Projections", True,
     prompts.FINANCIAL_PROJECTIONS, FinancialProjectionsData, False),
    ("marketing_channels", "Marketing Channels", False,
     prompts.MARKETING_CHANNELS, MarketingChannelsData, False),
    ("go_to_market_plan", "Go-to-Market Plan", False,
     prompts.GO_TO_MARKET_PLAN, GoToMarketPlanData, False),
    ("vc_activity", "VC Activity", False,
     prompts.VC_ACTIVITY, VCActivityData, True),
    ("vc_sentiment", "VC Sentiment", False,
     prompts.VC_SENTIMENT, VCSentimentData, True),
    ("critical_questions", "Critical Questions", False,
     prompts.CRITICAL_QUESTIONS, CriticalQuestionsData, False),
]


def build_default_registry(
    writer: LLMClient,
    research: Optional[LLMClient] = None,
    max_tokens: int = 4000,
) -> SectionRegistry:
    """Build and freeze the registry of default report sections.

    `writer` handles the strategic sections; `research` (a search-grounded
    model) handles market data sections and falls back to `writer`.
    """
    registry = SectionRegistry()
    for section_id, title, required, template, model, uses_research in DEFAULT_SECTIONS:
        client = research if (uses_research and research is not None) else writer
        generator = PromptedSectionGenerator(
            client=client,
            prompt_template=template,
            output_model=model,
            max_tokens=max_tokens,
            envelope=section_id,
        )
        registry.register(SectionSpec(
            section_id=section_id,
            title=title,
            required=required,
            generator=generator,
            description=f"{title} generated by {client.name}",
        ))
    return registry.freeze()
