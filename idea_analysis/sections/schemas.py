"""Typed payloads produced by the section generators.

Every registered section has exactly one data model here. The models form a
closed tagged union (`SectionData`) discriminated on `kind`, so stored
section payloads round-trip into the right type on read.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Verdict(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


# ---------------------------------------------------------------------------
# Executive summary
# ---------------------------------------------------------------------------

class KeyFinding(BaseModel):
    type: Literal["strength", "weakness", "opportunity", "threat"]
    text: str


class ExecutiveSummaryData(BaseModel):
    kind: Literal["executive_summary"] = "executive_summary"
    title: str
    verdict: Verdict
    score: int = Field(ge=0, le=100)
    summary: str
    key_findings: List[KeyFinding] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Market size & growth
# ---------------------------------------------------------------------------

class MarketEstimate(BaseModel):
    size: str
    description: str
    methodology: Optional[str] = None


class GrowthRate(BaseModel):
    current: str
    projected: str
    factors: List[str] = Field(default_factory=list)


class MarketTrend(BaseModel):
    trend: str
    description: str
    impact: str
    timeframe: Optional[str] = None


class MarketSizeGrowthData(BaseModel):
    kind: Literal["market_size_growth"] = "market_size_growth"
    total_addressable_market: MarketEstimate
    serviceable_addressable_market: MarketEstimate
    serviceable_obtainable_market: MarketEstimate
    growth_rate: GrowthRate
    market_trends: List[MarketTrend] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Target users
# ---------------------------------------------------------------------------

class UserPersona(BaseModel):
    name: str
    description: str
    pain_points: List[str] = Field(default_factory=list)
    needs: List[str] = Field(default_factory=list)
    behaviors: List[str] = Field(default_factory=list)


class UserSegment(BaseModel):
    segment: str
    size: str
    characteristics: List[str] = Field(default_factory=list)


class TargetUsersData(BaseModel):
    kind: Literal["target_users"] = "target_users"
    primary_user_personas: List[UserPersona] = Field(min_length=1)
    user_segments: List[UserSegment] = Field(default_factory=list)
    user_acquisition_strategy: Optional[str] = None
    user_retention_strategy: Optional[str] = None


# ---------------------------------------------------------------------------
# Competition
# ---------------------------------------------------------------------------

class DirectCompetitor(BaseModel):
    name: str
    description: str
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    market_share: Optional[str] = None


class IndirectCompetitor(BaseModel):
    name: str
    description: str
    threat_level: Literal["high", "medium", "low"]


class CompetitionData(BaseModel):
    kind: Literal["competition"] = "competition"
    direct_competitors: List[DirectCompetitor] = Field(min_length=1)
    indirect_competitors: List[IndirectCompetitor] = Field(default_factory=list)
    competitive_advantages: List[str] = Field(default_factory=list)
    market_gaps: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Unit economics
# ---------------------------------------------------------------------------

class PricingTier(BaseModel):
    name: str
    price: str
    features: List[str] = Field(default_factory=list)


class UnitMetrics(BaseModel):
    cac: str
    ltv: str
    margin: str
    payback_period: str
    break_even_point: Optional[str] = None


class UnitEconomicsData(BaseModel):
    kind: Literal["unit_economics"] = "unit_economics"
    pricing_model: str
    pricing_tiers: List[PricingTier] = Field(default_factory=list)
    metrics: UnitMetrics


# ---------------------------------------------------------------------------
# Financial projections
# ---------------------------------------------------------------------------

class YearlyProjection(BaseModel):
    year: int
    revenue: float
    costs: float
    profit: float
    customers: Optional[int] = None


class FinancialProjectionsData(BaseModel):
    kind: Literal["financial_projections"] = "financial_projections"
    currency: str = "USD"
    projections: List[YearlyProjection] = Field(min_length=1)
    assumptions: List[str] = Field(default_factory=list)
    funding_required: Optional[str] = None
    break_even_year: Optional[int] = None


# ---------------------------------------------------------------------------
# Marketing channels
# ---------------------------------------------------------------------------

class MarketingChannel(BaseModel):
    name: str
    type: Literal["primary", "secondary", "experimental"]
    strategy: str
    budget: Optional[str] = None
    kpis: List[str] = Field(default_factory=list)


class MarketingChannelsData(BaseModel):
    kind: Literal["marketing_channels"] = "marketing_channels"
    channels: List[MarketingChannel] = Field(min_length=1)
    total_budget: Optional[str] = None
    recommendations: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Go-to-market plan
# ---------------------------------------------------------------------------

class LaunchPhase(BaseModel):
    phase: str
    timeline: str
    activities: List[str] = Field(default_factory=list)
    metrics: List[str] = Field(default_factory=list)


class Partnership(BaseModel):
    partner: str
    type: str
    value: str


class GoToMarketPlanData(BaseModel):
    kind: Literal["go_to_market_plan"] = "go_to_market_plan"
    launch_phases: List[LaunchPhase] = Field(min_length=1)
    key_partnerships: List[Partnership] = Field(default_factory=list)
    resource_requirements: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# VC activity
# ---------------------------------------------------------------------------

class NotableDeal(BaseModel):
    investor: str
    company: str
    amount: str
    date: str


class VCActivityData(BaseModel):
    kind: Literal["vc_activity"] = "vc_activity"
    active_vcs: int = Field(ge=0)
    total_investment: str
    average_deal_size: str
    notable_deals: List[NotableDeal] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# VC sentiment
# ---------------------------------------------------------------------------

class SentimentOverview(BaseModel):
    overall: Verdict
    confidence: float = Field(ge=0.0, le=1.0)
    key_factors: List[str] = Field(default_factory=list)


class Recommendation(BaseModel):
    category: str
    items: List[str] = Field(default_factory=list)
    priority: Priority


class VCSentimentData(BaseModel):
    kind: Literal["vc_sentiment"] = "vc_sentiment"
    sentiment: SentimentOverview
    investment_trends: List[str] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Critical questions
# ---------------------------------------------------------------------------

class CriticalQuestion(BaseModel):
    question: str
    importance: Priority
    context: Optional[str] = None


class QuestionCategory(BaseModel):
    category: str
    questions: List[CriticalQuestion] = Field(min_length=1)


class CriticalQuestionsData(BaseModel):
    kind: Literal["critical_questions"] = "critical_questions"
    categories: List[QuestionCategory] = Field(min_length=1)


SectionData = Annotated[
    Union[
        ExecutiveSummaryData,
        MarketSizeGrowthData,
        TargetUsersData,
        CompetitionData,
        UnitEconomicsData,
        FinancialProjectionsData,
        MarketingChannelsData,
        GoToMarketPlanData,
        VCActivityData,
        VCSentimentData,
        CriticalQuestionsData,
    ],
    Field(discriminator="kind"),
]
