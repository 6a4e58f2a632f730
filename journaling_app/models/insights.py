# insight + nudge models — rule-based and ai-assisted recommendations

from typing import Any, Optional, Literal
from pydantic import BaseModel, Field, field_validator

from journaling_app.models.analysis import clamp_number, coerce_choice, PRIORITIES


class Insight(BaseModel):
    type: str
    title: str
    message: str
    priority: Literal["high", "medium", "low"] = "medium"
    actionable: bool = True
    data: Optional[Any] = None


class AIInsight(BaseModel):
    """one item of an ai insight list; shapes differ per list so extra keys are kept"""
    title: str = ""
    message: str = ""
    description: str = ""
    confidence: float = 0.0
    impact: str = ""
    priority: str = ""
    steps: list[str] = Field(default_factory=list)
    expected_outcome: str = Field("", alias="expectedOutcome")

    model_config = {"populate_by_name": True, "extra": "allow"}

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence(cls, v):
        return clamp_number(v, 0.0, 1.0, 0.0)


class AIAnalysis(BaseModel):
    emotional_insights: list[AIInsight] = Field(default_factory=list, alias="emotionalInsights")
    behavioral_insights: list[AIInsight] = Field(default_factory=list, alias="behavioralInsights")
    relationship_insights: list[AIInsight] = Field(default_factory=list, alias="relationshipInsights")
    goal_insights: list[AIInsight] = Field(default_factory=list, alias="goalInsights")
    life_balance_insights: list[AIInsight] = Field(default_factory=list, alias="lifeBalanceInsights")
    growth_opportunities: list[AIInsight] = Field(default_factory=list, alias="growthOpportunities")
    predictive_insights: list[AIInsight] = Field(default_factory=list, alias="predictiveInsights")
    actionable_recommendations: list[AIInsight] = Field(default_factory=list, alias="actionableRecommendations")

    model_config = {"populate_by_name": True}


class EnhancedInsights(BaseModel):
    ai_insights: AIAnalysis = Field(default_factory=AIAnalysis, alias="aiInsights")
    life_areas: list[Insight] = Field(default_factory=list, alias="lifeAreas")
    goals: list[Insight] = Field(default_factory=list)
    wellness: list[Insight] = Field(default_factory=list)
    relationships: list[Insight] = Field(default_factory=list)
    finance: list[Insight] = Field(default_factory=list)
    productivity: list[Insight] = Field(default_factory=list)
    personality: list[Insight] = Field(default_factory=list)
    priority: list[Insight] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


# nudges

NudgeType = Literal["wellness", "goals", "relationships", "finance", "life-balance", "productivity"]
NudgeCategory = Literal["emotional", "physical", "social", "financial", "professional", "personal",
                        "productivity", "holistic"]
NudgeTiming = Literal["now", "today", "this-week", "this-month"]
NudgeFrequency = Literal["once", "daily", "weekly", "monthly"]


class NudgeAction(BaseModel):
    label: str
    impact: Literal["high", "medium", "low"] = "medium"

    @field_validator("impact", mode="before")
    @classmethod
    def _impact(cls, v):
        return coerce_choice(v, PRIORITIES, "medium")


class Nudge(BaseModel):
    id: str
    type: NudgeType = "wellness"
    category: NudgeCategory = "personal"
    title: str
    message: str
    priority: Literal["high", "medium", "low"] = "medium"
    actionable: bool = True
    actions: list[NudgeAction] = Field(default_factory=list)
    timing: NudgeTiming = "this-week"
    frequency: NudgeFrequency = "once"
    life_area: Optional[str] = Field(None, alias="lifeArea")
    confidence: float = 0.8
    expected_outcome: str = Field("", alias="expectedOutcome")
    relevance_score: int = Field(0, alias="relevanceScore")

    model_config = {"populate_by_name": True}

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, v):
        return coerce_choice(v, ("wellness", "goals", "relationships", "finance", "life-balance", "productivity"), "wellness")

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        return coerce_choice(v, ("emotional", "physical", "social", "financial", "professional", "personal",
                                 "productivity", "holistic"), "personal")

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v):
        return coerce_choice(v, PRIORITIES, "medium")

    @field_validator("timing", mode="before")
    @classmethod
    def _timing(cls, v):
        return coerce_choice(v, ("now", "today", "this-week", "this-month"), "this-week")

    @field_validator("frequency", mode="before")
    @classmethod
    def _frequency(cls, v):
        return coerce_choice(v, ("once", "daily", "weekly", "monthly"), "once")

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence(cls, v):
        return clamp_number(v, 0.0, 1.0, 0.8)


class NudgeSummary(BaseModel):
    total_nudges: int = Field(0, alias="totalNudges")
    high_priority: int = Field(0, alias="highPriority")
    medium_priority: int = Field(0, alias="mediumPriority")
    low_priority: int = Field(0, alias="lowPriority")
    categories: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class NudgesResponse(BaseModel):
    nudges: list[Nudge] = Field(default_factory=list)
    summary: NudgeSummary = Field(default_factory=NudgeSummary)


class NudgeInteractionCreate(BaseModel):
    nudge_id: str = Field(..., alias="nudgeId", min_length=1)
    action: Literal["dismissed", "completed", "snoozed", "ignored"]
    feedback: Optional[str] = None

    model_config = {"populate_by_name": True}


class NudgeInteraction(BaseModel):
    id: str
    nudge_id: str = Field(..., alias="nudgeId")
    action: str
    feedback: Optional[str] = None
    timestamp: str

    model_config = {"populate_by_name": True}


class NudgeInteractionResult(BaseModel):
    success: bool = True
    result: NudgeInteraction
