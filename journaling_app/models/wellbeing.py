# wellbeing models — wheel of life, soulmatrix (big five) and recaps

from typing import Any, Optional, Literal
from pydantic import BaseModel, Field, field_validator

from journaling_app.models.analysis import clamp_number, coerce_choice, normalize_life_area, PRIORITIES
from journaling_app.models.tracking import GoalResponse

DEFAULT_LIFE_AREAS = [
    {"id": "career", "name": "Career & Work", "description": "Job satisfaction, professional growth", "color": "#3B82F6", "icon": "💼"},
    {"id": "finances", "name": "Finances", "description": "Financial security, money management", "color": "#10B981", "icon": "💰"},
    {"id": "health", "name": "Health & Fitness", "description": "Physical health, exercise, nutrition", "color": "#EF4444", "icon": "🏃‍♂️"},
    {"id": "relationships", "name": "Relationships", "description": "Family, friends, romantic relationships", "color": "#F59E0B", "icon": "❤️"},
    {"id": "personal-growth", "name": "Personal Growth", "description": "Learning, skills development", "color": "#8B5CF6", "icon": "📚"},
    {"id": "recreation", "name": "Recreation & Fun", "description": "Hobbies, entertainment, leisure", "color": "#EC4899", "icon": "🎮"},
    {"id": "spirituality", "name": "Spirituality", "description": "Faith, purpose, meaning", "color": "#6366F1", "icon": "🕊️"},
    {"id": "environment", "name": "Environment", "description": "Living space, surroundings", "color": "#059669", "icon": "🏠"},
]

LIFE_AREA_IDS = tuple(a["id"] for a in DEFAULT_LIFE_AREAS)
BIG_FIVE = ("openness", "conscientiousness", "extraversion", "agreeableness", "neuroticism")


# wheel of life

class LifeArea(BaseModel):
    id: str
    name: str = ""
    description: str = ""
    current_score: float = Field(5, alias="currentScore")
    target_score: float = Field(8, alias="targetScore")
    color: str = ""
    icon: str = ""

    model_config = {"populate_by_name": True}

    @field_validator("current_score", "target_score", mode="before")
    @classmethod
    def _score(cls, v):
        return clamp_number(v, 1, 10, 5)


class WheelOfLifeSave(BaseModel):
    life_areas: list[LifeArea] = Field(..., alias="lifeAreas", min_length=1)
    priorities: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class PrioritiesUpdate(BaseModel):
    priorities: list[str]


class WheelOfLifeDoc(BaseModel):
    id: str
    user_id: str = Field(..., alias="userId")
    life_areas: list[LifeArea] = Field(default_factory=list, alias="lifeAreas")
    priorities: list[str] = Field(default_factory=list)
    is_completed: bool = Field(False, alias="isCompleted")
    created_at: str = Field(..., alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    model_config = {"populate_by_name": True}


class WheelOfLifeResponse(BaseModel):
    wheel_of_life: Optional[WheelOfLifeDoc] = Field(None, alias="wheelOfLife")
    priorities: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class AreaStats(BaseModel):
    total_entries: int = Field(0, alias="totalEntries")
    average_sentiment: float = Field(0.0, alias="averageSentiment")
    most_active_month: str = Field("No entries", alias="mostActiveMonth")
    entry_frequency: str = Field("No entries", alias="entryFrequency")
    recent_activity: int = Field(0, alias="recentActivity")
    improvement_trend: Literal["up", "down", "stable"] = Field("stable", alias="improvementTrend")

    model_config = {"populate_by_name": True}


class AreaEntry(BaseModel):
    id: str
    content: str
    date: Optional[str] = None
    sentiment: float = 0.0


class AreaInsight(BaseModel):
    type: Literal["positive", "negative", "neutral"]
    content: str
    source: str = "analysis"
    date: str
    life_area_id: str = Field(..., alias="lifeAreaId")

    model_config = {"populate_by_name": True}


class ProgressPoint(BaseModel):
    date: str
    score: int
    notes: str


class AreaJournalAnalysis(BaseModel):
    total_entries: int = Field(0, alias="totalEntries")
    average_sentiment: float = Field(0.0, alias="averageSentiment")
    most_active_month: str = Field("No entries", alias="mostActiveMonth")
    entry_frequency: str = Field("No entries", alias="entryFrequency")

    model_config = {"populate_by_name": True}


class AreaDetail(BaseModel):
    id: str
    name: str = ""
    description: str = ""
    color: str = ""
    icon: str = ""
    current_score: float = Field(5, alias="currentScore")
    target_score: float = Field(8, alias="targetScore")
    priority: int = 0
    goals: list[GoalResponse] = Field(default_factory=list)
    insights: list[AreaInsight] = Field(default_factory=list)
    progress_history: list[ProgressPoint] = Field(default_factory=list, alias="progressHistory")
    journal_analysis: AreaJournalAnalysis = Field(default_factory=AreaJournalAnalysis, alias="journalAnalysis")
    related_entries: list[AreaEntry] = Field(default_factory=list, alias="relatedEntries")
    sentiment_trend: Literal["improving", "declining", "stable"] = Field("stable", alias="sentimentTrend")
    key_themes: list[str] = Field(default_factory=list, alias="keyThemes")
    recommendations: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class AreaScoreUpdate(BaseModel):
    current_score: Optional[float] = Field(None, alias="currentScore", ge=1, le=10)
    target_score: Optional[float] = Field(None, alias="targetScore", ge=1, le=10)
    description: Optional[str] = None

    model_config = {"populate_by_name": True}


class AssessedArea(BaseModel):
    id: str
    current_score: float = Field(5, alias="currentScore")
    target_score: float = Field(8, alias="targetScore")
    confidence: float = 0.0
    reasoning: str = ""
    key_insights: list[str] = Field(default_factory=list, alias="keyInsights")
    immediate_goals: list[str] = Field(default_factory=list, alias="immediateGoals")
    long_term_vision: str = Field("", alias="longTermVision")

    model_config = {"populate_by_name": True}

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v):
        return normalize_life_area(v)

    @field_validator("current_score", "target_score", mode="before")
    @classmethod
    def _score(cls, v):
        return clamp_number(v, 1, 10, 5)

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence(cls, v):
        return clamp_number(v, 0.0, 1.0, 0.0)


class AssessmentSummary(BaseModel):
    overall_satisfaction: float = Field(5, alias="overallSatisfaction")
    life_balance_score: float = Field(5, alias="lifeBalanceScore")
    areas_of_strength: list[str] = Field(default_factory=list, alias="areasOfStrength")
    areas_for_improvement: list[str] = Field(default_factory=list, alias="areasForImprovement")
    priority_recommendations: list[str] = Field(default_factory=list, alias="priorityRecommendations")

    model_config = {"populate_by_name": True}


class AssessmentRecommendations(BaseModel):
    focus_areas: list[str] = Field(default_factory=list, alias="focusAreas")
    quick_wins: list[str] = Field(default_factory=list, alias="quickWins")
    long_term_strategies: list[str] = Field(default_factory=list, alias="longTermStrategies")
    balance_improvements: list[str] = Field(default_factory=list, alias="balanceImprovements")

    model_config = {"populate_by_name": True}


class WheelOfLifeAssessment(BaseModel):
    assessment: AssessmentSummary = Field(default_factory=AssessmentSummary)
    life_areas: list[AssessedArea] = Field(default_factory=list, alias="lifeAreas")
    recommendations: AssessmentRecommendations = Field(default_factory=AssessmentRecommendations)

    model_config = {"populate_by_name": True}


# soulmatrix

class TraitScore(BaseModel):
    score: float = 0.5
    confidence: float = 0.0
    description: str = ""
    trend: Literal["increasing", "decreasing", "stable"] = "stable"

    @field_validator("score", "confidence", mode="before")
    @classmethod
    def _unit(cls, v):
        return clamp_number(v, 0.0, 1.0, 0.5)

    @field_validator("trend", mode="before")
    @classmethod
    def _trend(cls, v):
        return coerce_choice(v, ("increasing", "decreasing", "stable"), "stable")


class BigFiveTraits(BaseModel):
    openness: TraitScore = Field(default_factory=TraitScore)
    conscientiousness: TraitScore = Field(default_factory=TraitScore)
    extraversion: TraitScore = Field(default_factory=TraitScore)
    agreeableness: TraitScore = Field(default_factory=TraitScore)
    neuroticism: TraitScore = Field(default_factory=TraitScore)


class PersonalityEvolution(BaseModel):
    overall_change: str = Field("", alias="overallChange")
    key_insights: list[str] = Field(default_factory=list, alias="keyInsights")
    life_events_correlation: list[str] = Field(default_factory=list, alias="lifeEventsCorrelation")
    personality_stability: Literal["high", "medium", "low"] = Field("medium", alias="personalityStability")
    recorded_at: Optional[str] = Field(None, alias="recordedAt")

    model_config = {"populate_by_name": True}

    @field_validator("personality_stability", mode="before")
    @classmethod
    def _stability(cls, v):
        return coerce_choice(v, PRIORITIES, "medium")


class SoulMatrixAnalysis(BaseModel):
    """llm output for a soulmatrix update"""
    traits: BigFiveTraits = Field(default_factory=BigFiveTraits)
    evolution: PersonalityEvolution = Field(default_factory=PersonalityEvolution)
    confidence: float = 0.0

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence(cls, v):
        return clamp_number(v, 0.0, 1.0, 0.0)

    @field_validator("evolution", mode="before")
    @classmethod
    def _evolution(cls, v):
        # some models answer with a list of snapshots
        if isinstance(v, list):
            return v[-1] if v else {}
        return v


class SoulMatrixDoc(BaseModel):
    id: str
    user_id: str = Field(..., alias="userId")
    traits: BigFiveTraits
    evolution: list[PersonalityEvolution] = Field(default_factory=list)
    confidence: float = 0.0
    analyzed_entries: list[str] = Field(default_factory=list, alias="analyzedEntries")
    last_updated: Optional[str] = Field(None, alias="lastUpdated")
    next_update: Optional[str] = Field(None, alias="nextUpdate")

    model_config = {"populate_by_name": True}


class SoulMatrixUpdateResponse(BaseModel):
    updated: bool
    message: str
    soul_matrix: Optional[SoulMatrixDoc] = Field(None, alias="soulMatrix")
    new_entries_analyzed: int = Field(0, alias="newEntriesAnalyzed")

    model_config = {"populate_by_name": True}


# recaps

class RecapContent(BaseModel):
    title: str = ""
    narrative: str = ""
    highlights: list[str] = Field(default_factory=list)
    challenges: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)


class RecapInsights(BaseModel):
    emotional_trends: str = Field("", alias="emotionalTrends")
    relationship_insights: str = Field("", alias="relationshipInsights")
    financial_insights: str = Field("", alias="financialInsights")
    productivity_insights: str = Field("", alias="productivityInsights")
    personal_growth: str = Field("", alias="personalGrowth")

    model_config = {"populate_by_name": True}

    @field_validator("*", mode="before")
    @classmethod
    def _text(cls, v):
        if isinstance(v, list):
            return " ".join(str(i) for i in v)
        return "" if v is None else str(v)


class RecapRecommendations(BaseModel):
    immediate_actions: list[str] = Field(default_factory=list, alias="immediateActions")
    long_term_goals: list[str] = Field(default_factory=list, alias="longTermGoals")
    habit_suggestions: list[str] = Field(default_factory=list, alias="habitSuggestions")
    life_balance_tips: list[str] = Field(default_factory=list, alias="lifeBalanceTips")

    model_config = {"populate_by_name": True}


class LifeAreaImprovement(BaseModel):
    area: str
    current_status: str = Field("", alias="currentStatus")
    suggested_actions: list[str] = Field(default_factory=list, alias="suggestedActions")
    priority: Literal["high", "medium", "low"] = "medium"

    model_config = {"populate_by_name": True}

    @field_validator("area", mode="before")
    @classmethod
    def _area(cls, v):
        return normalize_life_area(v)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v):
        return coerce_choice(v, PRIORITIES, "medium")


class RecapMetrics(BaseModel):
    entries_count: int = Field(0, alias="entriesCount")
    mood_average: float = Field(0.0, alias="moodAverage")
    energy_average: float = Field(0.0, alias="energyAverage")
    people_interacted: int = Field(0, alias="peopleInteracted")
    tasks_completed: int = Field(0, alias="tasksCompleted")
    financial_insights_count: int = Field(0, alias="financialInsightsCount")

    model_config = {"populate_by_name": True}


class GeneratedRecap(BaseModel):
    """llm output for a recap; metrics get replaced by locally computed values"""
    story: RecapContent = Field(default_factory=RecapContent)
    insights: RecapInsights = Field(default_factory=RecapInsights)
    recommendations: RecapRecommendations = Field(default_factory=RecapRecommendations)
    life_area_improvements: list[LifeAreaImprovement] = Field(default_factory=list, alias="lifeAreaImprovements")
    metrics: RecapMetrics = Field(default_factory=RecapMetrics)

    model_config = {"populate_by_name": True}


class RecapGenerateRequest(BaseModel):
    type: Literal["weekly", "monthly"]


class RecapResponse(BaseModel):
    id: str
    user_id: str = Field(..., alias="userId")
    type: str
    period_start: str = Field(..., alias="periodStart")
    period_end: str = Field(..., alias="periodEnd")
    content: RecapContent
    insights: RecapInsights
    recommendations: RecapRecommendations
    life_area_improvements: list[LifeAreaImprovement] = Field(default_factory=list, alias="lifeAreaImprovements")
    metrics: RecapMetrics
    generated_at: str = Field(..., alias="generatedAt")
    viewed_at: Optional[str] = Field(None, alias="viewedAt")

    model_config = {"populate_by_name": True}


class RecapCard(BaseModel):
    """one swipeable story card; cards with nothing to say are never built"""
    id: str
    category: Literal["people", "mood", "places", "growth", "goals", "finance"]
    title: str
    subtitle: str
    content: str
    insights: list[str] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)


def neutral_traits(description: str = "Initial neutral score") -> dict[str, Any]:
    """0.5 on every trait, used before the first soulmatrix update"""
    return {
        trait: {"score": 0.5, "confidence": 0.0, "description": description, "trend": "stable"}
        for trait in BIG_FIVE
    }
