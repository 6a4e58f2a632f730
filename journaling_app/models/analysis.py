# analysis models — structured entities extracted from a journal entry
# the llm answers in snake_case, the api speaks camelCase; populate_by_name accepts both.
# enum-like fields are coerced to a safe default instead of failing validation.

import re
from typing import Any, Optional, Literal
from pydantic import BaseModel, Field, field_validator


def coerce_choice(value: Any, allowed: tuple, default: str) -> str:
    """lowercase + match against allowed values, default otherwise"""
    if isinstance(value, str):
        candidate = value.strip().lower()
        if candidate in allowed:
            return candidate
        # llm sometimes writes in_progress / in progress
        candidate = re.sub(r"[\s_]+", "-", candidate)
        if candidate in allowed:
            return candidate
    return default


def clamp_number(value: Any, low: float, high: float, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number != number:  # nan
        return default
    return max(low, min(high, number))


def parse_amount(value: Any) -> Optional[float]:
    """accepts 42, 42.5, "42", "$1,200.50"; everything else is null"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        cleaned = re.sub(r"[^\d.\-]", "", value)
        if not cleaned or cleaned in ("-", ".", "-."):
            return None
        try:
            return float(cleaned)
        except ValueError:
            return None
    return None


def normalize_life_area(value: Any) -> str:
    """map llm area names onto wheel-of-life ids (personal_growth -> personal-growth)"""
    area = str(value or "").strip().lower().replace("_", "-").replace(" ", "-")
    if area == "finance":
        return "finances"
    return area


SENTIMENTS = ("positive", "negative", "neutral")
PRIORITIES = ("high", "medium", "low")


def _string_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [str(v) for v in value if v is not None and str(v).strip()]
    return []


class _Entity(BaseModel):
    model_config = {"populate_by_name": True}

    @field_validator("confidence", mode="before", check_fields=False)
    @classmethod
    def _clamp_confidence(cls, v):
        return clamp_number(v, 0.0, 1.0, 0.0)


class SentimentAnalysis(_Entity):
    overall: Literal["positive", "negative", "neutral"] = "neutral"
    confidence: float = 0.0
    emotions: list[str] = Field(default_factory=list)
    intensity: int = 5
    mood_indicators: list[str] = Field(default_factory=list, alias="moodIndicators")
    emotional_tone: str = Field("", alias="emotionalTone")

    @field_validator("overall", mode="before")
    @classmethod
    def _overall(cls, v):
        return coerce_choice(v, SENTIMENTS, "neutral")

    @field_validator("intensity", mode="before")
    @classmethod
    def _intensity(cls, v):
        return int(round(clamp_number(v, 1, 10, 5)))

    @field_validator("emotions", "mood_indicators", mode="before")
    @classmethod
    def _lists(cls, v):
        return _string_list(v)

    @field_validator("emotional_tone", mode="before")
    @classmethod
    def _tone(cls, v):
        return "" if v is None else str(v)


class PeopleMentioned(_Entity):
    name: str
    relationship: str = ""
    context: str = ""
    sentiment: Literal["positive", "negative", "neutral"] = "neutral"
    interaction_type: str = Field("", alias="interactionType")
    confidence: float = 0.0
    frequency: Literal["first_mention", "recurring", "frequent"] = "first_mention"

    @field_validator("sentiment", mode="before")
    @classmethod
    def _sentiment(cls, v):
        return coerce_choice(v, SENTIMENTS, "neutral")

    @field_validator("frequency", mode="before")
    @classmethod
    def _frequency(cls, v):
        if isinstance(v, str):
            v = v.strip().lower().replace("-", "_").replace(" ", "_")
        return v if v in ("first_mention", "recurring", "frequent") else "first_mention"

    @field_validator("relationship", "context", "interaction_type", mode="before")
    @classmethod
    def _text(cls, v):
        return "" if v is None else str(v)


class FinanceCue(_Entity):
    amount: Optional[float] = None
    currency: str = "USD"
    category: Literal["income", "expense", "investment", "debt"] = "expense"
    description: str = ""
    context: str = ""
    confidence: float = 0.0
    type: Literal["transaction", "decision", "plan", "reflection"] = "transaction"

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, v):
        return parse_amount(v)

    @field_validator("currency", mode="before")
    @classmethod
    def _currency(cls, v):
        return str(v).strip().upper() if v else "USD"

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        return coerce_choice(v, ("income", "expense", "investment", "debt"), "expense")

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, v):
        return coerce_choice(v, ("transaction", "decision", "plan", "reflection"), "transaction")


class TaskMentioned(_Entity):
    description: str
    priority: Literal["high", "medium", "low"] = "medium"
    deadline: Optional[str] = None
    status: Literal["pending", "completed", "in-progress"] = "pending"
    category: str = ""
    confidence: float = 0.0
    complexity: Literal["simple", "moderate", "complex"] = "simple"

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v):
        return coerce_choice(v, PRIORITIES, "medium")

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v):
        return coerce_choice(v, ("pending", "completed", "in-progress"), "pending")

    @field_validator("complexity", mode="before")
    @classmethod
    def _complexity(cls, v):
        return coerce_choice(v, ("simple", "moderate", "complex"), "simple")

    @field_validator("deadline", mode="before")
    @classmethod
    def _deadline(cls, v):
        if not v or str(v).lower() == "null":
            return None
        return str(v)


class LocationData(_Entity):
    name: str
    type: Literal["work", "home", "travel", "leisure", "other"] = "other"
    context: str = ""
    confidence: float = 0.0
    significance: Literal["primary", "secondary", "passing_mention"] = "passing_mention"

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, v):
        return coerce_choice(v, ("work", "home", "travel", "leisure", "other"), "other")

    @field_validator("significance", mode="before")
    @classmethod
    def _significance(cls, v):
        if isinstance(v, str):
            v = v.strip().lower().replace("-", "_").replace(" ", "_")
        return v if v in ("primary", "secondary", "passing_mention") else "passing_mention"


class TemporalReference(_Entity):
    date: Optional[str] = None
    time: Optional[str] = None
    duration: Optional[str] = None
    context: str = ""
    confidence: float = 0.0
    type: Literal["past", "present", "future", "recurring"] = "present"

    @field_validator("date", "time", "duration", mode="before")
    @classmethod
    def _nullable(cls, v):
        if v is None or str(v).strip().lower() in ("", "null", "none"):
            return None
        return str(v)

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, v):
        return coerce_choice(v, ("past", "present", "future", "recurring"), "present")


class LifeAreaAnalysis(_Entity):
    area: str
    relevance: int = 1
    sentiment: Literal["positive", "negative", "neutral"] = "neutral"
    insights: str = ""
    confidence: float = 0.0
    priority_alignment: Literal["high", "medium", "low"] = Field("medium", alias="priorityAlignment")

    @field_validator("area", mode="before")
    @classmethod
    def _area(cls, v):
        return normalize_life_area(v)

    @field_validator("relevance", mode="before")
    @classmethod
    def _relevance(cls, v):
        return int(round(clamp_number(v, 1, 10, 1)))

    @field_validator("sentiment", mode="before")
    @classmethod
    def _sentiment(cls, v):
        return coerce_choice(v, SENTIMENTS, "neutral")

    @field_validator("priority_alignment", mode="before")
    @classmethod
    def _alignment(cls, v):
        return coerce_choice(v, PRIORITIES, "medium")

    @field_validator("insights", mode="before")
    @classmethod
    def _insights(cls, v):
        if isinstance(v, list):
            return " ".join(str(i) for i in v)
        return "" if v is None else str(v)


class InsightsData(BaseModel):
    themes: list[str] = Field(default_factory=list)
    patterns: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    growth_opportunities: list[str] = Field(default_factory=list, alias="growthOpportunities")
    action_items: list[str] = Field(default_factory=list, alias="actionItems")
    reflection_points: list[str] = Field(default_factory=list, alias="reflectionPoints")

    model_config = {"populate_by_name": True}

    @field_validator("*", mode="before")
    @classmethod
    def _lists(cls, v):
        return _string_list(v)


class AnalysisResult(BaseModel):
    """full extraction output; a field is none when its extraction failed"""
    sentiment: Optional[SentimentAnalysis] = None
    people: Optional[list[PeopleMentioned]] = None
    finance: Optional[list[FinanceCue]] = None
    tasks: Optional[list[TaskMentioned]] = None
    locations: Optional[list[LocationData]] = None
    temporal: Optional[list[TemporalReference]] = None
    life_areas: Optional[list[LifeAreaAnalysis]] = Field(None, alias="lifeAreas")
    insights: Optional[InsightsData] = None

    model_config = {"populate_by_name": True}


class StoredAnalysis(AnalysisResult):
    """analysis_results document as returned to the client"""
    id: str
    journal_entry_id: str = Field(..., alias="journalEntryId")
    user_confirmed: bool = Field(False, alias="userConfirmed")
    created_at: str = Field(..., alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")
