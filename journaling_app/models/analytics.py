# analytics models — check-in / journaling correlations and personality evolution

from typing import Optional, Literal
from pydantic import BaseModel, Field


class MoodPattern(BaseModel):
    high_mood_long_entries: bool = Field(..., alias="highMoodLongEntries")
    low_mood_short_entries: bool = Field(..., alias="lowMoodShortEntries")
    mood_writing_pattern: str = Field(..., alias="moodWritingPattern")

    model_config = {"populate_by_name": True}


class MoodCorrelation(BaseModel):
    date: str
    mood: float
    dominant_mood: str = Field(..., alias="dominantMood")
    entry_length: int = Field(..., alias="entryLength")
    has_analysis: bool = Field(..., alias="hasAnalysis")
    correlation: MoodPattern

    model_config = {"populate_by_name": True}


class EnergyRange(BaseModel):
    min: float
    max: float


class EnergyPattern(BaseModel):
    high_energy_full_analysis: bool = Field(..., alias="highEnergyFullAnalysis")
    low_energy_basic_processing: bool = Field(..., alias="lowEnergyBasicProcessing")
    energy_writing_pattern: str = Field(..., alias="energyWritingPattern")

    model_config = {"populate_by_name": True}


class EnergyCorrelation(BaseModel):
    date: str
    energy: float
    energy_range: EnergyRange = Field(..., alias="energyRange")
    entry_length: int = Field(..., alias="entryLength")
    processing_type: Optional[str] = Field(None, alias="processingType")
    correlation: EnergyPattern

    model_config = {"populate_by_name": True}


class SleepPattern(BaseModel):
    good_sleep_long_entries: bool = Field(..., alias="goodSleepLongEntries")
    poor_sleep_short_entries: bool = Field(..., alias="poorSleepShortEntries")
    sleep_writing_pattern: str = Field(..., alias="sleepWritingPattern")

    model_config = {"populate_by_name": True}


class SleepCorrelation(BaseModel):
    date: str
    previous_day_sleep: float = Field(..., alias="previousDaySleep")
    sleep_quality: str = Field(..., alias="sleepQuality")
    entry_length: int = Field(..., alias="entryLength")
    entry_time: int = Field(..., alias="entryTime")
    correlation: SleepPattern

    model_config = {"populate_by_name": True}


class ContentFlags(BaseModel):
    positive_content: bool = Field(..., alias="positiveContent")
    negative_content: bool = Field(..., alias="negativeContent")
    work_content: bool = Field(..., alias="workContent")
    personal_content: bool = Field(..., alias="personalContent")

    model_config = {"populate_by_name": True}


class ContentPattern(BaseModel):
    date: str
    content_length: int = Field(..., alias="contentLength")
    word_count: int = Field(..., alias="wordCount")
    sentiment: str
    themes: list[str] = Field(default_factory=list)
    mood: float
    energy: float
    patterns: ContentFlags

    model_config = {"populate_by_name": True}


class WeeklyMetrics(BaseModel):
    average_mood: float = Field(0.0, alias="averageMood")
    average_energy: float = Field(0.0, alias="averageEnergy")
    average_sleep: float = Field(0.0, alias="averageSleep")
    journal_frequency: int = Field(0, alias="journalFrequency")
    average_entry_length: float = Field(0.0, alias="averageEntryLength")
    trend: str = "stable"

    model_config = {"populate_by_name": True}


class WeeklyTrend(BaseModel):
    period: str
    type: str = "weekly"
    metrics: WeeklyMetrics


class CorrelationInsight(BaseModel):
    type: str
    title: str
    message: str
    priority: str


class CorrelationAnalysis(BaseModel):
    mood_correlations: list[MoodCorrelation] = Field(default_factory=list, alias="moodCorrelations")
    energy_correlations: list[EnergyCorrelation] = Field(default_factory=list, alias="energyCorrelations")
    sleep_correlations: list[SleepCorrelation] = Field(default_factory=list, alias="sleepCorrelations")
    content_patterns: list[ContentPattern] = Field(default_factory=list, alias="contentPatterns")
    trends: list[WeeklyTrend] = Field(default_factory=list)
    insights: list[CorrelationInsight] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


# personality evolution

class PeriodMetrics(BaseModel):
    entry_count: int = Field(0, alias="entryCount")
    total_words: int = Field(0, alias="totalWords")
    avg_mood: Optional[float] = Field(None, alias="avgMood")
    avg_energy: Optional[float] = Field(None, alias="avgEnergy")
    themes: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class TraitSnapshot(BaseModel):
    """big five on a 1-10 scale; life event impacts reuse it as signed deltas"""
    openness: float = 5.0
    conscientiousness: float = 5.0
    extraversion: float = 5.0
    agreeableness: float = 5.0
    neuroticism: float = 5.0


class TimelinePoint(BaseModel):
    period: str
    type: Literal["daily", "weekly", "monthly"]
    index: int
    metrics: PeriodMetrics
    personality_snapshot: TraitSnapshot = Field(..., alias="personalitySnapshot")

    model_config = {"populate_by_name": True}


class TraitReading(BaseModel):
    date: str
    entry_id: Optional[str] = Field(None, alias="entryId")
    score: float
    confidence: float
    context: str = ""
    trend: Literal["increasing", "decreasing", "stable"] = "stable"
    change: float = 0.0

    model_config = {"populate_by_name": True}


class LifeEvent(BaseModel):
    date: str
    entry_id: Optional[str] = Field(None, alias="entryId")
    type: Literal["career", "relationship", "health", "personal_growth"]
    impact: float
    description: str
    personality_impact: TraitSnapshot = Field(..., alias="personalityImpact")

    model_config = {"populate_by_name": True}


class PersonalityInsight(BaseModel):
    type: str
    trait: Optional[str] = None
    message: str
    priority: Literal["high", "medium", "low"]


class GrowthArea(BaseModel):
    trait: str
    current_level: float = Field(..., alias="currentLevel")
    ideal_level: float = Field(..., alias="idealLevel")
    gap: float
    suggestions: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class StabilityMetrics(BaseModel):
    overall_stability: float = Field(1.0, alias="overallStability")
    trait_stability: dict[str, float] = Field(default_factory=dict, alias="traitStability")
    growth_rate: float = Field(0.0, alias="growthRate")
    adaptation_score: float = Field(0.0, alias="adaptationScore")

    model_config = {"populate_by_name": True}


class PersonalityEvolution(BaseModel):
    timeline: list[TimelinePoint] = Field(default_factory=list)
    trait_evolution: dict[str, list[TraitReading]] = Field(default_factory=dict, alias="traitEvolution")
    life_events: list[LifeEvent] = Field(default_factory=list, alias="lifeEvents")
    personality_insights: list[PersonalityInsight] = Field(default_factory=list, alias="personalityInsights")
    growth_areas: list[GrowthArea] = Field(default_factory=list, alias="growthAreas")
    stability_metrics: StabilityMetrics = Field(default_factory=StabilityMetrics, alias="stabilityMetrics")

    model_config = {"populate_by_name": True}
