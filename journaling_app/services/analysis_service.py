# analysis service — langchain + gemini entity extraction for journal entries
#
# extraction pipeline:
#   1. seven independent prompts run concurrently (sentiment, people, finance,
#      tasks, locations, temporal, life areas)
#   2. each llm answer is parsed as json and validated into the analysis models
#   3. a failed extraction leaves its field unset instead of failing the entry
#   4. entry insights are generated only when every list extraction succeeded
#
# also hosts the aggregate prompts (soulmatrix, wheel of life, recaps,
# insights, nudges) and audio transcription, all on the same gemini model

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Optional

from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_core.messages import HumanMessage
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.output_parsers import JsonOutputParser
from pydantic import BaseModel, ValidationError

from journaling_app.config import settings
from journaling_app.models.analysis import (
    AnalysisResult,
    SentimentAnalysis,
    PeopleMentioned,
    FinanceCue,
    TaskMentioned,
    LocationData,
    TemporalReference,
    LifeAreaAnalysis,
    InsightsData,
)
from journaling_app.models.insights import AIAnalysis, Nudge
from journaling_app.models.wellbeing import (
    DEFAULT_LIFE_AREAS,
    GeneratedRecap,
    SoulMatrixAnalysis,
    WheelOfLifeAssessment,
)

logger = logging.getLogger(__name__)


class AnalysisError(Exception):
    """llm call failed or returned something that is not usable json"""


SYSTEM_MESSAGE = (
    "You are a helpful AI assistant that analyzes journal entries and provides insights. "
    "Always respond with valid JSON only."
)


def _json_prompt(template: str) -> ChatPromptTemplate:
    return ChatPromptTemplate.from_messages([("system", SYSTEM_MESSAGE), ("human", template)])


# entity prompts — literal json braces are doubled for the prompt template

SENTIMENT_PROMPT = _json_prompt("""Analyze the sentiment and emotional content of this journal entry:

JOURNAL ENTRY:
{transcription}

VOICE FEATURES (if voice entry):
{voice_features}

USER'S PERSONALITY PROFILE (SoulMatrix):
{soul_matrix}

TODAY'S CHECK-INS:
{check_ins}

ENTRY TIMESTAMP:
{timestamp}

Return ONLY sentiment analysis in this JSON format:
{{
  "sentiment": {{
    "overall": "positive|negative|neutral",
    "confidence": 0.0-1.0,
    "emotions": ["joy", "sadness", "anger", "fear", "surprise", "disgust"],
    "intensity": 1-10,
    "mood_indicators": ["string"],
    "emotional_tone": "string"
  }}
}}

Focus on emotional patterns, mood shifts, and sentiment accuracy.""")

PEOPLE_PROMPT = _json_prompt("""Extract all people mentioned in this journal entry:

JOURNAL ENTRY:
{transcription}

CONTEXT:
- User's personality: {soul_matrix}
- Entry timestamp: {timestamp}
- Today's check-ins: {check_ins}

Return ONLY people mentioned in this JSON format:
{{
  "people": [
    {{
      "name": "string",
      "relationship": "string",
      "context": "string",
      "sentiment": "positive|negative|neutral",
      "interactionType": "string",
      "confidence": 0.0-1.0,
      "frequency": "first_mention|recurring|frequent"
    }}
  ]
}}

Focus on accuracy. If no people are mentioned, return empty array.""")

FINANCE_PROMPT = _json_prompt("""Extract all financial information from this journal entry:

JOURNAL ENTRY:
{transcription}

Return ONLY financial data in this JSON format:
{{
  "finance": [
    {{
      "amount": "number|null",
      "currency": "string",
      "category": "income|expense|investment|debt",
      "description": "string",
      "context": "string",
      "confidence": 0.0-1.0,
      "type": "transaction|decision|plan|reflection"
    }}
  ]
}}

Focus on monetary amounts, financial decisions, expenses, income, investments, debts. If no financial data, return empty array.""")

TASKS_PROMPT = _json_prompt("""Extract all tasks, to-dos, and action items from this journal entry:

JOURNAL ENTRY:
{transcription}

Return ONLY tasks in this JSON format:
{{
  "tasks": [
    {{
      "description": "string",
      "priority": "high|medium|low",
      "deadline": "YYYY-MM-DD|null",
      "status": "pending|completed|in-progress",
      "category": "string",
      "confidence": 0.0-1.0,
      "complexity": "simple|moderate|complex"
    }}
  ]
}}

Focus on actionable items, deadlines, goals, and completed tasks. If no tasks mentioned, return empty array.""")

LOCATIONS_PROMPT = _json_prompt("""Extract all locations and places mentioned in this journal entry:

JOURNAL ENTRY:
{transcription}

Return ONLY locations in this JSON format:
{{
  "locations": [
    {{
      "name": "string",
      "type": "work|home|travel|leisure|other",
      "context": "string",
      "confidence": 0.0-1.0,
      "significance": "primary|secondary|passing_mention"
    }}
  ]
}}

Focus on physical places, travel destinations, work locations, home references. If no locations mentioned, return empty array.""")

TEMPORAL_PROMPT = _json_prompt("""Extract all date, time, and temporal references from this journal entry:

JOURNAL ENTRY:
{transcription}

ENTRY TIMESTAMP: {timestamp}

Return ONLY temporal data in this JSON format:
{{
  "temporal": [
    {{
      "date": "YYYY-MM-DD|null",
      "time": "HH:MM|null",
      "duration": "string|null",
      "context": "string",
      "confidence": 0.0-1.0,
      "type": "past|present|future|recurring"
    }}
  ]
}}

Focus on dates, times, durations, deadlines, past/future references. If no temporal data, return empty array.""")

LIFE_AREAS_PROMPT = _json_prompt("""Analyze which life areas are relevant to this journal entry:

JOURNAL ENTRY:
{transcription}

USER'S WHEEL OF LIFE PRIORITIES:
{priorities}

Return ONLY life areas analysis in this JSON format:
{{
  "lifeAreas": [
    {{
      "area": "career|relationships|health|finances|personal-growth|recreation|spirituality|environment",
      "relevance": 1-10,
      "sentiment": "positive|negative|neutral",
      "insights": "string",
      "confidence": 0.0-1.0,
      "priority_alignment": "high|medium|low"
    }}
  ]
}}

Focus on life area relevance and alignment with user's priorities.""")

ENTRY_INSIGHTS_PROMPT = _json_prompt("""Generate insights and recommendations based on this journal entry:

JOURNAL ENTRY:
{transcription}

EXTRACTED ENTITIES:
- People: {people}
- Finance: {finance}
- Tasks: {tasks}
- Locations: {locations}
- Temporal: {temporal}
- Life Areas: {life_areas}

USER'S PERSONALITY PROFILE (SoulMatrix):
{soul_matrix}

Return ONLY insights in this JSON format:
{{
  "insights": {{
    "themes": ["string"],
    "patterns": ["string"],
    "recommendations": ["string"],
    "growth_opportunities": ["string"],
    "action_items": ["string"],
    "reflection_points": ["string"]
  }}
}}

Focus on actionable insights and personal growth opportunities.""")

SOUL_MATRIX_PROMPT = _json_prompt("""You are an AI personality analyst updating a user's Big Five personality profile based on their journal entries.

PREVIOUS PERSONALITY PROFILE:
{previous_soul_matrix}

NEW JOURNAL ENTRIES TO ANALYZE:
{new_entries}

TOTAL ENTRIES ANALYZED: {total_entries}

Please analyze the personality evolution and provide an updated Big Five profile in the following JSON format:

{{
  "traits": {{
    "openness": {{"score": 0.0-1.0, "confidence": 0.0-1.0, "description": "string", "trend": "increasing|decreasing|stable"}},
    "conscientiousness": {{"score": 0.0-1.0, "confidence": 0.0-1.0, "description": "string", "trend": "increasing|decreasing|stable"}},
    "extraversion": {{"score": 0.0-1.0, "confidence": 0.0-1.0, "description": "string", "trend": "increasing|decreasing|stable"}},
    "agreeableness": {{"score": 0.0-1.0, "confidence": 0.0-1.0, "description": "string", "trend": "increasing|decreasing|stable"}},
    "neuroticism": {{"score": 0.0-1.0, "confidence": 0.0-1.0, "description": "string", "trend": "increasing|decreasing|stable"}}
  }},
  "evolution": {{
    "overall_change": "string",
    "key_insights": ["string"],
    "life_events_correlation": ["string"],
    "personality_stability": "high|medium|low"
  }},
  "confidence": 0.0-1.0
}}

Consider the user's writing style, emotional patterns, social interactions, and life experiences when updating the personality profile.""")

WHEEL_ASSESSMENT_PROMPT = _json_prompt("""You are an AI life coach conducting an initial Wheel of Life assessment for a new user.

USER'S PERSONALITY PROFILE (SoulMatrix):
{soul_matrix}

AVAILABLE LIFE AREAS:
{life_areas}

Please conduct a comprehensive Wheel of Life assessment and return the results in this JSON format:

{{
  "assessment": {{
    "overall_satisfaction": 1-10,
    "life_balance_score": 1-10,
    "areas_of_strength": ["area_id"],
    "areas_for_improvement": ["area_id"],
    "priority_recommendations": ["area_id"]
  }},
  "life_areas": [
    {{
      "id": "string",
      "current_score": 1-10,
      "target_score": 1-10,
      "confidence": 0.0-1.0,
      "reasoning": "string",
      "key_insights": ["string"],
      "immediate_goals": ["string"],
      "long_term_vision": "string"
    }}
  ],
  "recommendations": {{
    "focus_areas": ["area_id"],
    "quick_wins": ["string"],
    "long_term_strategies": ["string"],
    "balance_improvements": ["string"]
  }}
}}

Focus on creating a balanced, realistic assessment that encourages growth while being achievable.""")

RECAP_PROMPT = _json_prompt("""You are an AI life coach creating a personalized {period_type} recap for a user based on their journal entries and data.

RECAP PERIOD: {period_type} ({start_date} to {end_date})

JOURNAL ENTRIES:
{journal_entries}

CHECK-INS DATA:
{check_ins}

PEOPLE MENTIONED:
{people}

FINANCE DATA:
{finance}

TASKS DATA:
{tasks}

CURRENT PERSONALITY PROFILE:
{soul_matrix}

WHEEL OF LIFE PRIORITIES:
{priorities}

Please create an engaging, story-format recap in the following JSON format:

{{
  "story": {{
    "title": "string",
    "narrative": "string (engaging story format)",
    "highlights": ["string"],
    "challenges": ["string"],
    "achievements": ["string"]
  }},
  "insights": {{
    "emotional_trends": "string",
    "relationship_insights": "string",
    "financial_insights": "string",
    "productivity_insights": "string",
    "personal_growth": "string"
  }},
  "recommendations": {{
    "immediate_actions": ["string"],
    "long_term_goals": ["string"],
    "habit_suggestions": ["string"],
    "life_balance_tips": ["string"]
  }},
  "life_area_improvements": [
    {{
      "area": "career|relationships|health|finances|personal-growth|recreation|spirituality|environment",
      "current_status": "string",
      "suggested_actions": ["string"],
      "priority": "high|medium|low"
    }}
  ]
}}

Make the recap engaging, practical, and actionable while maintaining a warm, encouraging tone. Focus on growth opportunities and celebrate achievements.""")

AGGREGATE_INSIGHTS_PROMPT = _json_prompt("""Analyze this user's comprehensive personal data and provide deep, actionable insights. Focus on:

1. Emotional patterns and triggers
2. Behavioral trends and habits
3. Relationship dynamics and social patterns
4. Goal achievement patterns and barriers
5. Life balance and priorities
6. Growth opportunities and potential challenges
7. Specific, actionable recommendations

{data_summary}

Provide insights in JSON format with the following structure:
{{
  "emotionalInsights": [{{"title": "", "message": "", "confidence": 0.0-1.0, "impact": "high|medium|low"}}],
  "behavioralInsights": [{{"title": "", "message": "", "confidence": 0.0-1.0, "impact": "high|medium|low"}}],
  "relationshipInsights": [{{"title": "", "message": "", "confidence": 0.0-1.0, "impact": "high|medium|low"}}],
  "goalInsights": [{{"title": "", "message": "", "confidence": 0.0-1.0, "impact": "high|medium|low"}}],
  "lifeBalanceInsights": [{{"title": "", "message": "", "confidence": 0.0-1.0, "impact": "high|medium|low"}}],
  "growthOpportunities": [{{"title": "", "description": "", "steps": [], "expectedOutcome": "", "difficulty": "easy|medium|hard"}}],
  "predictiveInsights": [{{"title": "", "prediction": "", "confidence": 0.0-1.0, "timeframe": "", "probability": "high|medium|low"}}],
  "actionableRecommendations": [{{"title": "", "description": "", "priority": "high|medium|low", "steps": [], "expectedOutcome": ""}}]
}}""")

LIFE_AREA_NUDGES_PROMPT = _json_prompt("""Generate intelligent life area improvement nudges based on this user's data. Focus on:

1. Areas needing attention based on low scores or patterns
2. Opportunities for growth and improvement
3. Specific, actionable recommendations
4. Timing and frequency considerations
5. Personalization based on user patterns

{data_summary}

Generate nudges in JSON format with the following structure:
{{
  "nudges": [
    {{
      "id": "unique-id",
      "type": "wellness|goals|relationships|finance|life-balance|productivity",
      "category": "emotional|physical|social|financial|professional|personal",
      "title": "Nudge title",
      "message": "Detailed message explaining the nudge",
      "priority": "high|medium|low",
      "actionable": true,
      "actions": [{{"label": "Action description", "impact": "high|medium|low"}}],
      "timing": "now|today|this-week|this-month",
      "frequency": "once|daily|weekly|monthly",
      "lifeArea": "specific-life-area",
      "confidence": 0.0-1.0,
      "expectedOutcome": "What will happen if followed"
    }}
  ]
}}

Focus on creating nudges that are specific, actionable, timely and personalized to the user's patterns.""")

TRANSCRIPTION_INSTRUCTION = (
    "Transcribe this voice journal recording word for word. "
    "Return only the transcript text with no commentary or formatting."
)

PROMPTS: dict[str, ChatPromptTemplate] = {
    "sentiment": SENTIMENT_PROMPT,
    "people": PEOPLE_PROMPT,
    "finance": FINANCE_PROMPT,
    "tasks": TASKS_PROMPT,
    "locations": LOCATIONS_PROMPT,
    "temporal": TEMPORAL_PROMPT,
    "life_areas": LIFE_AREAS_PROMPT,
    "entry_insights": ENTRY_INSIGHTS_PROMPT,
    "soul_matrix": SOUL_MATRIX_PROMPT,
    "wheel_assessment": WHEEL_ASSESSMENT_PROMPT,
    "recap": RECAP_PROMPT,
    "aggregate_insights": AGGREGATE_INSIGHTS_PROMPT,
    "life_area_nudges": LIFE_AREA_NUDGES_PROMPT,
}

# one cached chain per prompt
_chains: dict = {}
_llm: Optional[ChatGoogleGenerativeAI] = None


def get_llm() -> ChatGoogleGenerativeAI:
    """get or create the gemini llm shared by every chain"""
    global _llm
    if _llm is None:
        logger.info(f"Initialising Gemini model: {settings.GEMINI_MODEL}")
        _llm = ChatGoogleGenerativeAI(
            model=settings.GEMINI_MODEL,
            google_api_key=settings.GEMINI_API_KEY,
            temperature=settings.LLM_TEMPERATURE,
            max_output_tokens=settings.LLM_MAX_OUTPUT_TOKENS,
        )
    return _llm


def get_chain(name: str):
    """get or create the prompt | llm | json chain for a named prompt"""
    if name not in _chains:
        _chains[name] = PROMPTS[name] | get_llm() | JsonOutputParser()
    return _chains[name]


async def _invoke_json(name: str, variables: dict) -> Any:
    """run a named prompt and return the parsed json (dict or list)"""
    try:
        result = await get_chain(name).ainvoke(variables)
    except Exception as e:
        logger.error(f"LLM call '{name}' failed: {e}")
        raise AnalysisError(f"{name} request failed: {e}") from e
    if not isinstance(result, (dict, list)):
        raise AnalysisError(f"{name} returned non-json output")
    return result


def _dump(value: Any, empty: str = "N/A") -> str:
    if value is None:
        return empty
    if isinstance(value, BaseModel):
        value = value.model_dump(by_alias=True)
    return json.dumps(value, default=str)


def _stamp(timestamp: Optional[datetime]) -> str:
    return timestamp.isoformat() if timestamp else "N/A"


def _section(payload: Any, key: str) -> Any:
    """unwrap {"key": ...} answers; bare answers pass through"""
    if isinstance(payload, dict) and key in payload:
        return payload[key]
    return payload


def _validate_items(model: type[BaseModel], items: Any, label: str) -> list:
    """validate a list of llm items, dropping the ones that cannot be salvaged"""
    if isinstance(items, dict):
        items = [items]
    if not isinstance(items, list):
        return []
    valid = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            valid.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Dropping invalid {label} item: {e.error_count()} error(s)")
    return valid


# individual entity extraction

async def analyze_sentiment(
    transcription: str,
    voice_features: Optional[dict] = None,
    soul_matrix: Optional[dict] = None,
    check_ins: Optional[list] = None,
    timestamp: Optional[datetime] = None,
) -> SentimentAnalysis:
    result = await _invoke_json("sentiment", {
        "transcription": transcription,
        "voice_features": _dump(voice_features),
        "soul_matrix": _dump(soul_matrix),
        "check_ins": _dump(check_ins, "[]"),
        "timestamp": _stamp(timestamp),
    })
    section = _section(result, "sentiment")
    if not isinstance(section, dict):
        raise AnalysisError("sentiment answer is not an object")
    return SentimentAnalysis.model_validate(section)


async def extract_people(
    transcription: str,
    soul_matrix: Optional[dict] = None,
    check_ins: Optional[list] = None,
    timestamp: Optional[datetime] = None,
) -> list[PeopleMentioned]:
    result = await _invoke_json("people", {
        "transcription": transcription,
        "soul_matrix": _dump(soul_matrix),
        "check_ins": _dump(check_ins, "[]"),
        "timestamp": _stamp(timestamp),
    })
    return _validate_items(PeopleMentioned, _section(result, "people"), "people")


async def extract_finance(transcription: str) -> list[FinanceCue]:
    result = await _invoke_json("finance", {"transcription": transcription})
    return _validate_items(FinanceCue, _section(result, "finance"), "finance")


async def extract_tasks(transcription: str) -> list[TaskMentioned]:
    result = await _invoke_json("tasks", {"transcription": transcription})
    return _validate_items(TaskMentioned, _section(result, "tasks"), "tasks")


async def extract_locations(transcription: str) -> list[LocationData]:
    result = await _invoke_json("locations", {"transcription": transcription})
    return _validate_items(LocationData, _section(result, "locations"), "locations")


async def extract_temporal(transcription: str, timestamp: Optional[datetime] = None) -> list[TemporalReference]:
    result = await _invoke_json("temporal", {"transcription": transcription, "timestamp": _stamp(timestamp)})
    return _validate_items(TemporalReference, _section(result, "temporal"), "temporal")


async def analyze_life_areas(transcription: str, priorities: Optional[list[str]] = None) -> list[LifeAreaAnalysis]:
    result = await _invoke_json("life_areas", {
        "transcription": transcription,
        "priorities": _dump(priorities, "[]"),
    })
    if isinstance(result, dict) and "life_areas" in result and "lifeAreas" not in result:
        result = result["life_areas"]
    return _validate_items(LifeAreaAnalysis, _section(result, "lifeAreas"), "life area")


async def generate_entry_insights(transcription: str, entities: dict, soul_matrix: Optional[dict] = None) -> InsightsData:
    """themes / patterns / recommendations for one entry, given its extracted entities"""
    def dump_list(items):
        return _dump([i.model_dump(by_alias=True) for i in items or []], "[]")

    result = await _invoke_json("entry_insights", {
        "transcription": transcription,
        "people": dump_list(entities.get("people")),
        "finance": dump_list(entities.get("finance")),
        "tasks": dump_list(entities.get("tasks")),
        "locations": dump_list(entities.get("locations")),
        "temporal": dump_list(entities.get("temporal")),
        "life_areas": dump_list(entities.get("life_areas")),
        "soul_matrix": _dump(soul_matrix),
    })
    section = _section(result, "insights")
    if not isinstance(section, dict):
        raise AnalysisError("insights answer is not an object")
    return InsightsData.model_validate(section)


# list-valued extractions that must all succeed before entry insights run
LIST_ENTITIES = ("people", "finance", "tasks", "locations", "temporal", "life_areas")


async def extract_all_entities(
    transcription: str,
    voice_features: Optional[dict] = None,
    soul_matrix: Optional[dict] = None,
    check_ins: Optional[list] = None,
    timestamp: Optional[datetime] = None,
    priorities: Optional[list[str]] = None,
) -> AnalysisResult:
    """run every extraction concurrently; failed ones stay unset"""
    jobs = {
        "sentiment": analyze_sentiment(transcription, voice_features, soul_matrix, check_ins, timestamp),
        "people": extract_people(transcription, soul_matrix, check_ins, timestamp),
        "finance": extract_finance(transcription),
        "tasks": extract_tasks(transcription),
        "locations": extract_locations(transcription),
        "temporal": extract_temporal(transcription, timestamp),
        "life_areas": analyze_life_areas(transcription, priorities),
    }
    outcomes = await asyncio.gather(*jobs.values(), return_exceptions=True)

    extracted: dict[str, Any] = {}
    for entity, outcome in zip(jobs.keys(), outcomes):
        if isinstance(outcome, Exception):
            logger.warning(f"Failed to extract {entity}: {outcome}")
            continue
        extracted[entity] = outcome

    if all(entity in extracted for entity in LIST_ENTITIES):
        try:
            extracted["insights"] = await generate_entry_insights(transcription, extracted, soul_matrix)
        except (AnalysisError, ValidationError) as e:
            logger.warning(f"Failed to generate entry insights: {e}")

    logger.info(f"Entity extraction finished: {sorted(extracted.keys())}")
    return AnalysisResult(**extracted)


_RETRYABLE = {
    "sentiment": analyze_sentiment,
    "people": extract_people,
    "finance": extract_finance,
    "tasks": extract_tasks,
    "locations": extract_locations,
    "temporal": extract_temporal,
    "lifeAreas": analyze_life_areas,
    "life_areas": analyze_life_areas,
}


async def retry_entity_extraction(entity: str, transcription: str, max_retries: Optional[int] = None):
    """retry a single extraction with exponential backoff (base, 2x base, 4x base ... seconds)"""
    extractor = _RETRYABLE.get(entity)
    if extractor is None:
        raise AnalysisError(f"Unknown entity type: {entity}")

    attempts = settings.ANALYSIS_MAX_RETRIES if max_retries is None else max_retries
    if attempts < 1:
        raise ValueError("max_retries must be at least 1")

    for attempt in range(1, attempts + 1):
        try:
            return await extractor(transcription)
        except (AnalysisError, ValidationError) as e:
            if attempt == attempts:
                raise AnalysisError(f"Failed to extract {entity} after {attempts} attempts: {e}") from e
            logger.warning(f"Extraction of {entity} failed (attempt {attempt}/{attempts}), retrying")
            await asyncio.sleep(settings.ANALYSIS_RETRY_BASE_SECONDS * 2 ** (attempt - 1))


# aggregate prompts

async def analyze_soul_matrix(previous: dict, new_entries: list[str], total_entries: int) -> SoulMatrixAnalysis:
    result = await _invoke_json("soul_matrix", {
        "previous_soul_matrix": _dump(previous),
        "new_entries": _dump(new_entries, "[]"),
        "total_entries": str(total_entries),
    })
    if not isinstance(result, dict):
        raise AnalysisError("soulmatrix answer is not an object")
    try:
        return SoulMatrixAnalysis.model_validate(result)
    except ValidationError as e:
        raise AnalysisError(f"soulmatrix answer failed validation: {e}") from e


async def assess_wheel_of_life(soul_matrix: Optional[dict] = None) -> WheelOfLifeAssessment:
    result = await _invoke_json("wheel_assessment", {
        "soul_matrix": _dump(soul_matrix),
        "life_areas": _dump(DEFAULT_LIFE_AREAS),
    })
    if not isinstance(result, dict):
        raise AnalysisError("wheel of life answer is not an object")
    try:
        return WheelOfLifeAssessment.model_validate(result)
    except ValidationError as e:
        raise AnalysisError(f"wheel of life answer failed validation: {e}") from e


async def generate_recap(data: dict) -> GeneratedRecap:
    """story-format recap; data holds the period bounds and pre-rendered text blocks"""
    result = await _invoke_json("recap", {
        "period_type": data["period_type"],
        "start_date": data["start_date"],
        "end_date": data["end_date"],
        "journal_entries": "\n\n".join(data.get("journal_entries", [])) or "No entries",
        "check_ins": "\n".join(data.get("check_ins", [])) or "No check-ins",
        "people": "\n".join(data.get("people", [])) or "No people mentioned",
        "finance": "\n".join(data.get("finance", [])) or "No finance entries",
        "tasks": "\n".join(data.get("tasks", [])) or "No tasks",
        "soul_matrix": _dump(data.get("soul_matrix")),
        "priorities": _dump(data.get("priorities"), "[]"),
    })
    if not isinstance(result, dict):
        raise AnalysisError("recap answer is not an object")
    try:
        return GeneratedRecap.model_validate(result)
    except ValidationError as e:
        raise AnalysisError(f"recap answer failed validation: {e}") from e


def _entry_text(entry: dict) -> str:
    return entry.get("content") or entry.get("transcription") or ""


def build_data_summary(data: dict, sample_entries: int = 3, sample_check_ins: int = 5) -> str:
    """compact text view of a user's records for the aggregate prompts"""
    entries = data.get("journal_entries", [])
    check_ins = data.get("check_ins", [])
    goals = data.get("goals", [])
    lines = [
        "DATA:",
        f"Journal Entries: {len(entries)} entries",
        f"Check-ins: {len(check_ins)} entries",
        f"Goals: {len(goals)} goals",
        f"People: {len(data.get('people', []))} relationships",
        f"Finance: {len(data.get('finance_entries', []))} entries",
        f"Tasks: {len(data.get('tasks', []))} tasks",
        "",
        "SAMPLE JOURNAL CONTENT:",
        "\n\n".join(_entry_text(e) for e in entries[:sample_entries]),
        "",
        "CHECK-IN PATTERNS:",
        "\n".join(
            f"Mood: {c.get('mood')}, Energy: {c.get('energy')}, Sleep: {c.get('sleep_hours', 0)}h"
            for c in check_ins[:sample_check_ins]
        ),
        "",
        "GOAL STATUS:",
        "\n".join(f"{g.get('title')}: {g.get('status')} ({g.get('progress', 0)}%)" for g in goals),
        "",
        "PERSONALITY PROFILE:",
        json.dumps(data["soul_matrix"], indent=2, default=str) if data.get("soul_matrix") else "Not available",
        "",
        "LIFE AREAS:",
        json.dumps(data["wheel_of_life"], indent=2, default=str) if data.get("wheel_of_life") else "Not available",
    ]
    return "\n".join(lines)


async def analyze_with_ai(data: dict) -> AIAnalysis:
    """eight ai insight lists; any failure yields all-empty lists"""
    try:
        result = await _invoke_json("aggregate_insights", {"data_summary": build_data_summary(data)})
        if not isinstance(result, dict):
            raise AnalysisError("aggregate insights answer is not an object")
        return AIAnalysis.model_validate(result)
    except (AnalysisError, ValidationError) as e:
        logger.error(f"AI insight analysis failed, using empty insights: {e}")
        return AIAnalysis()


async def generate_life_area_nudges(data: dict) -> list[Nudge]:
    try:
        result = await _invoke_json("life_area_nudges", {
            "data_summary": build_data_summary(data, sample_entries=2, sample_check_ins=3),
        })
    except AnalysisError as e:
        logger.error(f"Life area nudge generation failed: {e}")
        return []

    items = _section(result, "nudges")
    if not isinstance(items, list):
        return []
    stamp = int(datetime.now().timestamp() * 1000)
    for i, item in enumerate(items):
        if isinstance(item, dict) and not item.get("id"):
            item["id"] = f"ai-{i}-{stamp}"
    return _validate_items(Nudge, items, "nudge")


async def transcribe_audio(audio_b64: str, mime_type: str) -> str:
    """send base64 audio to gemini as a media block and return the transcript"""
    message = HumanMessage(content=[
        {"type": "text", "text": TRANSCRIPTION_INSTRUCTION},
        {"type": "media", "mime_type": mime_type, "data": audio_b64},
    ])
    try:
        response = await get_llm().ainvoke([message])
    except Exception as e:
        logger.error(f"Transcription request failed: {e}")
        raise AnalysisError(f"transcription failed: {e}") from e

    text = response.content if isinstance(response.content, str) else " ".join(
        part.get("text", "") for part in response.content if isinstance(part, dict)
    )
    text = text.strip()
    if not text:
        raise AnalysisError("transcription returned no text")
    return text
