# personality evolution — big five readings from journal wording over time
# keyword heuristics only; the llm-backed soulmatrix lives in analysis_service.
# entries and check-ins arrive already cut to the requested period.

import logging
import re
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Optional

from journaling_app.models.analytics import (
    GrowthArea,
    LifeEvent,
    PeriodMetrics,
    PersonalityEvolution,
    PersonalityInsight,
    StabilityMetrics,
    TimelinePoint,
    TraitReading,
    TraitSnapshot,
)
from journaling_app.models.wellbeing import BIG_FIVE
from journaling_app.services.insights_service import entry_text, get_mood_score, keyword_sentiment
from journaling_app.services.records import parse_datetime

logger = logging.getLogger(__name__)

GRANULARITIES = ("daily", "weekly", "monthly")

# trait -> (raising words, lowering words, weight per word)
TRAIT_WORDS = {
    "extraversion": (
        ("friend", "party", "social", "meet", "talk", "people", "group", "team"),
        ("alone", "quiet", "solitude", "introvert", "shy"),
        0.5,
    ),
    "neuroticism": (
        ("stress", "anxiety", "worry", "fear", "sad", "angry", "frustrated", "overwhelmed"),
        ("happy", "calm", "peaceful", "relaxed", "content", "satisfied"),
        0.3,
    ),
    "openness": (
        ("explore", "learn", "new", "creative", "imagine", "curious", "adventure", "experience"),
        ("routine", "same", "boring", "predictable", "traditional"),
        0.4,
    ),
    "conscientiousness": (
        ("plan", "organize", "goal", "achieve", "complete", "responsible", "diligent"),
        ("procrastinate", "messy", "forget", "late", "chaos"),
        0.4,
    ),
    "agreeableness": (
        ("help", "kind", "compassionate", "understanding", "forgive", "support"),
        ("conflict", "argue", "angry", "hostile", "critical", "judge"),
        0.4,
    ),
}

# words that pick the sentences quoted back as context
CONTEXT_WORDS = {
    "extraversion": ("friend", "social", "party", "people", "talk", "meet"),
    "neuroticism": ("stress", "anxiety", "worry", "fear", "sad", "angry"),
    "openness": ("explore", "learn", "new", "creative", "imagine", "curious"),
    "conscientiousness": ("plan", "goal", "achieve", "complete", "responsible"),
    "agreeableness": ("help", "kind", "compassionate", "understanding", "support"),
}

THEME_WORDS = {
    "work": ("work", "job"),
    "relationships": ("family", "friend"),
    "health": ("health", "exercise"),
    "finance": ("money", "finance"),
}

# (type, trigger words, impact, description)
LIFE_EVENT_RULES = (
    ("career", ("job", "work", "career"), 0.6, "Career-related event"),
    ("relationship", ("relationship", "marriage", "breakup"), 0.8, "Relationship event"),
    ("health", ("health", "illness", "recovery"), 0.7, "Health-related event"),
    ("personal_growth", ("learn", "grow", "change"), 0.5, "Personal growth event"),
)

EVENT_POSITIVE = ("happy", "good", "great", "wonderful", "amazing", "love", "enjoy")
EVENT_NEGATIVE = ("sad", "bad", "terrible", "awful", "hate", "stress", "anxiety")

# neuroticism is the one trait where lower is healthier
IDEAL_PROFILE = {"openness": 8, "conscientiousness": 7, "extraversion": 7, "agreeableness": 8, "neuroticism": 3}

GROWTH_SUGGESTIONS = {
    "extraversion": [
        "Try joining a social group or club",
        "Practice initiating conversations",
        "Attend social events regularly",
    ],
    "neuroticism": [
        "Practice mindfulness and meditation",
        "Develop stress management techniques",
        "Consider therapy or counseling",
    ],
    "openness": [
        "Try new hobbies or activities",
        "Read diverse books and articles",
        "Travel to new places",
    ],
    "conscientiousness": [
        "Set clear goals and deadlines",
        "Create daily routines and schedules",
        "Practice time management skills",
    ],
    "agreeableness": [
        "Practice active listening",
        "Show empathy in conversations",
        "Volunteer or help others",
    ],
}


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def variance(values: list[float]) -> float:
    """population variance, 0 for an empty list"""
    if not values:
        return 0.0
    mean = _mean(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


def _count(text: str, words: tuple) -> int:
    return sum(1 for w in words if w in text)


def trait_scores(content: str) -> dict[str, float]:
    """1-10 per trait: 5 plus weighted (raising - lowering) keyword hits"""
    lowered = content.lower()
    scores = {}
    for trait, (up, down, weight) in TRAIT_WORDS.items():
        raw = 5 + (_count(lowered, up) - _count(lowered, down)) * weight
        scores[trait] = round(min(10.0, max(1.0, raw)), 2)
    return scores


def reading_confidence(length: int) -> float:
    return min(1.0, max(0.1, length / 1000))


def trait_context(content: str, trait: str) -> str:
    """first two sentences mentioning the trait's words, cut to 200 chars"""
    sentences = [s.strip() for s in re.split(r"[.!?]+", content) if len(s.strip()) > 10]
    words = CONTEXT_WORDS.get(trait, ())
    relevant = [s for s in sentences if any(w in s.lower() for w in words)]
    if not relevant:
        return ""
    return " ".join(relevant[:2])[:200] + "..."


def score_trend(scores: list[float]) -> str:
    if len(scores) < 2:
        return "stable"
    half = len(scores) // 2
    difference = _mean(scores[half:]) - _mean(scores[:half])
    if difference > 0.5:
        return "increasing"
    if difference < -0.5:
        return "decreasing"
    return "stable"


def entry_themes(entries: list[dict]) -> list[str]:
    text = " ".join(entry_text(e) for e in entries).lower()
    return [theme for theme, words in THEME_WORDS.items() if _count(text, words)]


def period_key(day: date, granularity: str) -> date:
    """first day of the bucket a day falls in; weeks start on sunday"""
    if granularity == "weekly":
        return day - timedelta(days=(day.weekday() + 1) % 7)
    if granularity == "monthly":
        return day.replace(day=1)
    return day


def _created(record: dict) -> Optional[datetime]:
    return parse_datetime(record.get("created_at"))


def period_metrics(entries: list[dict], check_ins: list[dict]) -> PeriodMetrics:
    """mood / energy stay none when the bucket has no check-ins"""
    return PeriodMetrics(
        entryCount=len(entries),
        totalWords=sum(len(entry_text(e).split()) for e in entries),
        avgMood=round(_mean([get_mood_score(c.get("mood")) for c in check_ins]), 2) if check_ins else None,
        avgEnergy=round(_mean([c.get("energy") or 0 for c in check_ins]), 2) if check_ins else None,
        themes=entry_themes(entries),
    )


def personality_snapshot(metrics: PeriodMetrics) -> TraitSnapshot:
    mood = metrics.avg_mood if metrics.avg_mood is not None else 5.0
    energy_low = metrics.avg_energy is not None and metrics.avg_energy < 5
    return TraitSnapshot(
        extraversion=round(5 + (mood - 5) * 0.2 + (0.5 if metrics.entry_count > 3 else 0), 2),
        neuroticism=round(5 + (5 - mood) * 0.3 + (0.3 if energy_low else 0), 2),
        openness=round(5 + (0.5 if len(metrics.themes) > 2 else 0) + (0.3 if metrics.total_words > 200 else 0), 2),
        conscientiousness=round(
            5 + (0.4 if metrics.entry_count > 2 else 0) + (0.3 if metrics.total_words > 100 else 0), 2,
        ),
        agreeableness=round(5 + (0.3 if mood > 6 else 0) + (0.4 if "relationships" in metrics.themes else 0), 2),
    )


def _snapshot_mean(snapshot: TraitSnapshot) -> float:
    return _mean([getattr(snapshot, trait) for trait in BIG_FIVE])


def build_timeline(entries: list[dict], check_ins: list[dict], granularity: str) -> list[TimelinePoint]:
    entry_buckets = defaultdict(list)
    for entry in entries:
        created = _created(entry)
        if created:
            entry_buckets[period_key(created.date(), granularity)].append(entry)

    check_in_buckets = defaultdict(list)
    for check_in in check_ins:
        created = _created(check_in)
        if created:
            check_in_buckets[period_key(created.date(), granularity)].append(check_in)

    timeline = []
    for index, start in enumerate(sorted(entry_buckets)):
        metrics = period_metrics(entry_buckets[start], check_in_buckets.get(start, []))
        timeline.append(TimelinePoint(
            period=start.isoformat(),
            type=granularity,
            index=index,
            metrics=metrics,
            personalitySnapshot=personality_snapshot(metrics),
        ))
    return timeline


def trait_evolution(entries: list[dict]) -> dict[str, list[TraitReading]]:
    """one reading per entry and trait, oldest first, with trend and step change"""
    readings = {trait: [] for trait in BIG_FIVE}
    for entry in entries:
        content = entry_text(entry)
        scores = trait_scores(content)
        for trait in BIG_FIVE:
            readings[trait].append(TraitReading(
                date=entry.get("created_at", ""),
                entryId=entry.get("id"),
                score=scores[trait],
                confidence=reading_confidence(len(content)),
                context=trait_context(content, trait),
            ))

    for trait, series in readings.items():
        if len(series) < 2:
            continue
        trend = score_trend([r.score for r in series])
        for i, reading in enumerate(series):
            reading.trend = trend
            reading.change = round(reading.score - series[i - 1].score, 2) if i else 0.0
    return readings


def detect_life_events(content: str) -> list[tuple[str, float, str]]:
    lowered = content.lower()
    return [(kind, impact, description) for kind, words, impact, description in LIFE_EVENT_RULES if _count(lowered, words)]


def personality_impact(kind: str, impact: float, content: str) -> TraitSnapshot:
    """signed trait deltas an event of this kind suggests"""
    negative = keyword_sentiment([content], positive=EVENT_POSITIVE, negative=EVENT_NEGATIVE) == "negative"
    delta = dict.fromkeys(BIG_FIVE, 0.0)
    if kind == "career":
        delta["conscientiousness"] += impact * 0.3
        delta["neuroticism"] += impact * 0.2 if negative else -impact * 0.1
    elif kind == "relationship":
        delta["agreeableness"] += impact * 0.2
        delta["extraversion"] += impact * 0.2
        delta["neuroticism"] += impact * 0.3 if negative else -impact * 0.2
    elif kind == "health":
        delta["neuroticism"] += impact * 0.4 if negative else -impact * 0.2
        delta["conscientiousness"] += impact * 0.2
    elif kind == "personal_growth":
        delta["openness"] += impact * 0.3
        delta["conscientiousness"] += impact * 0.2
    return TraitSnapshot(**{trait: round(value, 3) for trait, value in delta.items()})


def life_events(entries: list[dict]) -> list[LifeEvent]:
    events = []
    for entry in entries:
        content = entry_text(entry)
        for kind, impact, description in detect_life_events(content):
            events.append(LifeEvent(
                date=entry.get("created_at", ""),
                entryId=entry.get("id"),
                type=kind,
                impact=impact,
                description=description,
                personalityImpact=personality_impact(kind, impact, content),
            ))
    return events


def personality_insights(
    evolution: dict[str, list[TraitReading]], timeline: list[TimelinePoint], events: list[LifeEvent],
) -> list[PersonalityInsight]:
    insights = []
    for trait, series in evolution.items():
        # a single reading says nothing about stability
        if len(series) < 2:
            continue
        spread = variance([r.score for r in series])
        if spread > 0.5:
            insights.append(PersonalityInsight(
                type="trait_volatility",
                trait=trait,
                message=f"Your {trait} shows significant variation, suggesting you're adapting to changing circumstances.",
                priority="medium",
            ))
        elif spread < 0.1:
            insights.append(PersonalityInsight(
                type="trait_stability",
                trait=trait,
                message=f"Your {trait} remains remarkably stable, indicating a strong core personality trait.",
                priority="low",
            ))

    rising = falling = 0
    for previous, current in zip(timeline, timeline[1:]):
        before = _snapshot_mean(previous.personality_snapshot)
        after = _snapshot_mean(current.personality_snapshot)
        if after > before:
            rising += 1
        elif after < before:
            falling += 1
    if rising > falling:
        insights.append(PersonalityInsight(
            type="positive_evolution",
            message="Your personality shows positive evolution with increasing emotional maturity and self-awareness.",
            priority="high",
        ))

    significant = [e for e in events if e.impact > 0.7]
    if significant:
        verb = "event has" if len(significant) == 1 else "events have"
        insights.append(PersonalityInsight(
            type="life_event_impact",
            message=f"{len(significant)} significant life {verb} influenced your personality development.",
            priority="medium",
        ))
    return insights


def growth_areas(evolution: dict[str, list[TraitReading]]) -> list[GrowthArea]:
    areas = []
    for trait, series in evolution.items():
        if not series:
            continue
        average = _mean([r.score for r in series])
        ideal = IDEAL_PROFILE[trait]
        gap = average - ideal if trait == "neuroticism" else ideal - average
        if gap > 0.3:
            areas.append(GrowthArea(
                trait=trait,
                currentLevel=round(average, 2),
                idealLevel=ideal,
                gap=round(gap, 2),
                suggestions=GROWTH_SUGGESTIONS[trait],
            ))
    return areas


def stability_metrics(
    evolution: dict[str, list[TraitReading]], timeline: list[TimelinePoint], events: list[LifeEvent],
) -> StabilityMetrics:
    spreads = {trait: variance([r.score for r in series]) for trait, series in evolution.items()}
    growth_rate = 0.0
    if len(timeline) > 1:
        first = _snapshot_mean(timeline[0].personality_snapshot)
        last = _snapshot_mean(timeline[-1].personality_snapshot)
        growth_rate = (last - first) / 10
    significant = [e for e in events if e.impact > 0.5]
    return StabilityMetrics(
        overallStability=round(1 - _mean(list(spreads.values())), 3),
        traitStability={trait: round(1 - spread, 3) for trait, spread in spreads.items()},
        growthRate=round(growth_rate, 3),
        adaptationScore=min(1.0, len(significant) / 10),
    )


def build_personality_evolution(
    entries: list[dict], check_ins: list[dict], granularity: str = "weekly",
) -> PersonalityEvolution:
    """full evolution report; entries may come in any order"""
    if granularity not in GRANULARITIES:
        raise ValueError(f"Unknown granularity: {granularity}")

    dated = sorted((e for e in entries if _created(e)), key=_created)
    timeline = build_timeline(dated, check_ins, granularity)
    evolution = trait_evolution(dated)
    events = life_events(dated)
    logger.info(f"Personality evolution over {len(dated)} entries: {len(timeline)} {granularity} points, {len(events)} life events")
    return PersonalityEvolution(
        timeline=timeline,
        traitEvolution=evolution,
        lifeEvents=events,
        personalityInsights=personality_insights(evolution, timeline, events),
        growthAreas=growth_areas(evolution),
        stabilityMetrics=stability_metrics(evolution, timeline, events),
    )
