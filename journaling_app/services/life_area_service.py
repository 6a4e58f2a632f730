# life area service — keyword analysis of journal entries per wheel-of-life area
# entries are matched by substring keywords; sentiment is a whole-word count
# of positive minus negative words. lists passed in are oldest first.

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Optional

from journaling_app.models.wellbeing import (
    AreaEntry,
    AreaInsight,
    AreaJournalAnalysis,
    AreaStats,
    ProgressPoint,
)
from journaling_app.services.records import parse_datetime, utcnow

logger = logging.getLogger(__name__)

AREA_KEYWORDS = {
    "career": ["work", "job", "career", "profession", "office", "business", "project", "meeting", "colleague",
               "boss", "promotion", "salary", "workplace", "deadline", "presentation"],
    "finances": ["money", "finance", "financial", "budget", "saving", "spending", "expense", "income", "investment",
                 "debt", "credit", "bank", "payment", "cost", "price", "expensive", "cheap"],
    "health": ["health", "fitness", "exercise", "workout", "gym", "running", "diet", "nutrition", "doctor",
               "medical", "sick", "pain", "energy", "sleep", "rest", "wellness", "physical"],
    "relationships": ["friend", "friendship", "relationship", "dating", "romance", "love", "partner", "boyfriend",
                      "girlfriend", "social", "connection", "people", "interaction", "communication", "family"],
    "personal-growth": ["growth", "learning", "development", "skill", "knowledge", "education", "study", "reading",
                        "course", "training", "improvement", "goal", "achievement", "progress"],
    "recreation": ["fun", "hobby", "entertainment", "leisure", "recreation", "game", "movie", "music", "travel",
                   "vacation", "party", "celebration", "enjoyment", "pleasure", "relaxation"],
    "spirituality": ["spiritual", "religion", "faith", "meditation", "prayer", "worship", "belief", "meaning",
                     "purpose", "inner", "soul", "mindfulness", "zen", "peace", "tranquility"],
    "environment": ["home", "house", "apartment", "room", "space", "environment", "surroundings", "neighborhood",
                    "community", "city", "town", "place", "location", "living"],
}

POSITIVE_WORDS = ("happy", "joy", "excited", "great", "wonderful", "amazing", "love", "enjoy", "pleased",
                  "satisfied", "grateful", "blessed", "fulfilled", "accomplished")
NEGATIVE_WORDS = ("sad", "angry", "frustrated", "disappointed", "worried", "anxious", "stressed", "tired",
                  "exhausted", "upset", "depressed", "lonely", "afraid", "scared")


def _text(entry: dict) -> str:
    return entry.get("transcription") or entry.get("content") or ""


def word_sentiment(text: str) -> int:
    """distinct positive words minus distinct negative words, whole words only"""
    words = set(text.lower().split())
    return sum(1 for w in POSITIVE_WORDS if w in words) - sum(1 for w in NEGATIVE_WORDS if w in words)


def related_entries(entries: list[dict], area_id: str) -> list[dict]:
    keywords = AREA_KEYWORDS.get(area_id, [])
    return [e for e in entries if any(k in _text(e).lower() for k in keywords)]


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def most_active_month(entries: list[dict]) -> str:
    months = Counter()
    for e in entries:
        created = parse_datetime(e.get("created_at"))
        if created:
            months[created.strftime("%B %Y")] += 1
    if not months:
        return "No entries"
    return months.most_common(1)[0][0]


def entry_frequency(entries: list[dict], now: Optional[datetime] = None) -> str:
    """how often the area comes up, measured from the oldest related entry"""
    if not entries:
        return "No entries"
    now = now or utcnow()
    first = parse_datetime(entries[0].get("created_at"))
    days = (now - first).total_seconds() / 86400 if first else 0
    rate = len(entries) / days if days > 0 else 0
    if rate >= 1:
        return "Daily"
    if rate >= 0.5:
        return "Every other day"
    if rate >= 0.25:
        return "Weekly"
    if rate >= 0.1:
        return "Monthly"
    return "Occasionally"


def score_trend(scores: list[float]) -> str:
    """average of the newest three scores against the rest: up, down or stable"""
    if len(scores) < 2:
        return "stable"
    recent = scores[-3:]
    earlier = scores[:-3]
    recent_avg = _mean(recent)
    earlier_avg = _mean(earlier) if earlier else recent_avg
    if recent_avg > earlier_avg + 0.5:
        return "up"
    if recent_avg < earlier_avg - 0.5:
        return "down"
    return "stable"


def area_stats(entries: list[dict], area_id: str, now: Optional[datetime] = None) -> AreaStats:
    now = now or utcnow()
    related = related_entries(entries, area_id)
    scores = [word_sentiment(_text(e)) for e in related]
    week_ago = now - timedelta(days=7)
    recent = 0
    for e in related:
        created = parse_datetime(e.get("created_at"))
        if created and created > week_ago:
            recent += 1

    return AreaStats(
        totalEntries=len(related),
        averageSentiment=_mean(scores),
        mostActiveMonth=most_active_month(related),
        entryFrequency=entry_frequency(related, now),
        recentActivity=recent,
        improvementTrend=score_trend(scores),
    )


def all_area_stats(entries: list[dict], now: Optional[datetime] = None) -> dict[str, AreaStats]:
    return {area_id: area_stats(entries, area_id, now) for area_id in AREA_KEYWORDS}


def key_themes(entries: list[dict], area_id: str, limit: int = 5) -> list[str]:
    counts = Counter()
    for e in entries:
        text = _text(e).lower()
        for keyword in AREA_KEYWORDS.get(area_id, []):
            if keyword in text:
                counts[keyword] += 1
    return [word for word, _ in counts.most_common(limit)]


def area_insights(area: dict, related: list[dict], sentiment: float, themes: list[str], now: datetime) -> list[AreaInsight]:
    stamp = now.isoformat()
    name = area.get("name") or area["id"]

    def insight(kind: str, content: str) -> AreaInsight:
        return AreaInsight(type=kind, content=content, source="analysis", date=stamp, lifeAreaId=area["id"])

    if not related:
        return [insight(
            "neutral",
            f"No journal entries found related to {name}. Start journaling about this area to get personalized insights.",
        )]

    insights = []
    if sentiment > 0:
        insights.append(insight("positive", f"You've been feeling positive about {name} recently. Keep up the great work!"))
    elif sentiment < 0:
        insights.append(insight(
            "negative",
            f"You've been experiencing challenges in {name}. Consider focusing on this area for improvement.",
        ))
    if themes:
        insights.append(insight("neutral", f"Key themes in your {name} entries: {', '.join(themes)}"))
    return insights


def area_recommendations(area: dict, sentiment: float, themes: list[str]) -> list[str]:
    name = area.get("name") or area["id"]
    recommendations = []
    if sentiment < 0:
        recommendations.append(f"Focus on positive aspects of {name} in your journaling")
        recommendations.append(f"Set specific goals to improve your {name} satisfaction")
    if themes:
        recommendations.append(f"Explore deeper insights about: {', '.join(themes)}")
    recommendations.append(f"Journal more frequently about {name} for better tracking")
    return recommendations


def progress_history(related: list[dict], sentiment: float, now: datetime, days: int = 7) -> list[ProgressPoint]:
    """one point per day for the last week, nudged by sentiment and that day's entry count"""
    history = []
    for offset in range(days - 1, -1, -1):
        day = (now - timedelta(days=offset)).date()
        count = 0
        for e in related:
            created = parse_datetime(e.get("created_at"))
            if created and created.date() == day:
                count += 1
        score = max(1.0, min(10.0, 5 + sentiment * 0.5 + count * 0.5))
        history.append(ProgressPoint(
            date=day.isoformat(),
            score=round(score),
            notes=f"{count} entries" if count else "No entries",
        ))
    return history


def analyze_area(entries: list[dict], area: dict, now: Optional[datetime] = None) -> dict:
    """journal-derived fields of an area detail view"""
    now = now or utcnow()
    related = related_entries(entries, area["id"])
    scores = [word_sentiment(_text(e)) for e in related]
    sentiment = _mean(scores)
    themes = key_themes(related, area["id"])
    trend = {"up": "improving", "down": "declining"}.get(score_trend(scores), "stable")

    return {
        "insights": area_insights(area, related, sentiment, themes, now),
        "progress_history": progress_history(related, sentiment, now),
        "journal_analysis": AreaJournalAnalysis(
            totalEntries=len(related),
            averageSentiment=sentiment,
            mostActiveMonth=most_active_month(related),
            entryFrequency=entry_frequency(related, now),
        ),
        "related_entries": [
            AreaEntry(
                id=e["id"],
                content=e.get("content") or e.get("transcription") or "",
                date=e.get("created_at"),
                sentiment=word_sentiment(_text(e)),
            )
            for e in reversed(related[-5:])
        ],
        "sentiment_trend": trend,
        "key_themes": themes,
        "recommendations": area_recommendations(area, sentiment, themes),
    }
