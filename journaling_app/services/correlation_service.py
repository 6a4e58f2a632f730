# correlation service — joins check-ins with journaling behaviour
# check-ins are grouped per calendar day (utc); entries are matched to the same
# day (mood, energy, content) or to the previous day (sleep)

import logging
from collections import Counter, defaultdict
from datetime import date, timedelta

from journaling_app.models.analytics import (
    CorrelationAnalysis,
    CorrelationInsight,
    ContentFlags,
    ContentPattern,
    EnergyCorrelation,
    EnergyPattern,
    EnergyRange,
    MoodCorrelation,
    MoodPattern,
    SleepCorrelation,
    SleepPattern,
    WeeklyMetrics,
    WeeklyTrend,
)
from journaling_app.services.insights_service import entry_text, get_mood_score, sleep_total
from journaling_app.services.records import parse_datetime

logger = logging.getLogger(__name__)

ANALYSIS_TYPES = ("all", "mood", "energy", "sleep", "content")

CONTENT_POSITIVE = ("happy", "good", "great", "excellent", "wonderful", "amazing", "love", "enjoy")
CONTENT_NEGATIVE = ("sad", "bad", "terrible", "awful", "hate", "stress", "anxiety", "worried")
CONTENT_THEMES = {
    "work": ("work", "job", "project"),
    "relationships": ("family", "friend", "relationship"),
    "health": ("health", "exercise", "diet"),
    "finance": ("money", "finance", "budget"),
}


def _day(record: dict):
    created = parse_datetime(record.get("created_at"))
    return created.date() if created else None


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _by_day(check_ins: list[dict]) -> dict[date, list[dict]]:
    days = defaultdict(list)
    for c in check_ins:
        day = _day(c)
        if day:
            days[day].append(c)
    return days


def mood_writing_pattern(mood: float, length: int) -> str:
    if mood > 7 and length > 500:
        return "high_mood_long_writing"
    if mood < 4 and length < 200:
        return "low_mood_short_writing"
    if mood > 7 and length < 200:
        return "high_mood_concise"
    if mood < 4 and length > 500:
        return "low_mood_detailed"
    return "balanced"


def energy_writing_pattern(energy: float, length: int) -> str:
    if energy > 7 and length > 500:
        return "high_energy_detailed"
    if energy < 4 and length < 200:
        return "low_energy_brief"
    if energy > 7 and length < 200:
        return "high_energy_focused"
    if energy < 4 and length > 500:
        return "low_energy_rambling"
    return "balanced"


def sleep_quality(hours: float) -> str:
    if hours >= 8:
        return "excellent"
    if hours >= 7:
        return "good"
    if hours >= 6:
        return "fair"
    return "poor"


def sleep_writing_pattern(sleep: float, length: int, hour: int) -> str:
    if sleep >= 7 and length > 400:
        return "well_rested_detailed"
    if sleep < 6 and length < 200:
        return "tired_brief"
    if sleep >= 7 and hour < 12:
        return "well_rested_morning"
    if sleep < 6 and hour > 22:
        return "tired_late_night"
    return "balanced"


def content_sentiment(text: str) -> str:
    lowered = text.lower()
    pos = sum(1 for w in CONTENT_POSITIVE if w in lowered)
    neg = sum(1 for w in CONTENT_NEGATIVE if w in lowered)
    if pos > neg:
        return "positive"
    if neg > pos:
        return "negative"
    return "neutral"


def content_themes(text: str) -> list[str]:
    lowered = text.lower()
    return [theme for theme, words in CONTENT_THEMES.items() if any(w in lowered for w in words)]


def _dominant_mood(moods: list[str]) -> str:
    if not moods:
        return "😐"
    return Counter(moods).most_common(1)[0][0]


def mood_correlations(entries: list[dict], check_ins: list[dict]) -> list[MoodCorrelation]:
    days = _by_day(check_ins)
    results = []
    for entry in entries:
        day = _day(entry)
        rows = days.get(day)
        if not rows:
            continue
        mood = _mean([get_mood_score(c.get("mood")) for c in rows])
        length = len(entry_text(entry))
        results.append(MoodCorrelation(
            date=day.isoformat(),
            mood=round(mood, 2),
            dominantMood=_dominant_mood([c.get("mood") for c in rows if c.get("mood")]),
            entryLength=length,
            hasAnalysis=entry.get("processing_status") in ("analyzed", "completed"),
            correlation=MoodPattern(
                highMoodLongEntries=mood > 7 and length > 500,
                lowMoodShortEntries=mood < 4 and length < 200,
                moodWritingPattern=mood_writing_pattern(mood, length),
            ),
        ))
    return results


def energy_correlations(entries: list[dict], check_ins: list[dict]) -> list[EnergyCorrelation]:
    days = _by_day(check_ins)
    results = []
    for entry in entries:
        day = _day(entry)
        rows = days.get(day)
        if not rows:
            continue
        energies = [c.get("energy") or 0 for c in rows]
        energy = _mean(energies)
        length = len(entry_text(entry))
        processing = entry.get("processing_type")
        results.append(EnergyCorrelation(
            date=day.isoformat(),
            energy=round(energy, 2),
            energyRange=EnergyRange(min=min(energies), max=max(energies)),
            entryLength=length,
            processingType=processing,
            correlation=EnergyPattern(
                highEnergyFullAnalysis=energy > 7 and processing == "full-analysis",
                lowEnergyBasicProcessing=energy < 4 and processing == "transcribe-only",
                energyWritingPattern=energy_writing_pattern(energy, length),
            ),
        ))
    return results


def sleep_correlations(entries: list[dict], check_ins: list[dict]) -> list[SleepCorrelation]:
    """sleep logged the day before an entry against how that entry was written"""
    days = _by_day(check_ins)
    results = []
    for entry in entries:
        created = parse_datetime(entry.get("created_at"))
        if created is None:
            continue
        rows = days.get(created.date() - timedelta(days=1))
        if not rows:
            continue
        sleep = _mean([sleep_total(c) for c in rows])
        length = len(entry_text(entry))
        results.append(SleepCorrelation(
            date=created.date().isoformat(),
            previousDaySleep=round(sleep, 2),
            sleepQuality=sleep_quality(sleep),
            entryLength=length,
            entryTime=created.hour,
            correlation=SleepPattern(
                goodSleepLongEntries=sleep >= 7 and length > 400,
                poorSleepShortEntries=sleep < 6 and length < 200,
                sleepWritingPattern=sleep_writing_pattern(sleep, length, created.hour),
            ),
        ))
    return results


def content_patterns(entries: list[dict], check_ins: list[dict]) -> list[ContentPattern]:
    days = _by_day(check_ins)
    results = []
    for entry in entries:
        day = _day(entry)
        rows = days.get(day)
        if not rows:
            continue
        text = entry_text(entry)
        lowered = text.lower()
        results.append(ContentPattern(
            date=day.isoformat(),
            contentLength=len(text),
            wordCount=len(text.split()),
            sentiment=content_sentiment(text),
            themes=content_themes(text),
            mood=round(_mean([get_mood_score(c.get("mood")) for c in rows]), 2),
            energy=round(_mean([c.get("energy") or 0 for c in rows]), 2),
            patterns=ContentFlags(
                positiveContent=any(w in lowered for w in ("happy", "good", "great")),
                negativeContent=any(w in lowered for w in ("sad", "bad", "stress")),
                workContent=any(w in lowered for w in CONTENT_THEMES["work"]),
                personalContent=any(w in lowered for w in CONTENT_THEMES["relationships"]),
            ),
        ))
    return results


def week_start(day: date) -> date:
    """sunday that opens the week containing `day`"""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def weekly_trends(entries: list[dict], check_ins: list[dict]) -> list[WeeklyTrend]:
    """weeks are opened by check-ins; entries only count toward weeks that have one"""
    weeks = {}
    for c in check_ins:
        day = _day(c)
        if day is None:
            continue
        week = weeks.setdefault(week_start(day), {"moods": [], "energies": [], "sleep": [], "lengths": []})
        week["moods"].append(get_mood_score(c.get("mood")))
        week["energies"].append(c.get("energy") or 0)
        week["sleep"].append(sleep_total(c))

    for entry in entries:
        day = _day(entry)
        if day is not None and week_start(day) in weeks:
            weeks[week_start(day)]["lengths"].append(len(entry_text(entry)))

    trends = []
    previous_mood = None
    for start in sorted(weeks):
        week = weeks[start]
        mood = _mean(week["moods"])
        if previous_mood is None or abs(mood - previous_mood) <= 0.5:
            direction = "stable"
        else:
            direction = "improving" if mood > previous_mood else "declining"
        previous_mood = mood
        trends.append(WeeklyTrend(
            period=start.isoformat(),
            metrics=WeeklyMetrics(
                averageMood=round(mood, 2),
                averageEnergy=round(_mean(week["energies"]), 2),
                averageSleep=round(_mean(week["sleep"]), 2),
                journalFrequency=len(week["lengths"]),
                averageEntryLength=round(_mean(week["lengths"]), 1),
                trend=direction,
            ),
        ))
    return trends


def summary_insights(analysis: CorrelationAnalysis) -> list[CorrelationInsight]:
    insights = []

    high_mood = sum(1 for c in analysis.mood_correlations if c.mood > 7)
    low_mood = sum(1 for c in analysis.mood_correlations if c.mood < 4)
    if high_mood > low_mood:
        insights.append(CorrelationInsight(
            type="mood_trend",
            title="Positive Mood Trend",
            message=f"You've had {high_mood} high-mood days vs {low_mood} low-mood days. Your overall mood trend is positive.",
            priority="low",
        ))
    elif low_mood > high_mood:
        insights.append(CorrelationInsight(
            type="mood_trend",
            title="Mood Improvement Opportunity",
            message=f"You've had {low_mood} low-mood days vs {high_mood} high-mood days. Consider activities that boost your mood.",
            priority="high",
        ))

    high_energy = sum(1 for c in analysis.energy_correlations if c.energy > 7)
    low_energy = sum(1 for c in analysis.energy_correlations if c.energy < 4)
    if high_energy > low_energy:
        insights.append(CorrelationInsight(
            type="energy_trend",
            title="Good Energy Levels",
            message=f"You tend to journal more when your energy is high ({high_energy} vs {low_energy} low-energy entries).",
            priority="low",
        ))

    good_sleep = sum(1 for c in analysis.sleep_correlations if c.previous_day_sleep >= 7)
    poor_sleep = sum(1 for c in analysis.sleep_correlations if c.previous_day_sleep < 6)
    if poor_sleep > good_sleep:
        insights.append(CorrelationInsight(
            type="sleep_trend",
            title="Sleep Quality Impact",
            message=f"Poor sleep ({poor_sleep} days) seems to affect your journaling more than good sleep ({good_sleep} days).",
            priority="medium",
        ))
    return insights


def analyze_correlations(entries: list[dict], check_ins: list[dict], analysis_type: str = "all") -> CorrelationAnalysis:
    wanted = analysis_type if analysis_type in ANALYSIS_TYPES else "all"
    analysis = CorrelationAnalysis()
    if wanted in ("all", "mood"):
        analysis.mood_correlations = mood_correlations(entries, check_ins)
    if wanted in ("all", "energy"):
        analysis.energy_correlations = energy_correlations(entries, check_ins)
    if wanted in ("all", "sleep"):
        analysis.sleep_correlations = sleep_correlations(entries, check_ins)
    if wanted in ("all", "content"):
        analysis.content_patterns = content_patterns(entries, check_ins)
    analysis.trends = weekly_trends(entries, check_ins)
    analysis.insights = summary_insights(analysis)
    return analysis
