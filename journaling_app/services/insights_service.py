# insights service — rule-based insights and nudges over a user's records
# combined with the ai lists from analysis_service. records are raw
# mongodb documents (snake_case), newest first.

import logging
from datetime import datetime
from typing import Any, Optional

from journaling_app.models.insights import AIAnalysis, EnhancedInsights, Insight, Nudge, NudgeSummary, NudgesResponse
from journaling_app.services import analysis_service
from journaling_app.services.db import Database
from journaling_app.services.records import clean_doc, load_json, parse_datetime, utcnow

logger = logging.getLogger(__name__)

MOOD_SCORES = {
    "😊": 9, "🙂": 7, "😐": 5, "😞": 3, "😢": 1,
    "😡": 2, "😴": 4, "🤔": 6, "😌": 8, "😤": 4,
}

# keyword sentiment used for people enrichment
PEOPLE_POSITIVE_WORDS = ("love", "great", "amazing", "wonderful", "happy", "excited", "grateful")
PEOPLE_NEGATIVE_WORDS = ("angry", "sad", "frustrated", "disappointed", "upset", "worried")

# order in which rule groups feed the priority list
INSIGHT_GROUPS = ("life_areas", "goals", "wellness", "relationships", "finance", "productivity", "personality")


def get_mood_score(mood: Any) -> float:
    """emoji or numeric mood -> 1-10 score, 5 when unknown"""
    if isinstance(mood, str) and mood in MOOD_SCORES:
        return MOOD_SCORES[mood]
    if isinstance(mood, bool):
        return 5
    try:
        value = float(mood)
    except (TypeError, ValueError):
        return 5
    return value if 1 <= value <= 10 else 5


def sleep_total(check_in: dict) -> float:
    return (check_in.get("sleep_hours") or 0) + (check_in.get("sleep_minutes") or 0) / 60


def entry_text(entry: dict) -> str:
    return entry.get("content") or entry.get("transcription") or ""


def keyword_sentiment(texts: list[str], positive=PEOPLE_POSITIVE_WORDS, negative=PEOPLE_NEGATIVE_WORDS) -> str:
    """positive / negative / neutral by how many distinct keywords appear in the joined texts"""
    lowered = " ".join(texts).lower()
    pos = sum(1 for w in positive if w in lowered)
    neg = sum(1 for w in negative if w in lowered)
    if pos > neg:
        return "positive"
    if neg > pos:
        return "negative"
    return "neutral"


def _is_open(record: dict) -> bool:
    return record.get("status") != "completed"


def _is_overdue(value: Any, now: datetime) -> bool:
    due = parse_datetime(value)
    return due is not None and due < now


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count > 1 else ''}"


# data gathering

async def gather_user_data(db: Database, user_id: str) -> dict:
    """the record snapshot both insights and nudges are computed from"""
    async def newest(collection, limit: Optional[int]):
        cursor = collection.find({"user_id": user_id}).sort("created_at", -1)
        if limit:
            cursor = cursor.limit(limit)
        return [clean_doc(d) async for d in cursor]

    return {
        "journal_entries": await newest(db.journal_entries, 50),
        "check_ins": await newest(db.check_ins, 30),
        "goals": await newest(db.goals, 100),
        "wheel_of_life": clean_doc(await db.wheel_of_life.find_one({"user_id": user_id})),
        "soul_matrix": clean_doc(await db.soul_matrix.find_one({"user_id": user_id})),
        "people": await newest(db.people, None),
        "finance_entries": await newest(db.finance_entries, 50),
        "tasks": await newest(db.tasks, 50),
    }


# rule-based insights

def life_area_insights(wheel: Optional[dict]) -> list[Insight]:
    if not wheel:
        return []
    areas = load_json(wheel.get("life_areas"), [])
    priorities = load_json(wheel.get("priorities"), [])
    insights = [Insight(
        type="priority_areas",
        title="Focus Areas",
        message=f"Your top priorities are: {', '.join(priorities[:3])}",
        priority="high",
    )]
    low = [a for a in areas if (a.get("current_score") or 0) < 6]
    if low:
        names = ", ".join(a.get("name") or a.get("id", "") for a in low)
        insights.append(Insight(
            type="low_scoring",
            title="Areas Needing Attention",
            message=f"{names} are scoring below 6/10",
            priority="high",
        ))
    return insights


def goal_insights(goals: list[dict], now: datetime) -> list[Insight]:
    if not goals:
        return []
    insights = []
    overdue = [g for g in goals if _is_overdue(g.get("target_date"), now) and _is_open(g)]
    high = [g for g in goals if g.get("priority") == "high" and _is_open(g)]
    completion = sum(1 for g in goals if g.get("status") == "completed") / len(goals) * 100

    if overdue:
        insights.append(Insight(
            type="overdue",
            title="Overdue Goals",
            message=f"You have {_plural(len(overdue), 'overdue goal')}",
            priority="high",
            data=overdue,
        ))
    if high:
        insights.append(Insight(
            type="high_priority",
            title="High Priority Goals",
            message=f"Focus on {_plural(len(high), 'high-priority goal')}",
            priority="medium",
            data=high,
        ))
    if completion < 50:
        insights.append(Insight(
            type="low_completion",
            title="Goal Completion",
            message=f"Your goal completion rate is {completion:.1f}%. Consider breaking down larger goals.",
            priority="medium",
        ))
    return insights


def wellness_insights(check_ins: list[dict]) -> list[Insight]:
    recent = check_ins[:7]
    if not recent:
        return []
    avg_mood = sum(get_mood_score(c.get("mood")) for c in recent) / len(recent)
    avg_energy = sum(c.get("energy") or 0 for c in recent) / len(recent)
    avg_sleep = sum(sleep_total(c) for c in recent) / len(recent)

    insights = []
    if avg_mood < 6:
        insights.append(Insight(
            type="low_mood",
            title="Mood Trend",
            message="Your average mood has been lower than usual. Consider activities that boost your mood.",
            priority="high",
        ))
    if avg_energy < 6:
        insights.append(Insight(
            type="low_energy",
            title="Energy Levels",
            message="Your energy levels have been low. Focus on sleep, nutrition, and movement.",
            priority="medium",
        ))
    if avg_sleep < 7:
        insights.append(Insight(
            type="sleep",
            title="Sleep Quality",
            message=f"You're averaging {avg_sleep:.1f} hours of sleep. Aim for 7-9 hours for optimal health.",
            priority="medium",
        ))
    return insights


def _more_negative_people(people: list[dict]) -> bool:
    positive = sum(1 for p in people if p.get("sentiment") == "positive")
    negative = sum(1 for p in people if p.get("sentiment") == "negative")
    return negative > positive


def relationship_insights(people: list[dict]) -> list[Insight]:
    if people and _more_negative_people(people):
        return [Insight(
            type="relationship_balance",
            title="Relationship Balance",
            message="You have more challenging relationships than positive ones. Consider nurturing positive connections.",
            priority="medium",
        )]
    return []


def finance_insights(entries: list[dict]) -> list[Insight]:
    if not entries:
        return []
    expenses = sum(float(e.get("amount") or 0) for e in entries if e.get("category") == "expense")
    income = sum(float(e.get("amount") or 0) for e in entries if e.get("category") == "income")
    if expenses > income * 0.9:
        return [Insight(
            type="spending_high",
            title="High Spending",
            message="Your expenses are high relative to income. Consider reviewing your spending patterns.",
            priority="medium",
        )]
    return []


def productivity_insights(tasks: list[dict], now: datetime) -> list[Insight]:
    if not tasks:
        return []
    insights = []
    completed = sum(1 for t in tasks if t.get("status") == "completed")
    overdue = [t for t in tasks if t.get("deadline") and _is_overdue(t["deadline"], now) and _is_open(t)]
    completion = completed / len(tasks) * 100

    if overdue:
        insights.append(Insight(
            type="overdue_tasks",
            title="Overdue Tasks",
            message=f"You have {_plural(len(overdue), 'overdue task')}. Consider prioritizing or delegating.",
            priority="high",
        ))
    if completion < 60:
        insights.append(Insight(
            type="low_productivity",
            title="Task Completion",
            message=f"Your task completion rate is {completion:.1f}%. Try breaking tasks into smaller steps.",
            priority="medium",
        ))
    return insights


def _trait_score(traits: dict, name: str) -> Optional[float]:
    trait = traits.get(name)
    if isinstance(trait, dict) and trait.get("score") is not None:
        return float(trait["score"])
    return None


def personality_insights(soul_matrix: Optional[dict]) -> list[Insight]:
    if not soul_matrix:
        return []
    traits = load_json(soul_matrix.get("traits"), {})
    insights = []
    neuroticism = _trait_score(traits, "neuroticism")
    extraversion = _trait_score(traits, "extraversion")
    # trait scores live on the 0-1 scale
    if neuroticism is not None and neuroticism > 0.7:
        insights.append(Insight(
            type="stress_management",
            title="Stress Management",
            message="You may benefit from stress management techniques and mindfulness practices.",
            priority="medium",
        ))
    if extraversion is not None and extraversion < 0.4:
        insights.append(Insight(
            type="social_connections",
            title="Social Connections",
            message="Consider reaching out to friends or joining social activities to boost your well-being.",
            priority="low",
        ))
    return insights


def generate_priority_recommendations(groups: dict[str, list[Insight]]) -> list[Insight]:
    """first three high + first two medium actionable insights, in group order"""
    ordered = [i for name in INSIGHT_GROUPS for i in groups.get(name, [])]
    high = [i for i in ordered if i.priority == "high" and i.actionable][:3]
    medium = [i for i in ordered if i.priority == "medium" and i.actionable][:2]
    return high + medium


def generate_rule_insights(data: dict, now: Optional[datetime] = None) -> dict[str, list[Insight]]:
    now = now or utcnow()
    return {
        "life_areas": life_area_insights(data.get("wheel_of_life")),
        "goals": goal_insights(data.get("goals", []), now),
        "wellness": wellness_insights(data.get("check_ins", [])),
        "relationships": relationship_insights(data.get("people", [])),
        "finance": finance_insights(data.get("finance_entries", [])),
        "productivity": productivity_insights(data.get("tasks", []), now),
        "personality": personality_insights(data.get("soul_matrix")),
    }


async def generate_enhanced_insights(data: dict) -> EnhancedInsights:
    ai = await analysis_service.analyze_with_ai(data)
    groups = generate_rule_insights(data)
    return EnhancedInsights(
        ai_insights=ai if isinstance(ai, AIAnalysis) else AIAnalysis(),
        priority=generate_priority_recommendations(groups),
        **groups,
    )


# nudges

def _stamp_ms(now: datetime) -> int:
    return int(now.timestamp() * 1000)


def generate_rule_based_nudges(data: dict, now: Optional[datetime] = None) -> list[Nudge]:
    now = now or utcnow()
    ms = _stamp_ms(now)
    nudges = []

    recent = data.get("check_ins", [])[:3]
    if recent:
        avg_mood = sum(get_mood_score(c.get("mood")) for c in recent) / len(recent)
        if avg_mood < 5:
            nudges.append(Nudge(
                id=f"wellness-mood-{ms}",
                type="wellness",
                category="emotional",
                title="Boost Your Mood",
                message="Your recent mood has been lower than usual. Consider activities that typically lift your spirits.",
                priority="high",
                actions=[
                    {"label": "Take a walk", "impact": "medium"},
                    {"label": "Call a friend", "impact": "high"},
                    {"label": "Practice gratitude", "impact": "medium"},
                ],
                timing="now",
                frequency="daily",
                life_area="emotional-wellbeing",
            ))

    overdue = [g for g in data.get("goals", []) if _is_overdue(g.get("target_date"), now) and _is_open(g)]
    if overdue:
        nudges.append(Nudge(
            id=f"goals-overdue-{ms}",
            type="goals",
            category="productivity",
            title="Overdue Goals",
            message=f"You have {_plural(len(overdue), 'overdue goal')}. Consider reviewing and adjusting them.",
            priority="high",
            actions=[
                {"label": "Review goals", "impact": "high"},
                {"label": "Break down tasks", "impact": "medium"},
                {"label": "Set new deadlines", "impact": "medium"},
            ],
            timing="today",
            frequency="weekly",
            life_area="goals",
        ))

    people = data.get("people", [])
    if people and _more_negative_people(people):
        nudges.append(Nudge(
            id=f"relationships-balance-{ms}",
            type="relationships",
            category="social",
            title="Relationship Balance",
            message="You have more challenging relationships than positive ones. Consider nurturing your positive connections.",
            priority="medium",
            actions=[
                {"label": "Reach out to positive people", "impact": "high"},
                {"label": "Address conflicts", "impact": "medium"},
                {"label": "Set boundaries", "impact": "medium"},
            ],
            timing="this-week",
            frequency="weekly",
            life_area="relationships",
        ))

    high_finance = [e for e in data.get("finance_entries", []) if e.get("priority") == "high"]
    if len(high_finance) > 3:
        nudges.append(Nudge(
            id=f"finance-priorities-{ms}",
            type="finance",
            category="financial",
            title="Financial Priorities",
            message="You have several high-priority financial items. Consider reviewing your spending priorities.",
            priority="medium",
            actions=[
                {"label": "Review expenses", "impact": "high"},
                {"label": "Create budget", "impact": "medium"},
                {"label": "Set savings goals", "impact": "medium"},
            ],
            timing="this-week",
            frequency="monthly",
            life_area="finances",
        ))

    wheel = data.get("wheel_of_life")
    if wheel:
        areas = load_json(wheel.get("life_areas"), [])
        low = [a for a in areas if (a.get("current_score") or 0) < 6]
        if low:
            area = low[0]
            name = area.get("name") or area.get("id", "")
            score = area.get("current_score")
            score_text = f"{score:g}" if isinstance(score, (int, float)) else str(score)
            nudges.append(Nudge(
                id=f"life-balance-{area.get('id') or name}-{ms}",
                type="life-balance",
                category="holistic",
                title=f"Focus on {name}",
                message=f"Your {name} area is scoring low ({score_text}/10). Consider dedicating more attention to this area.",
                priority="high",
                actions=[
                    {"label": "Set specific goals", "impact": "high"},
                    {"label": "Schedule time for this area", "impact": "medium"},
                    {"label": "Seek resources or support", "impact": "medium"},
                ],
                timing="this-week",
                frequency="weekly",
                life_area=area.get("id") or name,
            ))

    return nudges


def prioritize_nudges(nudges: list[Nudge], data: dict, limit: int = 10) -> list[Nudge]:
    """score each nudge against the user's activity, keep the top ones"""
    base = 0
    for key in ("journal_entries", "check_ins", "goals"):
        if data.get(key):
            base += 10

    scored = []
    for nudge in nudges:
        score = base
        if nudge.priority == "high":
            score += 20
        if nudge.timing == "now":
            score += 15
        elif nudge.timing == "today":
            score += 10
        if nudge.actionable:
            score += 10
        if nudge.actions:
            score += 5
        scored.append(nudge.model_copy(update={"relevance_score": score}))

    # sorted() is stable, equal scores keep their input order
    return sorted(scored, key=lambda n: n.relevance_score, reverse=True)[:limit]


def summarize_nudges(nudges: list[Nudge]) -> NudgeSummary:
    categories: list[str] = []
    for n in nudges:
        if n.category not in categories:
            categories.append(n.category)
    return NudgeSummary(
        total_nudges=len(nudges),
        high_priority=sum(1 for n in nudges if n.priority == "high"),
        medium_priority=sum(1 for n in nudges if n.priority == "medium"),
        low_priority=sum(1 for n in nudges if n.priority == "low"),
        categories=categories,
    )


async def build_nudges(data: dict) -> NudgesResponse:
    ai_nudges = await analysis_service.generate_life_area_nudges(data)
    prioritized = prioritize_nudges(list(ai_nudges) + generate_rule_based_nudges(data), data)
    logger.info(f"Generated {len(prioritized)} nudges ({len(ai_nudges)} from ai)")
    return NudgesResponse(nudges=prioritized, summary=summarize_nudges(prioritized))
